"""Config loader — YAML to dataclasses."""

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

MODE_ADD = "add"  # addition only
MODE_MIX = "mix"  # addition + subtraction
MODES = (MODE_ADD, MODE_MIX)
STEPS = (1, 2, 3, 4)
INT_FIELDS = ("step", "count", "gap_ms", "reveal_sec")

STEP3_NEEDS_MIX = (
    "STEP3は「減算で5跨ぎが発生」が条件のため、"
    "モードは「足し算＋引き算」を選んでください。"
)


@dataclass(frozen=True)
class DrillConfig:
    """Parameters of one drill run. Never mutated while a run is live."""

    step: int = 1
    count: int = 5
    mode: str = MODE_MIX
    gap_ms: int = 0
    reveal_sec: int = 3
    rate: float = 1.05
    voice: str | None = None

    def __post_init__(self):
        for name in INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.step not in STEPS:
            raise ValueError(f"step must be one of {STEPS}, got {self.step!r}")
        if self.count < 1:
            raise ValueError(f"count must be positive, got {self.count!r}")
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.gap_ms < 0:
            raise ValueError(f"gap_ms must be >= 0, got {self.gap_ms!r}")
        if self.reveal_sec < 1:
            raise ValueError(f"reveal_sec must be >= 1, got {self.reveal_sec!r}")
        if not 0.5 <= self.rate <= 2.0:
            raise ValueError(f"rate must be within 0.5-2.0, got {self.rate!r}")

    @property
    def allow_sub(self) -> bool:
        return self.mode == MODE_MIX


@dataclass
class SpeechConfig:
    rate: float = 1.05
    voice: str | None = "Kyoko"
    muted: bool = False


@dataclass
class DeckConfig:
    brightness: int = 60


@dataclass
class AppConfig:
    drill: DrillConfig = field(default_factory=DrillConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    deck: DeckConfig = field(default_factory=DeckConfig)

    def drill_config(self) -> DrillConfig:
        """Drill settings with the speech rate and voice folded in."""
        return replace(self.drill, rate=self.speech.rate, voice=self.speech.voice)


def drill_warning(config: DrillConfig) -> str | None:
    """Cross-field check done by front-ends before starting a run.

    Returns a user-facing warning, or None when the combination is usable.
    """
    if config.step == 3 and config.mode == MODE_ADD:
        return STEP3_NEEDS_MIX
    return None


def parse_config(raw: dict | None) -> AppConfig:
    """Build an AppConfig from an already-parsed YAML mapping."""
    raw = raw or {}
    drill = DrillConfig(**{k: v for k, v in (raw.get("drill") or {}).items()})
    speech = SpeechConfig(**{k: v for k, v in (raw.get("speech") or {}).items()})
    deck = DeckConfig(**{k: v for k, v in (raw.get("deck") or {}).items()})
    return AppConfig(drill=drill, speech=speech, deck=deck)


def load_config(path: Path) -> AppConfig:
    """Load config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f)
    return parse_config(raw)

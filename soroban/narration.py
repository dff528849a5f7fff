"""Phrases, display text and speech text for a listening drill."""

from dataclasses import dataclass

from soroban.generator import ADD, SUB, Problem, Step
from soroban.reader import read_number

# ── fixed phrases ────────────────────────────────────────────────────
WISH_TEXT = "願いましては、"
WISH_SPEECH = "ねがいましてはぁ"
WISH_PAUSE_MS = 80

PREFIX_TEXT = {"sub": "引いては", "add_after_sub": "足しては", "none": ""}
PREFIX_SPEECH = {"sub": "ひいては", "add_after_sub": "たしては", "none": ""}

TRAILING_SPEECH = "えんなーりー"
TRAILING_TEXT = "円なーりー"
UNIT = "円"
NO_NUMBER = "—"

HEADLINE_HIDDEN = "答えは・・・"
HEADLINE_ANSWER = "答え"

# (multiplier, min, max, pitch)
WISH_VOICE = (1.02, 0.7, 2.0, 0.92)
STEP_VOICE = (1.04, 0.7, 2.2, 1.0)


@dataclass(frozen=True)
class StepDisplay:
    prefix: str
    value_text: str
    log_line: str


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def format_number(n: int) -> str:
    """Locale digit grouping, e.g. 12345 -> '12,345'."""
    return f"{n:,}"


def format_yen(n: int) -> str:
    return f"{format_number(n)}{UNIT}"


def prefix_kind(step: Step, prev: Step | None) -> str:
    """Which cue precedes a step: 'sub', 'add_after_sub' or 'none'."""
    if step.op == SUB:
        return "sub"
    if prev is not None and prev.op == SUB:
        return "add_after_sub"
    return "none"


def build_display(step: Step, prev: Step | None) -> StepDisplay:
    prefix = PREFIX_TEXT[prefix_kind(step, prev)]
    value_text = format_number(step.operand)
    return StepDisplay(
        prefix=prefix,
        value_text=value_text,
        log_line=f"{prefix}{value_text}{TRAILING_TEXT}",
    )


def step_speech(step: Step, prev: Step | None) -> str:
    """Spoken form: prefix + reading + trailing phrase. Numbers only, no unit."""
    prefix = PREFIX_SPEECH[prefix_kind(step, prev)]
    return f"{prefix}{read_number(step.operand)}{TRAILING_SPEECH}"


def voice_params(base_rate: float, wish: bool = False) -> tuple[float, float]:
    """Return (rate, pitch) for the wish or a step utterance."""
    mult, lo, hi, pitch = WISH_VOICE if wish else STEP_VOICE
    return clamp(base_rate * mult, lo, hi), pitch


def formula_lines(problem: Problem) -> list[str]:
    """Running-total trace shown under the hidden answer."""
    lines = []
    total = 0
    for i, s in enumerate(problem.steps):
        sign = "+" if i == 0 or s.op == ADD else "-"
        total += s.signed_operand
        lines.append(f"{i + 1}. {sign}{s.operand}  =>  {total}")
    return lines

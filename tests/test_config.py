"""Tests for config loader — YAML to dataclasses."""

import tempfile
from pathlib import Path

import pytest
import yaml


def _write(raw: dict) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(raw, f, allow_unicode=True)
        return Path(f.name)


def test_load_config_parses_sections():
    """load_config should parse YAML into drill/speech/deck dataclasses."""
    path = _write({
        "drill": {"step": 2, "count": 7, "mode": "add", "gap_ms": 250, "reveal_sec": 4},
        "speech": {"rate": 1.2, "voice": "Otoya"},
        "deck": {"brightness": 80},
    })

    from soroban.config import load_config

    cfg = load_config(path)
    assert cfg.drill.step == 2
    assert cfg.drill.count == 7
    assert cfg.drill.mode == "add"
    assert cfg.drill.gap_ms == 250
    assert cfg.drill.reveal_sec == 4
    assert cfg.speech.voice == "Otoya"
    assert cfg.deck.brightness == 80


def test_load_config_defaults():
    """Missing sections and fields should get defaults."""
    path = _write({"drill": {"count": 3}})

    from soroban.config import load_config

    cfg = load_config(path)
    assert cfg.drill.step == 1
    assert cfg.drill.count == 3
    assert cfg.drill.mode == "mix"
    assert cfg.speech.rate == 1.05
    assert cfg.speech.muted is False
    assert cfg.deck.brightness == 60


def test_load_config_empty_file():
    path = _write({})

    from soroban.config import load_config

    cfg = load_config(path)
    assert cfg.drill.count == 5


def test_drill_config_folds_in_speech_settings():
    from soroban.config import parse_config

    cfg = parse_config({"speech": {"rate": 1.5, "voice": "Kyoko"}})
    drill = cfg.drill_config()
    assert drill.rate == 1.5
    assert drill.voice == "Kyoko"
    assert cfg.drill.voice is None


@pytest.mark.parametrize("field,value", [
    ("step", 5),
    ("step", 0),
    ("count", 0),
    ("mode", "sub"),
    ("gap_ms", -1),
    ("reveal_sec", 0),
    ("rate", 3.0),
])
def test_drill_config_rejects_out_of_range(field, value):
    from soroban.config import DrillConfig

    with pytest.raises(ValueError):
        DrillConfig(**{field: value})


def test_drill_config_is_immutable():
    import dataclasses

    from soroban.config import DrillConfig

    cfg = DrillConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.count = 10


def test_step3_add_only_is_constructible_but_warned():
    """Cross-field rules are left to front-ends, not the dataclass."""
    from soroban.config import DrillConfig, drill_warning

    cfg = DrillConfig(step=3, mode="add")
    assert drill_warning(cfg) is not None
    assert drill_warning(DrillConfig(step=3, mode="mix")) is None
    assert drill_warning(DrillConfig(step=1, mode="add")) is None


@pytest.mark.parametrize("field,value", [
    ("count", 2.5),
    ("count", "5"),
    ("step", 2.0),
    ("gap_ms", 100.5),
    ("reveal_sec", True),
    ("count", True),
])
def test_drill_config_rejects_non_integers(field, value):
    from soroban.config import DrillConfig

    with pytest.raises(ValueError, match="integer"):
        DrillConfig(**{field: value})


def test_fractional_count_in_yaml_is_rejected_before_any_run():
    from soroban.config import parse_config

    with pytest.raises(ValueError):
        parse_config({"drill": {"count": 2.5}})

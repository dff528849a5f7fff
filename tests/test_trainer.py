"""Tests for the command line entry point."""

from unittest.mock import AsyncMock, patch

import yaml

from soroban.config import DrillConfig


def _args(argv):
    from soroban.trainer import build_parser

    return build_parser().parse_args(argv)


def test_flags_override_last_settings():
    from soroban.trainer import resolve_config

    stored = lambda defaults: {**defaults, "step": 2, "count": 9}
    with patch("soroban.trainer.load_last", side_effect=stored):
        _, drill = resolve_config(_args(["--count", "4", "--mode", "add"]))
    assert drill.step == 2
    assert drill.count == 4
    assert drill.mode == "add"
    assert drill.voice == "Kyoko"


def test_config_file_replaces_last_settings(tmp_path):
    from soroban.trainer import resolve_config

    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"drill": {"step": 4, "count": 2}, "speech": {"rate": 1.3}}))
    with patch("soroban.trainer.load_last") as load:
        app, drill = resolve_config(_args(["--config", str(path), "--gap-ms", "200"]))
        load.assert_not_called()
    assert drill.step == 4
    assert drill.count == 2
    assert drill.gap_ms == 200
    assert drill.rate == 1.3


def test_main_missing_config(capsys):
    from soroban.trainer import main

    assert main(["--config", "/nonexistent/soroban.yaml"]) == 1
    assert "Config not found" in capsys.readouterr().out


def test_main_refuses_step3_add_only(capsys):
    from soroban.trainer import main

    with patch("soroban.trainer.load_last", side_effect=lambda d: d), \
         patch("soroban.trainer.run_console") as run:
        assert main(["--step", "3", "--mode", "add"]) == 2
        run.assert_not_called()
    assert "STEP3" in capsys.readouterr().out


def test_main_rejects_invalid_values(capsys):
    from soroban.trainer import main

    with patch("soroban.trainer.load_last", side_effect=lambda d: d):
        assert main(["--count", "0"]) == 2
    assert "Invalid settings" in capsys.readouterr().out


def test_main_saves_and_runs_console():
    from soroban.trainer import main

    with patch("soroban.trainer.load_last", side_effect=lambda d: d), \
         patch("soroban.trainer.save_last") as save, \
         patch("soroban.trainer.run_console", return_value=0) as run:
        assert main(["--step", "1", "--count", "3", "--mode", "add", "--mute"]) == 0

    drill, speech = run.call_args[0]
    assert drill == DrillConfig(step=1, count=3, mode="add", voice="Kyoko")
    assert speech.muted is True
    assert save.call_args[0][0]["count"] == 3


def test_run_console_plays_a_drill(capsys):
    from soroban.speech import SaySpeech
    from soroban.trainer import run_console

    with patch("soroban.playback.asyncio.sleep", new=AsyncMock()):
        code = run_console(DrillConfig(step=1, count=3, mode="add"), SaySpeech(muted=True))
    out = capsys.readouterr().out
    assert code == 0
    assert "願いましては、" in out
    assert "3. " in out
    assert "答え: " in out


def test_run_console_reports_generation_failure(capsys):
    from soroban import generator
    from soroban.speech import SaySpeech
    from soroban.trainer import run_console

    with patch.object(generator, "MAX_ATTEMPTS", 10):
        code = run_console(DrillConfig(step=3, count=5, mode="add"), SaySpeech(muted=True))
    assert code == 1
    assert generator.EXHAUSTED_MESSAGE in capsys.readouterr().out


def test_main_reports_fractional_count_from_config_file(tmp_path, capsys):
    from soroban.trainer import main

    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"drill": {"count": 2.5}}))
    with patch("soroban.trainer.run_console") as run:
        assert main(["--config", str(path)]) == 2
        run.assert_not_called()
    assert "Invalid settings" in capsys.readouterr().out


def test_console_display_verbose_adds_status_and_progress():
    import io

    from soroban.display import RUNNING, ConsoleDisplay

    quiet, loud = io.StringIO(), io.StringIO()
    for display in (ConsoleDisplay(out=quiet), ConsoleDisplay(verbose=True, out=loud)):
        display.set_status(RUNNING)
        display.set_progress(1, 3)
        display.set_phrase_text("願いましては、")
        display.set_number_text("7")
        display.append_log_line("1. 7円なーりー")

    assert quiet.getvalue() == "1. 7円なーりー\n"
    assert loud.getvalue() == "[RUNNING]\n  1/3\n1. 7円なーりー\n"

"""Soroban listening-drill trainer — command line entry point."""

import argparse
import asyncio
import sys
import threading
from dataclasses import asdict, replace
from pathlib import Path

from soroban.config import MODES, STEPS, AppConfig, DrillConfig, drill_warning, load_config
from soroban.display import DONE, ConsoleDisplay
from soroban.playback import PlaybackOrchestrator
from soroban.settings import load_last, save_last
from soroban.speech import SaySpeech

OVERRIDES = ("step", "count", "mode", "gap_ms", "reveal_sec", "rate", "voice")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Soroban listening-drill trainer")
    parser.add_argument("--config", help="Config file path (YAML)")
    parser.add_argument("--step", type=int, choices=STEPS, help="Difficulty step")
    parser.add_argument("--count", type=int, help="Numbers per problem")
    parser.add_argument("--mode", choices=MODES, help="add = addition only, mix = add and subtract")
    parser.add_argument("--gap-ms", type=int, help="Pause between numbers (ms)")
    parser.add_argument("--reveal-sec", type=int, help="Seconds before the answer is shown")
    parser.add_argument("--rate", type=float, help="Base speech rate (0.5-2.0)")
    parser.add_argument("--voice", help="Voice name passed to `say -v`")
    parser.add_argument("--mute", action="store_true", help="Display only, no speech")
    parser.add_argument("--deck", action="store_true", help="Run on a Stream Deck")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def resolve_config(args) -> tuple[AppConfig, DrillConfig]:
    """Flags win over the config file; without a file, last settings are used.

    Raises FileNotFoundError for a missing config file and ValueError for
    out-of-range values.
    """
    if args.config:
        path = Path(args.config)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        app = load_config(path)
        drill = app.drill_config()
    else:
        app = AppConfig()
        drill = DrillConfig(**load_last(asdict(app.drill_config())))

    overrides = {k: getattr(args, k) for k in OVERRIDES if getattr(args, k) is not None}
    return app, replace(drill, **overrides)


def run_console(drill: DrillConfig, speech: SaySpeech, verbose: bool = False) -> int:
    """Play one drill in the terminal. Ctrl+C stops it."""
    display = ConsoleDisplay(verbose=verbose)
    orchestrator = PlaybackOrchestrator(speech, display)
    try:
        asyncio.run(orchestrator.start(drill))
    except KeyboardInterrupt:
        orchestrator.stop()
        print("\nStopped.")
        return 130
    return 0 if display.status == DONE else 1


def run_deck(app: AppConfig, drill: DrillConfig, speech: SaySpeech, verbose: bool = False) -> int:
    from soroban.deck import SorobanDeck, find_deck

    deck = find_deck()
    if deck is None:
        print("No Stream Deck found. Is it plugged in?")
        return 1

    ui = SorobanDeck(deck, drill, speech, brightness=app.deck.brightness,
                     verbose=verbose, on_start=lambda cfg: save_last(asdict(cfg)))
    print(f"Connected: {deck.deck_type()} ({deck.key_count()} keys)")
    ui.start()

    try:
        # Block main thread
        threading.Event().wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        ui.stop()
        print("Done.")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        app, drill = resolve_config(args)
    except FileNotFoundError as e:
        print(e)
        return 1
    except (TypeError, ValueError) as e:
        print(f"Invalid settings: {e}")
        return 2

    warning = drill_warning(drill)
    if warning:
        print(warning)
        return 2

    speech = SaySpeech(muted=args.mute or app.speech.muted, verbose=args.verbose)
    if args.verbose:
        print(f"Step {drill.step}, {drill.count} numbers, mode={drill.mode}, "
              f"gap={drill.gap_ms}ms, reveal={drill.reveal_sec}s, rate={drill.rate}")

    if args.deck:
        return run_deck(app, drill, speech, verbose=args.verbose)

    save_last(asdict(drill))
    return run_console(drill, speech, verbose=args.verbose)


if __name__ == "__main__":
    sys.exit(main())

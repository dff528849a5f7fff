"""Stream Deck front-end for the listening drill.

Layout (8x4 = 32 keys):
  Row 1 (0-7):   HUD: title, status, progress, step/mode
  Row 2 (8-15):  phrase cue and the operand being read
  Row 3 (16-23): result: headline, formula trace, answer
  Row 4 (24-31): START / STOP / AGAIN

Key callbacks arrive on the StreamDeck library's thread; the orchestrator
lives on an asyncio loop running in a daemon thread, so every press is
handed over with call_soon_threadsafe / run_coroutine_threadsafe.
"""

import asyncio
import threading
from collections.abc import Callable

from PIL import Image
from StreamDeck.DeviceManager import DeviceManager
from StreamDeck.ImageHelpers import PILHelper

from soroban.config import MODE_MIX, DrillConfig, drill_warning
from soroban.display import READY
from soroban.narration import HEADLINE_ANSWER, HEADLINE_HIDDEN, NO_NUMBER
from soroban.playback import PlaybackOrchestrator
from soroban.renderer import (
    BG_DARK,
    BG_HUD,
    SIZE,
    render_label,
    render_number,
    render_text_button,
    status_to_color,
)
from soroban.speech import SpeechAdapter

TITLE_KEY = 0
STATUS_KEY = 1
PROGRESS_KEY = 2
INFO_KEY = 3
PHRASE_KEY = 10
NUMBER_KEY = 11
HEADLINE_KEY = 17
TRACE_KEY = 18
ANSWER_KEY = 19
START_KEY = 26
STOP_KEY = 27
AGAIN_KEY = 28

KEY_COUNT = 32
TRACE_LINES = 4


def find_deck():
    """Find first visual Stream Deck device."""
    decks = DeviceManager().enumerate()
    for deck in decks:
        if deck.is_visual():
            return deck
    return None


class DeckDisplay:
    """DisplayAdapter that draws drill events onto deck keys."""

    def __init__(self, deck, config: DrillConfig, verbose: bool = False):
        self.deck = deck
        self.config = config
        self.verbose = verbose
        self.log: list[str] = []

    def set_key(self, pos: int, img: Image.Image):
        native = PILHelper.to_native_key_format(self.deck, img)
        with self.deck:
            self.deck.set_key_image(pos, native)

    def show_idle(self):
        """Blank board with the control row."""
        for k in range(KEY_COUNT):
            self.set_key(k, Image.new("RGB", SIZE, BG_HUD if k < 8 else BG_DARK))
        self.set_key(TITLE_KEY, render_text_button(lines=["そろばん", "読上算"],
                                                   bg_color=BG_HUD))
        self.set_status(READY)
        self.set_progress(0, self.config.count)
        mode = "加減" if self.config.mode == MODE_MIX else "加算"
        self.set_key(INFO_KEY, render_label(f"STEP {self.config.step}", mode))
        self.set_key(START_KEY, render_text_button(lines=["START"], bg_color="#065f46"))
        self.set_key(STOP_KEY, render_text_button(lines=["STOP"], bg_color="#7c2d12"))
        self.set_key(AGAIN_KEY, render_text_button(lines=["AGAIN"], bg_color="#1e3a5f"))

    # ── DisplayAdapter ────────────────────────────────────────────

    def set_status(self, status: str) -> None:
        self.set_key(STATUS_KEY, render_label(status, bg_color=status_to_color(status)))

    def set_progress(self, index: int, total: int) -> None:
        self.set_key(PROGRESS_KEY, render_label("口数", f"{index}/{total}"))

    def set_phrase_text(self, text: str) -> None:
        self.set_key(PHRASE_KEY, render_text_button(lines=[text] if text else None))

    def set_number_text(self, text: str) -> None:
        self.set_key(NUMBER_KEY, render_number(text))

    def clear_log(self) -> None:
        self.log.clear()
        for k in (HEADLINE_KEY, TRACE_KEY, ANSWER_KEY):
            self.set_key(k, Image.new("RGB", SIZE, BG_DARK))

    def append_log_line(self, text: str) -> None:
        self.log.append(text)
        if self.verbose:
            print(text)

    def show_result_headline_hidden(self) -> None:
        self.set_key(HEADLINE_KEY, render_text_button(lines=[HEADLINE_HIDDEN]))
        self.set_key(ANSWER_KEY, render_number("?"))

    def show_formula_trace(self, lines: list[str]) -> None:
        tail = [line.split(". ", 1)[-1] for line in lines[-TRACE_LINES:]]
        self.set_key(TRACE_KEY, render_text_button(lines=tail))

    def reveal_answer(self, text: str) -> None:
        self.set_key(HEADLINE_KEY, render_text_button(lines=[HEADLINE_ANSWER]))
        self.set_key(ANSWER_KEY, render_number(text, bg_color="#14532d"))

    def report_generation_failure(self, message: str) -> None:
        print(message)
        self.set_key(STATUS_KEY, render_label("ERROR", bg_color=status_to_color("ERROR")))
        self.set_key(NUMBER_KEY, render_number(NO_NUMBER))


class SorobanDeck:
    """Binds deck keys to the playback orchestrator."""

    def __init__(self, deck, config: DrillConfig, speech: SpeechAdapter,
                 brightness: int = 60, verbose: bool = False,
                 on_start: Callable[[DrillConfig], None] | None = None):
        self.deck = deck
        self.config = config
        self.brightness = brightness
        self.verbose = verbose
        self.on_start = on_start
        self.display = DeckDisplay(deck, config, verbose=verbose)
        self.orchestrator = PlaybackOrchestrator(speech, self.display)
        self.loop = asyncio.new_event_loop()
        self.loop_thread = threading.Thread(target=self.loop.run_forever, daemon=True)

    def start(self):
        """Open the deck and start the loop thread."""
        self.deck.open()
        self.deck.reset()
        self.deck.set_brightness(self.brightness)
        self.loop_thread.start()
        self.display.show_idle()
        self.deck.set_key_callback(self.on_key)

    def stop(self):
        """Shutdown cleanly."""
        self.loop.call_soon_threadsafe(self.orchestrator.stop)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.loop_thread.join(timeout=2)
        if not self.loop.is_running():
            pending = asyncio.all_tasks(self.loop)
            for task in pending:
                task.cancel()
            if pending:
                self.loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True))
            self.loop.close()
        self.deck.reset()
        self.deck.close()

    def _submit(self, coro):
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        future.add_done_callback(self._report)
        return future

    def _report(self, future):
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            print(f"Drill error: {exc!r}")

    async def _run(self, replay: bool = False):
        self.orchestrator.stop()
        if replay:
            await self.orchestrator.replay_last()
        else:
            await self.orchestrator.start(self.config)

    def _halt(self):
        self.orchestrator.stop()
        self.display.show_idle()

    def on_key(self, _deck, key: int, pressed: bool):
        if not pressed:
            return

        if key == START_KEY:
            warning = drill_warning(self.config)
            if warning:
                print(warning)
                return
            if self.on_start:
                self.on_start(self.config)
            if self.verbose:
                print(f"Start: step {self.config.step}, {self.config.count} numbers")
            self._submit(self._run())

        elif key == STOP_KEY:
            self.loop.call_soon_threadsafe(self._halt)

        elif key == AGAIN_KEY:
            self._submit(self._run(replay=True))

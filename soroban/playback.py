"""Playback orchestrator. Runs one drill as a cancellable chain of events.

Every run captures the run token at start. After each suspension point
(utterance finished, timer elapsed) the captured value is compared with the
live one; a mismatch means the run was stopped or replaced and it returns
without touching speech or display again.
"""

import asyncio
import random

from soroban.config import DrillConfig
from soroban.display import DONE, READY, RUNNING, DisplayAdapter
from soroban.generator import GenerationExhausted, Problem, generate_problem
from soroban.narration import (
    NO_NUMBER,
    WISH_PAUSE_MS,
    WISH_SPEECH,
    WISH_TEXT,
    build_display,
    format_yen,
    formula_lines,
    step_speech,
    voice_params,
)
from soroban.speech import SpeechAdapter


async def sleep_ms(ms: int) -> None:
    await asyncio.sleep(ms / 1000)


class PlaybackOrchestrator:
    """Drives drills on a single asyncio event loop.

    Not thread-safe: start(), stop() and replay_last() must be called from
    the loop's thread.
    """

    def __init__(self, speech: SpeechAdapter, display: DisplayAdapter,
                 after=sleep_ms, rng=random):
        self.speech = speech
        self.display = display
        self.after = after
        self.rng = rng
        self.token = 0
        self.last_config: DrillConfig | None = None
        self.last_problem: Problem | None = None

    def is_live(self, token: int) -> bool:
        return token == self.token

    # ── suspension points ─────────────────────────────────────────

    async def _speak(self, text: str, config: DrillConfig, token: int,
                     wish: bool = False) -> None:
        if not self.is_live(token):
            return
        rate, pitch = voice_params(config.rate, wish=wish)
        self.speech.cancel_all()
        try:
            await self.speech.speak(text, rate=rate, pitch=pitch, voice=config.voice)
        except Exception:
            # a failed utterance counts as finished; never retried
            pass

    async def _wait(self, ms: int, token: int) -> None:
        if not self.is_live(token):
            return
        await self.after(ms)

    # ── run ───────────────────────────────────────────────────────

    async def start(self, config: DrillConfig) -> None:
        """Generate a problem and play it. Supersedes any run in flight."""
        self.token += 1
        token = self.token
        self.last_config = config

        d = self.display
        d.set_status(RUNNING)
        d.clear_log()
        d.set_phrase_text("")
        d.set_number_text(NO_NUMBER)
        d.set_progress(0, config.count)

        try:
            problem = generate_problem(config, self.rng)
        except GenerationExhausted as e:
            d.report_generation_failure(str(e))
            d.set_status(READY)
            return
        self.last_problem = problem

        d.set_phrase_text(WISH_TEXT)
        d.set_number_text(NO_NUMBER)
        d.append_log_line(WISH_TEXT)
        await self._speak(WISH_SPEECH, config, token, wish=True)
        await self._wait(WISH_PAUSE_MS, token)
        if not self.is_live(token):
            return

        prev = None
        for i, step in enumerate(problem.steps):
            shown = build_display(step, prev)
            d.set_progress(i + 1, config.count)
            d.set_phrase_text(shown.prefix)
            d.set_number_text(shown.value_text)
            d.append_log_line(f"{i + 1}. {shown.log_line}")

            await self._speak(step_speech(step, prev), config, token)
            if not self.is_live(token):
                return
            await self._wait(config.gap_ms, token)
            if not self.is_live(token):
                return
            prev = step

        d.set_status(DONE)
        await self.show_result(problem, config, token)

    async def show_result(self, problem: Problem, config: DrillConfig, token: int) -> None:
        """Show the trace with the answer hidden, then reveal it silently."""
        if not self.is_live(token):
            return
        d = self.display
        d.show_result_headline_hidden()
        d.show_formula_trace(formula_lines(problem))

        await self._wait(max(1, config.reveal_sec) * 1000, token)
        if not self.is_live(token):
            return
        d.reveal_answer(format_yen(problem.final_answer))

    def stop(self) -> None:
        """Invalidate the live run and silence speech. Safe to repeat."""
        self.token += 1
        self.speech.cancel_all()

    async def replay_last(self) -> None:
        """Run again with the most recent config, if there is one."""
        if self.last_config is None:
            return
        await self.start(self.last_config)

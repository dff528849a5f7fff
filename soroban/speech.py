"""Speech output for the drill.

The playback core only needs speak() and cancel_all(). SaySpeech drives the
macOS `say` command, tracking its processes the same way the arcade sound
engine tracks afplay so that a stop can kill whatever is still talking.
"""

import asyncio
import math
import subprocess
from typing import Protocol

SAY_BINARY = "say"
BASE_WPM = 175  # `say` default speaking rate, scaled by the drill rate


class SpeechAdapter(Protocol):
    async def speak(self, text: str, rate: float = 1.0, pitch: float = 1.0,
                    voice: str | None = None) -> None:
        """Resolve when the utterance ends. Errors resolve too."""
        ...

    def cancel_all(self) -> None: ...


def pitch_command(pitch: float) -> str:
    """Relative pitch-base command in semitones, '' for neutral pitch."""
    if pitch <= 0 or math.isclose(pitch, 1.0):
        return ""
    semitones = 12 * math.log2(pitch)
    return f"[[pbas {semitones:+.1f}]]"


def build_say_command(text: str, rate: float = 1.0, pitch: float = 1.0,
                      voice: str | None = None, binary: str = SAY_BINARY) -> list[str]:
    cmd = [binary, "-r", str(round(BASE_WPM * rate))]
    if voice:
        cmd.extend(["-v", voice])
    cmd.append(pitch_command(pitch) + text)
    return cmd


class SaySpeech:
    """Speaks through `say`. A missing binary or failed run counts as done."""

    def __init__(self, muted: bool = False, verbose: bool = False,
                 binary: str = SAY_BINARY):
        self.muted = muted
        self.verbose = verbose
        self.binary = binary
        self._processes: list[asyncio.subprocess.Process] = []

    async def speak(self, text: str, rate: float = 1.0, pitch: float = 1.0,
                    voice: str | None = None) -> None:
        if self.muted:
            return
        cmd = build_say_command(text, rate, pitch, voice, binary=self.binary)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            if self.verbose:
                print(f"[speech] cannot run {self.binary}: {e}")
            return

        self._processes.append(proc)
        try:
            code = await proc.wait()
        finally:
            if proc in self._processes:
                self._processes.remove(proc)
        if code != 0 and self.verbose:
            print(f"[speech] {self.binary} exited with {code}")

    def cancel_all(self) -> None:
        """Kill every utterance still playing."""
        for proc in self._processes:
            if proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
        self._processes.clear()

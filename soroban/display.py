"""Display events emitted during a drill, and a terminal implementation."""

from typing import Protocol

from soroban.narration import HEADLINE_ANSWER, HEADLINE_HIDDEN

READY = "READY"
RUNNING = "RUNNING"
DONE = "DONE"


class DisplayAdapter(Protocol):
    """What the playback core tells the screen. Rendering is up to the adapter."""

    def set_status(self, status: str) -> None: ...
    def set_progress(self, index: int, total: int) -> None: ...
    def set_phrase_text(self, text: str) -> None: ...
    def set_number_text(self, text: str) -> None: ...
    def clear_log(self) -> None: ...
    def append_log_line(self, text: str) -> None: ...
    def show_result_headline_hidden(self) -> None: ...
    def show_formula_trace(self, lines: list[str]) -> None: ...
    def reveal_answer(self, text: str) -> None: ...
    def report_generation_failure(self, message: str) -> None: ...


class ConsoleDisplay:
    """Prints drill events to stdout.

    Status and progress are quiet unless verbose; phrase and number updates
    are never printed since the log line already carries the same content.
    """

    def __init__(self, verbose: bool = False, out=None):
        self.verbose = verbose
        self.out = out
        self.status = READY
        self.log: list[str] = []

    def _print(self, text: str):
        print(text, file=self.out, flush=True)

    def set_status(self, status: str) -> None:
        self.status = status
        if self.verbose:
            self._print(f"[{status}]")

    def set_progress(self, index: int, total: int) -> None:
        if self.verbose:
            self._print(f"  {index}/{total}")

    def set_phrase_text(self, text: str) -> None:
        pass

    def set_number_text(self, text: str) -> None:
        pass

    def clear_log(self) -> None:
        self.log.clear()

    def append_log_line(self, text: str) -> None:
        self.log.append(text)
        self._print(text)

    def show_result_headline_hidden(self) -> None:
        self._print(f"\n{HEADLINE_HIDDEN}")

    def show_formula_trace(self, lines: list[str]) -> None:
        for line in lines:
            self._print(f"  {line}")

    def reveal_answer(self, text: str) -> None:
        self._print(f"{HEADLINE_ANSWER}: {text}")

    def report_generation_failure(self, message: str) -> None:
        self._print(message)

"""Problem generator: bounded random search for a valid listening drill.

Each attempt builds the sequence left to right, drawing (op, operand) pairs
until one passes the per-position rules. Completed sequences are then checked
against the difficulty step's whole-sequence requirement.
"""

import random
from dataclasses import dataclass

from soroban.config import DrillConfig

ADD = "add"
SUB = "sub"

MAX_ATTEMPTS = 12_000   # full sequence constructions
MAX_DRAWS = 160         # draws per position before the attempt is abandoned

EXHAUSTED_MESSAGE = (
    "条件を満たす問題が生成できませんでした。"
    "回数や難易度、モードを変更して再度お試しください。"
)


class GenerationExhausted(Exception):
    """No problem satisfying the config was found within the search budget."""

    def __init__(self, message: str = EXHAUSTED_MESSAGE):
        super().__init__(message)


@dataclass(frozen=True)
class Step:
    op: str          # ADD | SUB
    operand: int
    before: int      # running total before this step
    after: int       # running total after this step

    @property
    def signed_operand(self) -> int:
        return self.operand if self.op == ADD else -self.operand


@dataclass(frozen=True)
class Problem:
    steps: tuple[Step, ...]
    final_answer: int


def operand_range(step: int) -> tuple[int, int]:
    """Operand bounds for a difficulty step."""
    return (10, 99) if step == 4 else (1, 9)


def crosses_five(before: int, after: int) -> bool:
    """True when a total drops from 5 or more to below 5."""
    return before >= 5 and after < 5


def _draw_step(config: DrillConfig, total: int, prev_operand: int | None,
               ops: list[str], rng) -> Step | None:
    lo, hi = operand_range(config.step)
    for _ in range(MAX_DRAWS):
        op = rng.choice(ops)
        value = rng.randint(lo, hi)

        if value == prev_operand:
            continue
        if op == SUB and value > total:
            continue

        after = total + value if op == ADD else total - value
        if config.step == 1 and after > 9:
            continue
        # 5-complement subtraction is kept for step 3
        if config.step in (1, 2) and op == SUB and crosses_five(total, after):
            continue

        return Step(op=op, operand=value, before=total, after=after)
    return None


def _build_sequence(config: DrillConfig, rng) -> list[Step] | None:
    steps: list[Step] = []
    total = 0
    prev_operand = None
    for i in range(config.count):
        ops = [ADD, SUB] if i > 0 and config.allow_sub else [ADD]
        step = _draw_step(config, total, prev_operand, ops, rng)
        if step is None:
            return None
        steps.append(step)
        total = step.after
        prev_operand = step.operand
    return steps


def _accepts(config: DrillConfig, steps: list[Step]) -> bool:
    """Whole-sequence requirements of steps 2 and 3."""
    over_nine = any(s.after > 9 for s in steps)
    five_borrow = any(s.op == SUB and crosses_five(s.before, s.after) for s in steps)

    if config.step in (2, 3) and not over_nine:
        return False
    if config.step == 3 and not (five_borrow and config.allow_sub):
        return False
    return True


def generate_problem(config: DrillConfig, rng=random) -> Problem:
    """Generate a problem for config.

    rng is anything with randint() and choice(); the random module by default.
    Raises GenerationExhausted when no problem passes within MAX_ATTEMPTS.
    """
    for _ in range(MAX_ATTEMPTS):
        steps = _build_sequence(config, rng)
        if steps is None or not _accepts(config, steps):
            continue
        answer = sum(s.signed_operand for s in steps)
        return Problem(steps=tuple(steps), final_answer=answer)

    raise GenerationExhausted()

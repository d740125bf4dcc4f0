"""
Sequence-order exercise handler.

User orders four expressions from smallest to biggest value.
Unlike timeline-style partial credit, a single misplaced item makes the whole answer wrong.
"""

from __future__ import annotations

from loguru import logger

from mathpath.core.rng import RandomSource, resolve_rng, shuffled
from mathpath.curriculum.models import ProblemConfig

from . import ExerciseKind, register
from .base import DirectChoice, SequenceOrder, SequenceOrderSubmission
from .generator import generate

SEQUENCE_LENGTH = 4
SEQUENCE_ATTEMPTS = 50


def build_sequence_order(config: ProblemConfig, rng: RandomSource | None = None) -> SequenceOrder | DirectChoice:
    """Collect four facts with distinct values, shuffle, and record the ascending order."""
    rng = resolve_rng(rng)
    items: list[tuple[str, int]] = []
    used_values: set[int] = set()

    for _ in range(SEQUENCE_ATTEMPTS):
        if len(items) >= SEQUENCE_LENGTH:
            break
        problem = generate(config, rng)
        if problem.answer not in used_values:
            used_values.add(problem.answer)
            items.append((problem.question, problem.answer))

    if len(items) < SEQUENCE_LENGTH:
        logger.debug(f"Ordering: only {len(items)} distinct values in {SEQUENCE_ATTEMPTS} attempts, using direct choice")
        return generate(config, rng)

    display = shuffled(items, rng)
    correct_order = sorted(range(len(display)), key=lambda i: display[i][1])
    return SequenceOrder(
        items=tuple(expr for expr, _ in display),
        correct_order=tuple(correct_order),
    )


@register(ExerciseKind.SEQUENCE_ORDER)
class SequenceOrderHandler:
    """Handler for smallest-to-biggest ordering exercises."""

    def check(self, exercise: SequenceOrder, submission: SequenceOrderSubmission) -> bool:
        return list(submission.selected_order) == list(exercise.correct_order)

    def describe(self, exercise: SequenceOrder) -> tuple[str, str]:
        ordered = [exercise.items[i] for i in exercise.correct_order]
        return f"Order from smallest to biggest: {', '.join(exercise.items)}", " < ".join(ordered)

    def format_submission(self, submission: SequenceOrderSubmission) -> str:
        return " ".join(str(i) for i in submission.selected_order)

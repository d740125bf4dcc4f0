"""
Multi-select ("bubble pop") exercise handler.

The learner pops every bubble whose expression equals the target value.
Grading is all-or-nothing: the selected set must equal the correct set.
"""

from __future__ import annotations

from loguru import logger

from mathpath.core.rng import RandomSource, resolve_rng, shuffled
from mathpath.curriculum.models import ProblemConfig

from . import ExerciseKind, register
from .base import DirectChoice, MultiSelect, MultiSelectSubmission
from .generator import generate

POOL_SIZE = 30
MIN_CORRECT = 2
MAX_CORRECT = 3
MIN_DISTRACTORS = 3
MAX_BUBBLES = 8


def build_multi_select(config: ProblemConfig, rng: RandomSource | None = None) -> MultiSelect | DirectChoice:
    """
    Build a bubble-pop board from a pool of generated facts.

    The target is the first value (in generation order) reached by at least two
    distinct expressions; up to three of those become the correct bubbles.
    """
    rng = resolve_rng(rng)
    pool = []
    for _ in range(POOL_SIZE):
        problem = generate(config, rng)
        pool.append((problem.question, problem.answer))

    by_value: dict[int, list[str]] = {}
    for expr, value in pool:
        exprs = by_value.setdefault(value, [])
        if expr not in exprs:
            exprs.append(expr)

    target_value = None
    correct: list[str] = []
    for value, exprs in by_value.items():
        if len(exprs) >= MIN_CORRECT:
            target_value = value
            correct = exprs[:MAX_CORRECT]
            break

    if target_value is None:
        logger.debug("Bubble pop: no value with two distinct expressions, using direct choice")
        return generate(config, rng)

    wrong: list[str] = []
    for expr, value in pool:
        if value != target_value and expr not in wrong:
            wrong.append(expr)
            if len(wrong) >= MAX_BUBBLES - len(correct):
                break

    if len(wrong) < MIN_DISTRACTORS:
        logger.debug(f"Bubble pop: only {len(wrong)} distractors, using direct choice")
        return generate(config, rng)

    board = shuffled([(expr, True) for expr in correct] + [(expr, False) for expr in wrong], rng)
    return MultiSelect(
        target_value=target_value,
        bubbles=tuple(expr for expr, _ in board),
        correct_indices=tuple(i for i, (_, is_correct) in enumerate(board) if is_correct),
    )


@register(ExerciseKind.MULTI_SELECT)
class MultiSelectHandler:
    """Handler for bubble-pop exercises."""

    def check(self, exercise: MultiSelect, submission: MultiSelectSubmission) -> bool:
        selected = list(submission.selected_indices)
        if len(selected) != len(exercise.correct_indices):
            return False
        return set(selected) == set(exercise.correct_indices)

    def describe(self, exercise: MultiSelect) -> tuple[str, str]:
        correct = [exercise.bubbles[i] for i in exercise.correct_indices]
        return f"Pop every bubble that makes {exercise.target_value}", ", ".join(correct)

    def format_submission(self, submission: MultiSelectSubmission) -> str:
        return ", ".join(str(i) for i in submission.selected_indices)

"""
Comparison exercise handler.

Shows two expressions from the same skill and asks which one is bigger.
"""

from __future__ import annotations

from loguru import logger

from mathpath.core.rng import RandomSource, resolve_rng
from mathpath.curriculum.models import ProblemConfig

from . import ExerciseKind, register
from .base import Comparison, ComparisonSubmission, DirectChoice
from .generator import generate

COMPARISON_ATTEMPTS = 20


def build_comparison(config: ProblemConfig, rng: RandomSource | None = None) -> Comparison | DirectChoice:
    """Draw pairs until their values differ; fall back to a direct choice."""
    rng = resolve_rng(rng)
    for _ in range(COMPARISON_ATTEMPTS):
        first = generate(config, rng)
        second = generate(config, rng)
        if first.answer != second.answer:
            return Comparison(
                expression_a=first.question,
                expression_b=second.question,
                value_a=first.answer,
                value_b=second.answer,
                answer="A" if first.answer > second.answer else "B",
            )

    logger.debug(f"Comparison: no distinct pair in {COMPARISON_ATTEMPTS} attempts, using direct choice")
    return generate(config, rng)


@register(ExerciseKind.COMPARISON)
class ComparisonHandler:
    """Handler for comparison exercises."""

    def check(self, exercise: Comparison, submission: ComparisonSubmission) -> bool:
        return submission.choice == exercise.answer

    def describe(self, exercise: Comparison) -> tuple[str, str]:
        description = f"Which is bigger: {exercise.expression_a} or {exercise.expression_b}?"
        if exercise.answer == "A":
            answer_text = f"{exercise.expression_a} = {exercise.value_a}"
        else:
            answer_text = f"{exercise.expression_b} = {exercise.value_b}"
        return description, answer_text

    def format_submission(self, submission: ComparisonSubmission) -> str:
        return str(submission.choice)

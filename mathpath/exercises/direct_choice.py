"""
Direct choice and missing-operand exercises.

- Direct choice: "7 + 5 = ?" with four numeric choices.
- Missing operand: "7 + ___ = 12"; the hidden operand becomes the answer and
  the distractors are built around it rather than around the original result.
"""

from __future__ import annotations

from mathpath.core.rng import RandomSource, resolve_rng
from mathpath.curriculum.models import ProblemConfig

from . import ExerciseKind, register
from .base import ChoiceSubmission, DirectChoice
from .generator import generate, make_direct_choice, parse_question

BLANK = "___"


def build_missing_operand(config: ProblemConfig, rng: RandomSource | None = None) -> DirectChoice:
    """Hide one operand of a generated fact and ask for it."""
    rng = resolve_rng(rng)
    base = generate(config, rng)
    fact = parse_question(base.question)
    if fact is None:
        return base

    if rng.random() < 0.5:
        missing = fact.operand2
        question = f"{fact.operand1} {fact.operator} {BLANK} = {base.answer}"
    else:
        missing = fact.operand1
        question = f"{BLANK} {fact.operator} {fact.operand2} = {base.answer}"

    return make_direct_choice(question, missing, rng)


@register(ExerciseKind.DIRECT_CHOICE)
class DirectChoiceHandler:
    """Handler for direct choice (and missing operand) exercises."""

    def check(self, exercise: DirectChoice, submission: ChoiceSubmission) -> bool:
        return submission.choice == exercise.answer

    def describe(self, exercise: DirectChoice) -> tuple[str, str]:
        question = exercise.question
        if "=" not in question:
            question = f"{question} = ?"
        return question, str(exercise.answer)

    def format_submission(self, submission: ChoiceSubmission) -> str:
        return str(submission.choice)

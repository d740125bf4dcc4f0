"""
Answer evaluator.

Grades a learner submission against an exercise, whatever way the exercise was
displayed. Pure and side-effect free: malformed input is an incorrect answer,
never an exception.
"""

from __future__ import annotations

from loguru import logger

from . import get_handler
from .base import EvaluationResult, Exercise, Submission


def evaluate(exercise: Exercise, submission: Submission) -> EvaluationResult:
    """Grade ``submission`` against ``exercise``."""
    handler = get_handler(getattr(exercise, "kind", ""))
    if handler is None:
        # Not one of the registered exercise kinds
        return EvaluationResult(False, "", "", feedback="Unknown exercise.")

    description, answer_text = handler.describe(exercise)

    submission_kind = getattr(submission, "kind", None)
    if submission_kind != exercise.kind:
        logger.debug(f"Submission kind {submission_kind} does not match exercise kind {exercise.kind.value}")
        return EvaluationResult(
            correct=False,
            description=description,
            answer_text=answer_text,
            feedback="Incorrect.",
        )

    try:
        correct = bool(handler.check(exercise, submission))
    except (AttributeError, TypeError, ValueError, IndexError) as e:
        logger.debug(f"Malformed {exercise.kind.value} submission treated as wrong: {e}")
        correct = False

    return EvaluationResult(
        correct=correct,
        description=description,
        answer_text=answer_text,
        feedback="Correct!" if correct else f"Incorrect. Answer: {answer_text}",
        user_answer=_format(handler, submission),
    )


def _format(handler, submission: Submission) -> str:
    try:
        return handler.format_submission(submission)
    except (AttributeError, TypeError, ValueError):
        return ""

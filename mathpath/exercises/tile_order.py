"""
Tile-order ("equation builder") exercise handler.

A fact is split into five tiles - operand, operator, operand, "=", result - and
shuffled. The arrangement is graded by evaluating it, not by comparing it to
the original order, so any true equation built from the tiles is accepted
(e.g. both "3 + 4 = 7" and "4 + 3 = 7").
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from loguru import logger

from mathpath.core.rng import RandomSource, resolve_rng, shuffled
from mathpath.curriculum.models import ProblemConfig

from . import ExerciseKind, register
from .base import DirectChoice, TileOrder, TileOrderSubmission
from .generator import OPERATORS, apply_operator, generate, parse_question

EQUATION_LENGTH = 5


def build_tile_order(config: ProblemConfig, rng: RandomSource | None = None) -> TileOrder | DirectChoice:
    """Split a generated fact into shuffled tiles."""
    rng = resolve_rng(rng)
    base = generate(config, rng)
    fact = parse_question(base.question)
    if fact is None:
        logger.debug(f"Equation builder: could not parse '{base.question}', using direct choice")
        return base

    correct_order = fact.tokens
    return TileOrder(tiles=tuple(shuffled(correct_order, rng)), correct_order=tuple(correct_order))


def _parse_int(token: str) -> int | None:
    if not isinstance(token, str) or not (token.isascii() and token.isdigit()):
        return None
    return int(token)


def evaluate_equation(tiles: Sequence[str]) -> bool:
    """
    Return True if ``tiles`` read as a true ``<num> <op> <num> = <num>``.

    Wrong length, a missing "=", numbers that are not plain ASCII digits and
    unknown operators are all simply false. Division must be exact and never
    by zero.
    """
    if len(tiles) != EQUATION_LENGTH or tiles[3] != "=":
        return False

    left = _parse_int(tiles[0])
    op = tiles[1]
    right = _parse_int(tiles[2])
    stated = _parse_int(tiles[4])
    if left is None or right is None or stated is None:
        return False
    if op not in OPERATORS:
        return False

    result = apply_operator(left, op, right)
    return result is not None and result == stated


@register(ExerciseKind.TILE_ORDER)
class TileOrderHandler:
    """Handler for equation builder exercises."""

    def check(self, exercise: TileOrder, submission: TileOrderSubmission) -> bool:
        arranged = list(submission.arranged_tiles)
        # every tile used exactly once
        if Counter(arranged) != Counter(exercise.tiles):
            return False
        return evaluate_equation(arranged)

    def describe(self, exercise: TileOrder) -> tuple[str, str]:
        return f"Build the equation from {' '.join(exercise.tiles)}", " ".join(exercise.correct_order)

    def format_submission(self, submission: TileOrderSubmission) -> str:
        return " ".join(submission.arranged_tiles)

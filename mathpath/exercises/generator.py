"""
Constraint-based problem generator.

Turns a skill's ProblemConfig into a concrete DirectChoice fact:

- addition: optional doubles, optional sumMax (bounded rejection sampling, then clamp)
- subtraction: operands swapped when needed so the result is never negative
- multiplication: optional fixed factor, factors presented in random order
- division: built backwards from quotient * divisor, so it is always exact
- mixed_add_sub / mixed_mul_div: one of the two operations, chosen per call
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mathpath.core.rng import RandomSource, resolve_rng, shuffled
from mathpath.curriculum.models import OperationKind, ProblemConfig

from .base import DirectChoice

SUM_MAX_RETRIES = 50

PLUS = "+"
MINUS = "-"
TIMES = "×"
DIVIDE = "÷"
OPERATORS = (PLUS, MINUS, TIMES, DIVIDE)

# Near-miss offsets, tried in this order before widening the search
NEAR_MISS_OFFSETS = (-2, -1, 1, 2, -3, 3)

_QUESTION_RE = re.compile(r"^(\d+)\s*([+\-×÷])\s*(\d+)$")


@dataclass(frozen=True)
class Fact:
    """One arithmetic fact: ``operand1 operator operand2 = result``."""

    operand1: int
    operator: str
    operand2: int
    result: int

    @property
    def question(self) -> str:
        return f"{self.operand1} {self.operator} {self.operand2}"

    @property
    def tokens(self) -> list[str]:
        return [str(self.operand1), self.operator, str(self.operand2), "=", str(self.result)]


def generate_wrong_choices(answer: int, count: int = 3) -> list[int]:
    """
    Build ``count`` distinct, non-negative distractors for ``answer``.

    Near misses (-2, -1, +1, +2, -3, +3) come first, then +4, -4, +5, -5, ...
    """
    wrong: list[int] = []
    for offset in NEAR_MISS_OFFSETS:
        if len(wrong) >= count:
            break
        candidate = answer + offset
        if candidate >= 0 and candidate != answer and candidate not in wrong:
            wrong.append(candidate)

    offset = 4
    while len(wrong) < count:
        candidate = answer + offset
        if candidate >= 0 and candidate not in wrong:
            wrong.append(candidate)
        offset = -offset if offset > 0 else -offset + 1

    return wrong


def make_direct_choice(question: str, answer: int, rng: RandomSource | None = None) -> DirectChoice:
    """Wrap a question and its answer with three shuffled near-miss choices."""
    choices = shuffled([answer, *generate_wrong_choices(answer, 3)], rng)
    return DirectChoice(question=question, answer=answer, choices=tuple(choices))


def parse_question(question: str) -> Fact | None:
    """Parse ``"a op b"`` back into a Fact, or None if it is not that shape."""
    match = _QUESTION_RE.match(question.strip())
    if not match:
        return None
    left, op, right = int(match.group(1)), match.group(2), int(match.group(3))
    result = apply_operator(left, op, right)
    if result is None:
        return None
    return Fact(operand1=left, operator=op, operand2=right, result=result)


def apply_operator(left: int, op: str, right: int) -> int | None:
    """Exact integer result of ``left op right``, or None if undefined."""
    if op == PLUS:
        return left + right
    if op == MINUS:
        return left - right
    if op == TIMES:
        return left * right
    if op == DIVIDE:
        if right == 0 or left % right != 0:
            return None
        return left // right
    return None


# ============================================================================
# Per-operation fact builders
# ============================================================================


def _addition(config: ProblemConfig, rng: RandomSource) -> Fact:
    (lo1, hi1), (lo2, hi2) = config.operand1_range, config.operand2_range
    constraints = config.constraints

    a = rng.randint(lo1, hi1)
    if constraints.doubles:
        b = a
    else:
        b = rng.randint(lo2, hi2)
        sum_max = constraints.sum_max
        if sum_max is not None:
            tries = 0
            while a + b > sum_max and tries < SUM_MAX_RETRIES:
                a = rng.randint(lo1, hi1)
                b = rng.randint(lo2, hi2)
                tries += 1
            if a + b > sum_max:
                b = max(lo2, sum_max - a)

    return Fact(a, PLUS, b, a + b)


def _subtraction(config: ProblemConfig, rng: RandomSource) -> Fact:
    (lo1, hi1), (lo2, hi2) = config.operand1_range, config.operand2_range

    a = rng.randint(lo1, hi1)
    upper = min(hi2, a)
    b = rng.randint(lo2, upper) if upper >= lo2 else rng.randint(lo2, hi2)
    if b > a:
        a, b = b, a

    return Fact(a, MINUS, b, a - b)


def _multiplication(config: ProblemConfig, rng: RandomSource) -> Fact:
    (lo1, hi1), (lo2, hi2) = config.operand1_range, config.operand2_range
    fixed = config.constraints.fixed_operand

    a = rng.randint(lo1, hi1)
    b = fixed if fixed is not None else rng.randint(lo2, hi2)
    if rng.random() < 0.5:
        a, b = b, a

    return Fact(a, TIMES, b, a * b)


def _division(config: ProblemConfig, rng: RandomSource) -> Fact:
    (lo1, hi1), (lo2, hi2) = config.operand1_range, config.operand2_range
    fixed = config.constraints.fixed_operand

    quotient = rng.randint(lo1, hi1)
    divisor = fixed if fixed is not None else rng.randint(lo2, hi2)
    dividend = quotient * divisor

    return Fact(dividend, DIVIDE, divisor, quotient)


def generate_fact(config: ProblemConfig, rng: RandomSource | None = None) -> Fact:
    """Draw one Fact honoring the config's ranges and constraints."""
    rng = resolve_rng(rng)
    op = config.type

    if op == OperationKind.MIXED_ADD_SUB:
        op = OperationKind.ADDITION if rng.random() < 0.5 else OperationKind.SUBTRACTION
    elif op == OperationKind.MIXED_MUL_DIV:
        op = OperationKind.MULTIPLICATION if rng.random() < 0.5 else OperationKind.DIVISION

    builders = {
        OperationKind.ADDITION: _addition,
        OperationKind.SUBTRACTION: _subtraction,
        OperationKind.MULTIPLICATION: _multiplication,
        OperationKind.DIVISION: _division,
    }
    return builders[op](config, rng)


def generate(config: ProblemConfig, rng: RandomSource | None = None) -> DirectChoice:
    """Generate a plain multiple-choice problem from a skill config."""
    rng = resolve_rng(rng)
    fact = generate_fact(config, rng)
    return make_direct_choice(fact.question, fact.result, rng)

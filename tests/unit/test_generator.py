"""
Unit tests for the constraint-based problem generator.

Run: pytest tests/unit/test_generator.py -v
"""

import random

import pytest

from mathpath.exercises.base import DirectChoice
from mathpath.exercises.generator import (
    DIVIDE,
    MINUS,
    PLUS,
    TIMES,
    apply_operator,
    generate,
    generate_fact,
    generate_wrong_choices,
    parse_question,
)

DRAWS = 300


class TestAddition:
    """Addition facts honor sumMax and doubles."""

    def test_sum_max_never_exceeded(self, rng, addition_config):
        """Every sum stays at or under sumMax."""
        for _ in range(DRAWS):
            fact = generate_fact(addition_config, rng)
            assert fact.operator == PLUS
            assert fact.result <= 10
            assert fact.result == fact.operand1 + fact.operand2

    def test_sum_max_clamp_when_retries_exhausted(self, rng, make_config):
        """An unreachable sumMax clamps operand2 down to its range minimum."""
        config = make_config("addition", (8, 9), (1, 9), sumMax=5)
        for _ in range(50):
            fact = generate_fact(config, rng)
            assert fact.operand2 == 1

    def test_doubles(self, rng, make_config):
        """Doubles repeat operand1 and ignore operand2's range."""
        config = make_config("addition", (1, 10), (50, 60), doubles=True)
        for _ in range(DRAWS):
            fact = generate_fact(config, rng)
            assert fact.operand1 == fact.operand2
            assert 1 <= fact.operand1 <= 10

    def test_operands_within_ranges(self, rng, make_config):
        """Unconstrained addition draws from both ranges."""
        config = make_config("addition", (10, 50), (1, 9))
        for _ in range(DRAWS):
            fact = generate_fact(config, rng)
            assert 10 <= fact.operand1 <= 50
            assert 1 <= fact.operand2 <= 9


class TestSubtraction:
    """Subtraction never goes negative."""

    def test_result_non_negative(self, rng, subtraction_config):
        for _ in range(DRAWS):
            fact = generate_fact(subtraction_config, rng)
            assert fact.operator == MINUS
            assert fact.operand1 >= fact.operand2
            assert fact.result >= 0

    def test_disjoint_ranges_swap(self, rng, make_config):
        """operand2 above operand1's range still yields a non-negative result."""
        config = make_config("subtraction", (1, 3), (5, 9))
        for _ in range(DRAWS):
            fact = generate_fact(config, rng)
            assert fact.result >= 0
            assert fact.result == fact.operand1 - fact.operand2


class TestMultiplication:
    """Fixed factors and ranges for multiplication."""

    def test_fixed_operand_always_present(self, rng, make_config):
        config = make_config("multiplication", (1, 9), (7, 7), fixedOperand=7)
        for _ in range(DRAWS):
            fact = generate_fact(config, rng)
            assert fact.operator == TIMES
            assert 7 in (fact.operand1, fact.operand2)
            assert fact.result == fact.operand1 * fact.operand2

    def test_fixed_operand_appears_on_both_sides(self, rng, make_config):
        """The fixed factor is presented first or second at random."""
        config = make_config("multiplication", (2, 2), (9, 9), fixedOperand=9)
        firsts = {generate_fact(config, rng).operand1 for _ in range(DRAWS)}
        assert firsts == {2, 9}


class TestDivision:
    """Division is generated backwards and always exact."""

    def test_division_exact(self, rng, division_config):
        for _ in range(DRAWS):
            fact = generate_fact(division_config, rng)
            assert fact.operator == DIVIDE
            assert fact.operand2 >= 2
            assert fact.operand1 % fact.operand2 == 0
            assert fact.operand1 // fact.operand2 == fact.result
            assert 1 <= fact.result <= 12

    def test_fixed_divisor(self, rng, make_config):
        config = make_config("division", (1, 9), (5, 5), fixedOperand=5)
        for _ in range(DRAWS):
            fact = generate_fact(config, rng)
            assert fact.operand2 == 5


class TestMixed:
    """Mixed kinds pick one of their two operations per call."""

    def test_mixed_add_sub_uses_both(self, rng, make_config):
        config = make_config("mixed_add_sub", (1, 10), (1, 10), sumMax=10)
        operators = {generate_fact(config, rng).operator for _ in range(DRAWS)}
        assert operators == {PLUS, MINUS}

    def test_mixed_mul_div_uses_both(self, rng, make_config):
        config = make_config("mixed_mul_div", (1, 12), (2, 9))
        facts = [generate_fact(config, rng) for _ in range(DRAWS)]
        assert {fact.operator for fact in facts} == {TIMES, DIVIDE}
        for fact in facts:
            assert apply_operator(fact.operand1, fact.operator, fact.operand2) == fact.result


class TestWrongChoices:
    """Distractor generation."""

    @pytest.mark.parametrize("answer", [0, 1, 2, 5, 12, 99])
    def test_three_distinct_non_negative(self, answer):
        wrong = generate_wrong_choices(answer, 3)
        assert len(wrong) == 3
        assert len(set(wrong)) == 3
        assert answer not in wrong
        assert all(value >= 0 for value in wrong)

    def test_near_misses_first(self):
        """Near misses come in the order -2, -1, +1."""
        assert generate_wrong_choices(10, 3) == [8, 9, 11]

    def test_zero_answer(self):
        """Negative near misses are skipped for zero."""
        assert generate_wrong_choices(0, 3) == [1, 2, 3]

    def test_widens_when_near_misses_run_out(self):
        wrong = generate_wrong_choices(0, 6)
        assert wrong == [1, 2, 3, 4, 5, 6]


class TestGenerate:
    """The public DirectChoice generator."""

    def test_generate_direct_choice_shape(self, rng, addition_config):
        for _ in range(50):
            problem = generate(addition_config, rng)
            assert isinstance(problem, DirectChoice)
            assert len(problem.choices) == 4
            assert len(set(problem.choices)) == 4
            assert problem.answer in problem.choices

    def test_question_parses_back(self, rng, division_config):
        problem = generate(division_config, rng)
        fact = parse_question(problem.question)
        assert fact is not None
        assert fact.result == problem.answer

    def test_same_seed_same_problem(self, addition_config):
        first = generate(addition_config, random.Random(7))
        second = generate(addition_config, random.Random(7))
        assert first == second


class TestParseQuestion:
    """Parsing "a op b" strings."""

    def test_parse_each_operator(self):
        assert parse_question("3 + 4").result == 7
        assert parse_question("9 - 4").result == 5
        assert parse_question("3 × 4").result == 12
        assert parse_question("12 ÷ 4").result == 3

    def test_parse_rejects_other_shapes(self):
        assert parse_question("3 + ___ = 7") is None
        assert parse_question("three + 4") is None
        assert parse_question("7 ÷ 2") is None

    def test_apply_operator_division_guards(self):
        assert apply_operator(7, DIVIDE, 0) is None
        assert apply_operator(7, DIVIDE, 2) is None
        assert apply_operator(8, DIVIDE, 2) == 4
        assert apply_operator(1, "%", 2) is None

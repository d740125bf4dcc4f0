"""
Unit tests for the answer evaluator and exercise handlers.

Run: pytest tests/unit/test_evaluator.py -v
"""

from types import SimpleNamespace

import pytest

from mathpath.exercises import ExerciseKind, HANDLERS, evaluate, get_handler
from mathpath.exercises.base import (
    ChoiceSubmission,
    Comparison,
    ComparisonSubmission,
    DirectChoice,
    MultiSelect,
    MultiSelectSubmission,
    SequenceOrder,
    SequenceOrderSubmission,
    TileOrder,
    TileOrderSubmission,
)
from mathpath.exercises.tile_order import evaluate_equation


@pytest.fixture
def direct_choice():
    return DirectChoice(question="7 + 5", answer=12, choices=(10, 11, 12, 13))


@pytest.fixture
def comparison():
    return Comparison(expression_a="3 × 4", expression_b="2 × 5", value_a=12, value_b=10, answer="A")


@pytest.fixture
def multi_select():
    return MultiSelect(
        target_value=6,
        bubbles=("2 × 3", "4 + 1", "3 × 2", "9 - 2", "1 + 1"),
        correct_indices=(0, 2),
    )


@pytest.fixture
def tile_order():
    return TileOrder(tiles=("=", "4", "7", "+", "3"), correct_order=("3", "+", "4", "=", "7"))


@pytest.fixture
def sequence_order():
    return SequenceOrder(items=("5 + 4", "1 + 1", "3 + 3", "2 + 1"), correct_order=(1, 3, 2, 0))


class TestRegistry:
    """Handler registry."""

    def test_every_kind_has_a_handler(self):
        assert set(HANDLERS) == set(ExerciseKind)

    def test_lookup_by_string(self):
        assert get_handler("comparison") is HANDLERS[ExerciseKind.COMPARISON]
        assert get_handler("TILE_ORDER") is HANDLERS[ExerciseKind.TILE_ORDER]

    def test_unknown_kind(self):
        assert get_handler("flashcard") is None


class TestDirectChoice:
    """Direct choice grading."""

    def test_correct(self, direct_choice):
        result = evaluate(direct_choice, ChoiceSubmission(choice=12))
        assert result.correct is True
        assert result.feedback == "Correct!"
        assert result.user_answer == "12"

    def test_incorrect(self, direct_choice):
        result = evaluate(direct_choice, ChoiceSubmission(choice=11))
        assert result.correct is False
        assert result.answer_text == "12"
        assert "12" in result.feedback

    def test_description_appends_question_mark(self, direct_choice):
        result = evaluate(direct_choice, ChoiceSubmission(choice=12))
        assert result.description == "7 + 5 = ?"

    def test_missing_operand_description_kept(self):
        exercise = DirectChoice(question="7 + ___ = 12", answer=5, choices=(3, 4, 5, 6))
        result = evaluate(exercise, ChoiceSubmission(choice=5))
        assert result.correct is True
        assert result.description == "7 + ___ = 12"
        assert result.answer_text == "5"


class TestComparison:
    """Comparison grading."""

    def test_correct(self, comparison):
        assert evaluate(comparison, ComparisonSubmission(choice="A")).correct is True

    def test_incorrect(self, comparison):
        assert evaluate(comparison, ComparisonSubmission(choice="B")).correct is False

    def test_describe(self, comparison):
        result = evaluate(comparison, ComparisonSubmission(choice="B"))
        assert result.description == "Which is bigger: 3 × 4 or 2 × 5?"
        assert result.answer_text == "3 × 4 = 12"


class TestMultiSelect:
    """Bubble pop: exact set equality, no partial credit."""

    def test_exact_set(self, multi_select):
        assert evaluate(multi_select, MultiSelectSubmission(selected_indices=(0, 2))).correct is True

    def test_order_does_not_matter(self, multi_select):
        assert evaluate(multi_select, MultiSelectSubmission(selected_indices=(2, 0))).correct is True

    def test_subset_is_wrong(self, multi_select):
        assert evaluate(multi_select, MultiSelectSubmission(selected_indices=(0,))).correct is False

    def test_superset_is_wrong(self, multi_select):
        assert evaluate(multi_select, MultiSelectSubmission(selected_indices=(0, 2, 4))).correct is False

    def test_duplicate_selection_is_wrong(self, multi_select):
        assert evaluate(multi_select, MultiSelectSubmission(selected_indices=(0, 0))).correct is False

    def test_describe(self, multi_select):
        result = evaluate(multi_select, MultiSelectSubmission(selected_indices=()))
        assert result.description == "Pop every bubble that makes 6"
        assert result.answer_text == "2 × 3, 3 × 2"


class TestTileOrder:
    """Equation builder: any true equation from the tiles is accepted."""

    @pytest.mark.parametrize(
        "tiles",
        [
            ("3", "+", "4", "=", "7"),
            ("4", "+", "3", "=", "7"),
        ],
    )
    def test_true_equations(self, tile_order, tiles):
        assert evaluate(tile_order, TileOrderSubmission(arranged_tiles=tiles)).correct is True

    @pytest.mark.parametrize(
        "tiles",
        [
            ("3", "+", "4", "=", "8"),
            ("3", "x", "4", "=", "12"),
            ("7", "+", "3", "=", "4"),
            ("3", "+", "4", "7", "="),
            ("3", "+", "4", "="),
            ("3", "+", "4", "=", "7", "7"),
            ("x", "+", "4", "=", "7"),
            ("3", "%", "4", "=", "7"),
            ("3.5", "+", "4", "=", "7"),
        ],
    )
    def test_false_or_malformed(self, tile_order, tiles):
        assert evaluate(tile_order, TileOrderSubmission(arranged_tiles=tiles)).correct is False

    def test_division_must_be_exact(self):
        assert evaluate_equation(["12", "÷", "4", "=", "3"]) is True
        assert evaluate_equation(["7", "÷", "2", "=", "3"]) is False
        assert evaluate_equation(["7", "÷", "0", "=", "0"]) is False

    def test_commuted_multiplication(self):
        assert evaluate_equation(["4", "×", "3", "=", "12"]) is True

    @pytest.mark.parametrize("number", ["1_0", " 10", "+10", "١٠", "10.0"])
    def test_numbers_must_be_plain_digits(self, number):
        assert evaluate_equation([number, "+", "0", "=", "10"]) is False
        assert evaluate_equation(["10", "+", "0", "=", number]) is False

    def test_tiles_not_on_the_board_are_wrong(self, tile_order):
        """A true equation still has to use exactly the tiles given."""
        submission = TileOrderSubmission(arranged_tiles=("1", "+", "1", "=", "2"))
        assert evaluate(tile_order, submission).correct is False

    def test_repeated_tile_is_wrong(self):
        exercise = TileOrder(tiles=("2", "+", "4", "=", "2"), correct_order=("2", "+", "2", "=", "4"))
        good = TileOrderSubmission(arranged_tiles=("2", "+", "2", "=", "4"))
        reused = TileOrderSubmission(arranged_tiles=("4", "+", "4", "=", "8"))
        assert evaluate(exercise, good).correct is True
        assert evaluate(exercise, reused).correct is False

    def test_describe(self, tile_order):
        result = evaluate(tile_order, TileOrderSubmission(arranged_tiles=()))
        assert result.description == "Build the equation from = 4 7 + 3"
        assert result.answer_text == "3 + 4 = 7"


class TestSequenceOrder:
    """Ordering needs the full permutation."""

    def test_correct(self, sequence_order):
        submission = SequenceOrderSubmission(selected_order=(1, 3, 2, 0))
        assert evaluate(sequence_order, submission).correct is True

    def test_one_swap_is_wrong(self, sequence_order):
        submission = SequenceOrderSubmission(selected_order=(3, 1, 2, 0))
        assert evaluate(sequence_order, submission).correct is False

    def test_partial_is_wrong(self, sequence_order):
        submission = SequenceOrderSubmission(selected_order=(1, 3))
        assert evaluate(sequence_order, submission).correct is False

    def test_describe(self, sequence_order):
        result = evaluate(sequence_order, SequenceOrderSubmission(selected_order=()))
        assert result.description == "Order from smallest to biggest: 5 + 4, 1 + 1, 3 + 3, 2 + 1"
        assert result.answer_text == "1 + 1 < 2 + 1 < 3 + 3 < 5 + 4"


class TestMismatch:
    """Submissions of the wrong kind never raise."""

    def test_kind_mismatch_is_incorrect(self, direct_choice):
        result = evaluate(direct_choice, ComparisonSubmission(choice="A"))
        assert result.correct is False
        assert result.description == "7 + 5 = ?"
        assert result.answer_text == "12"

    def test_foreign_submission_is_incorrect(self, tile_order):
        assert evaluate(tile_order, object()).correct is False

    def test_submission_missing_its_payload_is_incorrect(self, direct_choice):
        """Right kind, but no ``choice`` attribute."""
        submission = SimpleNamespace(kind=ExerciseKind.DIRECT_CHOICE)
        result = evaluate(direct_choice, submission)
        assert result.correct is False
        assert result.user_answer == ""

    def test_foreign_exercise_is_incorrect(self):
        assert evaluate(object(), ChoiceSubmission(choice=1)).correct is False

    def test_malformed_payload_is_incorrect(self, tile_order):
        """Tiles that are not strings are simply wrong."""
        submission = TileOrderSubmission(arranged_tiles=(3, "+", 4, "=", 7))
        assert evaluate(tile_order, submission).correct is False

"""
Base types for exercises, submissions and handlers.

Exercises are immutable and built fresh for each lesson slot. Submissions carry
only what the learner chose; they never reference exercise internals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, Protocol, Union

from . import ExerciseKind

ComparisonLabel = Literal["A", "B"]


# ============================================================================
# Exercises
# ============================================================================


@dataclass(frozen=True)
class DirectChoice:
    """Pick the answer to ``question`` from ``choices``."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.DIRECT_CHOICE

    question: str
    answer: int
    choices: tuple[int, ...]


@dataclass(frozen=True)
class Comparison:
    """Decide which of two expressions is larger."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.COMPARISON

    expression_a: str
    expression_b: str
    value_a: int
    value_b: int
    answer: ComparisonLabel


@dataclass(frozen=True)
class MultiSelect:
    """Pop every bubble whose expression equals ``target_value``."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.MULTI_SELECT

    target_value: int
    bubbles: tuple[str, ...]
    correct_indices: tuple[int, ...]


@dataclass(frozen=True)
class TileOrder:
    """Arrange shuffled tiles into a true equation."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.TILE_ORDER

    tiles: tuple[str, ...]
    correct_order: tuple[str, ...]


@dataclass(frozen=True)
class SequenceOrder:
    """Order expressions from smallest to biggest value."""

    kind: ClassVar[ExerciseKind] = ExerciseKind.SEQUENCE_ORDER

    items: tuple[str, ...]
    correct_order: tuple[int, ...]  # indices into items, ascending by value


Exercise = Union[DirectChoice, Comparison, MultiSelect, TileOrder, SequenceOrder]


# ============================================================================
# Submissions
# ============================================================================


@dataclass(frozen=True)
class ChoiceSubmission:
    kind: ClassVar[ExerciseKind] = ExerciseKind.DIRECT_CHOICE

    choice: int


@dataclass(frozen=True)
class ComparisonSubmission:
    kind: ClassVar[ExerciseKind] = ExerciseKind.COMPARISON

    choice: str


@dataclass(frozen=True)
class MultiSelectSubmission:
    kind: ClassVar[ExerciseKind] = ExerciseKind.MULTI_SELECT

    selected_indices: tuple[int, ...]


@dataclass(frozen=True)
class TileOrderSubmission:
    kind: ClassVar[ExerciseKind] = ExerciseKind.TILE_ORDER

    arranged_tiles: tuple[str, ...]


@dataclass(frozen=True)
class SequenceOrderSubmission:
    kind: ClassVar[ExerciseKind] = ExerciseKind.SEQUENCE_ORDER

    selected_order: tuple[int, ...]


Submission = Union[
    ChoiceSubmission,
    ComparisonSubmission,
    MultiSelectSubmission,
    TileOrderSubmission,
    SequenceOrderSubmission,
]


# ============================================================================
# Grading
# ============================================================================


@dataclass(frozen=True)
class EvaluationResult:
    """Result of grading one submission."""

    correct: bool
    description: str  # what was asked, for the "review these" list
    answer_text: str  # the right answer, as shown to the learner
    feedback: str = ""
    user_answer: str = ""


class ExerciseHandler(Protocol):
    """Protocol for exercise kind handlers."""

    def check(self, exercise, submission) -> bool:
        """Return True if the submission answers the exercise. Never raises."""
        ...

    def describe(self, exercise) -> tuple[str, str]:
        """Return ``(description, answer_text)`` for review lists."""
        ...

    def format_submission(self, submission) -> str:
        """Render the learner's submission as text."""
        ...

"""
Exercise kinds for mathpath lessons.

Each exercise kind (direct choice, comparison, bubble pop, ...) has its own module with:
- a builder that turns a skill config into an exercise (falling back to DirectChoice)
- a handler with check(), describe() and format_submission()

The set of kinds is closed: importing this package fails if any kind lacks a handler.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import ExerciseHandler


class ExerciseKind(str, Enum):
    """Supported exercise shapes."""
    DIRECT_CHOICE = "direct_choice"
    COMPARISON = "comparison"
    MULTI_SELECT = "multi_select"
    TILE_ORDER = "tile_order"
    SEQUENCE_ORDER = "sequence_order"


# Handler registry - populated by @register decorator
HANDLERS: dict[ExerciseKind, "ExerciseHandler"] = {}


def register(kind: ExerciseKind):
    """Decorator to register an exercise handler."""
    def decorator(cls):
        HANDLERS[kind] = cls()
        return cls
    return decorator


def get_handler(kind: "str | ExerciseKind") -> "ExerciseHandler | None":
    """Get the handler for an exercise kind."""
    if isinstance(kind, str) and not isinstance(kind, ExerciseKind):
        try:
            kind = ExerciseKind(kind.lower())
        except ValueError:
            return None
    return HANDLERS.get(kind)


# Import handlers to trigger registration
from . import direct_choice
from . import comparison
from . import multi_select
from . import tile_order
from . import sequence_order

_missing = [kind.value for kind in ExerciseKind if kind not in HANDLERS]
if _missing:
    raise RuntimeError(f"Exercise kinds without a handler: {', '.join(_missing)}")

from .evaluator import evaluate

__all__ = [
    "ExerciseKind",
    "HANDLERS",
    "evaluate",
    "get_handler",
    "register",
]

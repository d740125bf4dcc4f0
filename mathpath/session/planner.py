"""
Lesson planner.

Every lesson is ten slots drawn from one fixed mix of exercise kinds, so each
lesson touches every modality while weighting direct recall highest:

- 4 direct choice
- 2 missing operand
- 1 each of comparison, bubble pop, equation builder, ordering
"""
from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from mathpath.core.rng import RandomSource, resolve_rng, shuffled
from mathpath.curriculum.models import ProblemConfig
from mathpath.exercises.base import Exercise
from mathpath.exercises.comparison import build_comparison
from mathpath.exercises.direct_choice import build_missing_operand
from mathpath.exercises.generator import generate
from mathpath.exercises.multi_select import build_multi_select
from mathpath.exercises.sequence_order import build_sequence_order
from mathpath.exercises.tile_order import build_tile_order


class SlotKind(str, Enum):
    """What a lesson slot asks for."""
    DIRECT_CHOICE = "direct_choice"
    MISSING_OPERAND = "missing_operand"
    COMPARISON = "comparison"
    MULTI_SELECT = "multi_select"
    TILE_ORDER = "tile_order"
    SEQUENCE_ORDER = "sequence_order"


SESSION_COMPOSITION: dict[SlotKind, int] = {
    SlotKind.DIRECT_CHOICE: 4,
    SlotKind.MISSING_OPERAND: 2,
    SlotKind.COMPARISON: 1,
    SlotKind.MULTI_SELECT: 1,
    SlotKind.TILE_ORDER: 1,
    SlotKind.SEQUENCE_ORDER: 1,
}

SESSION_LENGTH = sum(SESSION_COMPOSITION.values())

_BUILDERS: dict[SlotKind, Callable[[ProblemConfig, RandomSource], Exercise]] = {
    SlotKind.DIRECT_CHOICE: generate,
    SlotKind.MISSING_OPERAND: build_missing_operand,
    SlotKind.COMPARISON: build_comparison,
    SlotKind.MULTI_SELECT: build_multi_select,
    SlotKind.TILE_ORDER: build_tile_order,
    SlotKind.SEQUENCE_ORDER: build_sequence_order,
}

_unbuilt = [kind.value for kind in SlotKind if kind not in _BUILDERS or kind not in SESSION_COMPOSITION]
if _unbuilt:
    raise RuntimeError(f"Slot kinds missing a builder or a plan count: {', '.join(_unbuilt)}")


def plan_session(rng: RandomSource | None = None) -> list[SlotKind]:
    """Return the fixed slot mix in uniformly random order."""
    slots = [kind for kind, count in SESSION_COMPOSITION.items() for _ in range(count)]
    return shuffled(slots, rng)


def generate_for_slot(
    kind: SlotKind | str,
    config: ProblemConfig,
    rng: RandomSource | None = None,
) -> Exercise:
    """Materialize one slot's exercise for a skill config."""
    return _BUILDERS[SlotKind(kind)](config, resolve_rng(rng))

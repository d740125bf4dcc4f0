"""
Random source handling.

Every generator accepts an optional ``rng``. Tests pass a seeded
``random.Random``; everything else falls through to one process-global source.
"""

from __future__ import annotations

import random
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of ``random.Random`` the engine relies on."""

    def randint(self, a: int, b: int) -> int:
        ...

    def random(self) -> float:
        ...

    def shuffle(self, x: list) -> None:
        ...


_GLOBAL_RNG = random.Random()


def resolve_rng(rng: RandomSource | None = None) -> RandomSource:
    """Return the given source, or the process-global one."""
    return rng if rng is not None else _GLOBAL_RNG


def shuffled(items: list[T], rng: RandomSource | None = None) -> list[T]:
    """Return a uniformly shuffled copy (Fisher-Yates via ``Random.shuffle``)."""
    result = list(items)
    resolve_rng(rng).shuffle(result)
    return result

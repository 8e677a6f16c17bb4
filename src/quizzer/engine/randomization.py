"""Random sources and the Fisher–Yates shuffle used for quiz randomization.

A seeded source makes question and option order reproducible: given the same
seed and the same input ordering, the shuffle consumes exactly one bounded
draw per swap position (from the last index down to index 1) and therefore
yields the same permutation every run.
"""

from __future__ import annotations

import random
from typing import MutableSequence, Optional, Protocol, Sequence, TypeVar

__all__ = [
    "DefaultRandomSource",
    "RandomSource",
    "SeededRandomSource",
    "random_source_for",
    "shuffle_in_place",
    "shuffled",
]

T = TypeVar("T")


class RandomSource(Protocol):
    """Capability that yields bounded random integers."""

    def next_below(self, bound: int) -> int:
        """Return an integer in ``[0, bound)``."""


class SeededRandomSource:
    """Deterministic source for tests and reproducible runs."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_below(self, bound: int) -> int:
        return self._rng.randrange(bound)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed!r})"


class DefaultRandomSource:
    """Source seeded from process entropy."""

    def __init__(self) -> None:
        self._rng = random.Random()

    def next_below(self, bound: int) -> int:
        return self._rng.randrange(bound)


def random_source_for(seed: Optional[int]) -> RandomSource:
    """Return a seeded source when ``seed`` is given, else a default one."""

    if seed is None:
        return DefaultRandomSource()
    return SeededRandomSource(seed)


def shuffle_in_place(items: MutableSequence[T], source: RandomSource) -> None:
    """Shuffle ``items`` uniformly in place."""

    for i in range(len(items) - 1, 0, -1):
        j = source.next_below(i + 1)
        items[i], items[j] = items[j], items[i]


def shuffled(items: Sequence[T], source: RandomSource) -> list[T]:
    """Return a shuffled copy of ``items`` leaving the input untouched."""

    result = list(items)
    shuffle_in_place(result, source)
    return result

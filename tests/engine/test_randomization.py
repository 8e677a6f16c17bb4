from __future__ import annotations

import pytest

from quizzer.engine import randomization as rnd


class _RecordingSource:
    """Always draws ``value`` (clamped) and remembers every bound."""

    def __init__(self, value: int = 0):
        self.value = value
        self.bounds: list[int] = []

    def next_below(self, bound: int) -> int:
        self.bounds.append(bound)
        return min(self.value, bound - 1)


def test_shuffle_draws_once_per_position_descending():
    items = ["a", "b", "c", "d"]
    source = _RecordingSource(0)

    rnd.shuffle_in_place(items, source)

    assert source.bounds == [4, 3, 2]
    assert items == ["b", "c", "d", "a"]


def test_shuffle_with_identity_draws_keeps_order():
    items = [1, 2, 3, 4, 5]
    source = _RecordingSource(10)

    rnd.shuffle_in_place(items, source)

    assert items == [1, 2, 3, 4, 5]


@pytest.mark.parametrize("items", [[], ["only"]])
def test_shuffle_short_sequences_consume_nothing(items):
    source = _RecordingSource()

    rnd.shuffle_in_place(items, source)

    assert source.bounds == []


def test_seeded_sources_reproduce_permutations():
    data = list(range(20))

    first = rnd.shuffled(data, rnd.SeededRandomSource(42))
    second = rnd.shuffled(data, rnd.SeededRandomSource(42))

    assert first == second
    assert sorted(first) == data
    assert data == list(range(20))


def test_different_seeds_usually_differ():
    data = list(range(20))

    first = rnd.shuffled(data, rnd.SeededRandomSource(1))
    second = rnd.shuffled(data, rnd.SeededRandomSource(2))

    assert first != second


def test_next_below_stays_in_range():
    source = rnd.SeededRandomSource(7)

    draws = [source.next_below(3) for _ in range(200)]

    assert set(draws) == {0, 1, 2}


def test_random_source_for_picks_variant():
    seeded = rnd.random_source_for(5)
    default = rnd.random_source_for(None)

    assert isinstance(seeded, rnd.SeededRandomSource)
    assert seeded.seed == 5
    assert repr(seeded) == "SeededRandomSource(seed=5)"
    assert isinstance(default, rnd.DefaultRandomSource)
    assert rnd.random_source_for(None) is not default

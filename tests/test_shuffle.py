from __future__ import annotations

import random

import pytest

from trivia_app.core.shuffle import ShuffleService


def test_shuffled_is_a_permutation_and_leaves_input_alone() -> None:
    items = list(range(20))
    result = ShuffleService(random.Random(3)).shuffled(items)
    assert sorted(result) == items
    assert items == list(range(20))


def test_same_seed_same_order() -> None:
    first = ShuffleService(random.Random(42)).shuffled("abcdefgh")
    second = ShuffleService(random.Random(42)).shuffled("abcdefgh")
    assert first == second


def test_every_permutation_of_three_is_reachable() -> None:
    service = ShuffleService(random.Random(0))
    seen = {tuple(service.shuffled([1, 2, 3])) for _ in range(300)}
    assert len(seen) == 6


def test_pick() -> None:
    service = ShuffleService(random.Random(1))
    assert service.pick(["only"]) == "only"
    assert service.pick([1, 2, 3]) in {1, 2, 3}
    with pytest.raises(ValueError):
        service.pick([])

"""Randomness used by the quiz engine: sampling and lifeline target selection."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class ShuffleService:
    """Fisher-Yates shuffling over an injectable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Return a uniformly permuted copy of ``items``; the input is left untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self._rng.randint(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def pick(self, items: Sequence[T]) -> T:
        """Return one element chosen uniformly at random."""
        if not items:
            raise ValueError("Cannot pick from an empty sequence.")
        return items[self._rng.randrange(len(items))]

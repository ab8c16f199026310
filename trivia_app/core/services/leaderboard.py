"""Service for keeping the top quiz scores."""

from __future__ import annotations

from collections.abc import Iterable

from trivia_app.constants.quiz_constants import LEADERBOARD_SIZE
from trivia_app.core.models import LeaderboardEntry


class Leaderboard:
    """Tracks the best scores, highest first, ties kept in the order they were saved."""

    def __init__(self, entries: Iterable[LeaderboardEntry] = (), limit: int = LEADERBOARD_SIZE) -> None:
        self._limit = limit
        self._entries: list[LeaderboardEntry] = self._rank(list(entries))

    def append(self, entry: LeaderboardEntry) -> list[LeaderboardEntry]:
        """Add a score and return the updated top entries."""
        self._entries = self._rank([*self._entries, entry])
        return list(self._entries)

    def get_entries(self, limit: int | None = None) -> list[LeaderboardEntry]:
        if limit is None:
            return list(self._entries)
        return self._entries[: max(limit, 0)]

    def _rank(self, entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
        # sorted() is stable, so equal scores keep insertion order
        return sorted(entries, key=lambda e: -e.score)[: self._limit]

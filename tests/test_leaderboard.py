from __future__ import annotations

from datetime import datetime, timezone

from trivia_app.core.models import LeaderboardEntry
from trivia_app.core.services.leaderboard import Leaderboard


def test_highest_first_and_ties_keep_insertion_order() -> None:
    board = Leaderboard()
    board.append(LeaderboardEntry("Anna", 300))
    board.append(LeaderboardEntry("Boaz", 500))
    board.append(LeaderboardEntry("Caleb", 300))

    assert [e.name for e in board.get_entries()] == ["Boaz", "Anna", "Caleb"]


def test_only_top_ten_kept() -> None:
    board = Leaderboard()
    for score in range(12):
        top = board.append(LeaderboardEntry(f"p{score}", score * 10))

    assert len(top) == 10
    assert top[0].score == 110
    assert top[-1].score == 20


def test_low_score_falls_off_full_board() -> None:
    board = Leaderboard(LeaderboardEntry(f"p{i}", 100) for i in range(10))
    late = LeaderboardEntry("late", 100)
    board.append(late)
    assert late not in board.get_entries()
    assert len(board.get_entries()) == 10


def test_get_entries_limit() -> None:
    board = Leaderboard([LeaderboardEntry("a", 1), LeaderboardEntry("b", 2)])
    assert [e.name for e in board.get_entries(1)] == ["b"]
    assert board.get_entries(0) == []


def test_entry_dict_round_trip_keeps_identity() -> None:
    entry = LeaderboardEntry("Ruth", 450, id="abc", timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc))
    payload = entry.to_dict()
    assert payload["date"] == "2024-05-01T00:00:00+00:00"
    assert LeaderboardEntry.from_dict(payload) == entry


def test_entry_accepts_utc_z_suffix() -> None:
    entry = LeaderboardEntry.from_dict(
        {"id": "x", "name": "Lydia", "score": 300, "date": "2024-05-01T10:30:00.000Z"}
    )
    assert entry.timestamp == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)
    assert entry.timestamp.utcoffset() is not None

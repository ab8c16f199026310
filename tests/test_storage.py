from __future__ import annotations

import json
from pathlib import Path

from trivia_app.core.default_questions import INITIAL_QUESTIONS
from trivia_app.core.models import LeaderboardEntry
from trivia_app.core.storage import AppStorage, resolve_data_dir


def test_missing_files_fall_back_to_defaults(tmp_path: Path) -> None:
    storage = AppStorage(tmp_path / "data")
    assert storage.load_questions() == list(INITIAL_QUESTIONS)
    assert storage.load_leaderboard() == []
    assert storage.load_study_index() == 0


def test_corrupt_files_fall_back_to_defaults(tmp_path: Path) -> None:
    storage = AppStorage(tmp_path)
    storage.questions_path.write_text("{not json", encoding="utf-8")
    storage.leaderboard_path.write_text('{"oops": 1}', encoding="utf-8")
    storage.study_progress_path.write_text('{"index": "three"}', encoding="utf-8")

    assert storage.load_questions() == list(INITIAL_QUESTIONS)
    assert storage.load_leaderboard() == []
    assert storage.load_study_index() == 0


def test_questions_round_trip_and_skip_invalid(tmp_path: Path, five_questions) -> None:
    storage = AppStorage(tmp_path)
    assert storage.save_questions(five_questions)

    payload = json.loads(storage.questions_path.read_text(encoding="utf-8"))
    payload.append({"id": "broken", "text": "", "options": []})
    storage.questions_path.write_text(json.dumps(payload), encoding="utf-8")

    assert storage.load_questions() == five_questions


def test_empty_catalog_is_not_saved(tmp_path: Path) -> None:
    storage = AppStorage(tmp_path)
    assert not storage.save_questions([])
    assert not storage.questions_path.exists()


def test_leaderboard_round_trip(tmp_path: Path) -> None:
    storage = AppStorage(tmp_path)
    entries = [LeaderboardEntry("Ruth", 400), LeaderboardEntry("Boaz", 250)]
    assert storage.save_leaderboard(entries)
    assert storage.load_leaderboard() == entries


def test_invalid_leaderboard_rows_are_skipped(tmp_path: Path) -> None:
    storage = AppStorage(tmp_path)
    storage.leaderboard_path.write_text(
        json.dumps([{"name": "Ruth", "score": 10}, {"score": 5}, "junk"]),
        encoding="utf-8",
    )
    assert [e.name for e in storage.load_leaderboard()] == ["Ruth"]


def test_study_index_round_trip(tmp_path: Path) -> None:
    storage = AppStorage(tmp_path)
    assert storage.save_study_index(3)
    assert storage.load_study_index() == 3


def test_write_failure_reports_false(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    storage = AppStorage(blocker / "nested")
    assert not storage.save_study_index(1)


def test_data_dir_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SCRIPTURE_SCHOLAR_DATA_DIR", str(tmp_path))
    assert resolve_data_dir() == tmp_path
    assert AppStorage.from_environment().data_dir == tmp_path

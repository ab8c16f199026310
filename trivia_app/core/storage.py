"""JSON persistence for the question bank, leaderboard and study progress.

Reads never fail: a missing or corrupt file falls back to the built-in
questions, an empty leaderboard or the first flashcard. Write failures are
logged and reported to the caller as ``False`` so in-memory state stays the
source of truth for the running process.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path

from trivia_app.constants.storage_constants import (
    DATA_DIR_ENV_VAR,
    DEFAULT_DATA_DIR,
    LEADERBOARD_FILE_NAME,
    QUESTIONS_FILE_NAME,
    STUDY_PROGRESS_FILE_NAME,
)
from trivia_app.core.default_questions import INITIAL_QUESTIONS
from trivia_app.core.models import LeaderboardEntry, Question
from trivia_app.core.services.question_bank import question_from_mapping

logger = logging.getLogger(__name__)


def resolve_data_dir() -> Path:
    override = os.getenv(DATA_DIR_ENV_VAR)
    return Path(override).expanduser() if override else DEFAULT_DATA_DIR


@dataclass(slots=True)
class AppStorage:
    """File-backed store rooted at ``data_dir``."""

    data_dir: Path

    @classmethod
    def from_environment(cls) -> "AppStorage":
        return cls(resolve_data_dir())

    @property
    def questions_path(self) -> Path:
        return self.data_dir / QUESTIONS_FILE_NAME

    @property
    def leaderboard_path(self) -> Path:
        return self.data_dir / LEADERBOARD_FILE_NAME

    @property
    def study_progress_path(self) -> Path:
        return self.data_dir / STUDY_PROGRESS_FILE_NAME

    def load_questions(self) -> list[Question]:
        payload = self._read_json(self.questions_path)
        if not isinstance(payload, list):
            return list(INITIAL_QUESTIONS)
        questions: list[Question] = []
        for record in payload:
            if not isinstance(record, dict):
                continue
            try:
                stored_id = str(record["id"]) if record.get("id") else None
                questions.append(question_from_mapping(record, question_id=stored_id))
            except ValueError:
                logger.warning("Skipping invalid stored question: %r", record.get("id"))
        return questions or list(INITIAL_QUESTIONS)

    def save_questions(self, questions: list[Question]) -> bool:
        if not questions:
            return False
        return self._write_json(self.questions_path, [question.to_dict() for question in questions])

    def load_leaderboard(self) -> list[LeaderboardEntry]:
        payload = self._read_json(self.leaderboard_path)
        if not isinstance(payload, list):
            return []
        entries: list[LeaderboardEntry] = []
        for record in payload:
            try:
                entries.append(LeaderboardEntry.from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping invalid leaderboard entry: %r", record)
        return entries

    def save_leaderboard(self, entries: list[LeaderboardEntry]) -> bool:
        return self._write_json(self.leaderboard_path, [entry.to_dict() for entry in entries])

    def load_study_index(self) -> int:
        payload = self._read_json(self.study_progress_path)
        if isinstance(payload, dict) and isinstance(payload.get("index"), int):
            return payload["index"]
        return 0

    def save_study_index(self, index: int) -> bool:
        return self._write_json(self.study_progress_path, {"index": index})

    def _read_json(self, path: Path) -> object:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Could not read %s; using defaults", path)
            return None

    def _write_json(self, path: Path, payload: object) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Could not write %s", path)
            return False
        return True

"""Domain models for the trivia application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from trivia_app.constants.quiz_constants import DEFAULT_CATEGORY, TIMEOUT_SELECTION


class Difficulty(str, Enum):
    """Difficulty label attached to every question."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: object) -> "Difficulty":
        """Return the matching difficulty, falling back to Medium for unknown labels."""
        if isinstance(value, Difficulty):
            return value
        label = str(value or "").strip().capitalize()
        for member in cls:
            if member.value == label:
                return member
        return cls.MEDIUM


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice trivia question with exactly four options."""

    id: str
    text: str
    options: tuple[str, ...]
    correct_option_index: int
    reference: str
    difficulty: Difficulty = Difficulty.MEDIUM
    category: str = DEFAULT_CATEGORY

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]

    def incorrect_option_indices(self) -> list[int]:
        return [idx for idx in range(len(self.options)) if idx != self.correct_option_index]

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "text": self.text,
            "options": list(self.options),
            "correctOptionIndex": self.correct_option_index,
            "reference": self.reference,
            "difficulty": self.difficulty.value,
            "category": self.category,
        }


@dataclass(frozen=True, slots=True)
class AnswerRecord:
    """Outcome of one played question, appended once when the player moves on."""

    question_id: str
    selected_index: int
    is_correct: bool

    @property
    def timed_out(self) -> bool:
        return self.selected_index == TIMEOUT_SELECTION


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """A saved score from a completed quiz."""

    name: str
    score: int
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "score": self.score,
            "date": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "LeaderboardEntry":
        raw_date = str(payload.get("date") or "")
        if raw_date.endswith("Z"):
            # fromisoformat only accepts the Z suffix from Python 3.11
            raw_date = raw_date[:-1] + "+00:00"
        timestamp = datetime.fromisoformat(raw_date) if raw_date else datetime.now(timezone.utc)
        return cls(
            id=str(payload.get("id") or uuid4().hex),
            name=str(payload["name"]),
            score=int(payload["score"]),
            timestamp=timestamp,
        )


def new_question_id() -> str:
    return uuid4().hex

"""Read-only results derived from a completed quiz session."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from trivia_app.constants.ui_constants import TIME_EXPIRED_LABEL
from trivia_app.core.models import AnswerRecord, LeaderboardEntry, Question


@dataclass(frozen=True, slots=True)
class ReviewItem:
    """One row of the post-quiz review: the question and what the player picked."""

    question: Question
    selected_index: int
    is_correct: bool

    @property
    def selected_label(self) -> str:
        if 0 <= self.selected_index < len(self.question.options):
            return self.question.options[self.selected_index]
        return TIME_EXPIRED_LABEL

    def to_dict(self) -> dict[str, object]:
        return {
            "question_id": self.question.id,
            "text": self.question.text,
            "selected_index": self.selected_index,
            "selected_label": self.selected_label,
            "correct_option": self.question.correct_option,
            "is_correct": self.is_correct,
            "reference": self.question.reference,
        }


@dataclass(frozen=True, slots=True)
class ResultSummary:
    """Final tally of a quiz attempt; the payload behind a leaderboard entry."""

    correct_count: int
    total: int
    final_score: int
    answers: tuple[AnswerRecord, ...]
    review: tuple[ReviewItem, ...]

    @classmethod
    def from_session(
        cls,
        questions: Sequence[Question],
        answers: Sequence[AnswerRecord],
        score: int,
    ) -> "ResultSummary":
        review = tuple(
            ReviewItem(question=question, selected_index=record.selected_index, is_correct=record.is_correct)
            for question, record in zip(questions, answers)
        )
        return cls(
            correct_count=sum(1 for record in answers if record.is_correct),
            total=len(answers),
            final_score=score,
            answers=tuple(answers),
            review=review,
        )

    def leaderboard_entry(self, name: str) -> LeaderboardEntry:
        return LeaderboardEntry(name=name, score=self.final_score)

    def to_dict(self) -> dict[str, object]:
        return {
            "correct_count": self.correct_count,
            "total": self.total,
            "final_score": self.final_score,
            "review": [item.to_dict() for item in self.review],
        }

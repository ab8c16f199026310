"""Read-only view over the question catalog used to draw quiz questions."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from trivia_app.constants.quiz_constants import ALL_CATEGORIES, DEFAULT_CATEGORY
from trivia_app.core.models import Question
from trivia_app.core.shuffle import ShuffleService


class EmptyPoolError(ValueError):
    """Raised when a category filter leaves no questions to play."""

    def __init__(self, category: str | None) -> None:
        self.category = category or ALL_CATEGORIES
        super().__init__(f"No questions available in category '{self.category}'.")


def matches_category(question: Question, category: str | None) -> bool:
    if not category or category == ALL_CATEGORIES:
        return True
    return (question.category or DEFAULT_CATEGORY) == category


class QuestionPool:
    """Immutable snapshot of the catalog with category filtering and sampling."""

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)

    def filter(self, category: str | None) -> list[Question]:
        return [question for question in self._questions if matches_category(question, category)]

    def categories(self) -> list[str]:
        """Distinct categories in sorted order, prefixed with the "All" sentinel."""
        distinct = {question.category or DEFAULT_CATEGORY for question in self._questions}
        return [ALL_CATEGORIES, *sorted(distinct)]

    def sample(self, category: str | None, count: int, shuffler: ShuffleService) -> list[Question]:
        """Draw up to ``count`` distinct questions from ``category`` without replacement."""
        candidates = self.filter(category)
        if not candidates:
            raise EmptyPoolError(category)
        return shuffler.shuffled(candidates)[: max(count, 0)]

    def swap_candidates(self, category: str | None, excluded_ids: Collection[str]) -> list[Question]:
        return [
            question
            for question in self.filter(category)
            if question.id not in excluded_ids
        ]

"""Service backing the flashcard study mode."""

from __future__ import annotations

from collections.abc import Iterable

from trivia_app.core.models import Question
from trivia_app.core.shuffle import ShuffleService


class StudyDeck:
    """A shuffled, unscored pass over the catalog, one card at a time."""

    def __init__(
        self,
        questions: Iterable[Question],
        shuffler: ShuffleService | None = None,
        start_index: int = 0,
    ) -> None:
        self._cards = (shuffler or ShuffleService()).shuffled(list(questions))
        self._index = start_index if 0 <= start_index < len(self._cards) else 0
        self._flipped = False
        self._contexts: dict[str, str] = {}

    @property
    def index(self) -> int:
        return self._index

    @property
    def size(self) -> int:
        return len(self._cards)

    @property
    def is_flipped(self) -> bool:
        return self._flipped

    def current_card(self) -> Question | None:
        if not self._cards:
            return None
        return self._cards[self._index]

    def next_card(self) -> bool:
        if self._index >= len(self._cards) - 1:
            return False
        self._index += 1
        self._flipped = False
        return True

    def previous_card(self) -> bool:
        if self._index <= 0:
            return False
        self._index -= 1
        self._flipped = False
        return True

    def flip(self) -> bool:
        self._flipped = not self._flipped
        return self._flipped

    def reset(self) -> None:
        self._index = 0
        self._flipped = False

    def cached_context(self, question_id: str) -> str | None:
        return self._contexts.get(question_id)

    def store_context(self, question_id: str, context: str) -> None:
        self._contexts[question_id] = context

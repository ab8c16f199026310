"""Service for managing the catalog of trivia questions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace

from trivia_app.constants.quiz_constants import ALL_CATEGORIES, DEFAULT_CATEGORY, OPTION_COUNT
from trivia_app.core.models import Difficulty, Question, new_question_id
from trivia_app.core.services.question_pool import QuestionPool, matches_category


class QuestionBank:
    """Manages the lifecycle of the question catalog."""

    def __init__(self, questions: Iterable[Question] = ()) -> None:
        self._questions: list[Question] = []
        for question in questions:
            self.add_question(question)

    def load_questions(self, questions: Iterable[Question]) -> None:
        """Replace the current catalog with a new list of questions."""
        prepared = [self._prepare_question(q) for q in questions]
        self._ensure_unique_ids(prepared)
        self._questions = prepared

    def get_questions(self) -> list[Question]:
        """Return a copy of all loaded questions."""
        return list(self._questions)

    def snapshot(self) -> QuestionPool:
        return QuestionPool(self._questions)

    def get_question(self, question_id: str) -> Question:
        return self._questions[self._index_of(question_id)]

    def add_question(self, question: Question) -> Question:
        prepared = self._prepare_question(question)
        if any(existing.id == prepared.id for existing in self._questions):
            prepared = replace(prepared, id=new_question_id())
        self._questions.append(prepared)
        return prepared

    def add_questions(self, questions: Iterable[Question]) -> list[Question]:
        return [self.add_question(question) for question in questions]

    def update_question(self, question_id: str, question: Question) -> Question:
        index = self._index_of(question_id)
        # Preserve the original ID
        prepared = replace(self._prepare_question(question), id=question_id)
        self._questions[index] = prepared
        return prepared

    def delete_question(self, question_id: str) -> None:
        self._questions.pop(self._index_of(question_id))

    def filter_questions(
        self,
        difficulty: str | None = None,
        category: str | None = None,
    ) -> list[Question]:
        result = []
        for question in self._questions:
            if difficulty and difficulty != ALL_CATEGORIES and question.difficulty.value != difficulty:
                continue
            if not matches_category(question, category):
                continue
            result.append(question)
        return result

    def get_categories(self) -> list[str]:
        return sorted({question.category or DEFAULT_CATEGORY for question in self._questions})

    def _index_of(self, question_id: str) -> int:
        for index, question in enumerate(self._questions):
            if question.id == question_id:
                return index
        raise KeyError(f"Question '{question_id}' not found")

    def _prepare_question(self, question: Question) -> Question:
        """Validate and normalize a question before storage."""
        options = self._validate_options(question.options)
        if not isinstance(question.correct_option_index, int) or not 0 <= question.correct_option_index < OPTION_COUNT:
            raise ValueError("Correct option index must be between 0 and 3.")

        cleaned_text = question.text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")
        cleaned_reference = question.reference.strip()
        if not cleaned_reference:
            raise ValueError("Reference must not be empty.")

        return Question(
            id=question.id or new_question_id(),
            text=cleaned_text,
            options=options,
            correct_option_index=question.correct_option_index,
            reference=cleaned_reference,
            difficulty=Difficulty.parse(question.difficulty),
            category=question.category.strip() or DEFAULT_CATEGORY,
        )

    @staticmethod
    def _validate_options(options: Iterable[object]) -> tuple[str, ...]:
        raw = tuple(options)
        if len(raw) != OPTION_COUNT:
            raise ValueError("Each question must have exactly four options.")
        if any(not isinstance(option, str) for option in raw):
            raise ValueError("Option text must be a string.")
        cleaned = tuple(option.strip() for option in raw)
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned

    @staticmethod
    def _ensure_unique_ids(questions: list[Question]) -> None:
        seen: set[str] = set()
        for index, question in enumerate(questions):
            if question.id in seen:
                questions[index] = replace(question, id=new_question_id())
            seen.add(questions[index].id)


def question_from_mapping(record: Mapping[str, object], *, question_id: str | None = None) -> Question:
    """Build a question from an untrusted JSON-like record.

    Missing difficulty or category fall back to their defaults and the correct
    index is clamped into range. Raises ``ValueError`` when the text, reference
    or four options are missing.
    """
    text = str(record.get("text") or "").strip()
    reference = str(record.get("reference") or "").strip()
    raw_options = record.get("options")
    if not text:
        raise ValueError("Question text must not be empty.")
    if not reference:
        raise ValueError("Reference must not be empty.")
    if not isinstance(raw_options, (list, tuple)):
        raise ValueError("Each question must have exactly four options.")
    options = QuestionBank._validate_options(raw_options)

    raw_index = record.get("correctOptionIndex", record.get("correct_option_index"))
    if raw_index is None or isinstance(raw_index, bool):
        raise ValueError("Correct option index is required.")
    try:
        correct_index = int(raw_index)
    except (TypeError, ValueError) as exc:
        raise ValueError("Correct option index must be an integer.") from exc
    correct_index = max(0, min(OPTION_COUNT - 1, correct_index))

    category = str(record.get("category") or "").strip() or DEFAULT_CATEGORY
    return Question(
        id=question_id or new_question_id(),
        text=text,
        options=options,
        correct_option_index=correct_index,
        reference=reference,
        difficulty=Difficulty.parse(record.get("difficulty")),
        category=category,
    )

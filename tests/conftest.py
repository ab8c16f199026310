from __future__ import annotations

import random
from types import SimpleNamespace
from typing import Any

import pytest

from trivia_app.core.models import Difficulty, Question
from trivia_app.core.services.question_pool import QuestionPool
from trivia_app.core.shuffle import ShuffleService


def _make_question(
    question_id: str,
    *,
    correct: int = 0,
    category: str = "General",
    reference: str | None = None,
) -> Question:
    return Question(
        id=question_id,
        text=f"Question {question_id}?",
        options=(f"{question_id}-a", f"{question_id}-b", f"{question_id}-c", f"{question_id}-d"),
        correct_option_index=correct,
        reference=reference or f"Ref {question_id}",
        difficulty=Difficulty.MEDIUM,
        category=category,
    )


class ChatStub:
    """Minimal stand-in for ``OpenAI().chat.completions``."""

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.calls: list[dict[str, Any]] = []
        self.completions = self

    def queue(self, content: Any) -> None:
        self.responses.append(content)

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        content = self.responses.pop(0) if self.responses else ""
        if isinstance(content, Exception):
            raise content
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def question_factory():
    """Build a question whose options are named after its id."""

    return _make_question


@pytest.fixture
def shuffler() -> ShuffleService:
    return ShuffleService(random.Random(1234))


@pytest.fixture
def five_questions() -> list[Question]:
    return [_make_question(f"q{i}", correct=i % 4) for i in range(1, 6)]


@pytest.fixture
def pool(five_questions: list[Question]) -> QuestionPool:
    return QuestionPool(five_questions)


@pytest.fixture
def ai_client() -> SimpleNamespace:
    return SimpleNamespace(chat=ChatStub())

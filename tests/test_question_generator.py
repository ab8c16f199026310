from __future__ import annotations

import json

import pytest

from trivia_app.constants.ai_constants import CONTEXT_EMPTY_MESSAGE
from trivia_app.core import question_generator
from trivia_app.core.question_generator import QuestionGenerationError, QuestionGenerator, load_client

VALID_RECORD = {
    "text": "Who interpreted Pharaoh's dreams?",
    "options": ["Joseph", "Moses", "Daniel", "Aaron"],
    "correctOptionIndex": 0,
    "reference": "Genesis 41:25",
    "difficulty": "Medium",
    "category": "Old Testament",
}


def test_generate_parses_fenced_json(ai_client) -> None:
    broken = {**VALID_RECORD, "options": ["only", "three", "options"]}
    ai_client.chat.queue("```json\n" + json.dumps([VALID_RECORD, broken, "junk"]) + "\n```")

    questions = QuestionGenerator(client=ai_client).generate(3, "Joseph")

    assert [q.text for q in questions] == [VALID_RECORD["text"]]
    call = ai_client.chat.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert "Joseph" in call["messages"][1]["content"]


def test_generate_caps_at_count(ai_client) -> None:
    ai_client.chat.queue(json.dumps([VALID_RECORD] * 4))
    assert len(QuestionGenerator(client=ai_client).generate(2, "")) == 2
    assert "General Bible Knowledge" in ai_client.chat.calls[0]["messages"][1]["content"]


def test_generate_nothing_requested(ai_client) -> None:
    assert QuestionGenerator(client=ai_client).generate(0, "Ruth") == []
    assert ai_client.chat.calls == []


@pytest.mark.parametrize("content", ["", "not json", '{"text": "object"}', "[]"])
def test_generate_without_usable_records_raises(ai_client, content: str) -> None:
    ai_client.chat.queue(content)
    with pytest.raises(QuestionGenerationError):
        QuestionGenerator(client=ai_client).generate(5, "Ruth")


def test_generate_wraps_client_failures(ai_client) -> None:
    ai_client.chat.queue(ConnectionError("offline"))
    with pytest.raises(QuestionGenerationError) as excinfo:
        QuestionGenerator(client=ai_client).generate(5, "Ruth")
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_verse_context(ai_client) -> None:
    ai_client.chat.queue("  Jonah fled toward Tarshish.  ")
    generator = QuestionGenerator(client=ai_client)
    assert generator.verse_context("Jonah 1:3", "Where did Jonah flee?") == "Jonah fled toward Tarshish."
    assert "Jonah 1:3" in ai_client.chat.calls[0]["messages"][1]["content"]


def test_verse_context_fallbacks(ai_client) -> None:
    ai_client.chat.queue(TimeoutError("slow"))
    ai_client.chat.queue("")
    generator = QuestionGenerator(client=ai_client)
    assert generator.verse_context("Ruth 1:16", "Q?") == "Unable to load context at this time."
    assert generator.verse_context("Ruth 1:16", "Q?") == CONTEXT_EMPTY_MESSAGE


def test_load_client_requires_api_key(monkeypatch) -> None:
    monkeypatch.setattr(question_generator, "load_dotenv", lambda: None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(QuestionGenerationError):
        load_client()


def test_load_client_uses_environment_key(monkeypatch) -> None:
    captured = {}
    monkeypatch.setattr(question_generator, "load_dotenv", lambda: None)
    monkeypatch.setattr(question_generator, "OpenAI", lambda api_key: captured.setdefault("key", api_key))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert load_client() == "sk-test"
    assert captured["key"] == "sk-test"


def test_missing_key_surfaces_on_first_use(monkeypatch) -> None:
    monkeypatch.setattr(question_generator, "load_dotenv", lambda: None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    generator = QuestionGenerator()
    with pytest.raises(QuestionGenerationError, match="OPENAI_API_KEY"):
        generator.generate(1, "Ruth")
    assert generator.verse_context("Ruth 1:1", "Q?") == "Unable to load context at this time."

"""AI helpers for the admin and study surfaces: question drafting and verse context.

Neither helper is used while a quiz is being played. Calls are made outside
the quiz manager's lock so a slow model never holds up the question timer.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any

from dotenv import load_dotenv
from openai import OpenAI

from trivia_app.constants.ai_constants import (
    CONTEXT_EMPTY_MESSAGE,
    CONTEXT_MAX_TOKENS,
    CONTEXT_MODEL,
    CONTEXT_TEMPERATURE,
    CONTEXT_UNAVAILABLE_MESSAGE,
    DEFAULT_GENERATION_COUNT,
    DEFAULT_GENERATION_TOPIC,
    QUESTION_MAX_TOKENS,
    QUESTION_MODEL,
    QUESTION_TEMPERATURE,
)
from trivia_app.core.models import Question
from trivia_app.core.services.question_bank import question_from_mapping

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = "You write accurate multiple-choice Bible trivia questions."


class QuestionGenerationError(RuntimeError):
    """Raised when the model cannot be reached or returns nothing usable."""


def load_client() -> Any:
    """Initialize an OpenAI client using environment-derived credentials."""
    load_dotenv()
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise QuestionGenerationError(
            "OPENAI_API_KEY not found in environment. Set it or add to .env"
        )
    return OpenAI(api_key=api_key)


class QuestionGenerator:
    """Drafts questions and short verse insights with a chat-completion model."""

    def __init__(self, client: Any = None) -> None:
        self._client = client

    def _resolve_client(self) -> Any:
        if self._client is None:
            self._client = load_client()
        return self._client

    def generate(
        self,
        count: int = DEFAULT_GENERATION_COUNT,
        topic: str = DEFAULT_GENERATION_TOPIC,
    ) -> list[Question]:
        """Return up to ``count`` validated questions about ``topic``.

        Raises ``QuestionGenerationError`` when the request fails or no record
        in the response survives validation.
        """
        if count <= 0:
            return []
        topic = topic.strip() or DEFAULT_GENERATION_TOPIC
        try:
            content = self._complete(
                model=QUESTION_MODEL,
                user_prompt=_build_question_prompt(count, topic),
                temperature=QUESTION_TEMPERATURE,
                max_tokens=QUESTION_MAX_TOKENS,
            )
        except QuestionGenerationError:
            raise
        except Exception as exc:
            logger.warning("Question generation failed: %s", exc)
            raise QuestionGenerationError("Failed to generate questions.") from exc

        questions = []
        for record in _extract_json_array(content):
            if not isinstance(record, dict):
                continue
            try:
                questions.append(question_from_mapping(record))
            except ValueError:
                logger.debug("Discarding invalid generated record: %r", record)
            if len(questions) >= count:
                break
        if not questions:
            raise QuestionGenerationError("No content returned from the model.")
        return questions

    def verse_context(self, reference: str, question_text: str) -> str:
        """Two-sentence background on ``reference``; a fallback message on any failure."""
        prompt = (
            "Provide a concise (max 2 sentences) historical, theological, or cultural context "
            f'insight regarding the Bible verse "{reference}" relevant to this question: '
            f'"{question_text}". Keep it educational and fascinating.'
        )
        try:
            content = self._complete(
                model=CONTEXT_MODEL,
                user_prompt=prompt,
                temperature=CONTEXT_TEMPERATURE,
                max_tokens=CONTEXT_MAX_TOKENS,
            )
        except Exception as exc:
            logger.warning("Context lookup failed for %s: %s", reference, exc)
            return CONTEXT_UNAVAILABLE_MESSAGE
        return content or CONTEXT_EMPTY_MESSAGE

    def _complete(self, *, model: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        client = self._resolve_client()
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        raw_content = resp.choices[0].message.content
        return (raw_content or "").strip()


def _build_question_prompt(count: int, topic: str) -> str:
    return (
        f'Generate {count} multiple-choice Bible trivia questions about "{topic}".\n'
        "The difficulty should vary between Easy, Medium, and Hard.\n"
        "Output a JSON array of objects with the schema:\n"
        '{"text": str, "options": [str, str, str, str], "correctOptionIndex": int, '
        '"reference": str, "difficulty": "Easy"|"Medium"|"Hard", "category": str}\n'
        "Ensure 'correctOptionIndex' is the 0-based index of the correct answer in 'options'.\n"
        "Ensure 'reference' points to a valid Bible verse or passage.\n"
        "Assign a broad 'category' like 'Old Testament', 'New Testament', 'Gospels', "
        "'Prophecy', or 'History'."
    )


def _extract_json_array(content: str) -> list[Any]:
    if not content:
        return []
    fenced = re.search(r"```(?:json)?\s*(.+?)```", content, re.DOTALL)
    payload = fenced.group(1) if fenced else content
    try:
        data = json.loads(payload)
    except ValueError:
        return []
    return data if isinstance(data, list) else []

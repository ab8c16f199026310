"""Utilities for exporting questions to the formats accepted by the importer."""

from __future__ import annotations

import json

from trivia_app.core.models import Question

_OPTION_LETTERS = ("A", "B", "C", "D")

TEMPLATE_RECORDS: list[dict[str, object]] = [
    {
        "text": "Who led the Israelites out of Egypt?",
        "options": ["Moses", "Aaron", "Joshua", "Joseph"],
        "correctOptionIndex": 0,
        "reference": "Exodus 3:10",
        "difficulty": "Easy",
        "category": "Old Testament",
    },
    {
        "text": "What is the last book of the Bible?",
        "options": ["Genesis", "Malachi", "Acts", "Revelation"],
        "correctOptionIndex": 3,
        "reference": "Revelation 1:1",
        "difficulty": "Easy",
        "category": "New Testament",
    },
]


def serialize_questions_json(questions: list[Question]) -> str:
    records = []
    for question in questions:
        record = question.to_dict()
        record.pop("id")
        records.append(record)
    return json.dumps(records, indent=2) + "\n"


def serialize_questions_text(questions: list[Question]) -> str:
    blocks = [_serialize_question(question) for question in questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def template_json() -> str:
    return json.dumps(TEMPLATE_RECORDS, indent=2) + "\n"


def _serialize_question(question: Question) -> str:
    lines: list[str] = []

    question_lines = question.text.splitlines() or [question.text]
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    for letter, option_text in zip(_OPTION_LETTERS, question.options):
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {_OPTION_LETTERS[question.correct_option_index]}")
    lines.append(f"REFERENCE: {question.reference}")
    lines.append(f"DIFFICULTY: {question.difficulty.value}")
    lines.append(f"CATEGORY: {question.category}")

    return "\n".join(lines)

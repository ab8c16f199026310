"""Utilities for importing questions from JSON, CSV or a human-friendly text file.

Text format (repeat blocks separated by blank lines or '---'):

    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D
    REFERENCE: Book chapter:verse
    DIFFICULTY: Easy|Medium|Hard   (optional, defaults to Medium)
    CATEGORY: free text            (optional, defaults to General)

JSON files hold an array of objects with ``text``, ``options``,
``correctOptionIndex``, ``reference``, ``difficulty`` and ``category``. CSV
files start with the header row
``text,opt1,opt2,opt3,opt4,correctIndex,reference,difficulty,category``.

JSON and CSV rows that fail validation are skipped, as spreadsheets and AI
output tend to contain a few broken rows. The text format is written by hand,
so a malformed block raises ``QuizImportError`` naming the problem instead.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
import io
import json
import logging
from pathlib import Path

from trivia_app.constants.quiz_constants import DEFAULT_CATEGORY
from trivia_app.constants.ui_constants import NO_VALID_IMPORT_MESSAGE, UNSUPPORTED_IMPORT_MESSAGE
from trivia_app.core.models import Difficulty, Question, new_question_id
from trivia_app.core.services.question_bank import question_from_mapping

logger = logging.getLogger(__name__)


class QuizImportError(Exception):
    """Raised when a question file cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported questions and where they came from."""

    source_name: str
    questions: list[Question]
    skipped: int = 0


_OPTION_ORDER = ["A", "B", "C", "D"]
_CSV_MIN_COLUMNS = 8


def parse_quiz_document(text: str, source_name: str) -> ImportedQuiz:
    """Parse a document, choosing the format from the file extension."""
    suffix = Path(source_name).suffix.lower()
    if suffix == ".json":
        questions, skipped = _parse_json(text)
    elif suffix == ".csv":
        questions, skipped = _parse_csv(text)
    elif suffix == ".txt":
        questions, skipped = _parse_quiz_text(text), 0
    else:
        raise QuizImportError(UNSUPPORTED_IMPORT_MESSAGE)

    if not questions:
        raise QuizImportError(NO_VALID_IMPORT_MESSAGE)
    if skipped:
        logger.warning("Skipped %d invalid question(s) while importing %s", skipped, source_name)
    return ImportedQuiz(source_name=source_name, questions=questions, skipped=skipped)


def _parse_json(text: str) -> tuple[list[Question], int]:
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise QuizImportError("Error parsing file. Please ensure it is valid JSON.") from exc
    if not isinstance(payload, list):
        raise QuizImportError("JSON file must contain an array of questions.")
    return _build_questions(payload)


def _parse_csv(text: str) -> tuple[list[Question], int]:
    rows = list(csv.reader(io.StringIO(text)))
    records: list[object] = []
    # First row is the header
    for row in rows[1:]:
        if not any(cell.strip() for cell in row):
            continue
        if len(row) < _CSV_MIN_COLUMNS:
            records.append(None)
            continue
        cells = [cell.strip() for cell in row]
        records.append(
            {
                "text": cells[0],
                "options": cells[1:5],
                "correctOptionIndex": _parse_csv_index(cells[5]),
                "reference": cells[6],
                "difficulty": cells[7],
                "category": cells[8] if len(cells) > 8 else DEFAULT_CATEGORY,
            }
        )
    return _build_questions(records)


def _parse_csv_index(raw_value: str) -> int:
    try:
        return int(raw_value)
    except ValueError:
        return 0


def _build_questions(records: list[object]) -> tuple[list[Question], int]:
    questions: list[Question] = []
    skipped = 0
    for record in records:
        if not isinstance(record, dict):
            skipped += 1
            continue
        try:
            questions.append(question_from_mapping(record))
        except ValueError:
            skipped += 1
    return questions, skipped


def _parse_quiz_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    fields: dict[str, str] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        keyword = next(
            (name for name in ("CORRECT", "REFERENCE", "DIFFICULTY", "CATEGORY") if upper.startswith(f"{name}:")),
            None,
        )
        if keyword is not None:
            fields[keyword] = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")
    if len(options) != 4:
        raise QuizImportError("Each question must define exactly four options (A-D).")

    option_list = tuple(options.get(letter, "").strip() for letter in _OPTION_ORDER)
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    correct_letter = fields.get("CORRECT", "").upper()
    if correct_letter not in _OPTION_ORDER:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    reference = fields.get("REFERENCE", "")
    if not reference:
        raise QuizImportError("REFERENCE is required for every question.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    return Question(
        id=new_question_id(),
        text=question_text,
        options=option_list,
        correct_option_index=_OPTION_ORDER.index(correct_letter),
        reference=reference,
        difficulty=Difficulty.parse(fields.get("DIFFICULTY")),
        category=fields.get("CATEGORY") or DEFAULT_CATEGORY,
    )

from __future__ import annotations

from dataclasses import replace

import pytest

from trivia_app.core.models import Difficulty, Question
from trivia_app.core.services.question_bank import QuestionBank, question_from_mapping


def test_add_strips_and_defaults(question_factory) -> None:
    bank = QuestionBank()
    raw = replace(question_factory("q1"), text="  Who?  ", category="  ", reference=" Gen 1:1 ")

    added = bank.add_question(raw)

    assert added.text == "Who?"
    assert added.reference == "Gen 1:1"
    assert added.category == "General"
    assert bank.get_questions() == [added]


def test_duplicate_ids_are_reassigned(question_factory) -> None:
    bank = QuestionBank([question_factory("dup")])
    second = bank.add_question(question_factory("dup"))
    assert second.id != "dup"
    assert len({q.id for q in bank.get_questions()}) == 2


def test_load_questions_dedupes(question_factory) -> None:
    bank = QuestionBank()
    bank.load_questions([question_factory("a"), question_factory("a"), question_factory("b")])
    ids = [q.id for q in bank.get_questions()]
    assert ids[0] == "a"
    assert ids[2] == "b"
    assert len(set(ids)) == 3


@pytest.mark.parametrize(
    "changes",
    [
        {"text": "   "},
        {"reference": ""},
        {"options": ("a", "b", "c")},
        {"options": ("a", "b", " ", "d")},
        {"options": ("a", None, "c", "d")},
        {"correct_option_index": 4},
        {"correct_option_index": -1},
    ],
)
def test_invalid_questions_rejected(question_factory, changes) -> None:
    bank = QuestionBank()
    with pytest.raises(ValueError):
        bank.add_question(replace(question_factory("bad"), **changes))
    assert bank.get_questions() == []


def test_update_keeps_id(question_factory) -> None:
    bank = QuestionBank([question_factory("keep")])
    updated = bank.update_question("keep", replace(question_factory("other"), text="Edited?"))
    assert updated.id == "keep"
    assert bank.get_question("keep").text == "Edited?"


def test_missing_ids_raise_key_error(question_factory) -> None:
    bank = QuestionBank([question_factory("a")])
    with pytest.raises(KeyError):
        bank.get_question("zzz")
    with pytest.raises(KeyError):
        bank.update_question("zzz", question_factory("zzz"))
    with pytest.raises(KeyError):
        bank.delete_question("zzz")


def test_delete(question_factory) -> None:
    bank = QuestionBank([question_factory("a"), question_factory("b")])
    bank.delete_question("a")
    assert [q.id for q in bank.get_questions()] == ["b"]


def test_filter_and_categories(question_factory) -> None:
    hard = replace(question_factory("h", category="Law"), difficulty=Difficulty.HARD)
    bank = QuestionBank([question_factory("g"), hard])

    assert [q.id for q in bank.filter_questions(difficulty="Hard")] == ["h"]
    assert [q.id for q in bank.filter_questions(category="General")] == ["g"]
    assert len(bank.filter_questions(difficulty="All", category="All")) == 2
    assert bank.get_categories() == ["General", "Law"]
    assert bank.snapshot().categories() == ["All", "General", "Law"]


def test_get_questions_returns_copy(question_factory) -> None:
    bank = QuestionBank([question_factory("a")])
    bank.get_questions().clear()
    assert len(bank.get_questions()) == 1


def test_question_from_mapping_is_lenient() -> None:
    question = question_from_mapping(
        {
            "text": "Who built the ark?",
            "options": ["Noah", "Moses", "Abraham", "David"],
            "correctOptionIndex": 9,
            "reference": "Genesis 6:14",
            "difficulty": "easy",
        },
        question_id="ark",
    )
    assert isinstance(question, Question)
    assert question.id == "ark"
    assert question.correct_option_index == 3
    assert question.difficulty is Difficulty.EASY
    assert question.category == "General"


def test_question_from_mapping_accepts_snake_case_index() -> None:
    question = question_from_mapping(
        {"text": "Q?", "options": ["a", "b", "c", "d"], "correct_option_index": "2", "reference": "R"}
    )
    assert question.correct_option_index == 2
    assert question.difficulty is Difficulty.MEDIUM


@pytest.mark.parametrize(
    "record",
    [
        {"options": ["a", "b", "c", "d"], "correctOptionIndex": 0, "reference": "R"},
        {"text": "Q?", "options": ["a", "b", "c", "d"], "correctOptionIndex": 0},
        {"text": "Q?", "options": "abcd", "correctOptionIndex": 0, "reference": "R"},
        {"text": "Q?", "options": ["a", "b", "c", "d"], "reference": "R"},
        {"text": "Q?", "options": ["a", "b", "c", "d"], "correctOptionIndex": True, "reference": "R"},
        {"text": "Q?", "options": ["a", "b", "c", "d"], "correctOptionIndex": "x", "reference": "R"},
        {"text": "Q?", "options": ["a", None, "c", "d"], "correctOptionIndex": 0, "reference": "R"},
        {"text": "Q?", "options": ["a", "b", 3, "d"], "correctOptionIndex": 0, "reference": "R"},
    ],
)
def test_question_from_mapping_rejects(record) -> None:
    with pytest.raises(ValueError):
        question_from_mapping(record)

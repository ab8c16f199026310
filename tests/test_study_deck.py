from __future__ import annotations

from trivia_app.core.services.study_deck import StudyDeck


def test_navigation_is_bounded(five_questions, shuffler) -> None:
    deck = StudyDeck(five_questions, shuffler)
    assert deck.size == 5
    assert not deck.previous_card()

    for _ in range(4):
        assert deck.next_card()
    assert deck.index == 4
    assert not deck.next_card()
    assert deck.index == 4


def test_moving_unflips(five_questions, shuffler) -> None:
    deck = StudyDeck(five_questions, shuffler)
    assert deck.flip()
    deck.next_card()
    assert not deck.is_flipped
    deck.flip()
    deck.previous_card()
    assert not deck.is_flipped


def test_start_index_is_clamped(five_questions, shuffler) -> None:
    assert StudyDeck(five_questions, shuffler, start_index=3).index == 3
    assert StudyDeck(five_questions, shuffler, start_index=99).index == 0


def test_reset(five_questions, shuffler) -> None:
    deck = StudyDeck(five_questions, shuffler, start_index=2)
    deck.flip()
    deck.reset()
    assert deck.index == 0
    assert not deck.is_flipped


def test_covers_every_question(five_questions, shuffler) -> None:
    deck = StudyDeck(five_questions, shuffler)
    seen = [deck.current_card().id]
    while deck.next_card():
        seen.append(deck.current_card().id)
    assert sorted(seen) == sorted(q.id for q in five_questions)


def test_empty_deck() -> None:
    deck = StudyDeck([])
    assert deck.current_card() is None
    assert not deck.next_card()


def test_context_cache(five_questions, shuffler) -> None:
    deck = StudyDeck(five_questions, shuffler)
    assert deck.cached_context("q1") is None
    deck.store_context("q1", "Background")
    assert deck.cached_context("q1") == "Background"

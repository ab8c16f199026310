from __future__ import annotations

import time
from threading import Event

from trivia_app.core.question_generator import QuestionGenerator
from trivia_app.core.quiz_manager import QuizManager
from trivia_app.core.session_clock import SessionClock


def test_clock_ticks_until_stopped() -> None:
    ticks: list[int] = []
    reached = Event()

    def on_tick() -> None:
        ticks.append(1)
        if len(ticks) >= 3:
            reached.set()

    clock = SessionClock(on_tick, interval=0.01)
    clock.start()
    assert reached.wait(2.0)
    clock.stop(timeout=1.0)

    assert not clock.is_running()
    count = len(ticks)
    Event().wait(0.05)
    assert len(ticks) == count


def test_failing_tick_does_not_kill_clock() -> None:
    calls: list[int] = []
    recovered = Event()

    def on_tick() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        recovered.set()

    clock = SessionClock(on_tick, interval=0.01)
    clock.start()
    try:
        assert recovered.wait(2.0)
    finally:
        clock.stop(timeout=1.0)


def test_start_is_idempotent() -> None:
    clock = SessionClock(lambda: None, interval=0.01)
    clock.start()
    first = clock._thread
    clock.start()
    assert clock._thread is first
    clock.stop(timeout=1.0)
    assert not clock.is_running()


def test_first_tick_of_a_question_waits_a_full_interval(shuffler, ai_client) -> None:
    manager = QuizManager(generator=QuestionGenerator(client=ai_client), shuffler=shuffler, tick_interval=0.2)
    clock = SessionClock(manager.advance_clock, interval=0.2)
    clock.start()
    try:
        # land the question partway through the clock's idle interval
        Event().wait(0.15)
        manager.start_quiz()
        started = time.monotonic()

        deadline = started + 2.0
        while manager.get_session_state().turn.time_left == 30 and time.monotonic() < deadline:
            Event().wait(0.005)
        elapsed = time.monotonic() - started
    finally:
        clock.stop(timeout=1.0)

    assert manager.get_session_state().turn.time_left == 29
    assert elapsed >= 0.19

"""Service for playing one timed, scored quiz attempt.

The session owns a single immutable ``SessionState`` value. Every operation
computes the next state in full and swaps it in at the end, so a rejected or
failing call never leaves the state half updated. Rejections are returned as
``ActionResult`` values rather than raised; only ``start`` raises, when the
category filter leaves nothing to play.

Time is not read from a wall clock. Something outside the session (the
``SessionClock`` thread in the app, the test itself in the test suite) calls
``tick`` once per second while a question is unrevealed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import logging

from trivia_app.constants.quiz_constants import (
    ALL_CATEGORIES,
    FIFTY_FIFTY_HIDE_COUNT,
    GAME_LENGTH,
    PLAYER_NAME_MAX_LENGTH,
    TIMEOUT_SELECTION,
    TIMER_SECONDS,
)
from trivia_app.constants.ui_constants import SESSION_NOT_COMPLETE_MESSAGE
from trivia_app.core.models import AnswerRecord, Question
from trivia_app.core.result_summary import ResultSummary
from trivia_app.core.scoring import Lifeline, can_afford, lifeline_cost, next_streak, points_for_answer
from trivia_app.core.services.leaderboard import Leaderboard
from trivia_app.core.services.question_pool import EmptyPoolError, QuestionPool
from trivia_app.core.shuffle import ShuffleService

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class RejectReason(str, Enum):
    NOT_IN_PROGRESS = "not_in_progress"
    ALREADY_REVEALED = "already_revealed"
    NOT_REVEALED = "not_revealed"
    ALREADY_USED = "already_used"
    INSUFFICIENT_SCORE = "insufficient_score"
    NO_SWAP_CANDIDATE = "no_swap_candidate"
    INVALID_OPTION = "invalid_option"
    NOT_COMPLETED = "not_completed"
    ALREADY_SUBMITTED = "already_submitted"
    INVALID_NAME = "invalid_name"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a session operation."""

    accepted: bool
    reason: RejectReason | None = None
    points: int = 0

    @classmethod
    def ok(cls, points: int = 0) -> "ActionResult":
        return cls(accepted=True, points=points)

    @classmethod
    def rejected(cls, reason: RejectReason) -> "ActionResult":
        return cls(accepted=False, reason=reason)


@dataclass(frozen=True, slots=True)
class TurnState:
    """Everything scoped to the question on screen; replaced wholesale between questions."""

    time_left: int = TIMER_SECONDS
    hidden_options: frozenset[int] = frozenset()
    fifty_fifty_used: bool = False
    hint_used: bool = False
    selected_option: int | None = None
    revealed: bool = False


@dataclass(frozen=True, slots=True)
class SessionState:
    phase: SessionPhase = SessionPhase.NOT_STARTED
    category: str = ALL_CATEGORIES
    questions: tuple[Question, ...] = ()
    current_index: int = 0
    score: int = 0
    streak: int = 0
    answers: tuple[AnswerRecord, ...] = ()
    turn: TurnState = field(default_factory=TurnState)

    @property
    def current_question(self) -> Question | None:
        if self.phase is not SessionPhase.IN_PROGRESS:
            return None
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    @property
    def hint_reference(self) -> str | None:
        """The reference of the current question, once the hint was bought."""
        question = self.current_question
        if question is None or not self.turn.hint_used:
            return None
        return question.reference


class QuizSession:
    """Manages the state of a single player's quiz attempt."""

    def __init__(
        self,
        shuffler: ShuffleService | None = None,
        *,
        timer_seconds: int = TIMER_SECONDS,
    ) -> None:
        self._shuffler = shuffler or ShuffleService()
        self._timer_seconds = timer_seconds
        self._pool = QuestionPool(())
        self._state = SessionState(turn=self._fresh_turn())
        self._submitted = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def current_question(self) -> Question | None:
        return self._state.current_question

    @property
    def is_submitted(self) -> bool:
        return self._submitted

    def start(
        self,
        pool: QuestionPool,
        category: str | None = ALL_CATEGORIES,
        length: int = GAME_LENGTH,
    ) -> None:
        """Begin a fresh attempt; raises ``EmptyPoolError`` before touching any state."""
        category = category or ALL_CATEGORIES
        questions = pool.sample(category, length, self._shuffler)
        if not questions:
            raise EmptyPoolError(category)

        self._pool = pool
        self._submitted = False
        self._state = SessionState(
            phase=SessionPhase.IN_PROGRESS,
            category=category,
            questions=tuple(questions),
            turn=self._fresh_turn(),
        )
        logger.info("Quiz started with %d question(s) from category '%s'", len(questions), category)

    def abort(self) -> None:
        """Discard the attempt entirely."""
        self._pool = QuestionPool(())
        self._submitted = False
        self._state = SessionState(turn=self._fresh_turn())

    def tick(self) -> ActionResult:
        """Advance the question timer by one second; answers with a timeout at zero."""
        rejection = self._check_unrevealed()
        if rejection:
            return rejection

        state = self._state
        remaining = state.turn.time_left - 1
        if remaining > 0:
            self._state = replace(state, turn=replace(state.turn, time_left=remaining))
            return ActionResult.ok()

        logger.info("Time expired on question %d", state.current_index + 1)
        timed_out = replace(state, turn=replace(state.turn, time_left=0))
        self._state, points = self._scored(timed_out, TIMEOUT_SELECTION)
        return ActionResult.ok(points)

    def answer(self, selected_index: int) -> ActionResult:
        rejection = self._check_unrevealed()
        if rejection:
            return rejection

        question = self._state.questions[self._state.current_index]
        if selected_index != TIMEOUT_SELECTION and not 0 <= selected_index < len(question.options):
            return ActionResult.rejected(RejectReason.INVALID_OPTION)

        self._state, points = self._scored(self._state, selected_index)
        return ActionResult.ok(points)

    def use_fifty_fifty(self) -> ActionResult:
        rejection = self._check_unrevealed()
        if rejection:
            return rejection
        state = self._state
        if state.turn.fifty_fifty_used:
            return ActionResult.rejected(RejectReason.ALREADY_USED)
        if not can_afford(state.score, Lifeline.FIFTY_FIFTY):
            return self._reject_lifeline(Lifeline.FIFTY_FIFTY)

        question = state.questions[state.current_index]
        candidates = self._shuffler.shuffled(question.incorrect_option_indices())
        hidden = frozenset(candidates[:FIFTY_FIFTY_HIDE_COUNT])
        cost = lifeline_cost(Lifeline.FIFTY_FIFTY)
        self._state = replace(
            state,
            score=state.score - cost,
            turn=replace(state.turn, hidden_options=hidden, fifty_fifty_used=True),
        )
        return ActionResult.ok(-cost)

    def use_hint(self) -> ActionResult:
        rejection = self._check_unrevealed()
        if rejection:
            return rejection
        state = self._state
        if state.turn.hint_used:
            return ActionResult.rejected(RejectReason.ALREADY_USED)
        if not can_afford(state.score, Lifeline.HINT):
            return self._reject_lifeline(Lifeline.HINT)

        cost = lifeline_cost(Lifeline.HINT)
        self._state = replace(
            state,
            score=state.score - cost,
            turn=replace(state.turn, hint_used=True),
        )
        return ActionResult.ok(-cost)

    def use_swap(self) -> ActionResult:
        rejection = self._check_unrevealed()
        if rejection:
            return rejection
        state = self._state
        if not can_afford(state.score, Lifeline.SWAP):
            return self._reject_lifeline(Lifeline.SWAP)

        active_ids = {question.id for question in state.questions}
        candidates = self._pool.swap_candidates(state.category, active_ids)
        if not candidates:
            return ActionResult.rejected(RejectReason.NO_SWAP_CANDIDATE)

        replacement = self._shuffler.pick(candidates)
        questions = list(state.questions)
        questions[state.current_index] = replacement
        cost = lifeline_cost(Lifeline.SWAP)
        self._state = replace(
            state,
            questions=tuple(questions),
            score=state.score - cost,
            turn=self._fresh_turn(),
        )
        return ActionResult.ok(-cost)

    def next(self) -> ActionResult:
        """Record the revealed question and move on, completing after the last one."""
        state = self._state
        if state.phase is not SessionPhase.IN_PROGRESS:
            return ActionResult.rejected(RejectReason.NOT_IN_PROGRESS)
        if not state.turn.revealed:
            return ActionResult.rejected(RejectReason.NOT_REVEALED)

        question = state.questions[state.current_index]
        selected = state.turn.selected_option
        if selected is None:
            selected = TIMEOUT_SELECTION
        record = AnswerRecord(
            question_id=question.id,
            selected_index=selected,
            is_correct=selected == question.correct_option_index,
        )
        answers = (*state.answers, record)

        if state.is_last_question:
            self._state = replace(state, phase=SessionPhase.COMPLETED, answers=answers)
            logger.info(
                "Quiz completed: %d/%d correct, score %d",
                sum(1 for a in answers if a.is_correct),
                len(answers),
                state.score,
            )
        else:
            self._state = replace(
                state,
                answers=answers,
                current_index=state.current_index + 1,
                turn=self._fresh_turn(),
            )
        return ActionResult.ok()

    def summarize(self) -> ResultSummary:
        state = self._state
        if state.phase is not SessionPhase.COMPLETED:
            raise RuntimeError(SESSION_NOT_COMPLETE_MESSAGE)
        return ResultSummary.from_session(state.questions, state.answers, state.score)

    def submit_score(self, name: str, leaderboard: Leaderboard) -> ActionResult:
        """Save the final score under ``name``; accepted at most once per attempt."""
        if self._state.phase is not SessionPhase.COMPLETED:
            return ActionResult.rejected(RejectReason.NOT_COMPLETED)
        if self._submitted:
            return ActionResult.rejected(RejectReason.ALREADY_SUBMITTED)
        cleaned = (name or "").strip()
        if not cleaned or len(cleaned) > PLAYER_NAME_MAX_LENGTH:
            return ActionResult.rejected(RejectReason.INVALID_NAME)

        entry = self.summarize().leaderboard_entry(cleaned)
        leaderboard.append(entry)
        self._submitted = True
        logger.info("Saved score %d for '%s'", entry.score, cleaned)
        return ActionResult.ok()

    def _check_unrevealed(self) -> ActionResult | None:
        state = self._state
        if state.phase is not SessionPhase.IN_PROGRESS:
            return ActionResult.rejected(RejectReason.NOT_IN_PROGRESS)
        if state.turn.revealed:
            return ActionResult.rejected(RejectReason.ALREADY_REVEALED)
        return None

    def _scored(self, state: SessionState, selected_index: int) -> tuple[SessionState, int]:
        question = state.questions[state.current_index]
        is_correct = selected_index == question.correct_option_index
        points = points_for_answer(is_correct, state.streak)
        scored = replace(
            state,
            score=state.score + points,
            streak=next_streak(is_correct, state.streak),
            turn=replace(state.turn, selected_option=selected_index, revealed=True),
        )
        return scored, points

    def _reject_lifeline(self, lifeline: Lifeline) -> ActionResult:
        logger.debug(
            "Rejected %s: score %d below cost %d",
            lifeline.value,
            self._state.score,
            lifeline_cost(lifeline),
        )
        return ActionResult.rejected(RejectReason.INSUFFICIENT_SCORE)

    def _fresh_turn(self) -> TurnState:
        return TurnState(time_left=self._timer_seconds)

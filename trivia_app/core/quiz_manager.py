"""Business logic shared between the web layer and the session clock."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Lock
import time

from trivia_app.constants.network_constants import CLOCK_INTERVAL_SECONDS
from trivia_app.constants.quiz_constants import ALL_CATEGORIES, GAME_LENGTH
from trivia_app.core.default_questions import INITIAL_QUESTIONS
from trivia_app.core.models import LeaderboardEntry, Question
from trivia_app.core.question_generator import QuestionGenerator
from trivia_app.core.quiz_exporter import serialize_questions_json, serialize_questions_text
from trivia_app.core.quiz_importer import ImportedQuiz, parse_quiz_document
from trivia_app.core.result_summary import ResultSummary
from trivia_app.core.scoring import Lifeline
from trivia_app.core.services.leaderboard import Leaderboard
from trivia_app.core.services.question_bank import QuestionBank
from trivia_app.core.services.quiz_session import ActionResult, QuizSession, SessionPhase, SessionState
from trivia_app.core.services.study_deck import StudyDeck
from trivia_app.core.shuffle import ShuffleService
from trivia_app.core.storage import AppStorage

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade over the question bank, quiz session, leaderboard and study deck."""

    def __init__(
        self,
        storage: AppStorage | None = None,
        generator: QuestionGenerator | None = None,
        shuffler: ShuffleService | None = None,
        game_length: int = GAME_LENGTH,
        tick_interval: float = CLOCK_INTERVAL_SECONDS,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = Lock()
        self._storage = storage
        self._generator = generator or QuestionGenerator()
        self._shuffler = shuffler or ShuffleService()
        self._game_length = game_length
        self._tick_interval = tick_interval
        self._time_source = time_source
        # Monotonic time at which the running question loses its next second
        self._tick_due_at: float | None = None

        # Services
        if storage is not None:
            self._bank = QuestionBank(storage.load_questions())
            self._leaderboard = Leaderboard(storage.load_leaderboard())
        else:
            self._bank = QuestionBank(INITIAL_QUESTIONS)
            self._leaderboard = Leaderboard()
        self._session = QuizSession(self._shuffler)
        self._study_deck: StudyDeck | None = None

    # --- Question Bank ---

    def get_questions(self, difficulty: str | None = None, category: str | None = None) -> list[Question]:
        with self._lock:
            return self._bank.filter_questions(difficulty=difficulty, category=category)

    def get_question(self, question_id: str) -> Question:
        with self._lock:
            return self._bank.get_question(question_id)

    def get_categories(self) -> list[str]:
        with self._lock:
            return self._bank.snapshot().categories()

    def add_question(self, question: Question) -> Question:
        with self._lock:
            added = self._bank.add_question(question)
            self._persist_questions()
            return added

    def update_question(self, question_id: str, question: Question) -> Question:
        with self._lock:
            updated = self._bank.update_question(question_id, question)
            self._persist_questions()
            return updated

    def delete_question(self, question_id: str) -> None:
        with self._lock:
            self._bank.delete_question(question_id)
            self._persist_questions()

    def import_document(self, text: str, source_name: str) -> ImportedQuiz:
        imported = parse_quiz_document(text, source_name)
        with self._lock:
            imported.questions = self._bank.add_questions(imported.questions)
            self._persist_questions()
        logger.info("Imported %d question(s) from %s", len(imported.questions), source_name)
        return imported

    def export_document(self, fmt: str = "json") -> str:
        with self._lock:
            questions = self._bank.get_questions()
        if fmt == "txt":
            return serialize_questions_text(questions)
        return serialize_questions_json(questions)

    def generate_questions(self, count: int, topic: str) -> list[Question]:
        # The model call runs without the lock so the session clock keeps ticking.
        generated = self._generator.generate(count, topic)
        with self._lock:
            added = self._bank.add_questions(generated)
            self._persist_questions()
        logger.info("Added %d generated question(s) about '%s'", len(added), topic)
        return added

    # --- Quiz Session ---

    def start_quiz(self, category: str | None = ALL_CATEGORIES) -> SessionState:
        with self._lock:
            self._session.start(self._bank.snapshot(), category, self._game_length)
            self._arm_turn_timer()
            return self._session.state

    def abort_quiz(self) -> None:
        with self._lock:
            self._session.abort()
            self._tick_due_at = None

    def get_session_state(self) -> SessionState:
        with self._lock:
            return self._session.state

    def advance_clock(self) -> float | None:
        """Take one second off the running question once a full interval has passed.

        Intervals are measured from the moment the question appeared, so every
        new turn gets its whole allowance. Returns the seconds until the next
        tick is due, or ``None`` when no question is being timed.
        """
        with self._lock:
            state = self._session.state
            timing = state.phase is SessionPhase.IN_PROGRESS and not state.turn.revealed
            if self._tick_due_at is None or not timing:
                self._tick_due_at = None
                return None
            now = self._time_source()
            if now < self._tick_due_at:
                return self._tick_due_at - now
            self._session.tick()
            if self._session.state.turn.revealed:
                self._tick_due_at = None
                return None
            self._tick_due_at += self._tick_interval
            return max(self._tick_due_at - now, 0.0)

    def answer(self, selected_index: int) -> ActionResult:
        with self._lock:
            return self._session.answer(selected_index)

    def use_lifeline(self, lifeline: Lifeline) -> ActionResult:
        with self._lock:
            if lifeline is Lifeline.FIFTY_FIFTY:
                return self._session.use_fifty_fifty()
            if lifeline is Lifeline.HINT:
                return self._session.use_hint()
            result = self._session.use_swap()
            if result.accepted:
                self._arm_turn_timer()
            return result

    def next_question(self) -> ActionResult:
        with self._lock:
            result = self._session.next()
            if result.accepted:
                self._arm_turn_timer()
            return result

    def get_result(self) -> ResultSummary:
        with self._lock:
            return self._session.summarize()

    def is_score_submitted(self) -> bool:
        with self._lock:
            return self._session.is_submitted

    def submit_score(self, name: str) -> ActionResult:
        with self._lock:
            result = self._session.submit_score(name, self._leaderboard)
            if result.accepted and self._storage is not None:
                self._storage.save_leaderboard(self._leaderboard.get_entries())
            return result

    # --- Leaderboard ---

    def get_leaderboard(self, limit: int | None = None) -> list[LeaderboardEntry]:
        with self._lock:
            return self._leaderboard.get_entries(limit)

    # --- Study Mode ---

    def open_study_deck(self) -> StudyDeck:
        with self._lock:
            start_index = self._storage.load_study_index() if self._storage is not None else 0
            self._study_deck = StudyDeck(self._bank.get_questions(), self._shuffler, start_index)
            return self._study_deck

    def get_study_deck(self) -> StudyDeck:
        with self._lock:
            return self._require_study_deck()

    def study_move(self, step: int) -> StudyDeck:
        with self._lock:
            deck = self._require_study_deck()
            moved = deck.next_card() if step > 0 else deck.previous_card()
            if moved:
                self._persist_study_index(deck)
            return deck

    def study_flip(self) -> StudyDeck:
        with self._lock:
            deck = self._require_study_deck()
            deck.flip()
            return deck

    def study_reset(self) -> StudyDeck:
        with self._lock:
            deck = self._require_study_deck()
            deck.reset()
            self._persist_study_index(deck)
            return deck

    def study_context(self) -> str:
        with self._lock:
            deck = self._require_study_deck()
            card = deck.current_card()
            if card is None:
                raise RuntimeError("No questions available to study.")
            cached = deck.cached_context(card.id)
        if cached is not None:
            return cached
        context = self._generator.verse_context(card.reference, card.text)
        with self._lock:
            deck.store_context(card.id, context)
        return context

    def _arm_turn_timer(self) -> None:
        if self._session.phase is SessionPhase.IN_PROGRESS:
            self._tick_due_at = self._time_source() + self._tick_interval
        else:
            self._tick_due_at = None

    def _require_study_deck(self) -> StudyDeck:
        if self._study_deck is None:
            raise RuntimeError("Study mode has not been opened.")
        return self._study_deck

    def _persist_study_index(self, deck: StudyDeck) -> None:
        if self._storage is not None:
            self._storage.save_study_index(deck.index)

    def _persist_questions(self) -> None:
        if self._storage is not None:
            self._storage.save_questions(self._bank.get_questions())

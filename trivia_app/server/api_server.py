"""FastAPI server that exposes the quiz, study and question bank endpoints."""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel, Field
import uvicorn

from trivia_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from trivia_app.constants.ai_constants import DEFAULT_GENERATION_COUNT, DEFAULT_GENERATION_TOPIC
from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.constants.quiz_constants import ALL_CATEGORIES, DEFAULT_CATEGORY, DEFAULT_DIFFICULTY
from trivia_app.constants.ui_constants import EMPTY_STUDY_DECK_MESSAGE, REJECTION_MESSAGES
from trivia_app.core.markdown_renderer import renderer
from trivia_app.core.models import Difficulty, LeaderboardEntry, Question, new_question_id
from trivia_app.core.question_generator import QuestionGenerationError
from trivia_app.core.quiz_exporter import template_json
from trivia_app.core.quiz_importer import QuizImportError
from trivia_app.core.quiz_manager import QuizManager
from trivia_app.core.scoring import Lifeline, streak_multiplier
from trivia_app.core.services.quiz_session import ActionResult
from trivia_app.core.services.study_deck import StudyDeck

_PLAYER_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>Scripture Scholar</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: Georgia, 'Times New Roman', serif; background: #fbf7ef; color: #3b2f1e; }
      body { margin: 0 auto; padding: 1.5rem; max-width: 48rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #fff; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.25rem 1rem rgba(59, 47, 30, 0.15); }
      .hidden { display: none; }
      .stats { display: flex; gap: 1.5rem; font-weight: bold; }
      .options-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 0.75rem; margin: 1rem 0; }
      button { border: none; border-radius: 0.75rem; padding: 0.8rem 1.2rem; font-size: 1rem; background: #8a6d3b; color: #fff; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      .option-button.correct { background: #2f855a; }
      .option-button.wrong { background: #c53030; }
      .option-button.gone { visibility: hidden; }
      #status { min-height: 1.25rem; }
    </style>
  </head>
  <body>
    <section class=\"card\" id=\"start-card\">
      <h1>Scripture Scholar</h1>
      <p>Answer up to ten questions. Streaks multiply your points; lifelines cost points.</p>
      <select id=\"category\"></select>
      <button id=\"start-button\">Start Trivia</button>
      <p id=\"start-status\"></p>
    </section>
    <section class=\"card hidden\" id=\"play-card\">
      <div class=\"stats\">
        <span id=\"progress\"></span><span id=\"timer\"></span><span id=\"score\"></span><span id=\"streak\"></span>
      </div>
      <div id=\"question\"></div>
      <div id=\"options\" class=\"options-grid\"></div>
      <p id=\"hint\"></p>
      <div>
        <button id=\"fifty-fifty\">50/50 (-50)</button>
        <button id=\"hint-button\">Hint (-25)</button>
        <button id=\"swap\">Swap (-40)</button>
        <button id=\"next\">Next</button>
      </div>
      <p id=\"status\"></p>
    </section>
    <section class=\"card hidden\" id=\"result-card\">
      <h2 id=\"final\"></h2>
      <form id=\"save-form\">
        <input id=\"player-name\" maxlength=\"15\" placeholder=\"Your Name\" required />
        <button type=\"submit\">Save Score</button>
      </form>
      <ol id=\"leaderboard\"></ol>
      <ol id=\"review\"></ol>
      <button id=\"again\">Play Again</button>
    </section>
    <script>
      const $ = (id) => document.getElementById(id);
      let pollHandle = null;

      async function call(path, method = 'GET', body = null) {
        const options = { method, headers: { 'Content-Type': 'application/json' } };
        if (body !== null) options.body = JSON.stringify(body);
        const response = await fetch(path, options);
        const payload = await response.json().catch(() => ({}));
        return { ok: response.ok, payload };
      }

      function show(card) {
        ['start-card', 'play-card', 'result-card'].forEach(id => $(id).classList.toggle('hidden', id !== card));
      }

      async function loadCategories() {
        const { payload } = await call('/categories');
        $('category').innerHTML = '';
        (payload.categories || []).forEach(cat => {
          const option = document.createElement('option');
          option.value = cat; option.textContent = cat;
          $('category').appendChild(option);
        });
      }

      function renderSession(state) {
        if (state.phase === 'completed') { showResult(); return; }
        if (state.phase !== 'in_progress') { show('start-card'); return; }
        show('play-card');
        const q = state.question;
        $('progress').textContent = `Question ${state.question_number} of ${state.total_questions}`;
        $('timer').textContent = `${state.time_left}s`;
        $('score').textContent = `${state.score} pts`;
        $('streak').textContent = state.multiplier > 1 ? `Streak ${state.streak} x${state.multiplier}` : `Streak ${state.streak}`;
        $('question').innerHTML = q.text_html;
        $('hint').textContent = state.hint_reference ? `Hint: ${state.hint_reference}` : '';
        $('options').innerHTML = '';
        q.options.forEach((text, idx) => {
          const btn = document.createElement('button');
          btn.className = 'option-button';
          btn.textContent = text;
          if (state.hidden_options.includes(idx)) btn.classList.add('gone');
          if (state.revealed) {
            btn.disabled = true;
            if (idx === state.correct_option_index) btn.classList.add('correct');
            else if (idx === state.selected_option) btn.classList.add('wrong');
          }
          btn.onclick = () => act('/session/answer', { selected_index: idx });
          $('options').appendChild(btn);
        });
        $('next').disabled = !state.revealed;
        ['fifty-fifty', 'hint-button', 'swap'].forEach(id => $(id).disabled = state.revealed);
        if (state.revealed && state.selected_option === -1) $('status').textContent = 'Time Expired';
      }

      async function refresh() {
        const { payload } = await call('/session');
        renderSession(payload);
      }

      async function act(path, body = null) {
        const { ok, payload } = await call(path, 'POST', body);
        $('status').textContent = ok && payload.accepted === false ? payload.message : (ok ? '' : (payload.detail || ''));
        await refresh();
      }

      async function showResult() {
        show('result-card');
        if (pollHandle) { clearInterval(pollHandle); pollHandle = null; }
        const { payload } = await call('/session/result');
        $('final').textContent = `Score: ${payload.final_score} (${payload.correct_count}/${payload.total} correct)`;
        $('save-form').classList.toggle('hidden', payload.submitted);
        $('review').innerHTML = '';
        (payload.review || []).forEach(item => {
          const li = document.createElement('li');
          li.textContent = `${item.text} - ${item.selected_label}` + (item.is_correct ? '' : ` (answer: ${item.correct_option}, ${item.reference})`);
          $('review').appendChild(li);
        });
        await loadLeaderboard();
      }

      async function loadLeaderboard() {
        const { payload } = await call('/leaderboard');
        $('leaderboard').innerHTML = '';
        (payload.entries || []).forEach(entry => {
          const li = document.createElement('li');
          li.textContent = `${entry.name} - ${entry.score}`;
          $('leaderboard').appendChild(li);
        });
      }

      $('start-button').onclick = async () => {
        const { ok, payload } = await call('/session/start', 'POST', { category: $('category').value });
        $('start-status').textContent = ok ? '' : (payload.detail || 'Unable to start.');
        if (ok) {
          renderSession(payload);
          pollHandle = setInterval(refresh, 1000);
        }
      };
      $('fifty-fifty').onclick = () => act('/session/lifelines/fifty-fifty');
      $('hint-button').onclick = () => act('/session/lifelines/hint');
      $('swap').onclick = () => act('/session/lifelines/swap');
      $('next').onclick = () => act('/session/next');
      $('again').onclick = async () => { await call('/session/abort', 'POST'); await loadCategories(); show('start-card'); };
      $('save-form').onsubmit = async (event) => {
        event.preventDefault();
        const { payload } = await call('/leaderboard', 'POST', { name: $('player-name').value });
        if (payload.accepted === false) { alert(payload.message); }
        await showResult();
      };

      loadCategories();
      refresh();
    </script>
  </body>
</html>
"""


class StartPayload(BaseModel):
    """Payload schema for starting a quiz."""

    category: str = ALL_CATEGORIES


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    selected_index: int


class ScorePayload(BaseModel):
    """Payload schema for saving a score to the leaderboard."""

    name: str


class QuestionPayload(BaseModel):
    """Payload schema for a question created or edited by hand."""

    text: str
    options: list[str] = Field(min_length=4, max_length=4)
    correct_option_index: int = Field(ge=0, le=3)
    reference: str
    difficulty: str = DEFAULT_DIFFICULTY
    category: str = DEFAULT_CATEGORY

    def to_question(self, question_id: str | None = None) -> Question:
        return Question(
            id=question_id or new_question_id(),
            text=self.text,
            options=tuple(self.options),
            correct_option_index=self.correct_option_index,
            reference=self.reference,
            difficulty=Difficulty.parse(self.difficulty),
            category=self.category,
        )


class ImportPayload(BaseModel):
    """Payload schema for uploading a question file."""

    filename: str
    content: str


class GeneratePayload(BaseModel):
    """Payload schema for AI question generation."""

    count: int = Field(default=DEFAULT_GENERATION_COUNT, ge=1, le=20)
    topic: str = DEFAULT_GENERATION_TOPIC


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _action_payload(result: ActionResult) -> dict[str, object]:
    if result.accepted:
        return {"accepted": True, "reason": None, "message": None, "points": result.points}
    reason = result.reason.value if result.reason else None
    return {
        "accepted": False,
        "reason": reason,
        "message": REJECTION_MESSAGES.get(reason or "", ""),
        "points": 0,
    }


def _session_payload(manager: QuizManager) -> dict[str, object]:
    state = manager.get_session_state()
    question = state.current_question
    turn = state.turn
    payload: dict[str, object] = {
        "phase": state.phase.value,
        "category": state.category,
        "score": state.score,
        "streak": state.streak,
        "multiplier": streak_multiplier(state.streak),
        "question_number": state.current_index + 1 if question else None,
        "total_questions": len(state.questions),
        "time_left": turn.time_left,
        "revealed": turn.revealed,
        "selected_option": turn.selected_option,
        "hidden_options": sorted(turn.hidden_options),
        "hint_used": turn.hint_used,
        "hint_reference": state.hint_reference,
        "question": None,
        "correct_option_index": None,
    }
    if question is not None:
        payload["question"] = {
            "id": question.id,
            "text_html": renderer.render_fragment(question.text),
            "options": list(question.options),
            "difficulty": question.difficulty.value,
            "category": question.category,
        }
        # Only send the correct answer once the question is revealed
        if turn.revealed:
            payload["correct_option_index"] = question.correct_option_index
    return payload


def _leaderboard_payload(entries: list[LeaderboardEntry]) -> dict[str, object]:
    return {"entries": [entry.to_dict() for entry in entries]}


def _study_payload(deck: StudyDeck) -> dict[str, object]:
    card = deck.current_card()
    if card is None:
        return {"empty": True, "message": EMPTY_STUDY_DECK_MESSAGE, "index": 0, "size": 0}
    payload: dict[str, object] = {
        "empty": False,
        "index": deck.index,
        "size": deck.size,
        "flipped": deck.is_flipped,
        "question": {
            "id": card.id,
            "text_html": renderer.render_fragment(card.text),
            "category": card.category or DEFAULT_CATEGORY,
            "difficulty": card.difficulty.value,
        },
        "answer": None,
    }
    if deck.is_flipped:
        context = deck.cached_context(card.id)
        payload["answer"] = {
            "option": card.correct_option,
            "reference": card.reference,
            "context_html": renderer.render_fragment(context) if context else None,
        }
    return payload


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/", response_class=HTMLResponse)
    def serve_player_page() -> str:
        return _PLAYER_PAGE_HTML

    @app.get("/about")
    def get_about() -> dict[str, object]:
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "license": APP_LICENSE,
            "about": APP_ABOUT_TEXT,
            "help": HELP_TEXT,
        }

    @app.get("/categories")
    def get_categories(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {"categories": manager.get_categories()}

    # --- Quiz session ---

    @app.post("/session/start", status_code=201)
    def start_session(
        payload: StartPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            manager.start_quiz(payload.category)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _session_payload(manager)

    @app.get("/session")
    def get_session(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _session_payload(manager)

    @app.post("/session/answer")
    def submit_answer(
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return _action_payload(manager.answer(payload.selected_index))

    @app.post("/session/lifelines/{lifeline}")
    def use_lifeline(
        lifeline: Lifeline,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return _action_payload(manager.use_lifeline(lifeline))

    @app.post("/session/next")
    def next_question(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _action_payload(manager.next_question())

    @app.post("/session/abort", status_code=204)
    def abort_session(manager: QuizManager = Depends(quiz_manager_dep)) -> None:
        manager.abort_quiz()

    @app.get("/session/result")
    def get_result(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            summary = manager.get_result()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {**summary.to_dict(), "submitted": manager.is_score_submitted()}

    # --- Leaderboard ---

    @app.get("/leaderboard")
    def get_leaderboard(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _leaderboard_payload(manager.get_leaderboard())

    @app.post("/leaderboard")
    def save_score(
        payload: ScorePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        result = manager.submit_score(payload.name)
        return {**_action_payload(result), **_leaderboard_payload(manager.get_leaderboard())}

    # --- Question bank ---

    @app.get("/questions")
    def list_questions(
        difficulty: str | None = None,
        category: str | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        questions = manager.get_questions(difficulty=difficulty, category=category)
        return {"questions": [question.to_dict() for question in questions]}

    @app.post("/questions", status_code=201)
    def create_question(
        payload: QuestionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            question = manager.add_question(payload.to_question())
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return question.to_dict()

    @app.put("/questions/{question_id}")
    def edit_question(
        question_id: str,
        payload: QuestionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            question = manager.update_question(question_id, payload.to_question(question_id))
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Question '{question_id}' not found") from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return question.to_dict()

    @app.delete("/questions/{question_id}", status_code=204)
    def remove_question(question_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> None:
        try:
            manager.delete_question(question_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Question '{question_id}' not found") from exc

    @app.post("/questions/import", status_code=201)
    def import_questions(
        payload: ImportPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            imported = manager.import_document(payload.content, payload.filename)
        except QuizImportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"imported": len(imported.questions), "skipped": imported.skipped}

    @app.get("/questions/export", response_class=PlainTextResponse)
    def export_questions(
        fmt: str = Query("json", alias="format"),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> str:
        if fmt not in {"json", "txt"}:
            raise HTTPException(status_code=422, detail="Export format must be 'json' or 'txt'.")
        return manager.export_document(fmt)

    @app.get("/questions/template", response_class=PlainTextResponse)
    def download_template() -> str:
        return template_json()

    @app.post("/questions/generate", status_code=201)
    def generate_questions(
        payload: GeneratePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            questions = manager.generate_questions(payload.count, payload.topic)
        except QuestionGenerationError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"questions": [question.to_dict() for question in questions]}

    # --- Study mode ---

    @app.get("/study")
    def get_study(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return _study_payload(manager.get_study_deck())
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.post("/study/open")
    def open_study(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _study_payload(manager.open_study_deck())

    @app.post("/study/{action}")
    def study_action(action: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            if action == "next":
                deck = manager.study_move(1)
            elif action == "previous":
                deck = manager.study_move(-1)
            elif action == "flip":
                deck = manager.study_flip()
            elif action == "reset":
                deck = manager.study_reset()
            elif action == "context":
                context = manager.study_context()
                return {"context": context, "context_html": renderer.render_fragment(context)}
            else:
                raise HTTPException(status_code=404, detail=f"Unknown study action '{action}'")
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _study_payload(deck)

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread

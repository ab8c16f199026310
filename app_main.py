"""Application entry point for Scripture Scholar."""

from __future__ import annotations

from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.core.quiz_manager import QuizManager
from trivia_app.core.session_clock import SessionClock
from trivia_app.core.storage import AppStorage
from trivia_app.server.api_server import start_api_server
from trivia_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, start the quiz clock and serve the player page."""
    logger = configure_logging()
    logger.info("Starting Scripture Scholar…")

    storage = AppStorage.from_environment()
    logger.info("Using data directory %s", storage.data_dir)
    quiz_manager = QuizManager(storage=storage)

    clock = SessionClock(on_tick=quiz_manager.advance_clock)
    clock.start()
    server_thread = start_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Player page available at http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)

    try:
        server_thread.join()
    except KeyboardInterrupt:
        logger.info("Shutting down…")
    finally:
        clock.stop()


if __name__ == "__main__":
    main()

"""Logging configuration helpers for the trivia application."""

from __future__ import annotations

import logging
from logging import Logger

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# The player page polls once per second; one access line per poll drowns the game log.
_QUIET_LOGGERS = ("uvicorn.access",)


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure basic logging for the application and return the app logger."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logger = logging.getLogger("trivia_app")
    logger.setLevel(level)
    return logger

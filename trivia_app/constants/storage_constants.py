"""Locations used to persist the question bank and leaderboard."""

from pathlib import Path

DATA_DIR_ENV_VAR: str = "SCRIPTURE_SCHOLAR_DATA_DIR"
DEFAULT_DATA_DIR: Path = Path.home() / ".scripture_scholar"
QUESTIONS_FILE_NAME: str = "questions.json"
LEADERBOARD_FILE_NAME: str = "leaderboard.json"
STUDY_PROGRESS_FILE_NAME: str = "study_progress.json"

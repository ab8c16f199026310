"""User-facing messages shared by the engine adapters and the player page."""

SESSION_NOT_COMPLETE_MESSAGE: str = "The quiz has not been completed yet."
TIME_EXPIRED_LABEL: str = "Time Expired"
EMPTY_STUDY_DECK_MESSAGE: str = "No questions available to study."
NO_VALID_IMPORT_MESSAGE: str = "No valid questions found. Please check your file against the template."
UNSUPPORTED_IMPORT_MESSAGE: str = "Unsupported file type. Please use JSON, CSV or TXT."

REJECTION_MESSAGES: dict[str, str] = {
    "not_in_progress": "No question is currently being played.",
    "already_revealed": "This question has already been answered.",
    "not_revealed": "Answer the question before moving on.",
    "already_used": "That lifeline was already used for this question.",
    "insufficient_score": "Not enough points for that lifeline.",
    "no_swap_candidate": "No other questions available to swap in!",
    "invalid_option": "That option does not exist.",
    "not_completed": "Finish the quiz before saving a score.",
    "already_submitted": "This score has already been saved.",
    "invalid_name": "Please enter a name of up to 15 characters.",
}

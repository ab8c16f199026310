"""Settings for the AI question generator and study context lookups."""

QUESTION_MODEL: str = "gpt-4o-mini"
CONTEXT_MODEL: str = "gpt-4o-mini"
QUESTION_TEMPERATURE: float = 0.4
CONTEXT_TEMPERATURE: float = 0.3
QUESTION_MAX_TOKENS: int = 1600
CONTEXT_MAX_TOKENS: int = 200

DEFAULT_GENERATION_COUNT: int = 5
DEFAULT_GENERATION_TOPIC: str = "General Bible Knowledge"
CONTEXT_UNAVAILABLE_MESSAGE: str = "Unable to load context at this time."
CONTEXT_EMPTY_MESSAGE: str = "Context unavailable."

"""Quiz-related constants shared across the engine and the web layer."""

GAME_LENGTH: int = 10
TIMER_SECONDS: int = 30

POINTS_CORRECT: int = 100
POINTS_INCORRECT: int = 25  # Deduction amount

STREAK_THRESHOLD_1: int = 3
STREAK_THRESHOLD_2: int = 5
MULTIPLIER_1: float = 1.5
MULTIPLIER_2: float = 2.0

COST_FIFTY_FIFTY: int = 50
COST_HINT: int = 25
COST_SWAP: int = 40

FIFTY_FIFTY_HIDE_COUNT: int = 2
LEADERBOARD_SIZE: int = 10
PLAYER_NAME_MAX_LENGTH: int = 15

ALL_CATEGORIES: str = "All"
DEFAULT_CATEGORY: str = "General"
DEFAULT_DIFFICULTY: str = "Medium"
OPTION_COUNT: int = 4
TIMEOUT_SELECTION: int = -1

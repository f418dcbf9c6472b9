"""Quiz-related constants shared across UI and core layers."""

OPTION_COUNT: int = 4
NO_SELECTION: int = -1
NO_SELECTION_TEXT: str = "No selection"

DEFAULT_TIME_LIMIT_SECONDS: int = 30
DEFAULT_QUESTION_POINTS: int = 1
TIME_RUNNING_OUT_SECONDS: int = 5
COUNTDOWN_TICK_SECONDS: float = 1.0

DEFAULT_FULLSCREEN_COUNTDOWN_SECONDS: int = 8
FULLSCREEN_RETURN_GRACE_SECONDS: int = 10

RECENT_ATTEMPTS_LIMIT: int = 5
GOOD_SCORE_THRESHOLD: float = 70.0
FAIR_SCORE_THRESHOLD: float = 40.0

NAVIGATION_WARNING_MESSAGE: str = (
    "Warning: Navigating away from the quiz is not allowed. "
    "Your next attempt will result in automatic submission."
)
LEAVE_QUIZ_PROMPT: str = "Are you sure you want to leave the quiz? Your progress will be lost."

SAMPLE_QUESTIONS_PATH: str = "sample_questions.txt"

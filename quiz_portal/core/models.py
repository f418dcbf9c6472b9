"""Domain models for the quiz portal."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from quiz_portal.constants.quiz_constants import (
    DEFAULT_QUESTION_POINTS,
    DEFAULT_TIME_LIMIT_SECONDS,
    NO_SELECTION,
)


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question as stored in the question bank."""

    id: str
    question_text: str
    options: tuple[str, ...]
    correct_option_index: int
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    points: int = DEFAULT_QUESTION_POINTS
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class AnswerRecord:
    """Outcome of one answered (or timed-out) question."""

    question_id: str
    question_text: str
    selected_option_index: int
    selected_text: str
    correct_option_text: str
    is_correct: bool
    points_awarded: int
    max_points: int

    @property
    def has_selection(self) -> bool:
        return self.selected_option_index != NO_SELECTION


@dataclass(frozen=True, slots=True)
class QuizUser:
    """Authenticated quiz participant or administrator."""

    user_id: str
    email: str
    display_name: str = ""
    is_admin: bool = False


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Result document persisted once per quiz attempt."""

    user_id: str
    user_email: str
    answers: tuple[AnswerRecord, ...]
    total_points: int
    max_possible_points: int
    score_percentage: float
    correct_answers: int
    total_questions: int
    answered_questions: int
    completed_at: datetime
    result_id: str | None = field(default=None, compare=False)

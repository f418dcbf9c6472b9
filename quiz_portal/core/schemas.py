"""Pydantic wire schemas shared by the HTTP server and client."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from quiz_portal.constants.quiz_constants import DEFAULT_QUESTION_POINTS, DEFAULT_TIME_LIMIT_SECONDS
from quiz_portal.core.models import AnswerRecord, Question, QuizResult, QuizUser


class LoginPayload(BaseModel):
    """Credentials posted to the sign-in endpoint."""

    email: str
    password: str


class SessionPayload(BaseModel):
    """Signed-in user returned together with a bearer token."""

    token: str
    user_id: str
    email: str
    display_name: str = ""
    is_admin: bool = False

    def to_user(self) -> QuizUser:
        return QuizUser(
            user_id=self.user_id,
            email=self.email,
            display_name=self.display_name,
            is_admin=self.is_admin,
        )


class QuestionPayload(BaseModel):
    """Question record as exchanged over HTTP."""

    id: str = ""
    question_text: str
    options: list[str]
    correct_option_index: int
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    points: int = DEFAULT_QUESTION_POINTS
    image_url: str | None = None

    @classmethod
    def from_domain(cls, question: Question) -> QuestionPayload:
        return cls(
            id=question.id,
            question_text=question.question_text,
            options=list(question.options),
            correct_option_index=question.correct_option_index,
            time_limit_seconds=question.time_limit_seconds,
            points=question.points,
            image_url=question.image_url,
        )

    def to_domain(self) -> Question:
        return Question(
            id=self.id,
            question_text=self.question_text,
            options=tuple(self.options),
            correct_option_index=self.correct_option_index,
            time_limit_seconds=self.time_limit_seconds,
            points=self.points,
            image_url=self.image_url,
        )


class AnswerPayload(BaseModel):
    """One answer record inside a result document."""

    question_id: str
    question_text: str
    selected_option_index: int
    selected_text: str
    correct_option_text: str
    is_correct: bool
    points_awarded: int = Field(ge=0)
    max_points: int = Field(ge=0)

    @classmethod
    def from_domain(cls, answer: AnswerRecord) -> AnswerPayload:
        return cls(
            question_id=answer.question_id,
            question_text=answer.question_text,
            selected_option_index=answer.selected_option_index,
            selected_text=answer.selected_text,
            correct_option_text=answer.correct_option_text,
            is_correct=answer.is_correct,
            points_awarded=answer.points_awarded,
            max_points=answer.max_points,
        )

    def to_domain(self) -> AnswerRecord:
        return AnswerRecord(
            question_id=self.question_id,
            question_text=self.question_text,
            selected_option_index=self.selected_option_index,
            selected_text=self.selected_text,
            correct_option_text=self.correct_option_text,
            is_correct=self.is_correct,
            points_awarded=self.points_awarded,
            max_points=self.max_points,
        )


class ResultPayload(BaseModel):
    """Result document as posted by clients and listed for review."""

    result_id: str | None = None
    user_id: str
    user_email: str
    answers: list[AnswerPayload]
    total_points: int = Field(ge=0)
    max_possible_points: int = Field(ge=0)
    score_percentage: float = Field(ge=0, le=100)
    correct_answers: int = Field(ge=0)
    total_questions: int = Field(ge=0)
    answered_questions: int = Field(ge=0)
    completed_at: datetime

    @classmethod
    def from_domain(cls, result: QuizResult) -> ResultPayload:
        return cls(
            result_id=result.result_id,
            user_id=result.user_id,
            user_email=result.user_email,
            answers=[AnswerPayload.from_domain(answer) for answer in result.answers],
            total_points=result.total_points,
            max_possible_points=result.max_possible_points,
            score_percentage=result.score_percentage,
            correct_answers=result.correct_answers,
            total_questions=result.total_questions,
            answered_questions=result.answered_questions,
            completed_at=result.completed_at,
        )

    def to_domain(self) -> QuizResult:
        return QuizResult(
            user_id=self.user_id,
            user_email=self.user_email,
            answers=tuple(answer.to_domain() for answer in self.answers),
            total_points=self.total_points,
            max_possible_points=self.max_possible_points,
            score_percentage=self.score_percentage,
            correct_answers=self.correct_answers,
            total_questions=self.total_questions,
            answered_questions=self.answered_questions,
            completed_at=self.completed_at,
            result_id=self.result_id,
        )


class ResultCreated(BaseModel):
    result_id: str

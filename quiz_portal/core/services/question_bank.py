"""Service for storing the question bank read by quiz sessions."""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from quiz_portal.constants.quiz_constants import OPTION_COUNT
from quiz_portal.core.image_urls import convert_drive_url
from quiz_portal.core.models import Question


class InMemoryQuestionBank:
    """Manages the lifecycle and storage of quiz questions."""

    def __init__(self) -> None:
        self._questions: dict[str, Question] = {}

    def load_questions(self, questions: list[Question]) -> None:
        """Replace the bank's contents with a new list of questions."""
        loaded: dict[str, Question] = {}
        for question in questions:
            prepared = self._prepare_question(question)
            if prepared.id in loaded:
                raise ValueError(f"Question id {prepared.id!r} appears more than once.")
            loaded[prepared.id] = prepared
        self._questions = loaded

    def fetch_all(self, credential: str | None = None) -> list[Question]:
        """Return every stored question in insertion order."""
        return list(self._questions.values())

    def add_question(self, question: Question) -> Question:
        prepared = self._prepare_question(question)
        if prepared.id in self._questions:
            raise ValueError(f"Question id {prepared.id!r} already exists.")
        self._questions[prepared.id] = prepared
        return prepared

    def _prepare_question(self, question: Question) -> Question:
        """Validate and normalize a question before storage."""
        options = self._validate_options(question.options)
        if not 0 <= question.correct_option_index < OPTION_COUNT:
            raise ValueError(f"Correct option index must be between 0 and {OPTION_COUNT - 1}.")

        cleaned_text = question.question_text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")

        return replace(
            question,
            id=question.id.strip() or uuid4().hex,
            question_text=cleaned_text,
            options=options,
            time_limit_seconds=self._require_positive(question.time_limit_seconds, "Time limit"),
            points=self._require_positive(question.points, "Points"),
            image_url=convert_drive_url((question.image_url or "").strip()) or None,
        )

    @staticmethod
    def _validate_options(options: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        if len(options) != OPTION_COUNT:
            raise ValueError(f"Each question must have exactly {OPTION_COUNT} options.")
        cleaned = tuple(option.strip() for option in options)
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned

    @staticmethod
    def _require_positive(value: int, label: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{label} must be provided as an integer.")
        if value <= 0:
            raise ValueError(f"{label} must be a positive integer.")
        return value

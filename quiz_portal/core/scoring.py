"""Scoring helpers that turn selections into answer records and totals."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from quiz_portal.constants.quiz_constants import (
    FAIR_SCORE_THRESHOLD,
    GOOD_SCORE_THRESHOLD,
    NO_SELECTION,
    NO_SELECTION_TEXT,
)
from quiz_portal.core.models import AnswerRecord, Question


class ScoreBand(Enum):
    """Coarse classification used to colour a final score."""

    GOOD = auto()
    FAIR = auto()
    POOR = auto()


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    """Totals computed over the answers recorded in one attempt."""

    total_points: int
    max_possible_points: int
    score_percentage: float
    correct_answers: int
    total_questions: int
    answered_questions: int


def score_answer(question: Question, selected_index: int | None) -> AnswerRecord:
    """Build the answer record for ``question`` given the standing selection."""
    if selected_index is None:
        selected_index = NO_SELECTION

    has_selection = 0 <= selected_index < len(question.options)
    is_correct = has_selection and selected_index == question.correct_option_index
    return AnswerRecord(
        question_id=question.id,
        question_text=question.question_text,
        selected_option_index=selected_index if has_selection else NO_SELECTION,
        selected_text=question.options[selected_index] if has_selection else NO_SELECTION_TEXT,
        correct_option_text=question.options[question.correct_option_index],
        is_correct=is_correct,
        points_awarded=question.points if is_correct else 0,
        max_points=question.points,
    )


def summarize(answers: Sequence[AnswerRecord], total_questions: int) -> ScoreSummary:
    """Sum points over ``answers``; questions never reached are not counted."""
    total_points = sum(answer.points_awarded for answer in answers)
    max_possible_points = sum(answer.max_points for answer in answers)
    percentage = (total_points / max_possible_points) * 100 if max_possible_points else 0.0
    return ScoreSummary(
        total_points=total_points,
        max_possible_points=max_possible_points,
        score_percentage=percentage,
        correct_answers=sum(1 for answer in answers if answer.is_correct),
        total_questions=total_questions,
        answered_questions=len(answers),
    )


def score_band(percentage: float) -> ScoreBand:
    if percentage >= GOOD_SCORE_THRESHOLD:
        return ScoreBand.GOOD
    if percentage >= FAIR_SCORE_THRESHOLD:
        return ScoreBand.FAIR
    return ScoreBand.POOR

"""Shared fixtures for the quiz portal tests."""

from __future__ import annotations

import random

import pytest

from quiz_portal.core.models import Question, QuizUser
from quiz_portal.core.scheduler import ManualScheduler
from quiz_portal.core.services.identity import SessionIdentity
from quiz_portal.core.services.proctoring_environment import HeadlessEnvironment
from quiz_portal.core.services.proctoring_guard import ProctoringGuard
from quiz_portal.core.services.question_bank import InMemoryQuestionBank
from quiz_portal.core.services.quiz_runner import QuizRunner
from quiz_portal.core.services.result_store import InMemoryResultStore

STUDENT = QuizUser(user_id="u-1", email="student1@quizportal.com", display_name="Student One")


def make_question(
    question_id: str,
    correct: int = 0,
    points: int = 1,
    time_limit: int = 30,
    text: str | None = None,
) -> Question:
    return Question(
        id=question_id,
        question_text=text or f"Question {question_id}?",
        options=("Alpha", "Beta", "Gamma", "Delta"),
        correct_option_index=correct,
        time_limit_seconds=time_limit,
        points=points,
    )


class IdentityRng(random.Random):
    """Random source whose shuffle keeps the original order."""

    def shuffle(self, x) -> None:
        return None


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def environment() -> HeadlessEnvironment:
    return HeadlessEnvironment()


@pytest.fixture
def guard(environment: HeadlessEnvironment, scheduler: ManualScheduler) -> ProctoringGuard:
    return ProctoringGuard(environment, scheduler)


@pytest.fixture
def identity() -> SessionIdentity:
    session = SessionIdentity()
    session.establish(STUDENT, "token-1")
    return session


@pytest.fixture
def question_bank() -> InMemoryQuestionBank:
    bank = InMemoryQuestionBank()
    bank.load_questions([
        make_question("q1", correct=0, points=1),
        make_question("q2", correct=1, points=2),
        make_question("q3", correct=2, points=3),
    ])
    return bank


@pytest.fixture
def result_store() -> InMemoryResultStore:
    return InMemoryResultStore()


@pytest.fixture
def make_runner(question_bank, result_store, identity, guard, scheduler):
    def factory(**overrides) -> QuizRunner:
        kwargs = {
            "question_bank": question_bank,
            "result_store": result_store,
            "identity": identity,
            "guard": guard,
            "scheduler": scheduler,
            "rng": IdentityRng(),
        }
        kwargs.update(overrides)
        return QuizRunner(**kwargs)

    return factory

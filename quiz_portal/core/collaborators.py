"""Interfaces of the external services the quiz core depends on."""

from __future__ import annotations

from typing import Protocol, Sequence

from quiz_portal.core.models import Question, QuizResult, QuizUser


class QuestionBank(Protocol):
    """Read access to the full question set."""

    def fetch_all(self, credential: str | None = None) -> Sequence[Question]: ...


class ResultStore(Protocol):
    """Append-only storage for quiz result documents."""

    def append_result(self, result: QuizResult, credential: str | None = None) -> str: ...

    def recent_results(
        self,
        user_id: str,
        limit: int,
        credential: str | None = None,
    ) -> list[QuizResult]: ...


class IdentityProvider(Protocol):
    """Source of the signed-in user and their bearer credential."""

    def current_user(self) -> QuizUser: ...

    def get_token(self) -> str: ...

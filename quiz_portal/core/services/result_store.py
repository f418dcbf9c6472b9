"""Service for keeping submitted quiz results."""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from quiz_portal.core.models import QuizResult


class InMemoryResultStore:
    """Append-only list of result documents."""

    def __init__(self) -> None:
        self._results: list[QuizResult] = []

    def append_result(self, result: QuizResult, credential: str | None = None) -> str:
        """Store ``result`` and return the identifier assigned to it."""
        result_id = uuid4().hex
        self._results.append(replace(result, result_id=result_id))
        return result_id

    def recent_results(
        self,
        user_id: str,
        limit: int,
        credential: str | None = None,
    ) -> list[QuizResult]:
        """Return up to ``limit`` results for ``user_id``, newest first."""
        if limit <= 0:
            return []
        mine = [r for r in self._results if r.user_id == user_id]
        mine.sort(key=lambda r: r.completed_at, reverse=True)
        return mine[:limit]

    def all_results(self) -> list[QuizResult]:
        return sorted(self._results, key=lambda r: r.completed_at, reverse=True)

    def get_result_count(self) -> int:
        return len(self._results)

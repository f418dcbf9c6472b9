"""Business logic behind the HTTP API, shared between request threads."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock

from quiz_portal.constants.quiz_constants import RECENT_ATTEMPTS_LIMIT
from quiz_portal.core.errors import PermissionDenied
from quiz_portal.core.models import Question, QuizResult, QuizUser
from quiz_portal.core.question_importer import load_questions_from_file
from quiz_portal.core.services.identity import UserDirectory
from quiz_portal.core.services.question_bank import InMemoryQuestionBank
from quiz_portal.core.services.result_store import InMemoryResultStore

logger = logging.getLogger(__name__)


class PortalBackend:
    """Facade for backend services: UserDirectory, QuestionBank and ResultStore."""

    def __init__(self) -> None:
        self._lock = Lock()

        self._directory = UserDirectory()
        self._questions = InMemoryQuestionBank()
        self._results = InMemoryResultStore()

    # --- Accounts ---

    def register_user(
        self,
        email: str,
        password: str,
        display_name: str = "",
        is_admin: bool = False,
    ) -> QuizUser:
        with self._lock:
            return self._directory.add_user(email, password, display_name, is_admin)

    def sign_in(self, email: str, password: str) -> tuple[QuizUser, str]:
        with self._lock:
            user, token = self._directory.sign_in(email, password)
        logger.info("User %s signed in", user.email)
        return user, token

    def authenticate(self, token: str | None) -> QuizUser:
        with self._lock:
            return self._directory.resolve_token(token)

    def sign_out(self, token: str) -> None:
        with self._lock:
            self._directory.sign_out(token)

    # --- Questions ---

    def load_questions(self, questions: list[Question]) -> None:
        with self._lock:
            self._questions.load_questions(questions)

    def seed_questions_from_file(self, path: Path) -> int:
        imported = load_questions_from_file(path)
        self.load_questions(imported.questions)
        logger.info("Seeded %d questions from %s", len(imported.questions), path)
        return len(imported.questions)

    def list_questions(self, token: str | None) -> list[Question]:
        with self._lock:
            self._directory.resolve_token(token)
            return self._questions.fetch_all()

    def add_question(self, token: str | None, question: Question) -> Question:
        with self._lock:
            self._require_admin(token)
            return self._questions.add_question(question)

    # --- Results ---

    def record_result(self, token: str | None, result: QuizResult) -> str:
        with self._lock:
            user = self._directory.resolve_token(token)
            if result.user_id != user.user_id:
                raise PermissionDenied("Results can only be recorded for the signed-in user.")
            result_id = self._results.append_result(result)
        logger.info("Stored result %s for %s", result_id, user.email)
        return result_id

    def recent_results(self, token: str | None, limit: int = RECENT_ATTEMPTS_LIMIT) -> list[QuizResult]:
        with self._lock:
            user = self._directory.resolve_token(token)
            return self._results.recent_results(user.user_id, limit)

    def all_results(self, token: str | None) -> list[QuizResult]:
        with self._lock:
            self._require_admin(token)
            return self._results.all_results()

    def _require_admin(self, token: str | None) -> QuizUser:
        user = self._directory.resolve_token(token)
        if not user.is_admin:
            raise PermissionDenied("Administrator access required.")
        return user

"""Application entry point for the Quiz Portal student client."""

from __future__ import annotations

from logging import Logger
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication

from quiz_portal.client.portal_api_client import PortalApiClient
from quiz_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_portal.constants.quiz_constants import SAMPLE_QUESTIONS_PATH
from quiz_portal.core.portal_backend import PortalBackend
from quiz_portal.core.question_importer import QuestionImportError
from quiz_portal.server.api_server import start_api_server
from quiz_portal.ui.student_quiz_window import StudentQuizWindow
from quiz_portal.utils.logging_config import configure_logging

DEMO_ACCOUNTS = (
    ("student1@quizportal.com", "password123", "Student One", False),
    ("student2@quizportal.com", "password123", "Student Two", False),
    ("admin@quizportal.com", "adminpass", "Administrator", True),
)


def _build_backend(logger: Logger) -> PortalBackend:
    backend = PortalBackend()
    for email, password, display_name, is_admin in DEMO_ACCOUNTS:
        backend.register_user(email, password, display_name=display_name, is_admin=is_admin)

    sample_path = Path(__file__).resolve().parent / SAMPLE_QUESTIONS_PATH
    if sample_path.exists():
        try:
            backend.seed_questions_from_file(sample_path)
        except (OSError, ValueError, QuestionImportError) as exc:
            logger.warning("Could not load sample questions: %s", exc)
    return backend


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting Quiz Portal...")

    backend = _build_backend(logger)
    start_api_server(backend=backend, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Quiz API listening on http://%s:%d/", DEFAULT_HOST, DEFAULT_PORT)

    app = QApplication(sys.argv)
    client = PortalApiClient(base_url=f"http://{DEFAULT_HOST}:{DEFAULT_PORT}")
    window = StudentQuizWindow(app, client)
    window.resize(960, 720)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

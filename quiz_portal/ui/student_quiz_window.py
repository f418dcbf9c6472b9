"""Qt main window that walks a student through sign-in, the quiz and the results."""

from __future__ import annotations

import logging

from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import QApplication, QMainWindow, QStackedWidget, QVBoxLayout, QWidget

from quiz_portal.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION, INSTRUCTIONS_TEXT
from quiz_portal.constants.quiz_constants import FULLSCREEN_RETURN_GRACE_SECONDS
from quiz_portal.constants.ui_constants import (
    LOAD_FAILED_TITLE,
    LOADING_MESSAGE,
    LOADING_TITLE,
    LOGIN_FAILED_MESSAGE,
    NO_QUESTIONS_MESSAGE,
    NO_QUESTIONS_TITLE,
    RETRY_BUTTON,
    SIGN_OUT_BUTTON,
    SUBMIT_FAILED_MESSAGE,
    SUBMITTING_MESSAGE,
    SUBMITTING_TITLE,
    WINDOW_TITLE,
)
from quiz_portal.client.portal_api_client import PortalApiClient
from quiz_portal.core.errors import DataUnavailable, FullscreenUnsupported, Unauthenticated
from quiz_portal.core.services.identity import SessionIdentity
from quiz_portal.core.services.proctoring_guard import ProctoringGuard
from quiz_portal.core.services.quiz_runner import QuizRunner, RunnerState
from quiz_portal.styling.styles import Styles
from quiz_portal.ui.components.fullscreen_overlay import FullscreenOverlay
from quiz_portal.ui.components.login_panel import LoginPanel
from quiz_portal.ui.components.prompt_panel import FullscreenPromptPanel
from quiz_portal.ui.components.question_panel import QuestionPanel
from quiz_portal.ui.components.result_panel import ResultPanel
from quiz_portal.ui.components.status_panel import StatusPanel
from quiz_portal.ui.dialog_helpers import ask_continue_without_fullscreen, show_error, show_info
from quiz_portal.ui.qt_environment import QtProctoringEnvironment, QtScheduler

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


class StudentQuizWindow(QMainWindow):
    """Main window; one ``QuizRunner`` and ``ProctoringGuard`` pair per quiz session."""

    def __init__(self, app: QApplication, client: PortalApiClient) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.client = client
        self.identity = SessionIdentity()
        self.scheduler = QtScheduler(self)
        self.environment = QtProctoringEnvironment(app, self)
        self.runner: QuizRunner | None = None
        self._displayed_result_id: str | None = None

        self._build_ui()
        self._build_menu()
        self.setStyleSheet(Styles.get_main_window_style())
        self._show_login()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self.page_stack = QStackedWidget(self)
        self.login_panel = LoginPanel(on_sign_in=self._handle_sign_in, parent=self)
        self.status_panel = StatusPanel(parent=self)
        self.prompt_panel = FullscreenPromptPanel(
            FULLSCREEN_RETURN_GRACE_SECONDS,
            on_enter_fullscreen=self._handle_enter_fullscreen,
            on_skip=self._handle_skip_fullscreen,
            parent=self,
        )
        self.question_panel = QuestionPanel(on_next=self._handle_next, parent=self)
        self.result_panel = ResultPanel(on_sign_out=self._sign_out, parent=self)

        for page in (
            self.login_panel,
            self.status_panel,
            self.prompt_panel,
            self.question_panel,
            self.result_panel,
        ):
            self.page_stack.addWidget(page)
        root_layout.addWidget(self.page_stack)

        self.overlay = FullscreenOverlay(on_return=self._handle_return_to_fullscreen, parent=central_widget)

    def _build_menu(self) -> None:
        help_menu = self.menuBar().addMenu("&Help")

        instructions_action = QAction("Instructions", self)
        instructions_action.triggered.connect(
            lambda: show_info(self, "Instructions", INSTRUCTIONS_TEXT)
        )
        help_menu.addAction(instructions_action)

        about_action = QAction(f"About {APP_NAME}", self)
        about_action.triggered.connect(
            lambda: show_info(self, f"About {APP_NAME} {APP_VERSION}", APP_ABOUT_TEXT)
        )
        help_menu.addAction(about_action)

    # --- Session lifecycle ---

    def _handle_sign_in(self, email: str, password: str) -> None:
        try:
            user, token = self.client.sign_in(email, password)
        except Unauthenticated:
            self.login_panel.set_error(LOGIN_FAILED_MESSAGE)
            return
        except DataUnavailable as exc:
            self.login_panel.set_error(str(exc))
            return
        logger.info("Signed in as %s", user.email)
        self.identity.establish(user, token)
        self._start_session()

    def _start_session(self) -> None:
        self._discard_runner()
        guard = ProctoringGuard(self.environment, self.scheduler)
        self.runner = QuizRunner(
            self.client,
            self.client,
            self.identity,
            guard,
            self.scheduler,
            on_update=self._refresh,
            exit_countdown_display=self.overlay.set_countdown,
        )
        self.question_panel.set_runner(self.runner)
        self._displayed_result_id = None
        self._refresh()
        # Let the loading page paint before the blocking fetch.
        QTimer.singleShot(0, self._load_questions)

    def _load_questions(self) -> None:
        if self.runner is None:
            return
        try:
            self.runner.load_questions()
        except Unauthenticated:
            self._handle_session_expired()
        except DataUnavailable as exc:
            logger.warning("Question loading failed: %s", exc)

    def _sign_out(self) -> None:
        self._discard_runner()
        if self.identity.is_signed_in():
            try:
                self.client.sign_out(self.identity.get_token())
            except (DataUnavailable, Unauthenticated) as exc:
                logger.warning("Sign-out request failed: %s", exc)
        self.identity.clear()
        self._show_login()

    def _handle_session_expired(self) -> None:
        self._discard_runner()
        self.identity.clear()
        self._show_login()
        self.login_panel.set_error(SESSION_EXPIRED_MESSAGE)

    def _discard_runner(self) -> None:
        if self.runner is not None:
            self.runner.teardown()
        self.runner = None
        self.question_panel.set_runner(None)
        self.overlay.hide()

    # --- Quiz actions ---

    def _handle_enter_fullscreen(self) -> None:
        try:
            self.runner.enter_fullscreen()
        except FullscreenUnsupported:
            if ask_continue_without_fullscreen(self):
                self.runner.continue_without_fullscreen()

    def _handle_skip_fullscreen(self) -> None:
        self.runner.continue_without_fullscreen()

    def _handle_return_to_fullscreen(self) -> None:
        try:
            self.runner.return_to_fullscreen()
        except FullscreenUnsupported as exc:
            show_error(self, "Fullscreen", str(exc))

    def _handle_next(self) -> None:
        try:
            self.runner.advance()
        except Unauthenticated:
            self._handle_session_expired()
        except DataUnavailable as exc:
            logger.warning("Submission failed: %s", exc)

    def _handle_retry(self) -> None:
        try:
            self.runner.retry()
        except Unauthenticated:
            self._handle_session_expired()
        except DataUnavailable as exc:
            logger.warning("Retry failed: %s", exc)

    # --- Rendering ---

    def _show_login(self) -> None:
        self.login_panel.reset_state()
        self.page_stack.setCurrentWidget(self.login_panel)

    def _refresh(self) -> None:
        runner = self.runner
        if runner is None:
            return
        state = runner.state

        if state is RunnerState.LOADING:
            self.status_panel.set_status(LOADING_TITLE, LOADING_MESSAGE)
            self.page_stack.setCurrentWidget(self.status_panel)
        elif state is RunnerState.LOAD_FAILED:
            self.status_panel.set_status(
                LOAD_FAILED_TITLE,
                runner.last_error or "",
                action_text=RETRY_BUTTON,
                on_action=self._handle_retry,
                is_error=True,
            )
            self.page_stack.setCurrentWidget(self.status_panel)
        elif state is RunnerState.NO_QUESTIONS:
            self.status_panel.set_status(
                NO_QUESTIONS_TITLE,
                NO_QUESTIONS_MESSAGE,
                action_text=SIGN_OUT_BUTTON,
                on_action=self._sign_out,
            )
            self.page_stack.setCurrentWidget(self.status_panel)
        elif state is RunnerState.AWAITING_FULLSCREEN:
            self.prompt_panel.set_question_count(runner.total_questions)
            self.page_stack.setCurrentWidget(self.prompt_panel)
        elif state is RunnerState.IN_PROGRESS:
            self.question_panel.refresh()
            self.page_stack.setCurrentWidget(self.question_panel)
        elif state is RunnerState.SUBMITTING:
            self._show_submitting(runner)
        elif state is RunnerState.COMPLETED:
            self._show_result(runner)
        elif state is RunnerState.SIGNED_OUT:
            QTimer.singleShot(0, self._handle_session_expired)
            return

        if state is RunnerState.IN_PROGRESS and runner.fullscreen_warning_visible:
            self.overlay.show_overlay()
        else:
            self.overlay.hide()

    def _show_submitting(self, runner: QuizRunner) -> None:
        if runner.last_error and not runner.is_submitting:
            self.status_panel.set_status(
                SUBMITTING_TITLE,
                f"{SUBMIT_FAILED_MESSAGE}\n\n{runner.last_error}",
                action_text=RETRY_BUTTON,
                on_action=self._handle_retry,
                is_error=True,
            )
        else:
            self.status_panel.set_status(SUBMITTING_TITLE, SUBMITTING_MESSAGE)
        self.page_stack.setCurrentWidget(self.status_panel)

    def _show_result(self, runner: QuizRunner) -> None:
        result = runner.result
        if result is None or result.result_id == self._displayed_result_id:
            return
        self._displayed_result_id = result.result_id
        try:
            previous = runner.recent_attempts()
        except (DataUnavailable, Unauthenticated) as exc:
            logger.warning("Could not load previous attempts: %s", exc)
            previous = []
        self.result_panel.show_result(result, previous)
        self.page_stack.setCurrentWidget(self.result_panel)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self._discard_runner()
        self.environment.detach()
        super().closeEvent(event)

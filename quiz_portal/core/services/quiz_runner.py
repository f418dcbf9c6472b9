"""State machine that takes one student through a timed, proctored quiz."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum, auto
import logging
import random
from typing import Callable

from quiz_portal.constants.quiz_constants import (
    COUNTDOWN_TICK_SECONDS,
    FULLSCREEN_RETURN_GRACE_SECONDS,
    RECENT_ATTEMPTS_LIMIT,
    TIME_RUNNING_OUT_SECONDS,
)
from quiz_portal.core.collaborators import IdentityProvider, QuestionBank, ResultStore
from quiz_portal.core.errors import DataUnavailable, FullscreenUnsupported, Unauthenticated
from quiz_portal.core.models import AnswerRecord, Question, QuizResult, QuizUser
from quiz_portal.core.scheduler import Scheduler, TimerHandle
from quiz_portal.core.scoring import score_answer, summarize
from quiz_portal.core.services.proctoring_guard import ProctoringGuard

logger = logging.getLogger(__name__)


class RunnerState(Enum):
    """High-level phase of a quiz session."""

    LOADING = auto()
    LOAD_FAILED = auto()
    NO_QUESTIONS = auto()
    AWAITING_FULLSCREEN = auto()
    IN_PROGRESS = auto()
    SUBMITTING = auto()
    COMPLETED = auto()
    SIGNED_OUT = auto()


class QuizRunner:
    """Drives question order, the per-question countdown, answers and submission.

    Navigation is forward-only: ``advance`` is the only way to leave a
    question, whether the student clicks next or the countdown runs out.
    Proctoring is delegated to the ``ProctoringGuard``; its repeated-violation
    and fullscreen-timeout callbacks both end in ``submit``.
    """

    def __init__(
        self,
        question_bank: QuestionBank,
        result_store: ResultStore,
        identity: IdentityProvider,
        guard: ProctoringGuard,
        scheduler: Scheduler,
        *,
        rng: random.Random | None = None,
        fullscreen_grace_seconds: int = FULLSCREEN_RETURN_GRACE_SECONDS,
        on_update: Callable[[], None] | None = None,
        exit_countdown_display: Callable[[int], None] | None = None,
    ) -> None:
        self._question_bank = question_bank
        self._result_store = result_store
        self._identity = identity
        self._guard = guard
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._fullscreen_grace_seconds = fullscreen_grace_seconds
        self._on_update = on_update
        self._exit_countdown_display = exit_countdown_display

        self._state = RunnerState.LOADING
        self._user: QuizUser | None = None
        self._questions: tuple[Question, ...] = ()
        self._current_index = 0
        self._selected_option: int | None = None
        self._remaining_seconds = 0
        self._answers: list[AnswerRecord] = []
        self._submitting = False
        self._timer_paused = False
        self._question_timer: TimerHandle | None = None
        self._fullscreen_required = False
        self._fullscreen_warning_visible = False
        self._result: QuizResult | None = None
        self._last_error: str | None = None

    # --- Read-only state ---

    @property
    def state(self) -> RunnerState:
        return self._state

    @property
    def user(self) -> QuizUser | None:
        return self._user

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question | None:
        if self._state is RunnerState.IN_PROGRESS and self._current_index < len(self._questions):
            return self._questions[self._current_index]
        return None

    @property
    def selected_option(self) -> int | None:
        return self._selected_option

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._answers)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def timer_paused(self) -> bool:
        return self._timer_paused

    @property
    def fullscreen_required(self) -> bool:
        return self._fullscreen_required

    @property
    def fullscreen_warning_visible(self) -> bool:
        return self._fullscreen_warning_visible

    @property
    def result(self) -> QuizResult | None:
        return self._result

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def is_time_running_out(self) -> bool:
        return self._remaining_seconds <= TIME_RUNNING_OUT_SECONDS

    def is_last_question(self) -> bool:
        return self._current_index >= len(self._questions) - 1

    def progress_percentage(self) -> float:
        if not self._questions:
            return 0.0
        return (self._current_index / len(self._questions)) * 100

    # --- Loading ---

    def load_questions(self) -> None:
        """Fetch and shuffle the question set for a new session."""
        self._stop_question_timer()
        self._set_state(RunnerState.LOADING)
        self._reset_session()
        try:
            self._user = self._identity.current_user()
            credential = self._identity.get_token()
        except Unauthenticated:
            self._set_state(RunnerState.SIGNED_OUT)
            raise

        try:
            questions = list(self._question_bank.fetch_all(credential))
        except Unauthenticated:
            self._set_state(RunnerState.SIGNED_OUT)
            raise
        except Exception as exc:
            logger.error("Error fetching questions: %s", exc)
            self._last_error = str(exc) or "Questions could not be loaded."
            self._set_state(RunnerState.LOAD_FAILED)
            if isinstance(exc, DataUnavailable):
                raise
            raise DataUnavailable("Questions could not be loaded.") from exc

        self._rng.shuffle(questions)
        self._questions = tuple(questions)
        logger.info("Loaded %d questions for %s", len(questions), self._user.email)
        if not questions:
            self._set_state(RunnerState.NO_QUESTIONS)
        else:
            self._set_state(RunnerState.AWAITING_FULLSCREEN)

    # --- Starting ---

    def enter_fullscreen(self) -> None:
        """Switch to fullscreen and start the quiz with fullscreen enforced."""
        self._require_state(RunnerState.AWAITING_FULLSCREEN)
        try:
            self._guard.enter_fullscreen()
        except FullscreenUnsupported:
            logger.warning("Failed to enter fullscreen")
            raise
        self._start_quiz(fullscreen_required=True)

    def continue_without_fullscreen(self) -> None:
        self._require_state(RunnerState.AWAITING_FULLSCREEN)
        logger.info("Quiz started without fullscreen enforcement")
        self._start_quiz(fullscreen_required=False)

    def return_to_fullscreen(self) -> None:
        """Re-request fullscreen while the exit countdown is running."""
        self._guard.enter_fullscreen()

    def _start_quiz(self, fullscreen_required: bool) -> None:
        self._fullscreen_required = fullscreen_required
        if fullscreen_required:
            self._guard.setup_fullscreen_security(
                on_exit=self._handle_fullscreen_exit,
                on_return=self._handle_fullscreen_return,
                on_timeout=self._handle_security_submission,
                timer_display=self._exit_countdown_display,
                pause_timer=self.pause_timer,
                resume_timer=self.resume_timer,
                countdown_time=self._fullscreen_grace_seconds,
            )
        self._guard.activate(self._handle_security_submission, fullscreen_required)
        self._current_index = 0
        self._set_state(RunnerState.IN_PROGRESS)
        self._begin_question()

    # --- Answering ---

    def select_option(self, index: int) -> None:
        question = self.current_question
        if question is None:
            raise RuntimeError("No question is currently active.")
        if not 0 <= index < len(question.options):
            raise ValueError(f"Option index {index} out of range")
        self._selected_option = index
        self._notify()

    def advance(self) -> QuizResult | None:
        """Record the active question's answer and move on, submitting after the last."""
        if self._state is not RunnerState.IN_PROGRESS or self._submitting:
            logger.debug("Ignoring advance outside an active question")
            return None
        question = self.current_question
        if question is None:
            return None

        self._stop_question_timer()
        self._answers.append(score_answer(question, self._selected_option))
        self._current_index += 1
        self._selected_option = None

        if self._current_index < len(self._questions):
            self._begin_question()
            return None
        return self.submit()

    def _begin_question(self) -> None:
        question = self._questions[self._current_index]
        self._remaining_seconds = question.time_limit_seconds
        self._selected_option = None
        if not self._timer_paused:
            self._start_question_timer()
        self._notify()

    # --- Question countdown ---

    def pause_timer(self) -> None:
        if self._timer_paused:
            return
        self._timer_paused = True
        self._stop_question_timer()
        self._notify()

    def resume_timer(self) -> None:
        if not self._timer_paused:
            return
        self._timer_paused = False
        if self.current_question is not None and self._remaining_seconds > 0:
            self._start_question_timer()
        self._notify()

    def _start_question_timer(self) -> None:
        self._stop_question_timer()
        self._question_timer = self._scheduler.call_repeating(COUNTDOWN_TICK_SECONDS, self._tick)

    def _stop_question_timer(self) -> None:
        if self._question_timer is not None:
            self._question_timer.cancel()
            self._question_timer = None

    def _tick(self) -> None:
        if self._question_timer is None or self._timer_paused:
            return
        if self._state is not RunnerState.IN_PROGRESS:
            self._stop_question_timer()
            return

        self._remaining_seconds -= 1
        if self._remaining_seconds > 0:
            self._notify()
            return

        self._remaining_seconds = 0
        self._stop_question_timer()
        logger.info("Time expired on question %d", self._current_index + 1)
        try:
            self.advance()
        except (DataUnavailable, Unauthenticated) as exc:
            logger.error("Automatic submission failed: %s", exc)

    # --- Fullscreen callbacks ---

    def _handle_fullscreen_exit(self) -> None:
        if self._state is not RunnerState.IN_PROGRESS:
            return
        self._fullscreen_warning_visible = True
        self.pause_timer()

    def _handle_fullscreen_return(self) -> None:
        self._fullscreen_warning_visible = False
        self.resume_timer()

    def _handle_security_submission(self) -> None:
        logger.warning("Quiz auto-submitted due to security violation")
        try:
            self.submit()
        except (DataUnavailable, Unauthenticated) as exc:
            logger.error("Security submission failed: %s", exc)

    # --- Submission ---

    def submit(self) -> QuizResult | None:
        """Score the recorded answers and persist one result document.

        Returns ``None`` when a submission is already running. On a storage
        failure the recorded answers are kept and ``submit`` may be retried.
        """
        if self._submitting:
            logger.debug("Duplicate submission suppressed")
            return None
        if self._state is RunnerState.COMPLETED:
            return self._result
        if self._state not in (RunnerState.IN_PROGRESS, RunnerState.SUBMITTING):
            raise RuntimeError(f"Cannot submit a quiz in state {self._state.name}.")

        self._submitting = True
        self._stop_question_timer()
        self._last_error = None
        # The fullscreen overlay and pause only apply while a question is active.
        self._fullscreen_warning_visible = False
        self._timer_paused = False
        self._set_state(RunnerState.SUBMITTING)

        answers = tuple(self._answers)
        try:
            user = self._identity.current_user()
            credential = self._identity.get_token()
            summary = summarize(answers, len(self._questions))
            result = QuizResult(
                user_id=user.user_id,
                user_email=user.email,
                answers=answers,
                total_points=summary.total_points,
                max_possible_points=summary.max_possible_points,
                score_percentage=summary.score_percentage,
                correct_answers=summary.correct_answers,
                total_questions=summary.total_questions,
                answered_questions=summary.answered_questions,
                completed_at=datetime.now(timezone.utc),
            )
            result_id = self._result_store.append_result(result, credential)
        except Unauthenticated:
            self._submitting = False
            self._last_error = "Your session has expired. Please sign in again."
            self._set_state(RunnerState.SIGNED_OUT)
            self._release_proctoring()
            raise
        except Exception as exc:
            logger.error("Error submitting quiz: %s", exc)
            self._submitting = False
            self._last_error = str(exc) or "The quiz result could not be saved."
            self._notify()
            if isinstance(exc, DataUnavailable):
                raise
            raise DataUnavailable("The quiz result could not be saved.") from exc

        self._result = replace(result, result_id=result_id)
        logger.info(
            "Quiz submitted for %s: %d/%d points (%.1f%%)",
            user.email,
            result.total_points,
            result.max_possible_points,
            result.score_percentage,
        )
        self._release_proctoring()
        self._submitting = False
        self._set_state(RunnerState.COMPLETED)
        return self._result

    def retry(self) -> None:
        """Repeat whichever collaborator call failed last."""
        if self._state is RunnerState.LOAD_FAILED:
            self.load_questions()
        elif self._state is RunnerState.SUBMITTING and not self._submitting:
            self.submit()

    def recent_attempts(self, limit: int = RECENT_ATTEMPTS_LIMIT) -> list[QuizResult]:
        """Previous results of the signed-in user, excluding this session's result."""
        user = self._identity.current_user()
        credential = self._identity.get_token()
        fetched = self._result_store.recent_results(user.user_id, limit + 1, credential)
        current_id = self._result.result_id if self._result is not None else None
        return [r for r in fetched if current_id is None or r.result_id != current_id][:limit]

    def teardown(self) -> None:
        """Cancel timers and release proctoring when the session view goes away."""
        self._stop_question_timer()
        self._guard.deactivate()

    # --- Internals ---

    def _release_proctoring(self) -> None:
        self._guard.deactivate()
        self._fullscreen_warning_visible = False
        self._timer_paused = False
        if self._guard.check_fullscreen():
            try:
                self._guard.exit_fullscreen()
            except FullscreenUnsupported:
                logger.warning("Could not leave fullscreen after submission")

    def _reset_session(self) -> None:
        self._questions = ()
        self._current_index = 0
        self._selected_option = None
        self._remaining_seconds = 0
        self._answers = []
        self._submitting = False
        self._timer_paused = False
        self._fullscreen_required = False
        self._fullscreen_warning_visible = False
        self._result = None
        self._last_error = None

    def _require_state(self, expected: RunnerState) -> None:
        if self._state is not expected:
            raise RuntimeError(f"Expected state {expected.name}, quiz is {self._state.name}.")

    def _set_state(self, state: RunnerState) -> None:
        self._state = state
        self._notify()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update()

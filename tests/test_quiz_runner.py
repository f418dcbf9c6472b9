"""Tests for the quiz runner state machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import random

import pytest

from quiz_portal.constants.quiz_constants import NO_SELECTION, NO_SELECTION_TEXT
from quiz_portal.core.errors import DataUnavailable, FullscreenUnsupported, Unauthenticated
from quiz_portal.core.models import QuizResult
from quiz_portal.core.services.proctoring_environment import HeadlessEnvironment
from quiz_portal.core.services.proctoring_guard import ProctoringGuard
from quiz_portal.core.services.question_bank import InMemoryQuestionBank
from quiz_portal.core.services.quiz_runner import RunnerState
from quiz_portal.core.services.result_store import InMemoryResultStore

from conftest import STUDENT, make_question


class FailingBank:
    """Raises ``exc`` until it is cleared, then serves ``questions``."""

    def __init__(self, exc: Exception | None, questions=()) -> None:
        self.exc = exc
        self.questions = list(questions)
        self.calls = 0

    def fetch_all(self, credential=None):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return list(self.questions)


class FlakyStore(InMemoryResultStore):
    """Fails the first ``failures`` appends."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures

    def append_result(self, result, credential=None):
        if self.failures > 0:
            self.failures -= 1
            raise DataUnavailable("storage offline")
        return super().append_result(result, credential)


class ReentrantStore(InMemoryResultStore):
    """Calls back into ``submit`` while the first write is in flight."""

    def __init__(self) -> None:
        super().__init__()
        self.runner = None
        self.inner_results: list = []

    def append_result(self, result, credential=None):
        self.inner_results.append(self.runner.submit())
        return super().append_result(result, credential)


def _started(make_runner, **overrides):
    runner = make_runner(**overrides)
    runner.load_questions()
    runner.continue_without_fullscreen()
    return runner


def _old_result(user_id: str, days_ago: int, pct: float) -> QuizResult:
    return QuizResult(
        user_id=user_id,
        user_email=f"{user_id}@example.com",
        answers=(),
        total_points=0,
        max_possible_points=0,
        score_percentage=pct,
        correct_answers=0,
        total_questions=0,
        answered_questions=0,
        completed_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
    )


def test_load_questions_awaits_fullscreen(make_runner):
    runner = make_runner()
    assert runner.state is RunnerState.LOADING

    runner.load_questions()

    assert runner.state is RunnerState.AWAITING_FULLSCREEN
    assert runner.total_questions == 3
    assert runner.user == STUDENT
    assert runner.current_question is None


def test_scoring_follows_points_of_each_question(make_runner, result_store):
    runner = _started(make_runner)

    runner.select_option(0)
    assert runner.advance() is None
    runner.select_option(0)
    runner.advance()
    runner.select_option(2)
    result = runner.advance()

    assert runner.state is RunnerState.COMPLETED
    assert result is runner.result
    assert result.total_points == 4
    assert result.max_possible_points == 6
    assert result.score_percentage == pytest.approx(66.67, abs=0.01)
    assert result.correct_answers == 2
    assert result.answered_questions == 3
    assert result.total_questions == 3
    assert result.user_id == STUDENT.user_id
    assert result.result_id is not None
    assert result_store.get_result_count() == 1
    assert [a.is_correct for a in result.answers] == [True, False, True]


def test_answers_track_current_index(make_runner):
    runner = _started(make_runner)
    for expected in range(3):
        assert len(runner.answers) == runner.current_index == expected
        runner.advance()
    assert len(runner.answers) == runner.current_index == 3


def test_selection_can_change_until_advance(make_runner):
    runner = _started(make_runner)
    runner.select_option(3)
    runner.select_option(0)
    runner.advance()

    assert runner.answers[0].selected_option_index == 0
    assert runner.selected_option is None


def test_select_option_validation(make_runner):
    runner = make_runner()
    runner.load_questions()
    with pytest.raises(RuntimeError):
        runner.select_option(0)

    runner.continue_without_fullscreen()
    with pytest.raises(ValueError):
        runner.select_option(4)
    with pytest.raises(ValueError):
        runner.select_option(-1)


def test_timer_expiry_advances_exactly_once(make_runner, scheduler):
    runner = _started(make_runner)
    assert runner.remaining_seconds == 30

    scheduler.advance(29)
    assert runner.current_index == 0
    assert runner.remaining_seconds == 1
    assert runner.is_time_running_out()

    scheduler.advance(1)
    assert runner.current_index == 1
    assert len(runner.answers) == 1
    assert runner.answers[0].selected_option_index == NO_SELECTION
    assert runner.answers[0].selected_text == NO_SELECTION_TEXT
    assert runner.answers[0].points_awarded == 0
    assert runner.remaining_seconds == 30

    scheduler.advance(29)
    assert runner.current_index == 1
    assert scheduler.active_timer_count() == 1


def test_pause_and_resume_during_expiry_tick_advances_once(make_runner, scheduler):
    toggled: list[bool] = []
    holder: list = []

    def toggle_on_second_question() -> None:
        runner = holder[0]
        if runner.current_index == 1 and not toggled:
            toggled.append(True)
            runner.pause_timer()
            runner.resume_timer()

    runner = make_runner(on_update=toggle_on_second_question)
    holder.append(runner)
    runner.load_questions()
    runner.continue_without_fullscreen()

    scheduler.advance(30)

    assert toggled == [True]
    assert len(runner.answers) == 1
    assert runner.current_index == 1
    assert runner.remaining_seconds == 30
    assert not runner.timer_paused
    assert scheduler.active_timer_count() == 1

    scheduler.advance(29)
    assert runner.current_index == 1
    assert runner.remaining_seconds == 1


def test_unanswered_quiz_submits_when_time_runs_out(make_runner, scheduler, result_store):
    runner = _started(make_runner)
    scheduler.advance(90)

    assert runner.state is RunnerState.COMPLETED
    assert runner.result.total_points == 0
    assert runner.result.answered_questions == 3
    assert result_store.get_result_count() == 1
    assert scheduler.active_timer_count() == 0


def test_pause_and_resume_keep_remaining_time(make_runner, scheduler):
    runner = _started(make_runner)
    scheduler.advance(10)

    runner.pause_timer()
    scheduler.advance(100)
    assert runner.remaining_seconds == 20
    assert runner.current_index == 0

    runner.resume_timer()
    scheduler.advance(19)
    assert runner.current_index == 0
    scheduler.advance(1)
    assert runner.current_index == 1


def test_duplicate_submit_inside_store_write_is_ignored(make_runner):
    store = ReentrantStore()
    runner = _started(make_runner, result_store=store)
    store.runner = runner

    result = runner.submit()

    assert store.inner_results == [None]
    assert store.get_result_count() == 1
    assert result is not None
    assert runner.state is RunnerState.COMPLETED
    assert runner.submit() is result


def test_repeated_violation_submits_partial_answers(make_runner, environment, result_store):
    runner = make_runner()
    runner.load_questions()
    runner.enter_fullscreen()
    assert environment.fullscreen_element() is not None

    runner.select_option(0)
    runner.advance()

    environment.set_hidden(True)
    assert runner.state is RunnerState.IN_PROGRESS
    environment.set_hidden(False)
    environment.set_hidden(True)

    assert runner.state is RunnerState.COMPLETED
    assert runner.result.answered_questions == 1
    assert runner.result.total_questions == 3
    assert runner.result.max_possible_points == 1
    assert runner.result.score_percentage == 100.0
    assert result_store.get_result_count() == 1
    assert environment.listener_count() == 0
    assert environment.fullscreen_element() is None


def test_warning_carries_over_between_questions(make_runner, environment):
    runner = _started(make_runner)
    environment.press("F12")
    runner.advance()
    assert runner.state is RunnerState.IN_PROGRESS

    environment.press("F12")
    assert runner.state is RunnerState.COMPLETED
    assert len(environment.warnings) == 1


def test_fullscreen_exit_pauses_and_return_resumes(make_runner, environment, scheduler):
    displayed: list[int] = []
    runner = make_runner(exit_countdown_display=displayed.append)
    runner.load_questions()
    runner.enter_fullscreen()
    scheduler.advance(5)

    environment.leave_fullscreen()
    assert runner.fullscreen_warning_visible
    assert runner.timer_paused

    scheduler.advance(3)
    assert runner.remaining_seconds == 25
    assert displayed == [10, 9, 8, 7]

    runner.return_to_fullscreen()
    assert not runner.fullscreen_warning_visible
    assert not runner.timer_paused
    scheduler.advance(1)
    assert runner.remaining_seconds == 24
    assert runner.state is RunnerState.IN_PROGRESS


def test_fullscreen_timeout_submits_once(make_runner, environment, scheduler, result_store):
    runner = make_runner()
    runner.load_questions()
    runner.enter_fullscreen()
    runner.select_option(0)
    runner.advance()

    environment.leave_fullscreen()
    scheduler.advance(9)
    assert runner.state is RunnerState.IN_PROGRESS

    scheduler.advance(1)
    assert runner.state is RunnerState.COMPLETED
    assert runner.result.answered_questions == 1
    scheduler.advance(60)
    assert result_store.get_result_count() == 1
    assert scheduler.active_timer_count() == 0


def test_failed_fullscreen_timeout_submit_leaves_retry_reachable(make_runner, environment, scheduler):
    store = FlakyStore(failures=1)
    runner = make_runner(result_store=store)
    runner.load_questions()
    runner.enter_fullscreen()
    runner.select_option(0)
    runner.advance()

    environment.leave_fullscreen()
    assert runner.fullscreen_warning_visible
    scheduler.advance(10)

    assert runner.state is RunnerState.SUBMITTING
    assert runner.last_error == "storage offline"
    assert not runner.fullscreen_warning_visible
    assert not runner.timer_paused

    runner.return_to_fullscreen()
    environment.leave_fullscreen()
    assert not runner.fullscreen_warning_visible

    runner.retry()
    assert runner.state is RunnerState.COMPLETED
    assert runner.result.answered_questions == 1
    assert store.get_result_count() == 1


def test_enter_fullscreen_unsupported_keeps_prompt(make_runner, scheduler):
    environment = HeadlessEnvironment(fullscreen_capable=False)
    guard = ProctoringGuard(environment, scheduler)
    runner = make_runner(guard=guard)
    runner.load_questions()

    with pytest.raises(FullscreenUnsupported):
        runner.enter_fullscreen()
    assert runner.state is RunnerState.AWAITING_FULLSCREEN

    runner.continue_without_fullscreen()
    assert runner.state is RunnerState.IN_PROGRESS
    assert not runner.fullscreen_required


def test_empty_question_bank(make_runner):
    runner = make_runner(question_bank=InMemoryQuestionBank())
    runner.load_questions()

    assert runner.state is RunnerState.NO_QUESTIONS
    with pytest.raises(RuntimeError):
        runner.continue_without_fullscreen()


def test_load_failure_can_be_retried(make_runner):
    failing = FailingBank(DataUnavailable("offline"), [make_question("q1")])
    runner = make_runner(question_bank=failing)

    with pytest.raises(DataUnavailable):
        runner.load_questions()
    assert runner.state is RunnerState.LOAD_FAILED
    assert runner.last_error == "offline"

    failing.exc = RuntimeError("boom")
    with pytest.raises(DataUnavailable):
        runner.retry()
    assert failing.calls == 2

    failing.exc = None
    runner.retry()
    assert runner.state is RunnerState.AWAITING_FULLSCREEN
    assert runner.total_questions == 1


def test_submit_failure_keeps_answers_and_retry_succeeds(make_runner):
    store = FlakyStore(failures=1)
    runner = _started(make_runner, result_store=store)
    runner.select_option(0)
    runner.advance()
    runner.advance()

    with pytest.raises(DataUnavailable):
        runner.advance()

    assert runner.state is RunnerState.SUBMITTING
    assert not runner.is_submitting
    assert runner.last_error == "storage offline"
    assert len(runner.answers) == 3

    runner.retry()
    assert runner.state is RunnerState.COMPLETED
    assert runner.last_error is None
    assert store.get_result_count() == 1
    assert runner.result.total_points == 1


def test_missing_sign_in_moves_to_signed_out(make_runner, identity):
    identity.clear()
    runner = make_runner()

    with pytest.raises(Unauthenticated):
        runner.load_questions()
    assert runner.state is RunnerState.SIGNED_OUT


def test_expired_session_during_submit(make_runner, identity, environment):
    runner = _started(make_runner)
    identity.clear()

    with pytest.raises(Unauthenticated):
        runner.submit()
    assert runner.state is RunnerState.SIGNED_OUT
    assert environment.listener_count() == 0


def test_recent_attempts_exclude_current_result(make_runner, result_store):
    result_store.append_result(_old_result(STUDENT.user_id, days_ago=2, pct=50.0))
    result_store.append_result(_old_result(STUDENT.user_id, days_ago=1, pct=80.0))
    result_store.append_result(_old_result("someone-else", days_ago=1, pct=10.0))

    runner = _started(make_runner)
    runner.submit()
    attempts = runner.recent_attempts(limit=5)

    assert [a.score_percentage for a in attempts] == [80.0, 50.0]
    assert all(a.result_id != runner.result.result_id for a in attempts)


def test_teardown_releases_timers_and_listeners(make_runner, environment, scheduler):
    runner = make_runner()
    runner.load_questions()
    runner.enter_fullscreen()

    runner.teardown()

    assert scheduler.active_timer_count() == 0
    assert environment.listener_count() == 0


def test_progress_and_last_question(make_runner):
    runner = _started(make_runner)
    assert runner.progress_percentage() == 0.0
    assert not runner.is_last_question()

    runner.advance()
    runner.advance()
    assert runner.is_last_question()
    assert runner.progress_percentage() == pytest.approx(66.67, abs=0.01)


def test_questions_are_shuffled_with_injected_rng(make_runner):
    runner = make_runner(rng=random.Random(7))
    runner.load_questions()

    assert sorted(q.id for q in runner.questions) == ["q1", "q2", "q3"]


def test_on_update_is_called_on_ticks(make_runner, scheduler):
    updates: list[int] = []
    runner = make_runner(on_update=lambda: updates.append(1))
    runner.load_questions()
    runner.continue_without_fullscreen()
    before = len(updates)

    scheduler.advance(3)
    assert len(updates) == before + 3


def test_single_question_with_custom_points(scheduler, make_runner):
    bank = InMemoryQuestionBank()
    bank.load_questions([make_question("solo", correct=3, points=5, time_limit=10)])
    runner = _started(make_runner, question_bank=bank)
    assert runner.is_last_question()

    runner.select_option(3)
    scheduler.advance(10)

    assert runner.state is RunnerState.COMPLETED
    assert runner.result.total_points == 5
    assert runner.result.score_percentage == 100.0

"""Tests for the proctoring guard's warning policy and fullscreen grace period."""

from __future__ import annotations

import pytest

from quiz_portal.constants.quiz_constants import LEAVE_QUIZ_PROMPT, NAVIGATION_WARNING_MESSAGE
from quiz_portal.core.errors import FullscreenUnsupported
from quiz_portal.core.services.proctoring_environment import GuardEvent, HeadlessEnvironment, KeyStroke
from quiz_portal.core.services.proctoring_guard import ProctoringGuard, is_blocked_key


class Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.displayed: list[int] = []

    def hook(self, name: str):
        return lambda: self.calls.append(name)

    def count(self, name: str) -> int:
        return self.calls.count(name)


def _secure(guard: ProctoringGuard, recorder: Recorder, countdown: int = 10) -> None:
    guard.setup_fullscreen_security(
        on_exit=recorder.hook("exit"),
        on_return=recorder.hook("return"),
        on_timeout=recorder.hook("timeout"),
        timer_display=recorder.displayed.append,
        pause_timer=recorder.hook("pause"),
        resume_timer=recorder.hook("resume"),
        countdown_time=countdown,
    )


def test_first_violation_warns_and_second_forces_submission(guard, environment):
    violations: list[str] = []
    guard.activate(lambda: violations.append("submit"), fullscreen_required=False)

    environment.set_hidden(True)
    assert guard.warning_shown
    assert environment.warnings == [NAVIGATION_WARNING_MESSAGE]
    assert violations == []

    environment.set_hidden(False)
    assert violations == []

    environment.set_hidden(True)
    assert violations == ["submit"]
    assert len(environment.warnings) == 1


def test_blocked_shortcut_is_prevented_and_counts_as_violation(guard, environment):
    violations: list[str] = []
    guard.activate(lambda: violations.append("submit"), fullscreen_required=False)

    event = environment.press("Tab", alt=True)
    assert event.default_prevented
    assert guard.warning_shown

    harmless = environment.press("a")
    assert not harmless.default_prevented
    assert violations == []

    environment.press("I", ctrl=True, shift=True)
    assert violations == ["submit"]


@pytest.mark.parametrize(
    ("stroke", "blocked"),
    [
        (KeyStroke("Tab", alt=True), True),
        (KeyStroke("F4", alt=True), True),
        (KeyStroke("Tab", ctrl=True), True),
        (KeyStroke("F12"), True),
        (KeyStroke("i", ctrl=True, shift=True), True),
        (KeyStroke("Tab"), False),
        (KeyStroke("I", ctrl=True), False),
        (None, False),
    ],
)
def test_is_blocked_key(stroke, blocked):
    assert is_blocked_key(stroke) is blocked


def test_context_menu_and_unload_are_prevented(guard, environment):
    guard.activate(lambda: None, fullscreen_required=False)

    assert environment.open_context_menu().default_prevented
    unload = environment.attempt_unload()
    assert unload.default_prevented
    assert unload.return_value == LEAVE_QUIZ_PROMPT
    assert environment.warnings == []


def test_deactivate_removes_listeners_and_is_repeatable(guard, environment):
    violations: list[str] = []
    guard.activate(lambda: violations.append("submit"), fullscreen_required=True)
    assert environment.listener_count() == 5

    guard.deactivate()
    guard.deactivate()

    assert environment.listener_count() == 0
    assert not guard.is_active()
    assert not guard.warning_shown
    environment.set_hidden(True)
    environment.set_hidden(True)
    assert violations == []
    assert not environment.open_context_menu().default_prevented


def test_deactivate_before_activate_is_harmless(guard, environment):
    guard.deactivate()
    assert environment.listener_count() == 0


def test_activate_twice_raises(guard):
    guard.activate(lambda: None)
    with pytest.raises(RuntimeError):
        guard.activate(lambda: None)


def test_guard_can_be_reactivated_after_deactivate(guard, environment):
    guard.activate(lambda: None, fullscreen_required=False)
    environment.set_hidden(True)
    guard.deactivate()

    guard.activate(lambda: None, fullscreen_required=False)
    assert not guard.warning_shown
    assert environment.listener_count() == 4


def test_enter_fullscreen_without_support_raises(scheduler):
    environment = HeadlessEnvironment(fullscreen_capable=False)
    guard = ProctoringGuard(environment, scheduler)

    with pytest.raises(FullscreenUnsupported):
        guard.enter_fullscreen()
    with pytest.raises(FullscreenUnsupported):
        guard.exit_fullscreen()
    assert not guard.check_fullscreen()


def test_return_within_grace_period_resumes(guard, environment, scheduler):
    recorder = Recorder()
    guard.enter_fullscreen()
    _secure(guard, recorder)
    guard.activate(recorder.hook("violation"))

    environment.leave_fullscreen()
    assert recorder.calls == ["exit", "pause"]
    assert guard.exit_fullscreen_time is not None
    assert guard.countdown_active

    scheduler.advance(7)
    assert recorder.displayed == [10, 9, 8, 7, 6, 5, 4, 3]
    assert guard.countdown_remaining == 3

    guard.enter_fullscreen()
    assert recorder.calls == ["exit", "pause", "return", "resume"]
    assert not guard.countdown_active
    assert scheduler.active_timer_count() == 0

    scheduler.advance(30)
    assert recorder.count("timeout") == 0
    assert recorder.count("violation") == 0


def test_grace_period_expiry_fires_timeout_exactly_once(guard, environment, scheduler):
    recorder = Recorder()
    guard.enter_fullscreen()
    _secure(guard, recorder)
    guard.activate(recorder.hook("violation"))

    environment.leave_fullscreen()
    scheduler.advance(9)
    assert recorder.count("timeout") == 0
    assert recorder.displayed[-1] == 1

    scheduler.advance(1)
    assert recorder.count("timeout") == 1
    assert guard.is_expired()
    assert recorder.displayed[-1] == 0

    scheduler.advance(30)
    guard.enter_fullscreen()
    environment.leave_fullscreen()
    scheduler.advance(30)
    assert recorder.count("timeout") == 1
    assert recorder.count("return") == 0


def test_expiry_falls_back_to_violation_callback(guard, environment, scheduler):
    violations: list[str] = []
    guard.enter_fullscreen()
    guard.setup_fullscreen_security(countdown_time=2)
    guard.activate(lambda: violations.append("submit"))

    environment.leave_fullscreen()
    scheduler.advance(2)
    assert violations == ["submit"]


def test_leaving_fullscreen_twice_restarts_countdown_from_full(guard, environment, scheduler):
    recorder = Recorder()
    guard.enter_fullscreen()
    _secure(guard, recorder, countdown=5)
    guard.activate(recorder.hook("violation"))

    environment.leave_fullscreen()
    scheduler.advance(4)
    guard.enter_fullscreen()
    environment.leave_fullscreen()
    assert guard.countdown_remaining == 5

    scheduler.advance(4)
    assert recorder.count("timeout") == 0
    scheduler.advance(1)
    assert recorder.count("timeout") == 1


def test_fullscreen_change_ignored_when_not_required(guard, environment, scheduler):
    recorder = Recorder()
    guard.activate(recorder.hook("violation"), fullscreen_required=False)

    environment.request_fullscreen()
    environment.leave_fullscreen()
    scheduler.advance(20)

    assert environment.listener_count(GuardEvent.FULLSCREEN_CHANGE) == 0
    assert recorder.calls == []


def test_deactivate_cancels_running_countdown(guard, environment, scheduler):
    recorder = Recorder()
    guard.enter_fullscreen()
    _secure(guard, recorder)
    guard.activate(recorder.hook("violation"))

    environment.leave_fullscreen()
    guard.deactivate()
    scheduler.advance(30)

    assert recorder.count("timeout") == 0
    assert scheduler.active_timer_count() == 0


def test_setup_rejects_non_positive_countdown(guard):
    with pytest.raises(ValueError):
        guard.setup_fullscreen_security(countdown_time=0)

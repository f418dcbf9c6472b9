"""Anti-cheat enforcement for a running quiz session.

The guard watches the environment for actions that suggest the test-taker is
trying to leave the quiz. The first violation only shows a warning; every
later one calls the violation callback, which the quiz runner wires to an
immediate submission.

Fullscreen sub-policy::

    InFullscreen --exit--> ExitedGrace(n) --tick--> ExitedGrace(n-1)
    ExitedGrace(n) --return--> InFullscreen
    ExitedGrace(0) --> Expired (on_timeout fired, terminal)

The grace countdown runs off a single repeating scheduler tick. A monotonic
deadline is checked on that same tick so a delayed tick cannot stretch the
grace period, but it never fires the timeout on its own.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Callable

from quiz_portal.constants.quiz_constants import (
    COUNTDOWN_TICK_SECONDS,
    DEFAULT_FULLSCREEN_COUNTDOWN_SECONDS,
    LEAVE_QUIZ_PROMPT,
    NAVIGATION_WARNING_MESSAGE,
)
from quiz_portal.core.errors import FullscreenUnsupported
from quiz_portal.core.scheduler import Scheduler, TimerHandle
from quiz_portal.core.services.proctoring_environment import (
    EnvironmentEvent,
    GuardEvent,
    KeyStroke,
    Listener,
    ProctoringEnvironment,
)

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


def is_blocked_key(stroke: KeyStroke | None) -> bool:
    """Return True for shortcuts that switch windows, close them or open dev tools."""
    if stroke is None:
        return False
    key = stroke.key
    blocked = (
        stroke.alt and key == "Tab",
        stroke.alt and key == "F4",
        stroke.ctrl and key == "Tab",
        key == "F12",
        stroke.ctrl and stroke.shift and key.upper() == "I",
    )
    return any(blocked)


class ProctoringGuard:
    """Owns environment listeners, the warning policy and the fullscreen grace period."""

    def __init__(self, environment: ProctoringEnvironment, scheduler: Scheduler) -> None:
        self._environment = environment
        self._scheduler = scheduler
        self._fullscreen_supported = environment.supports_fullscreen()

        self._active = False
        self._listeners: list[tuple[GuardEvent, Listener]] = []
        self._on_violation: Callback | None = None

        self.warning_shown = False
        self.exit_fullscreen_time: datetime | None = None
        self._fullscreen_required = False
        self._is_fullscreen = False
        self._expired = False

        self._on_exit: Callback | None = None
        self._on_return: Callback | None = None
        self._on_timeout: Callback | None = None
        self._timer_display: Callable[[int], None] | None = None
        self._pause_timer: Callback | None = None
        self._resume_timer: Callback | None = None
        self._countdown_seconds = DEFAULT_FULLSCREEN_COUNTDOWN_SECONDS

        self._countdown_timer: TimerHandle | None = None
        self._countdown_remaining: int | None = None
        self._countdown_deadline: float | None = None

    # --- Lifecycle ---

    def activate(self, on_second_violation: Callback, fullscreen_required: bool = True) -> None:
        """Register every listener; must be paired with ``deactivate``."""
        if self._active:
            raise RuntimeError("Proctoring guard is already active.")
        self._active = True
        self._on_violation = on_second_violation
        self._fullscreen_required = fullscreen_required

        self._listen(GuardEvent.VISIBILITY_CHANGE, self._handle_visibility_change)
        self._listen(GuardEvent.CONTEXT_MENU, self._handle_context_menu)
        self._listen(GuardEvent.KEY_DOWN, self._handle_key_down)
        self._listen(GuardEvent.BEFORE_UNLOAD, self._handle_before_unload)

        if fullscreen_required:
            self._is_fullscreen = self.check_fullscreen()
            self._listen(GuardEvent.FULLSCREEN_CHANGE, self._handle_fullscreen_event)
        logger.info("Proctoring activated (fullscreen required: %s)", fullscreen_required)

    def deactivate(self) -> None:
        """Remove all listeners and reset to the initial state."""
        for kind, listener in self._listeners:
            self._environment.remove_listener(kind, listener)
        self._listeners = []

        self._clear_countdown()

        was_active = self._active
        self._active = False
        self.warning_shown = False
        self._on_violation = None
        self._fullscreen_required = False
        self._is_fullscreen = False
        self._expired = False
        self._on_exit = None
        self._on_return = None
        self._on_timeout = None
        self._timer_display = None
        self._pause_timer = None
        self._resume_timer = None
        if was_active:
            logger.info("Proctoring deactivated")

    def is_active(self) -> bool:
        return self._active

    def is_expired(self) -> bool:
        return self._expired

    def setup_fullscreen_security(
        self,
        *,
        on_exit: Callback | None = None,
        on_return: Callback | None = None,
        on_timeout: Callback | None = None,
        timer_display: Callable[[int], None] | None = None,
        pause_timer: Callback | None = None,
        resume_timer: Callback | None = None,
        countdown_time: int = DEFAULT_FULLSCREEN_COUNTDOWN_SECONDS,
    ) -> None:
        if countdown_time <= 0:
            raise ValueError("Fullscreen countdown must be a positive number of seconds.")
        self._on_exit = on_exit
        self._on_return = on_return
        self._on_timeout = on_timeout
        self._timer_display = timer_display
        self._pause_timer = pause_timer
        self._resume_timer = resume_timer
        self._countdown_seconds = countdown_time

    # --- Violations ---

    def trigger_warning(self) -> None:
        """Warn on the first violation; force submission on every later one."""
        if not self.warning_shown:
            self.warning_shown = True
            logger.warning("First proctoring violation; warning shown")
            self._environment.show_warning(NAVIGATION_WARNING_MESSAGE)
        elif self._on_violation is not None:
            logger.warning("Repeated proctoring violation; forcing submission")
            self._on_violation()

    def _handle_visibility_change(self, event: EnvironmentEvent) -> None:
        if self._environment.is_hidden():
            self.trigger_warning()

    def _handle_context_menu(self, event: EnvironmentEvent) -> None:
        event.prevent_default()

    def _handle_key_down(self, event: EnvironmentEvent) -> None:
        if is_blocked_key(event.key):
            event.prevent_default()
            logger.info("Blocked key combination %s", event.key)
            self.trigger_warning()

    def _handle_before_unload(self, event: EnvironmentEvent) -> None:
        event.prevent_default()
        event.return_value = LEAVE_QUIZ_PROMPT

    # --- Fullscreen ---

    def enter_fullscreen(self, element: object | None = None) -> None:
        """Request fullscreen on ``element`` (the whole window when omitted)."""
        if not self._fullscreen_supported:
            raise FullscreenUnsupported("Fullscreen API not supported")
        self._is_fullscreen = True
        try:
            self._environment.request_fullscreen(element)
        except FullscreenUnsupported:
            self._is_fullscreen = False
            raise

    def exit_fullscreen(self) -> None:
        if not self._fullscreen_supported:
            raise FullscreenUnsupported("Fullscreen API not supported")
        self._is_fullscreen = False
        self._environment.exit_fullscreen()

    def check_fullscreen(self) -> bool:
        return self._environment.fullscreen_element() is not None

    def _handle_fullscreen_event(self, event: EnvironmentEvent) -> None:
        self.handle_fullscreen_change()

    def handle_fullscreen_change(self) -> None:
        if self._expired:
            return

        if self.check_fullscreen():
            self._is_fullscreen = True
            self._clear_countdown()
            if self._on_return is not None:
                self._on_return()
            if self._resume_timer is not None:
                self._resume_timer()
        elif self._is_fullscreen:
            self._is_fullscreen = False
            self.exit_fullscreen_time = datetime.now(timezone.utc)
            logger.warning("Fullscreen exited during quiz")
            if self._on_exit is not None:
                self._on_exit()
            if self._pause_timer is not None:
                self._pause_timer()
            self._start_countdown()

    # --- Grace countdown ---

    @property
    def countdown_active(self) -> bool:
        return self._countdown_timer is not None

    @property
    def countdown_remaining(self) -> int | None:
        return self._countdown_remaining

    def _start_countdown(self) -> None:
        self._clear_countdown()
        self._countdown_remaining = self._countdown_seconds
        self._countdown_deadline = self._scheduler.monotonic() + self._countdown_seconds
        self._update_timer_display()
        self._countdown_timer = self._scheduler.call_repeating(COUNTDOWN_TICK_SECONDS, self._tick_countdown)
        logger.info("Started fullscreen return countdown (%ss)", self._countdown_seconds)

    def _tick_countdown(self) -> None:
        if self._countdown_timer is None or self._countdown_remaining is None:
            return
        self._countdown_remaining -= 1
        self._update_timer_display()

        deadline_passed = (
            self._countdown_deadline is not None
            and self._scheduler.monotonic() >= self._countdown_deadline
        )
        if self._countdown_remaining > 0 and not deadline_passed:
            return

        self._clear_countdown()
        if not self.check_fullscreen():
            self._expire()

    def _expire(self) -> None:
        if self._expired:
            return
        self._expired = True
        callback = self._on_timeout or self._on_violation
        logger.warning("Fullscreen return countdown expired; submitting quiz")
        if callback is not None:
            callback()

    def _update_timer_display(self) -> None:
        if self._timer_display is not None and self._countdown_remaining is not None:
            self._timer_display(max(0, self._countdown_remaining))

    def _clear_countdown(self) -> None:
        if self._countdown_timer is not None:
            self._countdown_timer.cancel()
        self._countdown_timer = None
        self._countdown_remaining = None
        self._countdown_deadline = None

    def _listen(self, kind: GuardEvent, listener: Listener) -> None:
        self._environment.add_listener(kind, listener)
        self._listeners.append((kind, listener))

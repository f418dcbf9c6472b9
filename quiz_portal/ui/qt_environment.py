"""Qt implementations of the scheduler and proctoring environment.

``QtScheduler`` backs quiz countdowns with ``QTimer`` objects.
``QtProctoringEnvironment`` installs an application-wide event filter and
translates key presses, context menus, window state changes, close requests
and application activation changes into ``GuardEvent`` notifications.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QGuiApplication, QKeySequence, QWindow
from PySide6.QtWidgets import QApplication, QMessageBox, QWidget

from quiz_portal.core.errors import FullscreenUnsupported
from quiz_portal.core.services.proctoring_environment import (
    EnvironmentEvent,
    GuardEvent,
    KeyStroke,
    Listener,
)
from quiz_portal.ui.dialog_helpers import confirm_leave_quiz, show_warning_nonblocking

logger = logging.getLogger(__name__)

_HEADLESS_PLATFORMS = ("offscreen", "minimal")


class _QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler:
    """Scheduler that runs callbacks from the Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> _QtTimerHandle:
        if interval_seconds <= 0:
            raise ValueError("Timer interval must be positive.")
        timer = QTimer(self._parent)
        timer.setInterval(int(interval_seconds * 1000))
        timer.timeout.connect(callback)
        timer.start()
        return _QtTimerHandle(timer)

    def monotonic(self) -> float:
        return time.monotonic()


class QtProctoringEnvironment(QObject):
    """Adapts a Qt application and its main window to the guard's event surface."""

    def __init__(self, app: QApplication, window: QWidget) -> None:
        super().__init__(window)
        self._app = app
        self._window = window
        self._listeners: dict[GuardEvent, list[Listener]] = {}
        self._was_fullscreen = window.isFullScreen()
        self._warning_box: QMessageBox | None = None

        app.installEventFilter(self)
        app.applicationStateChanged.connect(self._on_application_state_changed)

    def detach(self) -> None:
        """Stop observing the application; used when the window closes."""
        self._app.removeEventFilter(self)
        self._listeners.clear()

    # --- Listener registry ---

    def add_listener(self, kind: GuardEvent, listener: Listener) -> None:
        self._listeners.setdefault(kind, []).append(listener)

    def remove_listener(self, kind: GuardEvent, listener: Listener) -> None:
        registered = self._listeners.get(kind, [])
        if listener in registered:
            registered.remove(listener)

    def _dispatch(self, event: EnvironmentEvent) -> EnvironmentEvent:
        for listener in list(self._listeners.get(event.kind, [])):
            listener(event)
        return event

    def _has_listeners(self, kind: GuardEvent) -> bool:
        return bool(self._listeners.get(kind))

    # --- Queries and commands ---

    def is_hidden(self) -> bool:
        return (
            self._app.applicationState() != Qt.ApplicationActive
            or self._window.isMinimized()
        )

    def supports_fullscreen(self) -> bool:
        return QGuiApplication.platformName() not in _HEADLESS_PLATFORMS

    def fullscreen_element(self) -> object | None:
        return self._window if self._window.isFullScreen() else None

    def request_fullscreen(self, element: object | None = None) -> None:
        if not self.supports_fullscreen():
            raise FullscreenUnsupported("Fullscreen API not supported")
        target = element if isinstance(element, QWidget) else self._window
        target.showFullScreen()

    def exit_fullscreen(self) -> None:
        if not self.supports_fullscreen():
            raise FullscreenUnsupported("Fullscreen API not supported")
        self._window.showNormal()

    def show_warning(self, message: str) -> None:
        self._warning_box = show_warning_nonblocking(self._window, "Warning", message)

    # --- Event translation ---

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802 (Qt API)
        event_type = event.type()

        # Key presses reach the top-level QWindow first; handling them there
        # sees each press once instead of once per propagating widget.
        if event_type == QEvent.KeyPress and isinstance(watched, QWindow):
            if not self._has_listeners(GuardEvent.KEY_DOWN):
                return False
            dispatched = self._dispatch(EnvironmentEvent(GuardEvent.KEY_DOWN, key=self._key_stroke(event)))
            return dispatched.default_prevented

        if event_type == QEvent.ContextMenu and self._belongs_to_window(watched):
            dispatched = self._dispatch(EnvironmentEvent(GuardEvent.CONTEXT_MENU))
            return dispatched.default_prevented

        if watched is self._window and event_type == QEvent.WindowStateChange:
            is_fullscreen = self._window.isFullScreen()
            if is_fullscreen != self._was_fullscreen:
                self._was_fullscreen = is_fullscreen
                self._dispatch(EnvironmentEvent(GuardEvent.FULLSCREEN_CHANGE))
            return False

        if watched is self._window and event_type == QEvent.Close:
            dispatched = self._dispatch(EnvironmentEvent(GuardEvent.BEFORE_UNLOAD))
            if dispatched.default_prevented and not confirm_leave_quiz(self._window, dispatched.return_value or ""):
                event.ignore()
                return True
            return False

        return super().eventFilter(watched, event)

    def _on_application_state_changed(self, state: Qt.ApplicationState) -> None:
        logger.debug("Application state changed to %s", state)
        self._dispatch(EnvironmentEvent(GuardEvent.VISIBILITY_CHANGE))

    def _belongs_to_window(self, watched: QObject) -> bool:
        return isinstance(watched, QWidget) and watched.window() is self._window

    @staticmethod
    def _key_stroke(event: QEvent) -> KeyStroke:
        modifiers = event.modifiers()
        return KeyStroke(
            key=QKeySequence(event.key()).toString(),
            alt=bool(modifiers & Qt.AltModifier),
            ctrl=bool(modifiers & Qt.ControlModifier),
            shift=bool(modifiers & Qt.ShiftModifier),
        )

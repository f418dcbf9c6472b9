"""Environment surface watched by the proctoring guard.

The guard never talks to a windowing toolkit directly. It registers handlers
for the ``GuardEvent`` kinds below and queries fullscreen/visibility through a
``ProctoringEnvironment``. The Qt client adapts application events onto this
interface; ``HeadlessEnvironment`` is a plain in-process implementation that
lets callers raise the same events programmatically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Protocol

from quiz_portal.core.errors import FullscreenUnsupported


class GuardEvent(Enum):
    """Environment notifications the guard can listen to."""

    VISIBILITY_CHANGE = auto()
    CONTEXT_MENU = auto()
    KEY_DOWN = auto()
    BEFORE_UNLOAD = auto()
    FULLSCREEN_CHANGE = auto()


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """A key press together with its modifier state."""

    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False


@dataclass(slots=True)
class EnvironmentEvent:
    """Event object handed to guard listeners."""

    kind: GuardEvent
    key: KeyStroke | None = None
    default_prevented: bool = False
    return_value: str | None = None

    def prevent_default(self) -> None:
        self.default_prevented = True


Listener = Callable[[EnvironmentEvent], None]


class ProctoringEnvironment(Protocol):
    def add_listener(self, kind: GuardEvent, listener: Listener) -> None: ...

    def remove_listener(self, kind: GuardEvent, listener: Listener) -> None: ...

    def is_hidden(self) -> bool: ...

    def supports_fullscreen(self) -> bool: ...

    def fullscreen_element(self) -> object | None: ...

    def request_fullscreen(self, element: object | None = None) -> None: ...

    def exit_fullscreen(self) -> None: ...

    def show_warning(self, message: str) -> None: ...


@dataclass(slots=True)
class HeadlessEnvironment:
    """In-process environment whose state is driven by method calls."""

    fullscreen_capable: bool = True
    document: object = "document"
    hidden: bool = False
    warnings: list[str] = field(default_factory=list)
    _fullscreen_element: object | None = None
    _listeners: dict[GuardEvent, list[Listener]] = field(default_factory=dict)

    def add_listener(self, kind: GuardEvent, listener: Listener) -> None:
        self._listeners.setdefault(kind, []).append(listener)

    def remove_listener(self, kind: GuardEvent, listener: Listener) -> None:
        registered = self._listeners.get(kind, [])
        if listener in registered:
            registered.remove(listener)

    def listener_count(self, kind: GuardEvent | None = None) -> int:
        if kind is not None:
            return len(self._listeners.get(kind, []))
        return sum(len(listeners) for listeners in self._listeners.values())

    def dispatch(self, event: EnvironmentEvent) -> EnvironmentEvent:
        for listener in list(self._listeners.get(event.kind, [])):
            listener(event)
        return event

    def is_hidden(self) -> bool:
        return self.hidden

    def supports_fullscreen(self) -> bool:
        return self.fullscreen_capable

    def fullscreen_element(self) -> object | None:
        return self._fullscreen_element

    def request_fullscreen(self, element: object | None = None) -> None:
        if not self.fullscreen_capable:
            raise FullscreenUnsupported("Fullscreen API not supported")
        self._set_fullscreen_element(element if element is not None else self.document)

    def exit_fullscreen(self) -> None:
        if not self.fullscreen_capable:
            raise FullscreenUnsupported("Fullscreen API not supported")
        self._set_fullscreen_element(None)

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)

    # Simulated user actions

    def leave_fullscreen(self) -> None:
        """Drop out of fullscreen the way pressing Escape would."""
        self._set_fullscreen_element(None)

    def set_hidden(self, hidden: bool) -> None:
        self.hidden = hidden
        self.dispatch(EnvironmentEvent(GuardEvent.VISIBILITY_CHANGE))

    def press(self, key: str, *, alt: bool = False, ctrl: bool = False, shift: bool = False) -> EnvironmentEvent:
        stroke = KeyStroke(key=key, alt=alt, ctrl=ctrl, shift=shift)
        return self.dispatch(EnvironmentEvent(GuardEvent.KEY_DOWN, key=stroke))

    def open_context_menu(self) -> EnvironmentEvent:
        return self.dispatch(EnvironmentEvent(GuardEvent.CONTEXT_MENU))

    def attempt_unload(self) -> EnvironmentEvent:
        return self.dispatch(EnvironmentEvent(GuardEvent.BEFORE_UNLOAD))

    def _set_fullscreen_element(self, element: object | None) -> None:
        if element is self._fullscreen_element:
            return
        self._fullscreen_element = element
        self.dispatch(EnvironmentEvent(GuardEvent.FULLSCREEN_CHANGE))

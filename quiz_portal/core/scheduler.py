"""Repeating timer abstraction used by the quiz countdowns.

Both countdowns in a quiz session (the per-question timer and the fullscreen
grace period) are driven through a ``Scheduler`` so the state machines never
depend on a particular event loop. The Qt client supplies a QTimer-backed
scheduler; ``ManualScheduler`` advances virtual time explicitly and is what
headless sessions and the test-suite use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import itertools
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Handle returned for a scheduled repeating callback."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Creates repeating timers and reports monotonic time in seconds."""

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...

    def monotonic(self) -> float: ...


_sequence = itertools.count()


@dataclass(slots=True)
class _ManualTimer:
    interval: float
    callback: Callable[[], None]
    next_due: float
    sequence: int = field(default_factory=lambda: next(_sequence))
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class ManualScheduler:
    """Scheduler whose clock only moves when ``advance`` is called."""

    def __init__(self) -> None:
        self._now: float = 0.0
        self._timers: list[_ManualTimer] = []

    def monotonic(self) -> float:
        return self._now

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> _ManualTimer:
        if interval_seconds <= 0:
            raise ValueError("Timer interval must be positive.")
        timer = _ManualTimer(
            interval=interval_seconds,
            callback=callback,
            next_due=self._now + interval_seconds,
        )
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due in order."""
        target = self._now + seconds
        while True:
            due = [t for t in self._timers if t.active and t.next_due <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: (t.next_due, t.sequence))
            self._now = timer.next_due
            timer.next_due += timer.interval
            timer.callback()
        self._now = target
        self._timers = [t for t in self._timers if t.active]

    def active_timer_count(self) -> int:
        return sum(1 for t in self._timers if t.active)

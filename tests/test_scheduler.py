"""Tests for the manual scheduler used by headless sessions."""

from __future__ import annotations

import pytest

from quiz_portal.core.scheduler import ManualScheduler


def test_repeating_timer_fires_each_interval():
    scheduler = ManualScheduler()
    fired: list[float] = []
    scheduler.call_repeating(1.0, lambda: fired.append(scheduler.monotonic()))

    scheduler.advance(3.5)

    assert fired == [1.0, 2.0, 3.0]
    assert scheduler.monotonic() == 3.5


def test_cancelled_timer_stops_firing():
    scheduler = ManualScheduler()
    fired: list[str] = []
    handle = scheduler.call_repeating(1.0, lambda: fired.append("tick"))

    scheduler.advance(1)
    handle.cancel()
    scheduler.advance(5)

    assert fired == ["tick"]
    assert not handle.active
    assert scheduler.active_timer_count() == 0


def test_timers_fire_in_due_order():
    scheduler = ManualScheduler()
    order: list[str] = []
    scheduler.call_repeating(2.0, lambda: order.append("slow"))
    scheduler.call_repeating(1.0, lambda: order.append("fast"))

    scheduler.advance(2)

    assert order == ["fast", "slow", "fast"]


def test_callback_can_cancel_itself():
    scheduler = ManualScheduler()
    fired: list[int] = []
    handles = []

    def once() -> None:
        fired.append(1)
        handles[0].cancel()

    handles.append(scheduler.call_repeating(1.0, once))
    scheduler.advance(10)

    assert fired == [1]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ManualScheduler().call_repeating(0, lambda: None)

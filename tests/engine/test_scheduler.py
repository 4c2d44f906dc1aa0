"""
Tests for the virtual clock scheduler.
"""

import pytest
from idlebattle.core.constants import TimerGroup
from idlebattle.engine.scheduler import Scheduler


@pytest.fixture
def scheduler():
    return Scheduler()


def test_one_shot_fires_when_due(scheduler):
    fired = []
    scheduler.call_later(100, lambda: fired.append(scheduler.now))
    scheduler.advance(99)
    assert fired == []
    scheduler.advance(1)
    assert fired == [100]
    scheduler.advance(1000)
    assert fired == [100]


def test_zero_delay_fires_on_next_advance(scheduler):
    fired = []
    scheduler.call_later(0, lambda: fired.append(True))
    assert fired == []
    assert scheduler.advance(0) == 1
    assert fired == [True]


def test_repeating_timer_sees_due_time(scheduler):
    """Callbacks observe the clock at their own due time, not the target."""
    fired = []
    scheduler.call_every(100, lambda: fired.append(scheduler.now))
    assert scheduler.advance(350) == 3
    assert fired == [100, 200, 300]
    assert scheduler.now == 350


def test_first_delay(scheduler):
    fired = []
    scheduler.call_every(100, lambda: fired.append(scheduler.now), first_delay=0)
    scheduler.advance(200)
    assert fired == [0, 100, 200]


def test_same_instant_fires_in_schedule_order(scheduler):
    fired = []
    scheduler.call_later(50, lambda: fired.append("a"))
    scheduler.call_later(50, lambda: fired.append("b"))
    scheduler.call_later(10, lambda: fired.append("c"))
    scheduler.advance(50)
    assert fired == ["c", "a", "b"]


def test_cancel(scheduler):
    fired = []
    handle = scheduler.call_later(100, lambda: fired.append(True))
    scheduler.cancel(handle)
    scheduler.advance(200)
    assert fired == []
    # Cancelling nothing is allowed.
    scheduler.cancel(None)


def test_cancel_from_earlier_callback(scheduler):
    """A timer cancelled by an earlier callback in the same advance never fires."""
    fired = []
    later = scheduler.call_later(100, lambda: fired.append("later"))
    scheduler.call_later(100, lambda: fired.append("x"))
    scheduler.call_later(50, lambda: scheduler.cancel(later))
    scheduler.advance(100)
    assert fired == ["x"]


def test_callback_can_schedule_more_timers(scheduler):
    fired = []

    def chain():
        fired.append(scheduler.now)
        if len(fired) < 3:
            scheduler.call_later(10, chain)

    scheduler.call_later(10, chain)
    scheduler.advance(100)
    assert fired == [10, 20, 30]


def test_repeating_timer_cancelled_in_its_callback(scheduler):
    fired = []
    handle = None

    def once():
        fired.append(scheduler.now)
        scheduler.cancel(handle)

    handle = scheduler.call_every(100, once)
    scheduler.advance(1000)
    assert fired == [100]


def test_cancel_group(scheduler):
    fired = []
    scheduler.call_later(100, lambda: fired.append("encounter"), TimerGroup.ENCOUNTER)
    scheduler.call_every(100, lambda: fired.append("playing"), TimerGroup.PLAYING)
    scheduler.call_later(100, lambda: fired.append("display"), TimerGroup.DISPLAY)

    assert scheduler.cancel_group(TimerGroup.PLAYING) == 1
    assert scheduler.cancel_group(TimerGroup.ENCOUNTER) == 1
    scheduler.advance(300)
    assert fired == ["display"]


def test_suspend_preserves_remaining_time(scheduler):
    fired = []
    scheduler.call_later(1000, lambda: fired.append(scheduler.now), TimerGroup.ENCOUNTER)
    scheduler.advance(400)

    assert scheduler.suspend_group(TimerGroup.ENCOUNTER) == 1
    scheduler.advance(5000)
    assert fired == []
    assert len(scheduler.pending(TimerGroup.ENCOUNTER)) == 1

    assert scheduler.resume_group(TimerGroup.ENCOUNTER) == 1
    scheduler.advance(599)
    assert fired == []
    scheduler.advance(1)
    assert fired == [6000]


def test_suspended_timer_can_be_cancelled(scheduler):
    fired = []
    handle = scheduler.call_later(100, lambda: fired.append(True), TimerGroup.DISPLAY)
    scheduler.suspend_group(TimerGroup.DISPLAY)
    scheduler.cancel(handle)
    assert scheduler.resume_group(TimerGroup.DISPLAY) == 0
    scheduler.advance(1000)
    assert fired == []


def test_pending(scheduler):
    scheduler.call_later(200, lambda: None, TimerGroup.ENCOUNTER)
    scheduler.call_every(100, lambda: None, TimerGroup.PLAYING)
    assert len(scheduler.pending()) == 2
    assert [h.group for h in scheduler.pending(TimerGroup.PLAYING)] == [TimerGroup.PLAYING]
    assert scheduler.pending(TimerGroup.PLAYING)[0].is_repeating


def test_clear_keeps_clock(scheduler):
    scheduler.call_every(100, lambda: None)
    scheduler.advance(250)
    scheduler.clear()
    assert scheduler.pending() == []
    assert scheduler.now == 250
    assert scheduler.advance(1000) == 0


@pytest.mark.parametrize("delay", [-1, -0.5])
def test_negative_delay_is_rejected(scheduler, delay):
    with pytest.raises(ValueError):
        scheduler.call_later(delay, lambda: None)


@pytest.mark.parametrize("interval", [0, -100])
def test_non_positive_interval_is_rejected(scheduler, interval):
    with pytest.raises(ValueError):
        scheduler.call_every(interval, lambda: None)


def test_clock_cannot_go_backwards(scheduler):
    with pytest.raises(ValueError):
        scheduler.advance(-1)

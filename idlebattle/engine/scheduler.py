"""
Scheduler module for the engine.

A cooperative timer queue running on a virtual millisecond clock. The host
advances the clock explicitly, which makes every timed behaviour of the game
(auto attacks, cooldown decay, buff expiry, escape countdown) deterministic
and testable. Callbacks never run concurrently: each one completes before the
next due timer is examined.
"""

import heapq
import itertools
from typing import Callable

from ..core.constants import TimerGroup
from ..core.logging import get_logger

logger = get_logger(__name__)

TimerCallback = Callable[[], None]


class TimerHandle:
    """
    Cancellation handle of a scheduled timer.

    Attributes:
        callback (TimerCallback):
            Function invoked when the timer fires.
        group (TimerGroup):
            Group used for bulk suspension and cancellation.
        interval (float | None):
            Repeat period in ms, None for one-shot timers.
        due (float):
            Clock time at which the timer fires next.

    """

    __slots__ = ("callback", "group", "interval", "due", "seq", "cancelled", "remaining")

    def __init__(
        self,
        callback: TimerCallback,
        group: TimerGroup,
        interval: float | None,
        due: float,
        seq: int,
    ) -> None:
        self.callback = callback
        self.group = group
        self.interval = interval
        self.due = due
        self.seq = seq
        self.cancelled = False
        # Time left before firing while the group is suspended.
        self.remaining: float | None = None

    @property
    def is_repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: "TimerHandle") -> bool:
        return (self.due, self.seq) < (other.due, other.seq)

    def __repr__(self) -> str:
        kind = f"every {self.interval}ms" if self.interval is not None else "once"
        return f"TimerHandle({self.group}, {kind}, due={self.due})"


class Scheduler:
    """
    Timer queue driven by a virtual clock.

    Timers due at the same instant fire in the order they were scheduled.
    A timer cancelled by an earlier callback of the same `advance` call does
    not fire.
    """

    def __init__(self) -> None:
        self._now: float = 0.0
        self._queue: list[TimerHandle] = []
        self._suspended: list[TimerHandle] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        """Current clock time, in ms."""
        return self._now

    def call_later(
        self,
        delay: float,
        callback: TimerCallback,
        group: TimerGroup = TimerGroup.ENCOUNTER,
    ) -> TimerHandle:
        """
        Schedules a one-shot timer.

        Args:
            delay (float):
                Milliseconds from now. A zero delay fires on the next advance.
            callback (TimerCallback):
                Function to call.
            group (TimerGroup):
                The timer group.

        Returns:
            TimerHandle:
                The handle used to cancel the timer.

        """
        if delay < 0:
            raise ValueError(f"Timer delay must be non-negative, got {delay}.")
        handle = TimerHandle(callback, group, None, self._now + delay, next(self._seq))
        heapq.heappush(self._queue, handle)
        return handle

    def call_every(
        self,
        interval: float,
        callback: TimerCallback,
        group: TimerGroup = TimerGroup.PLAYING,
        first_delay: float | None = None,
    ) -> TimerHandle:
        """
        Schedules a repeating timer.

        Args:
            interval (float):
                Period in ms, must be positive.
            callback (TimerCallback):
                Function to call on every period.
            group (TimerGroup):
                The timer group.
            first_delay (float | None):
                Delay before the first firing, defaults to the interval.

        Returns:
            TimerHandle:
                The handle used to cancel the timer.

        """
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}.")
        delay = interval if first_delay is None else first_delay
        if delay < 0:
            raise ValueError(f"Timer delay must be non-negative, got {delay}.")
        handle = TimerHandle(
            callback, group, float(interval), self._now + delay, next(self._seq)
        )
        heapq.heappush(self._queue, handle)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None:
            return
        handle.cancel()
        if handle in self._suspended:
            self._suspended.remove(handle)

    def cancel_group(self, group: TimerGroup) -> int:
        """
        Cancels every pending and suspended timer of a group.

        Args:
            group (TimerGroup):
                The group to cancel.

        Returns:
            int:
                The number of timers cancelled.

        """
        count = 0
        for handle in self._queue:
            if handle.group == group and not handle.cancelled:
                handle.cancel()
                count += 1
        for handle in [h for h in self._suspended if h.group == group]:
            handle.cancel()
            self._suspended.remove(handle)
            count += 1
        self._compact()
        logger.debug("Cancelled %d timer(s) in group %s", count, group)
        return count

    def suspend_group(self, group: TimerGroup) -> int:
        """
        Takes the timers of a group out of the queue, remembering how long
        each had left before firing.
        """
        suspended = [h for h in self._queue if h.group == group and not h.cancelled]
        for handle in suspended:
            handle.remaining = max(0.0, handle.due - self._now)
            self._suspended.append(handle)
        self._queue = [h for h in self._queue if h not in suspended]
        heapq.heapify(self._queue)
        self._compact()
        return len(suspended)

    def resume_group(self, group: TimerGroup) -> int:
        """
        Puts the suspended timers of a group back in the queue with the time
        they had left when suspended.
        """
        resumed = [h for h in self._suspended if h.group == group]
        for handle in resumed:
            self._suspended.remove(handle)
            handle.due = self._now + (handle.remaining or 0.0)
            handle.remaining = None
            heapq.heappush(self._queue, handle)
        return len(resumed)

    def pending(self, group: TimerGroup | None = None) -> list[TimerHandle]:
        """Returns the live timers (queued or suspended), optionally of one group."""
        handles = [h for h in self._queue if not h.cancelled] + list(self._suspended)
        if group is not None:
            handles = [h for h in handles if h.group == group]
        return sorted(handles, key=lambda h: (h.due, h.seq))

    def advance(self, elapsed: float) -> int:
        """
        Moves the clock forward, firing every timer that falls due.

        Args:
            elapsed (float):
                Milliseconds to advance, must be non-negative.

        Returns:
            int:
                The number of callbacks run.

        """
        if elapsed < 0:
            raise ValueError(f"Cannot advance the clock backwards ({elapsed}).")
        target = self._now + elapsed
        fired = 0
        while self._queue and self._queue[0].due <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = handle.due
            if handle.interval is not None:
                handle.due += handle.interval
                heapq.heappush(self._queue, handle)
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def clear(self) -> None:
        """Cancels every timer, keeping the clock where it is."""
        for handle in self._queue + self._suspended:
            handle.cancel()
        self._queue = []
        self._suspended = []

    def _compact(self) -> None:
        if any(h.cancelled for h in self._queue):
            self._queue = [h for h in self._queue if not h.cancelled]
            heapq.heapify(self._queue)

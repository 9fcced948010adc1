"""Cooperative millisecond timers driven by the host's game clock.

Nothing here sleeps or spawns threads. The host calls ``advance(now_ms)``
once per frame and due callbacks are dispatched one at a time, in deadline
order, on the caller's thread.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable


class Timer:
    """
    Handle for one scheduled callback.

    A one-shot timer becomes inactive after it fires; a repeating timer stays
    active until cancelled.
    """

    def __init__(self, callback: Callable[[], None], deadline_ms: float,
                 interval_ms: float | None = None) -> None:
        self.callback = callback
        self.deadline_ms = deadline_ms
        self.interval_ms = interval_ms
        self.cancelled = False
        self.fired = False

    @property
    def repeating(self) -> bool:
        return self.interval_ms is not None

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        return self.repeating or not self.fired

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """
    Priority queue of timers keyed on game time in milliseconds.

    Notes
    - Callbacks scheduled from inside a callback use the firing deadline as
      "now", so chains of timers stay exact regardless of frame timing.
    - A repeating timer that falls several intervals behind fires once per
      missed interval.
    - Cancelled entries are dropped lazily when they reach the head.
    """

    def __init__(self, now_ms: float = 0) -> None:
        self.now_ms = now_ms
        self._queue: list[tuple[float, int, Timer]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(callback, self.now_ms + max(0, delay_ms))
        self._push(timer)
        return timer

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> Timer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = Timer(callback, self.now_ms + interval_ms, interval_ms)
        self._push(timer)
        return timer

    def _push(self, timer: Timer) -> None:
        heapq.heappush(self._queue, (timer.deadline_ms, next(self._seq), timer))

    def advance(self, now_ms: float) -> int:
        """
        Run every callback due at or before ``now_ms``.

        Parameters
        ----------
        now_ms : float
            Current game time in milliseconds. Time never runs backwards; an
            older value only dispatches nothing.

        Returns
        -------
        int
            Number of callbacks that fired.
        """
        fired = 0
        while self._queue and self._queue[0][0] <= now_ms:
            deadline, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now_ms = max(self.now_ms, deadline)
            if timer.repeating:
                timer.deadline_ms = deadline + timer.interval_ms
                self._push(timer)
            else:
                timer.fired = True
            timer.callback()
            fired += 1
        self.now_ms = max(self.now_ms, now_ms)
        return fired

    def pending(self) -> int:
        """Number of timers that can still fire."""
        return sum(1 for _, _, t in self._queue if t.active)

    def cancel_all(self) -> None:
        for _, _, timer in self._queue:
            timer.cancel()
        self._queue.clear()


class TimerGroup:
    """
    Cancellation list: every timer created through the group can be torn
    down with a single ``cancel_all``.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler
        self._timers: list[Timer] = []

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Timer:
        timer = self.scheduler.call_later(delay_ms, callback)
        self._track(timer)
        return timer

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> Timer:
        timer = self.scheduler.call_every(interval_ms, callback)
        self._track(timer)
        return timer

    def _track(self, timer: Timer) -> None:
        # drop spent handles so long rounds don't accumulate them
        self._timers = [t for t in self._timers if t.active]
        self._timers.append(timer)

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()

    def __len__(self) -> int:
        return sum(1 for t in self._timers if t.active)

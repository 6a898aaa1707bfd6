"""
Scheduler - Single-threaded cooperative timers.

All recomputation runs on the host's one execution context. Work is
deferred with call_later() and executed when the host calls run_due()
(from its own loop) or run_until_idle(). The clock is injectable so
tests can drive time deterministically.

Usage:
    scheduler = Scheduler()
    scheduler.call_later(0.05, refresh, node)

    # host loop
    while running:
        scheduler.run_due()
"""

from __future__ import annotations

import heapq
import logging
import time
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class TimerHandle:
    """A scheduled callback.

    Ordered by deadline, then by creation so timers due at the same
    instant fire in the order they were scheduled.
    """

    deadline: float
    sequence: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Deadline-ordered timer queue.

    Args:
        clock: Monotonic time source in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._queue: list[TimerHandle] = []
        self._sequence = count()

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Schedule callback(*args) after delay seconds."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        handle = TimerHandle(
            deadline=self._clock() + delay,
            sequence=next(self._sequence),
            callback=callback,
            args=args,
        )
        heapq.heappush(self._queue, handle)
        return handle

    def _discard_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)

    @property
    def pending(self) -> int:
        """Number of live (uncancelled) timers."""
        return sum(1 for handle in self._queue if not handle.cancelled)

    @property
    def next_deadline(self) -> float | None:
        self._discard_cancelled()
        return self._queue[0].deadline if self._queue else None

    def run_due(self) -> int:
        """Run every timer whose deadline has passed.

        Timers scheduled by a callback run in the same call if they are
        already due. A failing callback is logged and does not stop the
        remaining timers.

        Returns:
            Number of callbacks executed.
        """
        executed = 0
        while True:
            self._discard_cancelled()
            if not self._queue or self._queue[0].deadline > self._clock():
                return executed
            handle = heapq.heappop(self._queue)
            executed += 1
            try:
                handle.callback(*handle.args)
            except Exception:
                logger.exception("Scheduled callback %r failed", handle.callback)

    def run_until_idle(
        self,
        timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> int:
        """Sleep through deadlines until no timers remain.

        Args:
            timeout: Give up after this many seconds (None = no limit).
            sleep: Sleep function, replaceable for tests.

        Returns:
            Number of callbacks executed.
        """
        started = self._clock()
        executed = 0
        while True:
            deadline = self.next_deadline
            if deadline is None:
                return executed
            if timeout is not None and self._clock() - started >= timeout:
                return executed
            delay = deadline - self._clock()
            if delay > 0:
                sleep(delay)
            executed += self.run_due()

    def clear(self) -> None:
        """Drop every pending timer."""
        for handle in self._queue:
            handle.cancel()
        self._queue.clear()

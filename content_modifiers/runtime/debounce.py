"""
Debouncer - Trailing-edge coalescing per key.

Tree construction and restoration fire many attribute changes in quick
succession. Each reactive channel is wrapped in a Debouncer so a burst
collapses into one call, made with the arguments of the last trigger
once the quiet window closes.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable

from content_modifiers.runtime.scheduler import Scheduler, TimerHandle


class Debouncer:
    """Keyed trailing-edge debounce on a Scheduler.

    Each call cancels the pending timer for its key and schedules a new
    one; different keys have independent timers.

    Example:
        refresh = Debouncer(scheduler, 0.05, registry.refresh_node_sets)
        refresh(node.id, node)
        refresh(node.id, node)  # replaces the first call
    """

    def __init__(
        self,
        scheduler: Scheduler,
        delay: float,
        callback: Callable[..., Any],
    ):
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._pending: dict[Hashable, TimerHandle] = {}
        self.calls = 0
        self.executions = 0

    @property
    def delay(self) -> float:
        return self._delay

    def __call__(self, key: Hashable, *args: Any) -> TimerHandle:
        self.calls += 1
        previous = self._pending.get(key)
        if previous is not None:
            previous.cancel()
        handle = self._scheduler.call_later(self._delay, self._fire, key, args)
        self._pending[key] = handle
        return handle

    def _fire(self, key: Hashable, args: tuple) -> None:
        self._pending.pop(key, None)
        self.executions += 1
        self._callback(*args)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    @property
    def pending_keys(self) -> list[Hashable]:
        return list(self._pending)

    def cancel_all(self) -> None:
        """Drop every pending call. Used only on teardown."""
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

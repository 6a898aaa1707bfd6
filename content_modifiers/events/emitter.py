"""
Event emitter shared by tree nodes, storage and the host.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable

logger = logging.getLogger(__name__)

_sequence = count()


@dataclass
class Subscription:
    """Represents a registered event callback.

    Attributes:
        event: Event name this subscription responds to.
        callback: Function to call when the event fires.
        priority: Execution priority (lower = earlier).
        emitter: Emitter the callback is attached to.
    """

    event: str
    callback: Callable[..., Any]
    priority: int = 100
    emitter: "EventEmitter | None" = field(default=None, repr=False, compare=False)
    sequence: int = field(default_factory=lambda: next(_sequence))

    def __call__(self, *args, **kwargs) -> Any:
        return self.callback(*args, **kwargs)

    def cancel(self) -> bool:
        """Detach this callback from its emitter."""
        if self.emitter is None:
            return False
        return self.emitter._remove(self)


class EventEmitter:
    """Named-event publish/subscribe.

    Callbacks run synchronously in priority order, ties in registration
    order. A callback raising an exception is logged and reported
    through the ``"error"`` event; the remaining callbacks still run.

    Example:
        emitter = EventEmitter()

        sub = emitter.on("change:is_available", on_change)
        emitter.trigger("change:is_available", node, False)
        sub.cancel()
    """

    ERROR_EVENT = "error"

    def __init__(self):
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()

    def on(
        self,
        event: str,
        callback: Callable[..., Any],
        priority: int = 100,
    ) -> Subscription:
        """Register a callback for an event.

        Args:
            event: Event name.
            callback: Function to call.
            priority: Execution priority.

        Returns:
            The created Subscription.
        """
        subscription = Subscription(
            event=event,
            callback=callback,
            priority=priority,
            emitter=self,
        )

        with self._lock:
            subs = self._subscriptions.setdefault(event, [])
            subs.append(subscription)
            subs.sort(key=lambda s: (s.priority, s.sequence))

        return subscription

    def off(
        self,
        event: str | None = None,
        callback: Callable[..., Any] | None = None,
    ) -> int:
        """Remove subscriptions.

        Args:
            event: Event name, or None for every event.
            callback: Callback to remove, or None for every callback.

        Returns:
            Number of subscriptions removed.
        """
        removed = 0
        with self._lock:
            events = [event] if event is not None else list(self._subscriptions)
            for name in events:
                subs = self._subscriptions.get(name, [])
                kept = [s for s in subs if callback is not None and s.callback != callback]
                removed += len(subs) - len(kept)
                if kept:
                    self._subscriptions[name] = kept
                else:
                    self._subscriptions.pop(name, None)
        return removed

    def _remove(self, subscription: Subscription) -> bool:
        with self._lock:
            subs = self._subscriptions.get(subscription.event, [])
            if subscription in subs:
                subs.remove(subscription)
                if not subs:
                    del self._subscriptions[subscription.event]
                return True
        return False

    def has_listeners(self, event: str) -> bool:
        with self._lock:
            return bool(self._subscriptions.get(event))

    def listener_count(self, event: str | None = None) -> int:
        with self._lock:
            if event is not None:
                return len(self._subscriptions.get(event, []))
            return sum(len(subs) for subs in self._subscriptions.values())

    def trigger(self, event: str, *args, **kwargs) -> list[Any]:
        """Fire an event and call every callback registered at this moment.

        Args:
            event: Event name.
            *args, **kwargs: Arguments to pass to callbacks.

        Returns:
            List of return values from callbacks that did not raise.
        """
        with self._lock:
            subscriptions = list(self._subscriptions.get(event, []))

        results = []
        for subscription in subscriptions:
            try:
                results.append(subscription(*args, **kwargs))
            except Exception as e:
                logger.exception("Listener for %r failed", event)
                # Report but don't recurse
                if event != self.ERROR_EVENT:
                    self.trigger(self.ERROR_EVENT, e, event)

        return results

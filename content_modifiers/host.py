"""
Host lifecycle and busy indicator.

The registry needs two things from the application embedding it: a
signal that the tree is fully restored (``app:start``) and a shared
busy indicator that rendering layers watch while recomputation is
pending.
"""

from __future__ import annotations

from content_modifiers.events import EventEmitter
from content_modifiers.monitoring import get_logger


class Host(EventEmitter):
    """Application lifecycle emitter.

    Events:
        app:start: Fired once by start(), after the tree is built.
    """

    START_EVENT = "app:start"

    def __init__(self):
        super().__init__()
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self.trigger(self.START_EVENT)


class Wait(EventEmitter):
    """Reference-counted busy indicator.

    Events:
        wait:begin: Count went from 0 to 1.
        wait:complete: Count went back to 0.

    Example:
        wait = Wait()
        wait.on("wait:complete", render)
        wait.begin()
        ...
        wait.end()  # render() runs
    """

    BEGIN_EVENT = "wait:begin"
    COMPLETE_EVENT = "wait:complete"

    def __init__(self):
        super().__init__()
        self._count = 0
        self._logger = get_logger().bind(component="wait")

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_waiting(self) -> bool:
        return self._count > 0

    def begin(self) -> None:
        self._count += 1
        if self._count == 1:
            self.trigger(self.BEGIN_EVENT)

    def end(self) -> None:
        if self._count == 0:
            self._logger.warning("wait_unbalanced", "end() called while not waiting")
            return
        self._count -= 1
        if self._count == 0:
            self.trigger(self.COMPLETE_EVENT)

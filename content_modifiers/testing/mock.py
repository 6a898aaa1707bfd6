"""
Modifier Mocks - Deterministic time and simple concrete sets for testing.

Features:
    - Manually advanced clock for the scheduler
    - Call recording on modifier sets
    - Include/exclude sets configured from node attributes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from content_modifiers.modifiers import ModifierSet
from content_modifiers.runtime import Scheduler


class ManualClock:
    """Clock that only moves when told to.

    Example:
        clock = ManualClock()
        scheduler = Scheduler(clock=clock)
        scheduler.call_later(0.05, fn)
        clock.advance(0.05)
        scheduler.run_due()  # fn() runs
    """

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards ({seconds})")
        self._now += seconds
        return self._now


def tick(scheduler: Scheduler, clock: ManualClock, seconds: float) -> int:
    """Advance the clock and run whatever became due."""
    clock.advance(seconds)
    return scheduler.run_due()


@dataclass
class CallRecord:
    """Record of a modifier set call, timed on the registry scheduler."""

    method: str
    kind: str
    node_id: str
    timestamp: float = 0.0


class RecordingModifierSet(ModifierSet):
    """Records reset/refresh/setup_models calls into a shared log.

    Pass the same ``calls`` list to several sets to observe how their
    calls interleave within a cascade pass.
    """

    def __init__(self, *args: Any, calls: list[CallRecord] | None = None, **kwargs: Any):
        self.calls: list[CallRecord] = calls if calls is not None else []
        super().__init__(*args, **kwargs)

    def _record(self, method: str) -> None:
        self.calls.append(
            CallRecord(
                method=method,
                kind=self.kind,
                node_id=self.model_id,
                timestamp=self.registry.scheduler.now(),
            )
        )

    def reset(self) -> None:
        self._record("reset")
        super().reset()

    def refresh(self):
        self._record("refresh")
        return super().refresh()


class StaticModifierSet(RecordingModifierSet):
    """Keeps the available children whose ids are listed in config.

    Config is read from the node attribute named after the kind:
        {"is_enabled": True, "include": ["a-05", "a-10"]}
    """

    def init_config(self) -> None:
        self.config = self.model.get(self.kind)

    def setup_models(self):
        self._record("setup_models")
        if not self.is_enabled:
            return None
        include = set(self.config.get("include", []))
        self.models = [m for m in self.models if m.id in include]
        return None


class ExcludingModifierSet(RecordingModifierSet):
    """Drops the children whose ids are listed in config.

    Config is read from the node attribute named after the kind:
        {"is_enabled": True, "exclude": ["a-05"]}
    """

    def init_config(self) -> None:
        self.config = self.model.get(self.kind)

    def setup_models(self):
        self._record("setup_models")
        if not self.is_enabled:
            return None
        exclude = set(self.config.get("exclude", []))
        self.models = [m for m in self.models if m.id not in exclude]
        return None

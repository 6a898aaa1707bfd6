"""
Runtime module - single-threaded scheduling and debounce.
"""

from content_modifiers.runtime.scheduler import Scheduler, TimerHandle
from content_modifiers.runtime.debounce import Debouncer

__all__ = [
    "Scheduler",
    "TimerHandle",
    "Debouncer",
]

"""
Synchronous named events used across the content tree.
"""

from content_modifiers.events.emitter import EventEmitter, Subscription

__all__ = [
    "EventEmitter",
    "Subscription",
]

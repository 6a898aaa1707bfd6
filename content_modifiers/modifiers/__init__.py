"""
Modifier sets and the registry that cascades their recomputation.

Example:
    from content_modifiers.modifiers import ModifierSet, ModifierRegistry

    class HideCompleted(ModifierSet):
        def setup_models(self):
            self.models = [
                m for m in self.original_models
                if not m.is_interaction_complete
            ]

    registry = ModifierRegistry()
    HideCompleted(kind="hide_completed", model=page, registry=registry)
    registry.host.start()
"""

from content_modifiers.modifiers.base import ModifierSet
from content_modifiers.modifiers.latch import AvailabilityLatch
from content_modifiers.modifiers.registry import CascadeStats, ModifierRegistry

__all__ = [
    "AvailabilityLatch",
    "CascadeStats",
    "ModifierRegistry",
    "ModifierSet",
]

"""
Content Modifiers - Rule-driven availability for content trees.

Architecture:
    TreeNode events → ModifierRegistry (debounce) → ModifierSet.reset/refresh → is_available

Public API (stable):
    ModifierSet       - Extension point. Override setup_models().
    ModifierRegistry  - Ordered sets, listener wiring, cascade, suspend.
    TreeNode          - Content tree node with attribute change events.
    OfflineStorage    - Namespaced persistence of saved selections.
    Host, Wait        - Lifecycle signal and busy indicator.
    ModifiersConfig   - Debounce windows, storage path, logging.

Example:
    from content_modifiers import ModifierRegistry, ModifierSet, TreeNode

    class KeepFirst(ModifierSet):
        def setup_models(self):
            self.models = self.models[:1]

    page = TreeNode("co-05")
    TreeNode("a-05", parent=page)
    TreeNode("a-10", parent=page)

    registry = ModifierRegistry()
    KeepFirst(kind="keep_first", model=page, registry=registry)
    registry.host.start()

    [c.id for c in page.get_available_children()]  # ["a-05"]

Submodules:
    content_modifiers.runtime     - Scheduler, Debouncer
    content_modifiers.monitoring  - Structured logging
    content_modifiers.testing     - ManualClock, fixtures, assertions
"""

__version__ = "1.0.0"

from content_modifiers.config import ModifiersConfig
from content_modifiers.errors import (
    CodecError,
    ModifierError,
    SetupModelsNotImplementedError,
    StorageError,
)
from content_modifiers.host import Host, Wait
from content_modifiers.modifiers import (
    AvailabilityLatch,
    CascadeStats,
    ModifierRegistry,
    ModifierSet,
)
from content_modifiers.storage import OfflineStorage
from content_modifiers.tree import TreeNode

__all__ = [
    "__version__",
    # Core
    "ModifierSet",
    "ModifierRegistry",
    "AvailabilityLatch",
    "CascadeStats",
    # Collaborators
    "TreeNode",
    "OfflineStorage",
    "Host",
    "Wait",
    "ModifiersConfig",
    # Errors
    "ModifierError",
    "SetupModelsNotImplementedError",
    "StorageError",
    "CodecError",
]

"""
Test Fixtures - Common fixtures for testing.

Provides:
    - Test tree creation
    - Isolated, quiet registry setup on a manual clock
"""

from __future__ import annotations

import io
from typing import Any

from content_modifiers.config import ModifiersConfig
from content_modifiers.host import Host, Wait
from content_modifiers.modifiers import ModifierRegistry
from content_modifiers.monitoring import LogLevel, StructuredLogger
from content_modifiers.runtime import Scheduler
from content_modifiers.storage import OfflineStorage
from content_modifiers.testing.mock import ManualClock
from content_modifiers.tree import TreeNode


# A small course: one page, two articles, blocks under each
SAMPLE_TREE: dict[str, dict] = {
    "co-05": {
        "a-05": {"b-05": {}, "b-10": {}, "b-15": {}},
        "a-10": {"b-20": {}, "b-25": {}},
    },
}


def create_test_tree(
    structure: dict[str, dict] | None = None,
    root_id: str = "course",
    **root_attributes: Any,
) -> TreeNode:
    """
    Build a tree from nested dicts of ids.

    Tracking ids are assigned depth-first starting at 0 for the first
    node below the root. Every node has its children finished.

    Args:
        structure: Nested mapping of id -> children mapping.
        root_id: Id of the returned root node.
        **root_attributes: Extra attributes for the root.

    Returns:
        The root TreeNode.
    """
    structure = SAMPLE_TREE if structure is None else structure
    root = TreeNode(root_id, tracking_id=root_id, **root_attributes)
    counter = iter(range(10**6))

    def build(parent: TreeNode, children: dict[str, dict]) -> None:
        for child_id, grandchildren in children.items():
            node = TreeNode(child_id, tracking_id=next(counter), parent=parent)
            build(node, grandchildren or {})

    build(root, structure)
    return root


def create_test_registry(
    clock: ManualClock | None = None,
    storage: OfflineStorage | None = None,
    config: ModifiersConfig | None = None,
    log_output: io.StringIO | None = None,
) -> ModifierRegistry:
    """
    Create an isolated registry driven by a manual clock.

    Log lines go to ``log_output`` (a fresh StringIO by default) so
    tests stay quiet and can inspect what was logged.
    """
    clock = clock or ManualClock()
    logger = StructuredLogger(
        level=LogLevel.DEBUG,
        output=log_output if log_output is not None else io.StringIO(),
    )
    return ModifierRegistry(
        host=Host(),
        storage=storage or OfflineStorage(),
        wait=Wait(),
        scheduler=Scheduler(clock=clock),
        config=config,
        logger=logger,
    )

"""
Availability latch.

Records the last externally committed availability of each child node.
The next cascade pass reads it so a child that was switched off from
outside is not immediately re-included. Entries live until the parent
is reset.
"""

from __future__ import annotations

from typing import Iterable

from content_modifiers.tree import TreeNode


class AvailabilityLatch:
    """Side-table of node id -> latched availability."""

    def __init__(self):
        self._values: dict[str, bool] = {}

    def latch(self, node: TreeNode) -> bool:
        """Record the node's current availability and return it."""
        value = node.is_available
        self._values[node.id] = value
        return value

    def get(self, node: TreeNode, default: bool = True) -> bool:
        return self._values.get(node.id, default)

    def clear(self, nodes: Iterable[TreeNode]) -> None:
        for node in nodes:
            self._values.pop(node.id, None)

    def clear_all(self) -> None:
        self._values.clear()

    def __contains__(self, node: TreeNode) -> bool:
        return node.id in self._values

    def __len__(self) -> int:
        return len(self._values)

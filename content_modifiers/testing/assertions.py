"""
Availability Assertions - Tree state assertions for testing.
"""

from __future__ import annotations

from content_modifiers.tree import TreeNode


def hierarchy_violations(root: TreeNode) -> list[TreeNode]:
    """Nodes that are available although an ancestor is not."""
    return [
        node
        for node in root.walk()
        if node.is_available and not all(a.is_available for a in node.ancestors)
    ]


def assert_hierarchy_invariant(root: TreeNode, nodes: list[TreeNode] | None = None) -> None:
    """
    Assert that no node is available below an unavailable ancestor.

    Args:
        root: Tree to check.
        nodes: Restrict the check to these nodes.
    """
    violations = hierarchy_violations(root)
    if nodes is not None:
        violations = [node for node in violations if node in nodes]
    assert not violations, (
        "Available below an unavailable ancestor: "
        + ", ".join(node.id for node in violations)
    )


def assert_available(root: TreeNode, expected: dict[str, bool]) -> None:
    """
    Assert availability of nodes by id.

    Example:
        assert_available(page, {"a-05": True, "a-10": False})
    """
    actual = {}
    for node_id in expected:
        node = root.find_descendant(node_id)
        assert node is not None, f"No node '{node_id}' under '{root.id}'"
        actual[node_id] = node.is_available
    assert actual == expected, f"Availability mismatch: expected {expected}, got {actual}"

"""
In-process content tree model.
"""

from content_modifiers.tree.node import (
    ALL_CHILDREN,
    AWAITING_CHILDREN,
    TreeNode,
)

__all__ = [
    "ALL_CHILDREN",
    "AWAITING_CHILDREN",
    "TreeNode",
]

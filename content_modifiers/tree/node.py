"""
Content tree nodes.

A node owns its children; each child holds only a weak reference back
to its parent. Attributes are read and written through get/set so that
every effective change is announced as ``change:<name>``.
"""

from __future__ import annotations

import math
import weakref
from typing import Any, Iterator

from content_modifiers.events import EventEmitter

AWAITING_CHILDREN = math.inf
ALL_CHILDREN = -1


class TreeNode(EventEmitter):
    """A unit of the hierarchical content tree.

    Args:
        id: Unique node id.
        tracking_id: Stable identity persisted in saved state.
            Defaults to the node id.
        parent: Optional parent; the node is appended to its children.
        awaiting_children: True while children are still being attached.
            Call finish_children() once they are all in place.
        can_reset: Whether reset() is honoured without force.
        **attributes: Initial attribute values.

    Example:
        page = TreeNode("co-05", awaiting_children=True)
        TreeNode("a-05", tracking_id=0, parent=page)
        TreeNode("a-10", tracking_id=1, parent=page)
        page.finish_children()

        page.children[0].set("is_available", False)
        [c.id for c in page.get_available_children()]  # ["a-10"]
    """

    def __init__(
        self,
        id: str,
        tracking_id: Any = None,
        parent: "TreeNode | None" = None,
        awaiting_children: bool = False,
        can_reset: bool = True,
        **attributes: Any,
    ):
        super().__init__()
        self._attributes: dict[str, Any] = {
            "id": id,
            "tracking_id": tracking_id if tracking_id is not None else id,
            "is_available": True,
            "is_interaction_complete": False,
            "can_reset": can_reset,
            "require_completion_of": AWAITING_CHILDREN if awaiting_children else ALL_CHILDREN,
        }
        self._attributes.update(attributes)
        self._parent_ref: weakref.ref[TreeNode] | None = None
        self._children: list[TreeNode] = []

        if parent is not None:
            parent.add_child(self)

    # Attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> bool:
        """Set an attribute.

        Triggers ``change:<name>`` with ``(node, value)`` and then
        ``change`` with ``(node,)`` when the value actually changed.

        Returns:
            True if the value changed.
        """
        missing = object()
        previous = self._attributes.get(name, missing)
        if previous is not missing and previous == value:
            return False
        self._attributes[name] = value
        self.trigger(f"change:{name}", self, value)
        self.trigger("change", self)
        return True

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    @property
    def id(self) -> str:
        return self._attributes["id"]

    @property
    def tracking_id(self) -> Any:
        return self._attributes["tracking_id"]

    @property
    def is_available(self) -> bool:
        return bool(self._attributes["is_available"])

    @property
    def is_interaction_complete(self) -> bool:
        return bool(self._attributes["is_interaction_complete"])

    @property
    def require_completion_of(self) -> float:
        return self._attributes["require_completion_of"]

    @property
    def is_awaiting_children(self) -> bool:
        return self.require_completion_of == AWAITING_CHILDREN

    # Hierarchy

    @property
    def parent(self) -> "TreeNode | None":
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def children(self) -> list["TreeNode"]:
        """Live children list, owned by this node."""
        return self._children

    @property
    def ancestors(self) -> list["TreeNode"]:
        """Ancestors nearest first, excluding this node."""
        result = []
        node = self.parent
        while node is not None:
            result.append(node)
            node = node.parent
        return result

    def add_child(self, child: "TreeNode") -> "TreeNode":
        """Attach a child.

        Raises:
            ValueError: If the child already has a parent.
        """
        current = child.parent
        if current is self:
            return child
        if current is not None:
            raise ValueError(f"Node '{child.id}' already belongs to '{current.id}'")
        child._parent_ref = weakref.ref(self)
        self._children.append(child)
        self.trigger("add", child, self)
        return child

    def finish_children(self) -> None:
        """Mark every child as attached."""
        self.set("require_completion_of", ALL_CHILDREN)

    def get_available_children(self) -> list["TreeNode"]:
        return [child for child in self._children if child.is_available]

    def walk(self) -> Iterator["TreeNode"]:
        """Depth-first iteration starting with this node."""
        yield self
        for child in self._children:
            yield from child.walk()

    def find_descendant(self, id: str) -> "TreeNode | None":
        for node in self.walk():
            if node.id == id:
                return node
        return None

    # Lifecycle

    def reset(self, force: bool = False) -> bool:
        """Reset the node's interaction state.

        Args:
            force: Reset even when ``can_reset`` is False.

        Returns:
            True if the node was reset.
        """
        if not (self.get("can_reset") or force):
            return False
        self.set("is_interaction_complete", False)
        return True

    def __repr__(self) -> str:
        return f"<TreeNode '{self.id}' available={self.is_available}>"

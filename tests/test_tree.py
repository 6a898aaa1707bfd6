"""
Tests for the content tree model.
"""

import gc
import math

import pytest

from content_modifiers.tree import ALL_CHILDREN, AWAITING_CHILDREN, TreeNode
from content_modifiers.testing import create_test_tree


class TestAttributes:
    """Tests for get/set and change events."""

    def test_defaults(self):
        node = TreeNode("a-05")

        assert node.id == "a-05"
        assert node.tracking_id == "a-05"
        assert node.is_available is True
        assert node.is_interaction_complete is False
        assert node.require_completion_of == ALL_CHILDREN

    def test_extra_attributes(self):
        node = TreeNode("a-05", tracking_id=7, title="Intro")

        assert node.tracking_id == 7
        assert node.get("title") == "Intro"
        assert node.get("missing", "fallback") == "fallback"

    def test_set_triggers_change_events(self):
        node = TreeNode("a-05")
        calls = []

        node.on("change:is_available", lambda n, value: calls.append(("attr", n, value)))
        node.on("change", lambda n: calls.append(("any", n)))

        assert node.set("is_available", False) is True

        assert calls == [("attr", node, False), ("any", node)]

    def test_set_same_value_is_silent(self):
        node = TreeNode("a-05")
        calls = []
        node.on("change:is_available", lambda *args: calls.append(args))

        assert node.set("is_available", True) is False
        assert calls == []


class TestHierarchy:
    """Tests for parent/children/ancestors."""

    def test_ancestors_nearest_first(self):
        root = create_test_tree()
        block = root.find_descendant("b-10")

        assert [a.id for a in block.ancestors] == ["a-05", "co-05", "course"]

    def test_parent_is_weak(self):
        parent = TreeNode("co-05")
        child = TreeNode("a-05", parent=parent)
        assert child.parent is parent

        del parent
        gc.collect()

        assert child.parent is None
        assert child.ancestors == []

    def test_reparenting_rejected(self):
        first = TreeNode("a-05")
        second = TreeNode("a-10")
        child = TreeNode("b-05", parent=first)

        with pytest.raises(ValueError, match="already belongs"):
            second.add_child(child)

        # attaching to the same parent again is harmless
        first.add_child(child)
        assert first.children == [child]

    def test_add_event(self):
        parent = TreeNode("co-05")
        added = []
        parent.on("add", lambda child, p: added.append(child.id))

        TreeNode("a-05", parent=parent)

        assert added == ["a-05"]

    def test_available_children_keep_order(self):
        root = create_test_tree({"P": {"A": {}, "B": {}, "C": {}}})
        page = root.find_descendant("P")
        page.children[1].set("is_available", False)

        assert [c.id for c in page.get_available_children()] == ["A", "C"]

    def test_tracking_ids_depth_first(self):
        root = create_test_tree()

        ids = [(n.id, n.tracking_id) for n in root.walk()][1:4]
        assert ids == [("co-05", 0), ("a-05", 1), ("b-05", 2)]


class TestLifecycle:
    """Tests for awaiting children and reset."""

    def test_awaiting_children(self):
        node = TreeNode("co-05", awaiting_children=True)
        assert node.is_awaiting_children
        assert node.require_completion_of == math.inf == AWAITING_CHILDREN

        node.finish_children()
        assert not node.is_awaiting_children

    def test_reset_marks_incomplete(self):
        node = TreeNode("b-05", is_interaction_complete=True)

        assert node.reset() is True
        assert node.is_interaction_complete is False

    def test_reset_respects_can_reset(self):
        node = TreeNode("b-05", can_reset=False, is_interaction_complete=True)

        assert node.reset() is False
        assert node.is_interaction_complete is True

        assert node.reset(force=True) is True
        assert node.is_interaction_complete is False

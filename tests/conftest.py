"""
Shared fixtures: an isolated registry on a manual clock and a small tree.

Tree used by most tests:

    course
    └── P            (tracking_id 0)
        ├── A        (tracking_id 1)
        ├── B        (tracking_id 2)
        └── C        (tracking_id 3)
"""

from __future__ import annotations

import io

import pytest

from content_modifiers.testing import ManualClock, create_test_registry, create_test_tree


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def log_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def registry(clock, log_output):
    registry = create_test_registry(clock, log_output=log_output)
    yield registry
    registry.destroy()


@pytest.fixture
def tree():
    return create_test_tree({"P": {"A": {}, "B": {}, "C": {}}})


@pytest.fixture
def page(tree):
    return tree.find_descendant("P")


@pytest.fixture
def children(page) -> dict:
    return {child.id: child for child in page.children}

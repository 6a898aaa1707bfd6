"""
Content Modifiers - Testing Utilities

Components:
    ManualClock           - Deterministic scheduler time
    StaticModifierSet     - Keeps configured children
    ExcludingModifierSet  - Drops configured children
    create_test_tree      - Nested-dict tree builder
    create_test_registry  - Quiet registry on a manual clock

Usage:
    from content_modifiers.testing import ManualClock, create_test_registry, tick

    clock = ManualClock()
    registry = create_test_registry(clock)
    ...
    tick(registry.scheduler, clock, 0.05)
"""

from content_modifiers.testing.mock import (
    CallRecord,
    ExcludingModifierSet,
    ManualClock,
    RecordingModifierSet,
    StaticModifierSet,
    tick,
)

from content_modifiers.testing.assertions import (
    assert_available,
    assert_hierarchy_invariant,
    hierarchy_violations,
)

from content_modifiers.testing.fixtures import (
    SAMPLE_TREE,
    create_test_registry,
    create_test_tree,
)

__all__ = [
    # Mock
    "CallRecord",
    "ExcludingModifierSet",
    "ManualClock",
    "RecordingModifierSet",
    "StaticModifierSet",
    "tick",
    # Assertions
    "assert_available",
    "assert_hierarchy_invariant",
    "hierarchy_violations",
    # Fixtures
    "SAMPLE_TREE",
    "create_test_registry",
    "create_test_tree",
]

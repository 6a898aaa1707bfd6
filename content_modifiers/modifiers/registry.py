"""
Modifier Registry - ordered modifier sets and the cascade that keeps
child availability consistent as the tree changes.

Architecture:
    1. A tree event arrives (child availability, refresh, modified,
       interaction incomplete, reset)
    2. The event is debounced per node; bursts collapse into one pass
    3. refresh_node_sets(node) runs the two-phase pass:
       reset() every set on the node, then refresh() every set
    4. Availability writes land on the node's children while their
       listeners are detached
    5. Children whose availability the pass switched have the sets in
       their subtree refreshed, so nothing stays available below them
    6. Later external availability changes are latched and re-enter
       the pass for the parent node, one level up

The busy indicator (Wait) is raised for the duration of a pass, and from
the moment an upward reaction is scheduled, so renderers can hold off.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from content_modifiers.config import ModifiersConfig
from content_modifiers.events import Subscription
from content_modifiers.host import Host, Wait
from content_modifiers.modifiers.base import ModifierSet
from content_modifiers.modifiers.latch import AvailabilityLatch
from content_modifiers.monitoring import LogLevel, StructuredLogger
from content_modifiers.runtime import Debouncer, Scheduler
from content_modifiers.storage import OfflineStorage
from content_modifiers.tree import TreeNode


@dataclass
class CascadeStats:
    """Cascade statistics."""
    passes: int = 0
    refresh_requests: int = 0
    suspends_begun: int = 0
    suspends_ended: int = 0

    def reset(self):
        self.passes = 0
        self.refresh_requests = 0
        self.suspends_begun = 0
        self.suspends_ended = 0


class ModifierRegistry:
    """
    Registry of modifier sets, ordered by ``order``.

    Lifecycle:
        registry = ModifierRegistry(host=host, storage=storage)
        RandomiseSet(kind="randomise", model=page, registry=registry)
        host.start()        # wires listeners, runs setup_models()
        ...
        registry.destroy()  # detaches everything

    Hosts that are already started call setup_listeners() directly
    once their sets exist.
    """

    def __init__(
        self,
        host: Host | None = None,
        storage: OfflineStorage | None = None,
        wait: Wait | None = None,
        scheduler: Scheduler | None = None,
        config: ModifiersConfig | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.config = config or ModifiersConfig()
        self.host = host or Host()
        if storage is None:
            storage = (
                OfflineStorage.from_path(self.config.storage_path)
                if self.config.storage_path
                else OfflineStorage()
            )
        self.storage = storage
        self.wait = wait or Wait()
        self.scheduler = scheduler or Scheduler()
        if logger is None:
            logger = StructuredLogger(
                level=LogLevel(self.config.log_level),
                json_format=self.config.json_logs,
            )
        self.logger = logger.bind(component="modifiers")
        self.stats = CascadeStats()

        self._sets: list[ModifierSet] = []
        self._originals: dict[str, tuple[TreeNode, ...]] = {}
        self._latch = AvailabilityLatch()
        self._is_waiting = False
        self._is_listening = False

        self._lifecycle: list[Subscription] = []
        self._node_subscriptions: dict[str, list[Subscription]] = {}
        self._child_subscriptions: dict[str, list[Subscription]] = {}

        # debounce to prevent multiple calls and limit to last call
        delay = self.config.debounce_seconds
        self._refresh = Debouncer(self.scheduler, delay, self.refresh_node_sets)
        self._available_change = Debouncer(
            self.scheduler, delay, self._on_debounced_available_change
        )

        self._lifecycle.append(self.host.on(Host.START_EVENT, self.on_app_start))

    # Registration

    def register(self, modifier_set: ModifierSet) -> None:
        """Register and order a modifier set.

        This is usually performed automatically when the set's node has
        all its children. Registering the same set twice is a no-op.
        """
        if modifier_set in self._sets:
            return
        self._sets.append(modifier_set)
        # sort is stable, ties keep registration order
        self._sets.sort(key=lambda s: s.order)
        self.logger.set_registered(
            modifier_set.kind,
            modifier_set.model_id,
            modifier_set.order,
        )

        if self._is_listening:
            if self.storage.ready:
                self._apply_sets(modifier_set.model, [modifier_set])
            self._wire_node(modifier_set.model)

    def get_by_node_id(self, id: str) -> list[ModifierSet]:
        """Registered sets bound to the given node id, in order."""
        return [s for s in self._sets if s.model_id == id]

    @property
    def sets(self) -> list[ModifierSet]:
        return list(self._sets)

    @property
    def models(self) -> list[TreeNode]:
        """Distinct target nodes, in first-seen order."""
        seen: dict[str, TreeNode] = {}
        for modifier_set in self._sets:
            seen.setdefault(modifier_set.model_id, modifier_set.model)
        return list(seen.values())

    def original_models_for(self, model: TreeNode) -> tuple[TreeNode, ...]:
        """Children of the node as first captured. Captured once per node."""
        originals = self._originals.get(model.id)
        if originals is None:
            originals = tuple(model.children)
            self._originals[model.id] = originals
        return originals

    @property
    def latch(self) -> AvailabilityLatch:
        return self._latch

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    # Suspend

    @property
    def is_suspended(self) -> bool:
        return self._is_waiting

    def begin_suspend(self) -> None:
        if self._is_waiting:
            return
        self.wait.begin()
        self._is_waiting = True
        self.stats.suspends_begun += 1

    def end_suspend(self) -> None:
        if not self._is_waiting:
            return
        self.wait.end()
        self._is_waiting = False
        self.stats.suspends_ended += 1

    # Wiring

    def setup_listeners(self) -> None:
        """Wire every target node. Runs once, on ``app:start``."""
        if self._is_listening:
            return
        self._is_listening = True

        if self.storage.ready:
            self.on_storage_ready()
        else:
            self._lifecycle.append(
                self.storage.on(OfflineStorage.READY_EVENT, self.on_storage_ready)
            )

        for model in self.models:
            self._wire_node(model)

    def _wire_node(self, model: TreeNode) -> None:
        if model.id in self._node_subscriptions:
            return
        self._node_subscriptions[model.id] = [
            model.on("modifier:refresh", lambda *args: self.on_refresh_model(model)),
            model.on("modifier:modified", lambda *args: self.on_model_modified(model)),
            model.on(
                "change:is_interaction_complete",
                self.on_model_is_interaction_complete_change,
            ),
            model.on("reset", lambda *args: self.on_model_reset(model)),
        ]
        self._attach_child_listeners(model)

    def _attach_child_listeners(self, model: TreeNode) -> None:
        subscriptions = []
        for child in model.children:
            subscriptions.append(
                child.on("change:is_available", self.on_model_is_available_change)
            )
            subscriptions.append(
                child.on("change:is_available", self.on_debounced_model_is_available_change)
            )
        self._child_subscriptions[model.id] = subscriptions

    def _detach_child_listeners(self, model: TreeNode) -> bool:
        subscriptions = self._child_subscriptions.pop(model.id, None)
        if subscriptions is None:
            return False
        for subscription in subscriptions:
            subscription.cancel()
        return True

    # Cascade

    def request_refresh(self, model: TreeNode) -> None:
        """Schedule a debounced pass for the node."""
        self.stats.refresh_requests += 1
        self._refresh(model.id, model)

    def _apply_sets(self, model: TreeNode, sets: list[ModifierSet]) -> None:
        """Run setup_models() of the given sets without latching their writes."""
        was_attached = self._detach_child_listeners(model)
        before = {child.id: child.is_available for child in model.children}
        try:
            for modifier_set in sets:
                modifier_set.setup_models()
        finally:
            if was_attached:
                self._attach_child_listeners(model)
        self._refresh_changed_subtrees(model, before)

    def _refresh_changed_subtrees(self, model: TreeNode, before: dict[str, bool]) -> None:
        # children switched by a pass are not watched, so their own sets
        # and those below them are recomputed against the new ancestry
        for child in model.children:
            if child.is_available == before.get(child.id, child.is_available):
                continue
            for node in child.walk():
                if self.get_by_node_id(node.id):
                    self.request_refresh(node)

    def refresh_node_sets(self, model: TreeNode) -> None:
        """Reset then refresh every set on the node, as one suspended pass."""
        self.begin_suspend()
        was_attached = self._detach_child_listeners(model)
        before = {child.id: child.is_available for child in model.children}
        sets = self.get_by_node_id(model.id)
        self.logger.cascade_start(model.id, len(sets))
        started = time.perf_counter()
        try:
            for modifier_set in sets:
                modifier_set.reset()
            for modifier_set in sets:
                modifier_set.refresh()
        finally:
            if was_attached:
                self._attach_child_listeners(model)
            self.end_suspend()
        self.stats.passes += 1
        self.logger.cascade_complete(
            model.id,
            len(sets),
            (time.perf_counter() - started) * 1000,
        )
        self._refresh_changed_subtrees(model, before)

    def reset_node(self, model: TreeNode) -> None:
        """Forget latched exclusions of the node's children and recompute."""
        self._latch.clear(model.children)
        self.request_refresh(model)

    def _on_debounced_available_change(self, model: TreeNode) -> None:
        parent = model.parent
        if parent is None:
            return
        self.begin_suspend()
        self.request_refresh(parent)

    # Listeners

    def on_app_start(self, *args: Any) -> None:
        # delay any listeners until all models have been restored
        self.setup_listeners()

    def on_storage_ready(self, *args: Any) -> None:
        for model in self.models:
            self._apply_sets(model, self.get_by_node_id(model.id))

    def on_refresh_model(self, model: TreeNode) -> None:
        self.request_refresh(model)

    def on_model_modified(self, model: TreeNode) -> None:
        self.request_refresh(model)

    def on_model_is_interaction_complete_change(self, model: TreeNode, value: bool) -> None:
        if value:
            return
        self.on_model_reset(model)

    def on_model_reset(self, model: TreeNode) -> None:
        self.reset_node(model)

    def on_model_is_available_change(self, model: TreeNode, value: bool) -> None:
        self._latch.latch(model)

    def on_debounced_model_is_available_change(self, model: TreeNode, value: bool) -> None:
        parent = model.parent
        key = parent.id if parent is not None else model.id
        self._available_change(key, model)

    # Teardown

    def destroy(self) -> None:
        """Detach all listeners, drop pending work and every set."""
        self._refresh.cancel_all()
        self._available_change.cancel_all()
        for subscription in self._lifecycle:
            subscription.cancel()
        self._lifecycle.clear()
        for subscriptions in self._node_subscriptions.values():
            for subscription in subscriptions:
                subscription.cancel()
        self._node_subscriptions.clear()
        for model_id in list(self._child_subscriptions):
            for subscription in self._child_subscriptions.pop(model_id):
                subscription.cancel()
        for modifier_set in self._sets:
            modifier_set.destroy()
        self._sets.clear()
        self._originals.clear()
        self._latch.clear_all()
        self._is_listening = False
        self.end_suspend()

    def __len__(self) -> int:
        return len(self._sets)

    def __repr__(self) -> str:
        return f"<ModifierRegistry sets={len(self._sets)} listening={self._is_listening}>"

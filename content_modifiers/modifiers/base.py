"""
Base modifier set.

A modifier set is bound to one tree node and decides which of that
node's children are available. Concrete sets override setup_models()
and route every decision through the ``models`` setter, which applies
the hierarchy and latch constraints.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from content_modifiers.errors import SetupModelsNotImplementedError, StorageError
from content_modifiers.events import Subscription
from content_modifiers.runtime import Debouncer
from content_modifiers.tree import AWAITING_CHILDREN, TreeNode

if TYPE_CHECKING:
    from content_modifiers.modifiers.registry import ModifierRegistry


class ModifierSet:
    """Base class for all modifier sets.

    Each concrete set must implement:
    - setup_models(): compute and apply the available children

    and may override:
    - order: execution order among all sets (lower = earlier)
    - init_config(): re-derive ``self.config`` before each refresh
    - setup_listeners(): subscribe to node events, once

    Sets on the same node compose by intersection: pick from
    ``self.models`` (what lower-order sets left available) rather than
    from ``original_models``.

    Example:
        class FirstTwo(ModifierSet):
            order = 2

            def init_config(self):
                self.config = self.model.get(self.kind)

            def setup_models(self):
                if not self.is_enabled:
                    return
                self.models = self.models[:2]

        FirstTwo(kind="first_two", model=page, registry=registry)
    """

    order: int = 1

    def __init__(
        self,
        kind: str,
        model: TreeNode,
        registry: "ModifierRegistry",
    ):
        """Bind the set to a node.

        Registration, config and listeners are deferred until the node's
        children are all attached.

        Args:
            kind: Set type; also the persistence namespace.
            model: Node whose children this set governs.
            registry: Registry the set belongs to.
        """
        if not kind:
            raise ValueError(f"{type(self).__name__} requires a kind")
        self._kind = kind
        self._model = model
        self._registry = registry
        self._collection = model.children
        self._config: dict[str, Any] | None = None
        self._is_set_up = False
        self._subscriptions: list[Subscription] = []
        self._logger = registry.logger.bind(kind=kind, node_id=model.id)
        self._config_change = Debouncer(
            registry.scheduler,
            registry.config.config_debounce_seconds,
            self.trigger_model_modified,
        )

        if self.is_awaiting_children:
            self._subscriptions.append(
                model.on("change:require_completion_of", self._on_children_attached)
            )
            return
        self._setup()

    def _setup(self) -> None:
        if self._is_set_up:
            return
        self._is_set_up = True
        self._registry.original_models_for(self._model)
        # config must be in place before a listening registry applies the set
        self.init_config()
        self.register()
        self._subscriptions.append(
            self._model.on(f"change:{self._kind}", self.on_model_config_change)
        )
        self.setup_listeners()

    def _on_children_attached(self, model: TreeNode, value: float) -> None:
        if value == AWAITING_CHILDREN:
            return
        self._subscriptions = [
            s for s in self._subscriptions if s.event != "change:require_completion_of"
        ]
        model.off("change:require_completion_of", self._on_children_attached)
        self._setup()

    def register(self) -> None:
        """Register the set. Performed automatically once children are ready."""
        self._registry.register(self)

    # Extension points

    def setup_models(self) -> SetupModelsNotImplementedError | None:
        """Compute and apply the available children.

        The base implementation reports the missing override and returns
        the error without touching availability.
        """
        error = SetupModelsNotImplementedError(self._kind, type(self).__name__)
        self._logger.setup_models_missing(error)
        return error

    def init_config(self) -> None:
        pass

    def setup_listeners(self) -> None:
        pass

    # Lifecycle

    def reset(self) -> None:
        """Save the current selection under the reset marker, then restore the full pool."""
        self._save_state(is_reset=True)
        self.models = self.original_models

    def refresh(self) -> SetupModelsNotImplementedError | None:
        """Re-derive config and recompute the available children."""
        self.init_config()
        return self.setup_models()

    def destroy(self) -> None:
        """Detach every listener the set holds."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self._config_change.cancel_all()

    # Properties

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def model(self) -> TreeNode:
        return self._model

    @property
    def model_id(self) -> str:
        return self._model.id

    @property
    def registry(self) -> "ModifierRegistry":
        return self._registry

    @property
    def collection(self) -> list[TreeNode]:
        """Full, unfiltered child list."""
        return self._collection

    @property
    def config(self) -> dict[str, Any] | None:
        return self._config

    @config.setter
    def config(self, value: dict[str, Any] | None) -> None:
        self._config = value

    @property
    def is_enabled(self) -> bool:
        return bool((self._config or {}).get("is_enabled", False))

    @property
    def is_set_up(self) -> bool:
        return self._is_set_up

    @property
    def is_awaiting_children(self) -> bool:
        return self._model.require_completion_of == AWAITING_CHILDREN

    @property
    def original_models(self) -> tuple[TreeNode, ...]:
        """Children as first captured for this node, shared by every set on it."""
        return self._registry.original_models_for(self._model)

    @property
    def models(self) -> list[TreeNode]:
        """Currently available children, in original order."""
        return self._model.get_available_children()

    @models.setter
    def models(self, models: list[TreeNode] | tuple[TreeNode, ...]) -> None:
        included = set(models)
        latch = self._registry.latch
        for model in self.original_models:
            is_included = model in included
            is_still_available = latch.get(model)
            # don't include model in hierarchy check
            is_available_in_hierarchy = all(a.is_available for a in model.ancestors)
            model.set(
                "is_available",
                is_included and is_still_available and is_available_in_hierarchy,
            )

    # Persistence

    @property
    def save_state(self) -> list[Any] | None:
        """Tracking ids of the available children, or None if there are none."""
        models = self.models
        return [model.tracking_id for model in models] if models else None

    @property
    def save_state_name(self) -> str:
        return self._kind

    @property
    def reset_key(self) -> str:
        return f"{self.model_id}{self._registry.config.reset_marker}"

    def save(self) -> None:
        """Persist the current selection (or delete it when empty)."""
        self._save_state()

    def get_saved_models(self, reset: bool = False) -> list[TreeNode] | None:
        """Restore a saved selection.

        Stored tracking ids are mapped onto the currently available
        children; ids that no longer resolve are dropped.

        Args:
            reset: Read the selection saved by the last reset() instead.

        Returns:
            Matching nodes, or None when nothing usable is stored.
        """
        storage = self._registry.storage
        key = self.reset_key if reset else self.model_id
        try:
            token = (storage.get(self.save_state_name) or {}).get(key)
            if token is None:
                return None
            tracking_ids = storage.deserialize(token)
        except StorageError as e:
            self._logger.restore_failed(e, namespace=self.save_state_name, key=key)
            return None

        models = self.models
        restored = []
        for tracking_id in tracking_ids:
            match = next((m for m in models if m.tracking_id == tracking_id), None)
            if match is not None:
                restored.append(match)
        return restored

    def _save_state(self, is_reset: bool = False) -> None:
        storage = self._registry.storage
        try:
            record = storage.get(self.save_state_name) or {}
        except StorageError as e:
            self._logger.restore_failed(e, namespace=self.save_state_name)
            record = {}

        state = self.save_state
        key = self.model_id
        if is_reset:
            record.pop(key, None)
            key = self.reset_key

        if state is None:
            record.pop(key, None)
        else:
            record[key] = storage.serialize(state)
        storage.set(self.save_state_name, record)

    # Events

    def trigger_model_refresh(self) -> None:
        self._model.trigger("modifier:refresh")

    def trigger_model_modified(self) -> None:
        self._model.trigger("modifier:modified")

    def on_model_config_change(self, *args: Any) -> None:
        """Debounced reaction to ``change:<kind>`` on the node."""
        self._config_change(self.model_id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self._kind}' on '{self.model_id}' order={self.order}>"

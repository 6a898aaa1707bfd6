"""
Modifier Errors - Domain-specific error types.

Error hierarchy:
    ModifierError (base)
    ├── SetupModelsNotImplementedError (reported, not raised)
    └── StorageError
        └── CodecError
"""

from __future__ import annotations

from typing import Any


class ModifierError(Exception):
    """Base error for all modifier-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SetupModelsNotImplementedError(ModifierError):
    """
    A concrete modifier set did not override setup_models.

    Note: This is NOT raised by the core. The base implementation
    builds it, logs it and returns it so a batched cascade keeps
    running for the other sets on the node.
    """

    def __init__(
        self,
        kind: str,
        set_class: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            f"setup_models must be overridden for {set_class} ('{kind}')",
            details,
        )
        self.kind = kind
        self.set_class = set_class


class StorageError(ModifierError):
    """
    Raised when persisted state cannot be read or written.

    Restoring treats this as "no saved state".
    """

    def __init__(
        self,
        message: str,
        namespace: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.namespace = namespace


class CodecError(StorageError):
    """
    Raised when a stored token cannot be deserialized.

    Examples:
    - Malformed JSON
    - A payload that is not a list of tracking ids
    """

    def __init__(
        self,
        token: Any,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message or f"Cannot deserialize token: {token!r}", details=details)
        self.token = token

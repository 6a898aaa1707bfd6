"""
Offline Storage - Namespaced persistence of modifier selections.

Each modifier kind owns one namespace. A namespace record maps node ids
to tokens, where a token is the serialized list of tracking ids that
were available when the selection was saved.

Usage:
    storage = OfflineStorage()
    record = storage.get("randomise") or {}
    record["co-05"] = storage.serialize([0, 2, 3])
    storage.set("randomise", record)

    storage.deserialize(storage.get("randomise")["co-05"])  # [0, 2, 3]
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from content_modifiers.errors import CodecError, StorageError
from content_modifiers.events import EventEmitter

logger = logging.getLogger(__name__)


class MemoryBackend:
    """In-memory storage backend for testing/development."""

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def load(self, namespace: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._data.get(namespace)
            return dict(record) if record is not None else None

    def save(self, namespace: str, record: dict[str, Any]) -> None:
        with self._lock:
            self._data[namespace] = dict(record)

    def delete(self, namespace: str) -> None:
        with self._lock:
            self._data.pop(namespace, None)

    def namespaces(self) -> list[str]:
        with self._lock:
            return list(self._data)


class JsonFileBackend:
    """Stores every namespace in one JSON document.

    The file is read lazily on first access and rewritten on every save.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._data: dict[str, dict[str, Any]] | None = None
        self._lock = threading.Lock()

    def _read(self) -> dict[str, dict[str, Any]]:
        if self._data is None:
            if not self.path.exists():
                self._data = {}
            else:
                try:
                    with open(self.path, "r", encoding="utf-8") as f:
                        data = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    raise StorageError(f"Cannot read {self.path}: {e}") from e
                if not isinstance(data, dict):
                    raise StorageError(f"{self.path} does not contain a JSON object")
                self._data = data
        return self._data

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, sort_keys=True)

    def load(self, namespace: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._read().get(namespace)
            return dict(record) if record is not None else None

    def save(self, namespace: str, record: dict[str, Any]) -> None:
        with self._lock:
            self._read()[namespace] = dict(record)
            self._write()

    def delete(self, namespace: str) -> None:
        with self._lock:
            if self._read().pop(namespace, None) is not None:
                self._write()

    def namespaces(self) -> list[str]:
        with self._lock:
            return list(self._read())


class OfflineStorage(EventEmitter):
    """Key/value persistence with a list codec and a readiness signal.

    Events:
        ready: Fired once by mark_ready().

    Args:
        backend: MemoryBackend (default) or JsonFileBackend.
        ready: Start in the ready state.
    """

    READY_EVENT = "ready"

    def __init__(
        self,
        backend: MemoryBackend | JsonFileBackend | None = None,
        ready: bool = True,
    ):
        super().__init__()
        self._backend = backend or MemoryBackend()
        self._ready = ready

    @classmethod
    def from_path(cls, path: Path | str, ready: bool = True) -> "OfflineStorage":
        return cls(JsonFileBackend(path), ready=ready)

    @property
    def backend(self) -> MemoryBackend | JsonFileBackend:
        return self._backend

    @property
    def ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        """Flag storage as restored and notify listeners (once)."""
        if self._ready:
            return
        self._ready = True
        logger.debug("Offline storage ready")
        self.trigger(self.READY_EVENT)

    def get(self, namespace: str) -> dict[str, Any] | None:
        """Get a copy of a namespace record, or None if absent.

        Raises:
            StorageError: If the backend cannot be read.
        """
        try:
            return self._backend.load(namespace)
        except StorageError as e:
            e.namespace = namespace
            raise

    def set(self, namespace: str, record: dict[str, Any]) -> None:
        """Replace a namespace record. An empty record deletes it."""
        if record:
            self._backend.save(namespace, record)
        else:
            self._backend.delete(namespace)

    def delete(self, namespace: str) -> None:
        self._backend.delete(namespace)

    @staticmethod
    def serialize(values: list[Any]) -> str:
        """Encode a list of tracking ids as a compact token."""
        return json.dumps(list(values), separators=(",", ":"))

    @staticmethod
    def deserialize(token: str) -> list[Any]:
        """Decode a token produced by serialize().

        Raises:
            CodecError: If the token is malformed or not a list.
        """
        try:
            values = json.loads(token)
        except (TypeError, ValueError) as e:
            raise CodecError(token) from e
        if not isinstance(values, list):
            raise CodecError(token, f"Expected a list, got {type(values).__name__}")
        return values

"""
Persistence of modifier selections.
"""

from content_modifiers.storage.offline import (
    JsonFileBackend,
    MemoryBackend,
    OfflineStorage,
)

__all__ = [
    "JsonFileBackend",
    "MemoryBackend",
    "OfflineStorage",
]

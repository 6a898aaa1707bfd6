"""
Configuration for content modifiers.

Defaults mirror the host framework: a 50ms quiet window for every
debounced channel and a ":reset" suffix for reset snapshots.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class ModifiersConfig:
    """Registry and modifier set configuration.

    Args:
        debounce_ms: Quiet window for cascade and availability reactions.
        config_debounce_ms: Quiet window for a set's config change reaction.
        reset_marker: Suffix appended to a node id when saving the
            selection that was in place before a reset.
        storage_path: JSON file to persist saved state into. In-memory
            storage is used when unset.
        log_level: Minimum structured log level.
        json_logs: Emit JSON (vs. human-readable) log lines.

    Example:
        config = ModifiersConfig(debounce_ms=20)
        registry = ModifierRegistry(config=config)
    """

    debounce_ms: int = 50
    config_debounce_ms: int = 50
    reset_marker: str = ":reset"
    storage_path: Path | None = None
    log_level: str = "info"
    json_logs: bool = True

    def __post_init__(self):
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {self.debounce_ms}")
        if self.config_debounce_ms < 0:
            raise ValueError(
                f"config_debounce_ms must be >= 0, got {self.config_debounce_ms}"
            )
        if not self.reset_marker:
            raise ValueError("reset_marker must not be empty")
        if self.storage_path is not None:
            self.storage_path = Path(self.storage_path)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def config_debounce_seconds(self) -> float:
        return self.config_debounce_ms / 1000

    @classmethod
    def from_env(cls, prefix: str = "CONTENT_MODIFIERS_") -> "ModifiersConfig":
        """Build a config from environment variables.

        Reads ``{prefix}DEBOUNCE_MS``, ``CONFIG_DEBOUNCE_MS``,
        ``RESET_MARKER``, ``STORAGE_PATH``, ``LOG_LEVEL`` and ``JSON_LOGS``.
        Unset variables keep their defaults.
        """
        defaults = cls()

        def env(name: str) -> str | None:
            return os.environ.get(f"{prefix}{name}")

        storage_path = env("STORAGE_PATH")
        json_logs = env("JSON_LOGS")

        return cls(
            debounce_ms=int(env("DEBOUNCE_MS") or defaults.debounce_ms),
            config_debounce_ms=int(env("CONFIG_DEBOUNCE_MS") or defaults.config_debounce_ms),
            reset_marker=env("RESET_MARKER") or defaults.reset_marker,
            storage_path=Path(storage_path) if storage_path else None,
            log_level=(env("LOG_LEVEL") or defaults.log_level).lower(),
            json_logs=(
                json_logs.lower() not in {"0", "false", "no"}
                if json_logs is not None
                else defaults.json_logs
            ),
        )

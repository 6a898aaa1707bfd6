"""
Structured logging for content modifiers.

Records are single lines, JSON by default, each named by an event so
registrations, cascade passes and restore failures can be filtered:

    {"level": "info", "event": "cascade_complete", "node_id": "co-05", ...}
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO


class LogLevel(Enum):
    """Severity of a structured record, mirrored onto stdlib levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        return logging.getLevelName(self.name)


@dataclass
class LogRecord:
    """One structured record.

    ``data`` is flattened into the top level when serialized, so bound
    context such as ``component`` or ``node_id`` sits next to ``event``.
    """

    level: str
    event: str
    message: str = ""
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)
    logger_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "event": self.event,
            "message": self.message,
            "timestamp": self.timestamp,
            "logger_name": self.logger_name,
            **self.data,
        }

    def to_json(self) -> str:
        # non-JSON values (paths, nodes) fall back to str()
        return json.dumps(self.to_dict(), default=str)


class StructuredLogger:
    """Structured logging with JSON output.

    Every record carries an event name so cascade passes, registrations
    and restore failures can be filtered by machine:

    Example:
        logger = StructuredLogger("content_modifiers")

        logger.info(
            "cascade_complete",
            message="Refreshed 2 sets",
            node_id="co-05",
            duration_ms=0.8,
        )

        # Output (JSON):
        # {"level": "info", "event": "cascade_complete",
        #  "message": "Refreshed 2 sets", "node_id": "co-05", ...}

        # Bind context once, reuse for every record
        registry_logger = logger.bind(component="registry")
    """

    def __init__(
        self,
        name: str = "content_modifiers",
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
    ):
        """Initialize the logger.

        Args:
            name: Logger name.
            level: Minimum log level.
            output: Output stream (default: stderr).
            json_format: Output as JSON (vs. human-readable).
        """
        self.name = name
        self._level = level
        self._output = output or sys.stderr
        self._json_format = json_format

        # Bound context
        self._context: dict[str, Any] = {}

        self._lock = threading.Lock()

    @property
    def level(self) -> LogLevel:
        return self._level

    def bind(self, **context: Any) -> "StructuredLogger":
        """Create a new logger with bound context.

        Args:
            **context: Context to bind to all log records.

        Returns:
            New logger with bound context.
        """
        new_logger = StructuredLogger(
            name=self.name,
            level=self._level,
            output=self._output,
            json_format=self._json_format,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        **data: Any,
    ) -> None:
        if level.numeric < self._level.numeric:
            return

        record = LogRecord(
            level=level.value,
            event=event,
            message=message,
            data={**self._context, **data},
            logger_name=self.name,
        )

        self._emit(record)

    def _emit(self, record: LogRecord) -> None:
        with self._lock:
            if self._json_format:
                line = record.to_json()
            else:
                line = self._format_human(record)

            print(line, file=self._output)

    def _format_human(self, record: LogRecord) -> str:
        stamp = time.strftime("%H:%M:%S", time.localtime(record.timestamp))
        line = f"{stamp} [{record.level.upper()}] [{record.event}]"
        if record.message:
            line += f" {record.message}"
        if record.data:
            line += " (" + " ".join(f"{k}={v}" for k, v in record.data.items()) + ")"
        return line

    def debug(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.DEBUG, event, message, **data)

    def info(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.INFO, event, message, **data)

    def warning(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.WARNING, event, message, **data)

    def error(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.ERROR, event, message, **data)

    def critical(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.CRITICAL, event, message, **data)

    # Cascade events

    def set_registered(
        self,
        kind: str,
        node_id: str,
        order: int,
        **extra: Any,
    ) -> None:
        """Log modifier set registration."""
        self.debug(
            "set_registered",
            f"Registered '{kind}' set on {node_id}",
            kind=kind,
            node_id=node_id,
            order=order,
            **extra,
        )

    def cascade_start(self, node_id: str, set_count: int, **extra: Any) -> None:
        """Log the start of a cascade pass."""
        self.debug(
            "cascade_start",
            node_id=node_id,
            set_count=set_count,
            **extra,
        )

    def cascade_complete(
        self,
        node_id: str,
        set_count: int,
        duration_ms: float,
        **extra: Any,
    ) -> None:
        """Log cascade pass completion."""
        self.info(
            "cascade_complete",
            f"Refreshed {set_count} sets in {duration_ms:.1f}ms",
            node_id=node_id,
            set_count=set_count,
            duration_ms=duration_ms,
            **extra,
        )

    def setup_models_missing(self, error: Exception, **extra: Any) -> None:
        """Log a modifier set that never overrode setup_models."""
        self.error(
            "setup_models_missing",
            str(error),
            error_type=type(error).__name__,
            **extra,
        )

    def restore_failed(self, error: Exception, **extra: Any) -> None:
        """Log saved state that could not be read back."""
        self.warning(
            "restore_failed",
            str(error),
            error_type=type(error).__name__,
            **extra,
        )


# Global logger instance
_global_logger: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> StructuredLogger:
    """Configure global logging.

    Args:
        level: Log level.
        output: Output stream.
        json_format: Use JSON format.

    Returns:
        Configured logger.
    """
    global _global_logger

    if isinstance(level, str):
        level = LogLevel(level.lower())

    _global_logger = StructuredLogger(
        name="content_modifiers",
        level=level,
        output=output,
        json_format=json_format,
    )

    return _global_logger


def get_logger(name: str = "content_modifiers") -> StructuredLogger:
    """Get the global logger, creating a default one on first use."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name)

    return _global_logger

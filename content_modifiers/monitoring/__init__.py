"""
Observability for content modifiers.

Example:
    from content_modifiers.monitoring import configure_logging

    logger = configure_logging(level="debug", json_format=False)
    logger.info("cascade_complete", node_id="co-05", set_count=2)
"""

from content_modifiers.monitoring.logging import (
    LogLevel,
    LogRecord,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "LogRecord",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

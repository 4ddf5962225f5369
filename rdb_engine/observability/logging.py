"""
Contextual logging utilities for RDB_ENGINE.

Log records emitted through get_logger() carry the current correlation ID
(if one is set for the running thread or task) plus any fields bound to the
adapter, such as the client's address, database and mode.
"""

import contextvars
import logging
import uuid
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set a correlation ID in the current context.

    Args:
        correlation_id: Optional correlation ID (generates new one if None)

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges bound fields and the correlation ID into records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context: dict[str, Any] = dict(self.extra or {})
        correlation_id = get_correlation_id()
        if correlation_id:
            context["correlation_id"] = correlation_id
        context.update(kwargs.get("extra") or {})
        kwargs["extra"] = context
        return msg, kwargs

    def bind(self, **fields: Any) -> "ContextualLoggerAdapter":
        """Return a new adapter with additional bound fields."""
        return ContextualLoggerAdapter(self.logger, {**(self.extra or {}), **fields})


def get_logger(name: str, **fields: Any) -> ContextualLoggerAdapter:
    """
    Get a contextual logger.

    Args:
        name: Logger name (typically __name__)
        **fields: Fields attached to every record (addr, db, mode, ...)
    """
    return ContextualLoggerAdapter(logging.getLogger(name), fields)


def log_operation(
    logger: logging.LoggerAdapter | logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log a store operation with structured context.

    Args:
        logger: Logger or adapter
        operation: Operation (command) name
        level: Log level
        success: Whether the operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Additional context
    """
    extra: dict[str, Any] = {"operation": operation, "success": success, **context}
    message = f"Operation: {operation}" if success else f"Operation failed: {operation}"
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
        message += f" (duration: {duration_ms:.2f}ms)"
    logger.log(level, message, extra=extra)

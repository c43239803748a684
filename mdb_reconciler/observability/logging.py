"""
Contextual logging utilities for MDB_RECONCILER.

Attaches a correlation ID and the identity of the index being worked on to
log records, so every line emitted during one declarative operation can be
tied together.
"""

import contextvars
import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..indexes.types import IndexIdentity

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_index_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "index_context", default=None
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


def set_index_context(identity: "IndexIdentity", **kwargs: Any) -> None:
    """
    Set the index being operated on for logging.

    Args:
        identity: Identity of the index
        **kwargs: Additional context (operation, etc.)
    """
    _index_context.set(
        {
            "database": identity.database,
            "collection": identity.collection,
            "index_name": identity.name,
            **kwargs,
        }
    )


def clear_index_context() -> None:
    _index_context.set(None)


def get_logging_context() -> dict[str, Any]:
    """
    Get current logging context (timestamp, correlation ID and index context).
    """
    context: dict[str, Any] = {"timestamp": datetime.now().isoformat()}

    correlation_id = get_correlation_id()
    if correlation_id:
        context["correlation_id"] = correlation_id

    index_context = _index_context.get()
    if index_context:
        context.update(index_context)

    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the current logging context to records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = get_logging_context()
        extra = kwargs.get("extra", {})
        if extra:
            context.update(extra)
        kwargs["extra"] = context
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Get a contextual logger for ``name`` (typically __name__)."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.INFO,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log an operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (create_index, get_index, ...)
        level: Log level
        success: Whether operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Additional context
    """
    log_context = get_logging_context()
    log_context.update({"operation": operation, "success": success})
    if duration_ms is not None:
        log_context["duration_ms"] = round(duration_ms, 2)
    log_context.update(context)

    message = f"Operation: {operation}" if success else f"Operation failed: {operation}"
    if duration_ms is not None:
        message += f" (duration: {duration_ms:.2f}ms)"

    logger.log(level, message, extra=log_context)

"""
Observability components.

Provides contextual logging for index reconciliation operations.
"""

from .logging import (
    ContextualLoggerAdapter,
    clear_correlation_id,
    clear_index_context,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    set_correlation_id,
    set_index_context,
)

__all__ = [
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "set_index_context",
    "clear_index_context",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
]

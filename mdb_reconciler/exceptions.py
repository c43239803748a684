"""
Custom exceptions for MDB_RECONCILER.

These exceptions provide specific error types for declared-state
reconciliation while remaining catchable as RuntimeError.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .indexes.types import IndexIdentity


class MongoDBReconcilerError(RuntimeError):
    """
    Base exception for MDB_RECONCILER errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (database,
                 collection, index_name, operation, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


def _identity_context(identity: Optional["IndexIdentity"]) -> Dict[str, Any]:
    if identity is None:
        return {}
    return {
        "database": identity.database,
        "collection": identity.collection,
        "index_name": identity.name,
    }


class ConfigurationError(MongoDBReconcilerError):
    """
    Raised when a declared configuration is invalid or self-contradictory.

    Always fixable by editing the declaration; never retried.

    Attributes:
        message: Error message
        config_key: Declared setting that caused the error (if available)
        config_value: Offending value (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the configuration error.

        Args:
            message: Error message
            config_key: Declared setting that caused the error (if available)
            config_value: Offending value (if available)
            context: Additional context information
        """
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class NotFoundError(MongoDBReconcilerError):
    """
    Raised when no index matches the requested identity.

    Callers reading state treat this as "the index no longer exists".

    Attributes:
        identity: The (database, collection, name) identity that was looked up
        name: Index name, for convenience
    """

    def __init__(
        self,
        identity: "IndexIdentity",
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = _identity_context(identity)
        merged.update(context or {})
        super().__init__(message or f"Index '{identity.name}' not found", context=merged)
        self.identity = identity
        self.name = identity.name


class IndexOperationError(MongoDBReconcilerError):
    """
    Raised when a database operation on an index fails.

    Wraps the driver exception (available as ``__cause__``) and prepends the
    operation name and identity.

    Attributes:
        operation: Operation name (create_index, list_indexes, drop_index)
        identity: Identity of the index involved (if available)
    """

    def __init__(
        self,
        message: str,
        operation: str,
        identity: Optional["IndexIdentity"] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = {"operation": operation, **_identity_context(identity)}
        merged.update(context or {})
        super().__init__(message, context=merged)
        self.operation = operation
        self.identity = identity

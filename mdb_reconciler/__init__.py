"""
MDB_RECONCILER - MongoDB index reconciliation

Translates declared index configurations into MongoDB index-creation
commands and maps the server's index descriptions back into the declared
shape, so declarative infrastructure tools can detect drift.
"""

from .config import ReconcilerConfig
from .exceptions import (ConfigurationError, IndexOperationError,
                         MongoDBReconcilerError, NotFoundError)
from .indexes import (Collation, Index, IndexIdentity, IndexKey, IndexManager,
                      IndexOptions, detect_drift, normalize_index,
                      parse_declaration, reconcile_index, to_declaration)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ReconcilerConfig",
    # Errors
    "MongoDBReconcilerError",
    "ConfigurationError",
    "NotFoundError",
    "IndexOperationError",
    # Data model
    "Collation",
    "Index",
    "IndexIdentity",
    "IndexKey",
    "IndexOptions",
    # Operations
    "normalize_index",
    "reconcile_index",
    "detect_drift",
    "parse_declaration",
    "to_declaration",
    "IndexManager",
]

"""
Index Management Module

Normalizes declared indexes into MongoDB create commands, reconciles the
descriptions MongoDB returns back into declared shape, and manages the
create / read / delete lifecycle.

This module is part of MDB_RECONCILER.
"""

from .drift import detect_drift
from .helpers import detect_kind
from .manager import IndexManager
from .normalizer import IndexCommand, normalize_index
from .reconciler import classify_key_value, reconcile_description, reconcile_index
from .schema import DECLARATION_SCHEMA, parse_declaration, to_declaration, validate_declaration
from .types import Collation, Index, IndexIdentity, IndexKey, IndexOptions
from .validation import validate_index, validate_partial_filter

__all__ = [
    # Data model
    "Collation",
    "Index",
    "IndexIdentity",
    "IndexKey",
    "IndexOptions",
    # Normalize / reconcile
    "IndexCommand",
    "normalize_index",
    "validate_index",
    "validate_partial_filter",
    "classify_key_value",
    "reconcile_description",
    "reconcile_index",
    "detect_kind",
    "detect_drift",
    # Declarations
    "DECLARATION_SCHEMA",
    "parse_declaration",
    "to_declaration",
    "validate_declaration",
    # Manager
    "IndexManager",
]

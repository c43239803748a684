"""
Helper functions for index normalization and reconciliation.

This module contains small utilities shared by the normalizer, the
reconciler and the drift detector.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..constants import (
    INDEX_KIND_PLAIN,
    KIND_PRECEDENCE,
    TTL_FIELD_SUFFIXES,
    WILDCARD_MARKER,
)
from .types import IndexKey

logger = logging.getLogger(__name__)


def detect_kind(keys: Iterable[IndexKey]) -> str:
    """
    Derive the kind of an index from its key types.

    When several special key types are present the first one in
    ``KIND_PRECEDENCE`` wins, so the result is deterministic.

    Args:
        keys: Declared or reconciled index keys

    Returns:
        One of "text", "wildcard", "2dsphere", "2d", "hashed" or "plain"
    """
    key_types = {key.type for key in keys}
    for kind in KIND_PRECEDENCE:
        if kind in key_types:
            return kind
    return INDEX_KIND_PLAIN


def has_timestamp_field(keys: Iterable[IndexKey]) -> bool:
    """
    Check whether any key field name looks like it holds a timestamp.

    This is a naming convention check (``createdAt``, ``expiry_date``,
    ``lastSeenTime``), not a type check: declared keys carry no data types.
    """
    return any(key.field.lower().endswith(TTL_FIELD_SUFFIXES) for key in keys)


def is_wildcard_path(field_name: str) -> bool:
    """Check if a key field path ends in the wildcard marker."""
    return field_name.endswith(WILDCARD_MARKER)


def to_plain(value: Any) -> Any:
    """
    Recursively convert driver containers to plain Python values.

    ``SON`` and other mappings become ``dict``, tuples become lists; scalar
    leaves (including numbers) are returned unchanged.

    Example:
        >>> to_plain(SON([("status", SON([("$in", ("a", "b"))]))]))
        {"status": {"$in": ["a", "b"]}}
    """
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


def is_int(value: Any) -> bool:
    """True for integers (including bson Int64), never for booleans."""
    return isinstance(value, int) and not isinstance(value, bool)


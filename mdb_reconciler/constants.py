"""
Constants for MDB_RECONCILER.

This module contains all shared constants used across the codebase to avoid
magic numbers and keep the wire names of index options in one place.
"""

from typing import Final

# ============================================================================
# INDEX FORMAT CONSTANTS
# ============================================================================

DEFAULT_INDEX_VERSION: Final[int] = 2
"""Index format version stamped on every create command."""

WILDCARD_MARKER: Final[str] = "$**"
"""Path suffix MongoDB uses for wildcard index keys."""

TEXT_INDEX_MARKER: Final[str] = "_fts"
"""Sentinel key field MongoDB stores in place of text-indexed fields."""

TEXT_INDEX_TERM_MARKER: Final[str] = "_ftsx"
"""Companion sentinel MongoDB stores after the text marker."""

TEXT_INDEX_VERSIONS: Final[tuple[int, ...]] = (1, 2, 3)
"""Accepted values for textIndexVersion."""

MIN_2D_BITS: Final[int] = 1
MAX_2D_BITS: Final[int] = 32

MIN_TTL_SECONDS: Final[int] = 0
"""Minimum TTL value in seconds (0 expires at the stored timestamp)."""

# ============================================================================
# KEY TYPE CONSTANTS
# ============================================================================

KEY_TYPE_ASCENDING: Final[str] = "1"
KEY_TYPE_DESCENDING: Final[str] = "-1"
KEY_TYPE_TEXT: Final[str] = "text"
KEY_TYPE_WILDCARD: Final[str] = "wildcard"
KEY_TYPE_2D: Final[str] = "2d"
KEY_TYPE_2DSPHERE: Final[str] = "2dsphere"
KEY_TYPE_HASHED: Final[str] = "hashed"

SUPPORTED_KEY_TYPES: Final[tuple[str, ...]] = (
    KEY_TYPE_ASCENDING,
    KEY_TYPE_DESCENDING,
    KEY_TYPE_TEXT,
    KEY_TYPE_WILDCARD,
    KEY_TYPE_2D,
    KEY_TYPE_2DSPHERE,
    KEY_TYPE_HASHED,
)

KEY_TYPE_ALIASES: Final[dict[str, str]] = {
    "asc": KEY_TYPE_ASCENDING,
    "ascending": KEY_TYPE_ASCENDING,
    "desc": KEY_TYPE_DESCENDING,
    "descending": KEY_TYPE_DESCENDING,
}
"""Alternative spellings accepted for declared key types."""

# ============================================================================
# INDEX KIND CONSTANTS
# ============================================================================

INDEX_KIND_TEXT: Final[str] = "text"
INDEX_KIND_WILDCARD: Final[str] = "wildcard"
INDEX_KIND_2DSPHERE: Final[str] = "2dsphere"
INDEX_KIND_2D: Final[str] = "2d"
INDEX_KIND_HASHED: Final[str] = "hashed"
INDEX_KIND_PLAIN: Final[str] = "plain"

KIND_PRECEDENCE: Final[tuple[str, ...]] = (
    INDEX_KIND_TEXT,
    INDEX_KIND_WILDCARD,
    INDEX_KIND_2DSPHERE,
    INDEX_KIND_2D,
    INDEX_KIND_HASHED,
)
"""Order in which key types decide the kind of an index; plain otherwise."""

# ============================================================================
# VALIDATION CONSTANTS
# ============================================================================

TTL_FIELD_SUFFIXES: Final[tuple[str, ...]] = ("at", "date", "time")
"""Field name suffixes taken as a hint that a field holds a timestamp."""

PARTIAL_FILTER_OPERATORS: Final[tuple[str, ...]] = (
    "$eq",
    "$exists",
    "$gt",
    "$gte",
    "$lt",
    "$lte",
    "$type",
    "$and",
    "$or",
    "$in",
)
"""Query operators MongoDB accepts inside partialFilterExpression."""

COLLATION_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("locale", "locale"),
    ("case_level", "caseLevel"),
    ("case_first", "caseFirst"),
    ("strength", "strength"),
    ("numeric_ordering", "numericOrdering"),
    ("alternate", "alternate"),
    ("max_variable", "maxVariable"),
    ("backwards", "backwards"),
)
"""(attribute, server field) pairs of the collation sub-document."""

SIMPLE_COLLATION_LOCALE: Final[str] = "simple"
"""Locale meaning binary comparison; the server stores no collation for it."""

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

NAMESPACE_NOT_FOUND_CODE: Final[int] = 26
INDEX_NOT_FOUND_CODE: Final[int] = 27

MISSING_ON_DROP_CODES: Final[tuple[int, ...]] = (
    NAMESPACE_NOT_FOUND_CODE,
    INDEX_NOT_FOUND_CODE,
)
"""Server error codes meaning there was nothing to drop."""

# ============================================================================
# ENSURE ACTIONS
# ============================================================================

ENSURE_CREATED: Final[str] = "created"
ENSURE_UNCHANGED: Final[str] = "unchanged"
ENSURE_REPLACED: Final[str] = "replaced"

"""
Drift detection between a declared index and the state read back.

The comparison applies the same rules as the normalizer so that a freshly
created index never reports drift: option groups that are not sent for the
declared kind are not compared, unknown key types compare as ascending, and
settings the server fills in on its own only count when they were declared.
"""

import logging
from dataclasses import fields
from typing import Any

from ..constants import (
    INDEX_KIND_2D,
    INDEX_KIND_2DSPHERE,
    INDEX_KIND_TEXT,
    INDEX_KIND_WILDCARD,
    KEY_TYPE_ASCENDING,
    KEY_TYPE_TEXT,
    SIMPLE_COLLATION_LOCALE,
    SUPPORTED_KEY_TYPES,
)
from .helpers import detect_kind
from .types import Collation, Index, IndexKey, IndexOptions

logger = logging.getLogger(__name__)

_KIND_OPTIONS: dict[str, tuple[str, ...]] = {
    INDEX_KIND_TEXT: ("weights", "default_language", "language_override", "text_index_version"),
    INDEX_KIND_WILDCARD: ("wildcard_projection",),
    INDEX_KIND_2D: ("bits", "min", "max"),
    INDEX_KIND_2DSPHERE: ("sphere_index_version",),
}

# Filled in by the server when not declared.
_SERVER_DEFAULTED = frozenset(
    _KIND_OPTIONS[INDEX_KIND_TEXT]
    + _KIND_OPTIONS[INDEX_KIND_2D]
    + _KIND_OPTIONS[INDEX_KIND_2DSPHERE]
    + ("collation",)
)

_NEVER_COMPARED = frozenset({"version"})

# Left out of listIndexes when false.
_FALSE_WHEN_ABSENT = frozenset({"hidden"})


def _effective_type(key: IndexKey) -> str:
    return key.type if key.type in SUPPORTED_KEY_TYPES else KEY_TYPE_ASCENDING


def comparable_keys(keys: list[IndexKey]) -> list[tuple[str, str]]:
    """
    Key list in comparable form.

    Runs of consecutive text keys are sorted by field, because the server
    reports text fields in its own order.
    """
    out: list[tuple[str, str]] = []
    run: list[tuple[str, str]] = []
    for key in keys:
        pair = (key.field, _effective_type(key))
        if pair[1] == KEY_TYPE_TEXT:
            run.append(pair)
            continue
        out.extend(sorted(run))
        run = []
        out.append(pair)
    out.extend(sorted(run))
    return out


def _irrelevant_options(kind: str) -> set[str]:
    return {
        name for other, names in _KIND_OPTIONS.items() if other != kind for name in names
    }


def _collation_drift(declared: Collation, observed: Collation | None) -> bool:
    if observed is None:
        return declared.locale != SIMPLE_COLLATION_LOCALE
    declared_doc = declared.to_document()
    observed_doc = observed.to_document()
    return any(observed_doc.get(k) != v for k, v in declared_doc.items())


def _expected_weights(declared: Index) -> dict[str, Any]:
    weights = {key.field: 1 for key in declared.keys if key.type == KEY_TYPE_TEXT}
    weights.update(declared.options.weights or {})
    return weights


def detect_drift(declared: Index, observed: Index) -> dict[str, tuple[Any, Any]]:
    """
    Compare a declared index with its reconciled state.

    Args:
        declared: The desired index
        observed: The index as read back from the database

    Returns:
        Mapping of setting name to (declared value, observed value) for
        every difference; empty when there is no drift
    """
    drift: dict[str, tuple[Any, Any]] = {}

    if declared.identity != observed.identity:
        drift["identity"] = (declared.identity, observed.identity)

    declared_keys = comparable_keys(declared.keys)
    observed_keys = comparable_keys(observed.keys)
    if declared_keys != observed_keys:
        drift["keys"] = (declared_keys, observed_keys)

    kind = detect_kind(declared.keys)
    skipped = _NEVER_COMPARED | _irrelevant_options(kind)
    if kind == INDEX_KIND_WILDCARD:
        skipped = skipped | {"expire_after_seconds"}

    for option in fields(IndexOptions):
        name = option.name
        if name in skipped:
            continue
        want = getattr(declared.options, name)
        have = getattr(observed.options, name)
        if want is None and name in _SERVER_DEFAULTED:
            continue
        if name == "collation" and want is not None:
            if _collation_drift(want, have):
                drift[name] = (want, have)
            continue
        if name == "weights":
            want = _expected_weights(declared)
        elif name in _FALSE_WHEN_ABSENT:
            want, have = bool(want), bool(have)
        if want != have:
            drift[name] = (want, have)

    if drift:
        logger.debug(f"Index '{declared.identity}' drifted on {sorted(drift)}")
    return drift

"""
Index State Reconciler

Maps the index descriptions MongoDB returns from listIndexes back into the
declared shape. The server does not echo the declared key types, so the kind
of each key is re-derived from structural signals: the text-search marker
field, wildcard path suffixes and the stored key values.

Reading favours availability over strictness: malformed parts of a
description are dropped rather than raised. The only error is a missing
index.

This module is part of MDB_RECONCILER.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..constants import (
    KEY_TYPE_2D,
    KEY_TYPE_2DSPHERE,
    KEY_TYPE_ASCENDING,
    KEY_TYPE_DESCENDING,
    KEY_TYPE_HASHED,
    KEY_TYPE_TEXT,
    KEY_TYPE_WILDCARD,
    TEXT_INDEX_MARKER,
    TEXT_INDEX_TERM_MARKER,
)
from ..exceptions import NotFoundError
from .helpers import is_int, is_wildcard_path, to_plain
from .types import Collation, Index, IndexIdentity, IndexKey, IndexOptions

logger = logging.getLogger(__name__)

_STRING_KEY_TYPES = (KEY_TYPE_TEXT, KEY_TYPE_2D, KEY_TYPE_2DSPHERE, KEY_TYPE_HASHED)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify_key_value(field_name: str, value: Any) -> str:
    """
    Classify one stored key value as a declared key type.

    Anything unrecognised (for example ``3``) is read as ascending, the same
    fallback the normalizer applies to unknown declared types.
    """
    if _is_number(value):
        if value == 1 and is_wildcard_path(field_name):
            return KEY_TYPE_WILDCARD
        if value == -1:
            return KEY_TYPE_DESCENDING
        return KEY_TYPE_ASCENDING
    if isinstance(value, str) and value in _STRING_KEY_TYPES:
        return value
    logger.debug(
        f"Unrecognised key value {value!r} on field '{field_name}'; reading it as ascending."
    )
    return KEY_TYPE_ASCENDING


def _reconcile_keys(key_doc: dict[str, Any], weights: dict[str, Any] | None) -> list[IndexKey]:
    is_text = key_doc.get(TEXT_INDEX_MARKER) == "text"
    keys: list[IndexKey] = []
    for field_name, value in key_doc.items():
        if is_text and field_name == TEXT_INDEX_MARKER:
            if weights:
                keys.extend(IndexKey(field=w, type=KEY_TYPE_TEXT) for w in weights)
            else:
                keys.append(IndexKey(field=TEXT_INDEX_MARKER, type=KEY_TYPE_TEXT))
            continue
        if is_text and field_name == TEXT_INDEX_TERM_MARKER:
            continue
        keys.append(IndexKey(field=field_name, type=classify_key_value(field_name, value)))
    return keys


def _as_int(value: Any) -> int | None:
    if is_int(value):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_float(value: Any) -> float | None:
    return float(value) if _is_number(value) else None


def _as_map(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _reconcile_collation(value: Any) -> Collation | None:
    if not isinstance(value, dict) or not isinstance(value.get("locale"), str):
        return None
    return Collation.from_document(value)


def _reconcile_options(raw: dict[str, Any]) -> IndexOptions:
    get = raw.get
    return IndexOptions(
        unique=_as_bool(get("unique")),
        sparse=_as_bool(get("sparse")),
        hidden=_as_bool(get("hidden")),
        expire_after_seconds=_as_int(get("expireAfterSeconds")),
        collation=_reconcile_collation(get("collation")),
        partial_filter_expression=_as_map(get("partialFilterExpression")),
        wildcard_projection=_as_map(get("wildcardProjection")),
        weights=_as_map(get("weights")),
        default_language=_as_str(get("default_language")),
        language_override=_as_str(get("language_override")),
        text_index_version=_as_int(get("textIndexVersion")),
        bits=_as_int(get("bits")),
        min=_as_float(get("min")),
        max=_as_float(get("max")),
        sphere_index_version=_as_int(get("2dsphereIndexVersion")),
        version=_as_int(get("v")),
    )


def reconcile_description(raw: Mapping[str, Any], identity: IndexIdentity) -> Index:
    """
    Convert one raw index description into a declared-shape Index.

    Args:
        raw: A single entry from listIndexes (dict or SON)
        identity: Identity of the index; descriptions do not carry the
            database and collection names

    Returns:
        The reconciled Index
    """
    plain = to_plain(raw)
    key_doc = plain.get("key")
    weights = _as_map(plain.get("weights"))
    keys = _reconcile_keys(key_doc, weights) if isinstance(key_doc, dict) else []
    return Index(identity=identity, keys=keys, options=_reconcile_options(plain))


def reconcile_index(raw_indexes: Iterable[Mapping[str, Any]], identity: IndexIdentity) -> Index:
    """
    Find the index named by ``identity`` in a raw listing and reconcile it.

    Args:
        raw_indexes: Every index description of the collection
        identity: Identity of the index to read

    Returns:
        The reconciled Index

    Raises:
        NotFoundError: If no description carries the requested name
    """
    for raw in raw_indexes:
        if raw.get("name") == identity.name:
            logger.debug(f"Found matching index '{identity}': {raw}")
            return reconcile_description(raw, identity)
    raise NotFoundError(identity)

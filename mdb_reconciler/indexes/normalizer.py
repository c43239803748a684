"""
Index Specification Normalizer

Converts a declared Index into the create command MongoDB expects: an
ordered key document plus an options document. Option groups that do not
apply to the detected kind of index are never emitted, and the index format
version is always pinned so the command shape does not depend on the server.

This module is part of MDB_RECONCILER.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pymongo import IndexModel

from ..constants import (
    DEFAULT_INDEX_VERSION,
    INDEX_KIND_2D,
    INDEX_KIND_2DSPHERE,
    INDEX_KIND_TEXT,
    INDEX_KIND_WILDCARD,
    KEY_TYPE_2D,
    KEY_TYPE_2DSPHERE,
    KEY_TYPE_ASCENDING,
    KEY_TYPE_DESCENDING,
    KEY_TYPE_HASHED,
    KEY_TYPE_TEXT,
    KEY_TYPE_WILDCARD,
)
from .helpers import detect_kind
from .types import Index, IndexKey, IndexOptions
from .validation import validate_index

logger = logging.getLogger(__name__)

_KEY_VALUES: dict[str, Any] = {
    KEY_TYPE_ASCENDING: 1,
    KEY_TYPE_DESCENDING: -1,
    KEY_TYPE_TEXT: "text",
    KEY_TYPE_2D: "2d",
    KEY_TYPE_2DSPHERE: "2dsphere",
    KEY_TYPE_WILDCARD: 1,
    KEY_TYPE_HASHED: "hashed",
}


@dataclass
class IndexCommand:
    """Driver-ready create command for one index."""

    keys: list[tuple[str, Any]]
    options: dict[str, Any] = field(default_factory=dict)
    kind: str = "plain"

    def key_document(self) -> dict[str, Any]:
        """Key document as MongoDB stores it (insertion-ordered)."""
        return dict(self.keys)

    def to_index_model(self) -> IndexModel:
        """Build a pymongo IndexModel for ``create_indexes``."""
        return IndexModel(self.keys, **self.options)


def key_value(key: IndexKey) -> Any:
    """
    Map a declared key type to the value stored in the key document.

    Unknown types fall back to ascending; ``validate_index`` rejects them
    first when strict key types are enabled.
    """
    value = _KEY_VALUES.get(key.type)
    if value is None:
        logger.warning(
            f"Unknown index key type '{key.type}' on field '{key.field}'; "
            f"treating it as ascending."
        )
        return 1
    return value


def _common_options(options: IndexOptions, kind: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if options.unique is not None:
        out["unique"] = options.unique
    if options.sparse is not None:
        out["sparse"] = options.sparse
    if options.hidden is not None:
        out["hidden"] = options.hidden
    if options.expire_after_seconds is not None and kind != INDEX_KIND_WILDCARD:
        out["expireAfterSeconds"] = options.expire_after_seconds
    if options.collation is not None:
        out["collation"] = options.collation.to_document()
    if options.partial_filter_expression is not None:
        out["partialFilterExpression"] = options.partial_filter_expression
    return out


def _text_options(options: IndexOptions) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if options.weights:
        out["weights"] = dict(options.weights)
    if options.default_language is not None:
        out["default_language"] = options.default_language
    if options.language_override is not None:
        out["language_override"] = options.language_override
    if options.text_index_version is not None:
        out["textIndexVersion"] = options.text_index_version
    return out


def _2d_options(options: IndexOptions) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if options.bits is not None:
        out["bits"] = options.bits
    if options.min is not None:
        out["min"] = options.min
    if options.max is not None:
        out["max"] = options.max
    return out


def _suppressed_groups(options: IndexOptions, kind: str) -> list[str]:
    suppressed = []
    if kind != INDEX_KIND_TEXT and (
        options.weights
        or options.default_language is not None
        or options.language_override is not None
        or options.text_index_version is not None
    ):
        suppressed.append("text")
    if kind != INDEX_KIND_WILDCARD and options.wildcard_projection:
        suppressed.append("wildcard_projection")
    if kind != INDEX_KIND_2D and (
        options.bits is not None or options.min is not None or options.max is not None
    ):
        suppressed.append("2d")
    if kind != INDEX_KIND_2DSPHERE and options.sphere_index_version is not None:
        suppressed.append("2dsphere")
    return suppressed


def normalize_index(index: Index, strict_key_types: bool = False) -> IndexCommand:
    """
    Convert a declared index into its create command.

    Args:
        index: Declared index
        strict_key_types: Reject unknown key types instead of falling back
            to ascending

    Returns:
        IndexCommand with ordered keys and the options document

    Raises:
        ConfigurationError: If the declaration fails pre-flight validation
    """
    validate_index(index, strict_key_types=strict_key_types)

    options = index.options
    kind = detect_kind(index.keys)
    keys = [(key.field, key_value(key)) for key in index.keys]

    command_options: dict[str, Any] = {"name": index.name, "v": DEFAULT_INDEX_VERSION}
    command_options.update(_common_options(options, kind))

    if kind == INDEX_KIND_TEXT:
        command_options.update(_text_options(options))
    elif kind == INDEX_KIND_WILDCARD:
        if options.wildcard_projection:
            command_options["wildcardProjection"] = dict(options.wildcard_projection)
    elif kind == INDEX_KIND_2D:
        command_options.update(_2d_options(options))
    elif kind == INDEX_KIND_2DSPHERE:
        if options.sphere_index_version is not None:
            command_options["2dsphereIndexVersion"] = options.sphere_index_version

    suppressed = _suppressed_groups(options, kind)
    if suppressed:
        logger.debug(
            f"Index '{index.identity}' is a {kind} index; not sending "
            f"option group(s) {suppressed}."
        )

    return IndexCommand(keys=keys, options=command_options, kind=kind)

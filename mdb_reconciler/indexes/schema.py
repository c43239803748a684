"""
Declaration schema for managed indexes.

Defines the user-facing declared document (the shape a declarative tool
stores in its plan and state), validates it with JSON Schema and converts it
to and from the Index data model.

Example declaration:
    {
        "database": "app",
        "collection": "sessions",
        "name": "sessions_ttl",
        "keys": [{"field": "createdAt", "type": "1"}],
        "expire_after_seconds": 3600
    }

This module is part of MDB_RECONCILER.
"""

import logging
from typing import Any

from jsonschema import SchemaError, ValidationError, validate

from ..constants import TEXT_INDEX_VERSIONS
from ..exceptions import ConfigurationError
from .helpers import to_plain
from .types import Collation, Index, IndexIdentity, IndexKey, IndexOptions

logger = logging.getLogger(__name__)

# Declared properties named like their IndexOptions attribute
_OPTION_PROPERTIES: tuple[str, ...] = (
    "unique",
    "sparse",
    "hidden",
    "expire_after_seconds",
    "partial_filter_expression",
    "wildcard_projection",
    "weights",
    "default_language",
    "language_override",
    "text_index_version",
    "bits",
    "min",
    "max",
    "sphere_index_version",
)

# Collation properties use the server's camelCase names.
_COLLATION_PROPERTIES: dict[str, str] = {
    "locale": "locale",
    "caseLevel": "case_level",
    "caseFirst": "case_first",
    "strength": "strength",
    "numericOrdering": "numeric_ordering",
    "alternate": "alternate",
    "maxVariable": "max_variable",
    "backwards": "backwards",
}

DECLARATION_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["database", "collection", "name", "keys"],
    "additionalProperties": False,
    "properties": {
        "database": {"type": "string", "minLength": 1, "description": "Database name"},
        "collection": {"type": "string", "minLength": 1, "description": "Collection name"},
        "name": {"type": "string", "minLength": 1, "description": "Index name"},
        "keys": {
            "type": "array",
            "minItems": 1,
            "description": "Index key fields, in compound-index order",
            "items": {
                "type": "object",
                "required": ["field", "type"],
                "additionalProperties": False,
                "properties": {
                    "field": {"type": "string"},
                    "type": {
                        "type": ["string", "integer"],
                        "description": "1, -1, text, wildcard, 2d, 2dsphere or hashed",
                    },
                },
            },
        },
        "unique": {"type": "boolean"},
        "sparse": {"type": "boolean"},
        "hidden": {"type": "boolean"},
        "expire_after_seconds": {"type": "integer", "minimum": 0},
        "collation": {
            "type": "object",
            "required": ["locale"],
            "additionalProperties": False,
            "properties": {
                "locale": {"type": "string", "minLength": 1},
                "caseLevel": {"type": "boolean"},
                "caseFirst": {"type": "string", "enum": ["upper", "lower", "off"]},
                "strength": {"type": "integer", "minimum": 1, "maximum": 5},
                "numericOrdering": {"type": "boolean"},
                "alternate": {"type": "string", "enum": ["non-ignorable", "shifted"]},
                "maxVariable": {"type": "string", "enum": ["punct", "space"]},
                "backwards": {"type": "boolean"},
            },
        },
        "partial_filter_expression": {"type": "object"},
        "wildcard_projection": {
            "type": "object",
            "additionalProperties": {"type": "integer", "enum": [0, 1]},
        },
        "weights": {
            "type": "object",
            "additionalProperties": {"type": "integer"},
        },
        "default_language": {"type": "string"},
        "language_override": {"type": "string"},
        "text_index_version": {"type": "integer", "enum": list(TEXT_INDEX_VERSIONS)},
        "bits": {"type": "integer"},
        "min": {"type": "number"},
        "max": {"type": "number"},
        "sphere_index_version": {"type": "integer", "minimum": 1},
    },
}


def validate_declaration(declaration: dict[str, Any]) -> dict[str, Any]:
    """
    Validate a declared document against DECLARATION_SCHEMA.

    Mappings and tuples are converted to dicts and lists first, so a
    declaration built in Python validates the same as one loaded from JSON.

    Returns:
        The normalized (JSON-compatible) declaration

    Raises:
        ConfigurationError: With the JSON path of the first violation
    """
    normalized = to_plain(declaration)
    try:
        validate(instance=normalized, schema=DECLARATION_SCHEMA)
    except ValidationError as e:
        error_path = ".".join(str(p) for p in e.absolute_path) or "root"
        raise ConfigurationError(
            f"Invalid index declaration at '{error_path}': {e.message}",
            config_key=error_path,
        ) from e
    except SchemaError as e:
        logger.exception("Declaration schema is invalid")
        raise ConfigurationError(f"Declaration schema error: {e.message}") from e
    return normalized


def parse_declaration(declaration: dict[str, Any]) -> Index:
    """
    Build an Index from a declared document.

    Only the settings present in the document are set; everything else stays
    ``None`` (unset).

    Raises:
        ConfigurationError: If the document does not match the schema
    """
    doc = validate_declaration(declaration)

    identity = IndexIdentity(
        database=doc["database"], collection=doc["collection"], name=doc["name"]
    )
    keys = [IndexKey(field=k["field"], type=k["type"]) for k in doc["keys"]]

    values = {prop: doc[prop] for prop in _OPTION_PROPERTIES if prop in doc}
    if "collation" in doc:
        values["collation"] = Collation(
            **{_COLLATION_PROPERTIES[k]: v for k, v in doc["collation"].items()}
        )

    return Index(identity=identity, keys=keys, options=IndexOptions(**values))


def to_declaration(index: Index) -> dict[str, Any]:
    """
    Render an Index as a declared document, emitting only set settings.

    The server-computed format version is not part of a declaration.
    """
    doc: dict[str, Any] = {
        "database": index.database,
        "collection": index.collection,
        "name": index.name,
        "keys": [{"field": key.field, "type": key.type} for key in index.keys],
    }
    options = index.options
    for prop in _OPTION_PROPERTIES:
        value = getattr(options, prop)
        if value is not None:
            doc[prop] = value
    if options.collation is not None:
        doc["collation"] = options.collation.to_document()
    return doc

"""
Declared-shape data model for MongoDB indexes.

Every optional setting defaults to ``None`` meaning "unset", so an explicit
``False`` or ``0`` stays distinguishable from a setting that was never
declared. Structured settings (partial filters, wildcard projections,
weights) are carried as plain typed Python values in both directions.

This module is part of MDB_RECONCILER.
"""

from dataclasses import dataclass, field
from typing import Any

from ..constants import (
    COLLATION_FIELDS,
    KEY_TYPE_ALIASES,
    KEY_TYPE_WILDCARD,
    WILDCARD_MARKER,
)
from ..exceptions import ConfigurationError


def _canonical_key_type(key_type: Any) -> str:
    if isinstance(key_type, bool):
        return str(key_type)
    if isinstance(key_type, int):
        return str(key_type)
    key_type = str(key_type).strip()
    return KEY_TYPE_ALIASES.get(key_type.lower(), key_type)


def _wildcard_path(field_name: str) -> str:
    if field_name.endswith(WILDCARD_MARKER):
        return field_name
    if not field_name:
        return WILDCARD_MARKER
    return f"{field_name}.{WILDCARD_MARKER}"


@dataclass(frozen=True)
class IndexKey:
    """One (field, type) entry of an index key list."""

    field: str
    type: str

    def __post_init__(self) -> None:
        key_type = _canonical_key_type(self.type)
        object.__setattr__(self, "type", key_type)
        if key_type == KEY_TYPE_WILDCARD:
            object.__setattr__(self, "field", _wildcard_path(self.field))


@dataclass(frozen=True)
class IndexIdentity:
    """Immutable (database, collection, name) triple identifying one index."""

    database: str
    collection: str
    name: str

    @classmethod
    def from_import_id(cls, import_id: str) -> "IndexIdentity":
        """
        Parse an import identifier of the form ``database.collection.index_name``.

        Raises:
            ConfigurationError: If the identifier does not have exactly three
                non-empty dot-separated parts
        """
        parts = import_id.split(".")
        if len(parts) != 3 or not all(parts):
            raise ConfigurationError(
                "Import ID should be in the format: database.collection.index_name",
                config_key="import_id",
                config_value=import_id,
            )
        return cls(database=parts[0], collection=parts[1], name=parts[2])

    @property
    def import_id(self) -> str:
        return f"{self.database}.{self.collection}.{self.name}"

    def __str__(self) -> str:
        return self.import_id


@dataclass
class Collation:
    """Collation sub-record; only ``locale`` is required."""

    locale: str
    case_level: bool | None = None
    case_first: str | None = None
    strength: int | None = None
    numeric_ordering: bool | None = None
    alternate: str | None = None
    max_variable: str | None = None
    backwards: bool | None = None

    def to_document(self) -> dict[str, Any]:
        """Return the server document, omitting unset knobs."""
        doc: dict[str, Any] = {}
        for attr, server_name in COLLATION_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                doc[server_name] = value
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Collation":
        """Build from a server document, keeping only the fields it returns."""
        values = {
            attr: doc[server_name] for attr, server_name in COLLATION_FIELDS if server_name in doc
        }
        return cls(**values)


@dataclass
class IndexOptions:
    """Sparse bag of optional index settings."""

    unique: bool | None = None
    sparse: bool | None = None
    hidden: bool | None = None
    expire_after_seconds: int | None = None
    collation: Collation | None = None
    partial_filter_expression: dict[str, Any] | None = None
    wildcard_projection: dict[str, int] | None = None
    # text
    weights: dict[str, int] | None = None
    default_language: str | None = None
    language_override: str | None = None
    text_index_version: int | None = None
    # 2d
    bits: int | None = None
    min: float | None = None
    max: float | None = None
    # 2dsphere
    sphere_index_version: int | None = None
    # Server-computed; ignored on create.
    version: int | None = None


@dataclass
class Index:
    """A declared or reconciled index: identity, ordered keys and options."""

    identity: IndexIdentity
    keys: list[IndexKey] = field(default_factory=list)
    options: IndexOptions = field(default_factory=IndexOptions)

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def database(self) -> str:
        return self.identity.database

    @property
    def collection(self) -> str:
        return self.identity.collection

    @property
    def kind(self) -> str:
        from .helpers import detect_kind

        return detect_kind(self.keys)

"""
Pre-flight validation of declared indexes.

Every check raises ConfigurationError with a human-readable cause before any
command is built. None of these errors are worth retrying: the declaration
itself has to change.

This module is part of MDB_RECONCILER.
"""

import logging
from typing import Any

from ..constants import (
    INDEX_KIND_2D,
    INDEX_KIND_TEXT,
    KEY_TYPE_WILDCARD,
    MAX_2D_BITS,
    MIN_2D_BITS,
    MIN_TTL_SECONDS,
    PARTIAL_FILTER_OPERATORS,
    SUPPORTED_KEY_TYPES,
    TEXT_INDEX_VERSIONS,
    TTL_FIELD_SUFFIXES,
)
from ..exceptions import ConfigurationError
from .helpers import detect_kind, has_timestamp_field, is_int
from .types import Index, IndexKey, IndexOptions

logger = logging.getLogger(__name__)


def validate_keys(keys: list[IndexKey], strict_key_types: bool = False) -> None:
    """
    Validate the key list of an index.

    Raises:
        ConfigurationError: On an empty key list, duplicate field names, or
            (in strict mode) an unknown key type
    """
    if not keys:
        raise ConfigurationError("Index requires at least one key", config_key="keys")

    seen: set[str] = set()
    for key in keys:
        if key.field in seen:
            raise ConfigurationError(
                f"Duplicate key field '{key.field}'. Field names must be unique "
                f"within one index",
                config_key="keys",
                config_value=key.field,
            )
        seen.add(key.field)
        if strict_key_types and key.type not in SUPPORTED_KEY_TYPES:
            supported = ", ".join(SUPPORTED_KEY_TYPES)
            raise ConfigurationError(
                f"Unsupported key type '{key.type}' on field '{key.field}'. "
                f"Supported types: {supported}",
                config_key="keys",
                config_value=key.type,
            )


def validate_ttl(keys: list[IndexKey], expire_after_seconds: int | None) -> None:
    """
    Validate a TTL setting against the key list.

    Raises:
        ConfigurationError: If TTL is combined with a wildcard key, is
            negative, or no key field looks like a timestamp
    """
    if expire_after_seconds is None:
        return

    if any(key.type == KEY_TYPE_WILDCARD for key in keys):
        raise ConfigurationError(
            "TTL index (expire_after_seconds) cannot be used with a wildcard key",
            config_key="expire_after_seconds",
            config_value=expire_after_seconds,
        )

    if not is_int(expire_after_seconds) or expire_after_seconds < MIN_TTL_SECONDS:
        raise ConfigurationError(
            f"expire_after_seconds must be an integer >= {MIN_TTL_SECONDS}",
            config_key="expire_after_seconds",
            config_value=expire_after_seconds,
        )

    if not has_timestamp_field(keys):
        suffixes = ", ".join(f"'{s}'" for s in TTL_FIELD_SUFFIXES)
        raise ConfigurationError(
            f"TTL index (expire_after_seconds) requires a date field "
            f"(a key field name ending in {suffixes})",
            config_key="expire_after_seconds",
            config_value=expire_after_seconds,
        )


def validate_wildcard_projection(projection: dict[str, Any] | None) -> None:
    """
    Validate that a wildcard projection is all inclusions or all exclusions.

    Raises:
        ConfigurationError: On mixed 1/0 values or a value other than 1 or 0
    """
    if projection is None:
        return

    has_inclusion = False
    has_exclusion = False
    for path, value in projection.items():
        if value == 1:
            has_inclusion = True
        elif value == 0:
            has_exclusion = True
        else:
            raise ConfigurationError(
                f"Invalid wildcard projection value for '{path}': use 1 to include "
                f"or 0 to exclude",
                config_key="wildcard_projection",
                config_value=value,
            )

    if has_inclusion and has_exclusion:
        raise ConfigurationError(
            "Cannot mix inclusions (1) and exclusions (0) in wildcard_projection",
            config_key="wildcard_projection",
            config_value=projection,
        )


def validate_text_options(options: IndexOptions) -> None:
    """
    Validate text-index options.

    Raises:
        ConfigurationError: On a non-positive weight or an unsupported
            text index version
    """
    for path, weight in (options.weights or {}).items():
        if not is_int(weight) or weight <= 0:
            raise ConfigurationError(
                f"Text index weight for '{path}' must be a positive integer, got {weight}",
                config_key="weights",
                config_value=weight,
            )

    version = options.text_index_version
    if version is not None and version not in TEXT_INDEX_VERSIONS:
        raise ConfigurationError(
            f"text_index_version must be one of {list(TEXT_INDEX_VERSIONS)}, got {version}",
            config_key="text_index_version",
            config_value=version,
        )


def validate_2d_options(options: IndexOptions) -> None:
    """
    Validate 2d-index precision and bounds.

    Raises:
        ConfigurationError: If bits is outside 1..32 or min is not below max
    """
    if options.bits is not None and not (MIN_2D_BITS <= options.bits <= MAX_2D_BITS):
        raise ConfigurationError(
            f"bits must be between {MIN_2D_BITS} and {MAX_2D_BITS}, got {options.bits}",
            config_key="bits",
            config_value=options.bits,
        )
    if options.min is not None and options.max is not None and options.min >= options.max:
        raise ConfigurationError(
            f"min ({options.min}) must be lower than max ({options.max})",
            config_key="min",
            config_value=options.min,
        )


def validate_partial_filter(expression: Any, path: str = "") -> None:
    """
    Check every operator of a partial filter expression against the allow-list.

    Recurses into sub-documents and sequences.

    Args:
        expression: The partial filter expression (or a nested part of it)
        path: Dotted location used in error messages (used recursively)

    Raises:
        ConfigurationError: Naming the first unsupported operator found
    """
    if isinstance(expression, dict):
        for key, value in expression.items():
            current_path = f"{path}.{key}" if path else str(key)
            if isinstance(key, str) and key.startswith("$") and key not in PARTIAL_FILTER_OPERATORS:
                supported = ", ".join(PARTIAL_FILTER_OPERATORS)
                raise ConfigurationError(
                    f"Operator {key} is not supported in partial_filter_expression "
                    f"(at '{current_path}'). Supported operators are: {supported}",
                    config_key="partial_filter_expression",
                    config_value=key,
                )
            validate_partial_filter(value, current_path)
    elif isinstance(expression, (list, tuple)):
        for i, item in enumerate(expression):
            validate_partial_filter(item, f"{path}[{i}]")


def validate_index(index: Index, strict_key_types: bool = False) -> None:
    """
    Run every pre-flight check on a declared index.

    Args:
        index: The declared index
        strict_key_types: Reject unknown key types instead of letting them
            fall back to ascending

    Raises:
        ConfigurationError: On the first violated constraint
    """
    options = index.options
    validate_keys(index.keys, strict_key_types=strict_key_types)
    validate_ttl(index.keys, options.expire_after_seconds)
    validate_wildcard_projection(options.wildcard_projection)

    kind = detect_kind(index.keys)
    if kind == INDEX_KIND_TEXT:
        validate_text_options(options)
    elif kind == INDEX_KIND_2D:
        validate_2d_options(options)

    if options.partial_filter_expression is not None:
        validate_partial_filter(options.partial_filter_expression)

    if options.collation is not None and not options.collation.locale:
        raise ConfigurationError(
            "Collation must include 'locale' field as string", config_key="collation"
        )

    logger.debug(f"Index '{index.identity}' passed validation (kind={kind}).")

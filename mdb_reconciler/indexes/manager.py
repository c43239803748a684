"""
Index Management Orchestration

Async create / read / delete / ensure operations for declared indexes on top
of Motor. Each call normalizes or reconciles through the pure functions of
this package and makes exactly the database calls it needs: createIndexes,
listIndexes or dropIndexes.

Driver failures are wrapped in IndexOperationError with the operation name
and index identity; nothing is retried here.

This module is part of MDB_RECONCILER.
"""

import logging
import time
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import (
    ConnectionFailure,
    InvalidOperation,
    OperationFailure,
    ServerSelectionTimeoutError,
)

from ..config import ReconcilerConfig
from ..constants import (
    ENSURE_CREATED,
    ENSURE_REPLACED,
    ENSURE_UNCHANGED,
    MISSING_ON_DROP_CODES,
)
from ..exceptions import IndexOperationError, NotFoundError
from ..observability.logging import (
    clear_index_context,
    get_logger,
    log_operation,
    set_index_context,
)
from .drift import detect_drift
from .normalizer import normalize_index
from .reconciler import reconcile_index
from .types import Index, IndexIdentity

logger = get_logger(__name__)

_DRIVER_ERRORS = (
    OperationFailure,
    ConnectionFailure,
    ServerSelectionTimeoutError,
    InvalidOperation,
)


def _is_missing_on_drop(error: OperationFailure) -> bool:
    if error.code in MISSING_ON_DROP_CODES:
        return True
    message = str(error).lower()
    return "index not found" in message or "ns not found" in message


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


class IndexManager:
    """
    Manages declared MongoDB indexes with an asynchronous (Motor) interface.

    Example:
        manager = IndexManager.from_config(ReconcilerConfig())
        index = parse_declaration(declaration)
        current, action = await manager.ensure_index(index)
    """

    __slots__ = ("_client", "_config")

    def __init__(
        self, client: AsyncIOMotorClient, config: ReconcilerConfig | None = None
    ) -> None:
        """
        Initialize the index manager.

        Args:
            client: Motor client used for every index operation
            config: Reconciler configuration (defaults read from environment)
        """
        self._client = client
        self._config = config or ReconcilerConfig()

    @classmethod
    def from_config(cls, config: ReconcilerConfig) -> "IndexManager":
        """Create a manager with its own Motor client built from ``config``."""
        config.validate()
        client = AsyncIOMotorClient(
            config.mongo_uri,
            serverSelectionTimeoutMS=config.server_selection_timeout_ms,
            appname="MDB_RECONCILER",
        )
        return cls(client, config)

    @property
    def config(self) -> ReconcilerConfig:
        return self._config

    def _collection(self, identity: IndexIdentity) -> AsyncIOMotorCollection:
        return self._client[identity.database][identity.collection]

    async def list_raw_indexes(self, identity: IndexIdentity) -> list[dict[str, Any]]:
        """
        List every index description of the identity's collection.

        Raises:
            IndexOperationError: If the listing fails
        """
        try:
            return await self._collection(identity).list_indexes().to_list(None)
        except _DRIVER_ERRORS as e:
            logger.exception(f"Database error listing indexes for '{identity}'")
            raise IndexOperationError(
                f"Failed to list indexes of '{identity.database}.{identity.collection}'",
                operation="list_indexes",
                identity=identity,
            ) from e

    async def get_index(self, identity: IndexIdentity) -> Index:
        """
        Read an index back in declared shape.

        Raises:
            NotFoundError: If the collection has no index with that name
            IndexOperationError: If the listing fails
        """
        set_index_context(identity, operation="get_index")
        start_time = time.time()
        try:
            raw_indexes = await self.list_raw_indexes(identity)
            try:
                index = reconcile_index(raw_indexes, identity)
            except NotFoundError:
                logger.info(
                    f"Index '{identity}' not found. Available indexes: "
                    f"{[idx.get('name') for idx in raw_indexes]}"
                )
                raise
            log_operation(
                logger, "get_index", level=logging.DEBUG, duration_ms=_elapsed_ms(start_time)
            )
            return index
        finally:
            clear_index_context()

    async def create_index(self, index: Index) -> Index:
        """
        Create a declared index and return it as read back from the server.

        Raises:
            ConfigurationError: If the declaration fails validation
            IndexOperationError: If the server rejects the command
            NotFoundError: If the index is not visible right after creation
        """
        identity = index.identity
        command = normalize_index(index, strict_key_types=self._config.strict_key_types)

        set_index_context(identity, operation="create_index")
        start_time = time.time()
        try:
            logger.info(
                f"Creating {command.kind} index '{identity}' with keys {command.keys} "
                f"and options {command.options}..."
            )
            try:
                await self._collection(identity).create_indexes([command.to_index_model()])
            except _DRIVER_ERRORS as e:
                log_operation(
                    logger,
                    "create_index",
                    level=logging.ERROR,
                    success=False,
                    duration_ms=_elapsed_ms(start_time),
                    error=str(e),
                )
                raise IndexOperationError(
                    f"Error creating index '{identity.name}': {e}",
                    operation="create_index",
                    identity=identity,
                ) from e
            log_operation(logger, "create_index", duration_ms=_elapsed_ms(start_time))
        finally:
            clear_index_context()

        return await self.get_index(identity)

    async def delete_index(self, identity: IndexIdentity) -> bool:
        """
        Drop an index by name.

        Returns:
            True if an index was dropped, False if there was nothing to drop
            and missing indexes are tolerated

        Raises:
            NotFoundError: If the index is missing and missing indexes are not
                tolerated
            IndexOperationError: On any other database failure
        """
        set_index_context(identity, operation="delete_index")
        start_time = time.time()
        try:
            await self._collection(identity).drop_index(identity.name)
        except OperationFailure as e:
            if not _is_missing_on_drop(e):
                logger.exception(f"OperationFailure dropping index '{identity}'")
                raise IndexOperationError(
                    f"Failed to drop index '{identity.name}'",
                    operation="drop_index",
                    identity=identity,
                ) from e
            if not self._config.tolerate_missing_on_delete:
                raise NotFoundError(identity) from e
            logger.info(f"Index '{identity}' does not exist. Nothing to drop.")
            return False
        except (ConnectionFailure, ServerSelectionTimeoutError, InvalidOperation) as e:
            logger.exception(f"Connection error dropping index '{identity}'")
            raise IndexOperationError(
                f"Connection failed while dropping index '{identity.name}'",
                operation="drop_index",
                identity=identity,
            ) from e
        else:
            log_operation(logger, "delete_index", duration_ms=_elapsed_ms(start_time))
            logger.info(f"Successfully dropped index '{identity}'.")
            return True
        finally:
            clear_index_context()

    async def ensure_index(self, index: Index) -> tuple[Index, str]:
        """
        Converge the database onto a declared index.

        Creates the index when it is missing and drops and recreates it when
        it has drifted, since MongoDB cannot alter an existing index in place.

        Returns:
            Tuple of (index as read back, action) where action is one of
            "created", "unchanged" or "replaced"
        """
        # Fail on a bad declaration before anything gets dropped.
        normalize_index(index, strict_key_types=self._config.strict_key_types)

        try:
            current = await self.get_index(index.identity)
        except NotFoundError:
            return await self.create_index(index), ENSURE_CREATED

        drift = detect_drift(index, current)
        if not drift:
            logger.info(f"Index '{index.identity}' matches; skipping.")
            return current, ENSURE_UNCHANGED

        logger.warning(
            f"Index '{index.identity}' definition mismatch on {sorted(drift)}. "
            f"Dropping existing index and recreating."
        )
        await self.delete_index(index.identity)
        return await self.create_index(index), ENSURE_REPLACED

    async def import_index(self, import_id: str) -> Index:
        """
        Read an existing index from a ``database.collection.index_name`` ID.

        Raises:
            ConfigurationError: If the import ID is malformed
            NotFoundError: If no such index exists
        """
        return await self.get_index(IndexIdentity.from_import_id(import_id))

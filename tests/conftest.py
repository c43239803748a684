"""
Pytest configuration and shared fixtures for MDB_RECONCILER tests.

This module provides:
- Index and identity factories
- A simulated listIndexes server description
- Mock Motor client / collection fixtures backed by an in-memory index list
"""

from typing import Any, Callable, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import SON
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import OperationFailure

from mdb_reconciler.config import ReconcilerConfig
from mdb_reconciler.indexes.manager import IndexManager
from mdb_reconciler.indexes.types import Index, IndexIdentity, IndexKey, IndexOptions


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without a database")


# ============================================================================
# SIMULATED SERVER
# ============================================================================

TEXT_SERVER_DEFAULTS: Dict[str, Any] = {
    "default_language": "english",
    "language_override": "language",
    "textIndexVersion": 3,
}

COLLATION_SERVER_DEFAULTS: Dict[str, Any] = {
    "caseLevel": False,
    "caseFirst": "off",
    "strength": 3,
    "numericOrdering": False,
    "alternate": "non-ignorable",
    "maxVariable": "punct",
    "normalization": False,
    "backwards": False,
    "version": "57.1",
}


def describe_as_server(document: Dict[str, Any], fill_defaults: bool = True) -> SON:
    """
    Build the listIndexes entry MongoDB would return for a create document.

    Text keys collapse into the _fts/_ftsx markers with a weights document.
    With ``fill_defaults`` the server-computed settings (text language and
    version, 2dsphere version, full collation) are added and the settings a
    real server does not store (``hidden: false``, the ``simple`` collation)
    are left out; without it only what was sent is echoed back.
    """
    document = dict(document)
    key_items = list(document.pop("key").items())
    name = document.pop("name")
    description = SON([("v", document.pop("v", 2))])

    text_fields = [field for field, value in key_items if value == "text"]
    declared_weights = document.pop("weights", None) or {}
    weights: Dict[str, Any] = {}
    if text_fields:
        stored: List[tuple] = []
        for field, value in key_items:
            if value == "text":
                if ("_fts", "text") not in stored:
                    stored += [("_fts", "text"), ("_ftsx", 1)]
                continue
            stored.append((field, value))
        key_items = stored
        if fill_defaults:
            weights = {field: 1 for field in sorted(text_fields)}
            for key, value in TEXT_SERVER_DEFAULTS.items():
                document.setdefault(key, value)
        weights.update(declared_weights)

    if fill_defaults and any(value == "2dsphere" for _, value in key_items):
        document.setdefault("2dsphereIndexVersion", 3)

    if fill_defaults and document.get("hidden") is False:
        del document["hidden"]

    if fill_defaults and "collation" in document:
        if document["collation"].get("locale") == "simple":
            del document["collation"]
        else:
            document["collation"] = {**COLLATION_SERVER_DEFAULTS, **document["collation"]}

    description["key"] = SON(key_items)
    description["name"] = name
    if weights:
        description["weights"] = SON(weights)
    description.update(document)
    return description


@pytest.fixture
def server_description() -> Callable[..., SON]:
    """Provide the simulated listIndexes description builder."""
    return describe_as_server


# ============================================================================
# INDEX FIXTURES
# ============================================================================


@pytest.fixture
def identity() -> IndexIdentity:
    """Default identity used by most tests."""
    return IndexIdentity(database="app", collection="events", name="events_idx")


@pytest.fixture
def make_index(identity: IndexIdentity) -> Callable[..., Index]:
    """
    Factory for declared indexes.

    Usage:
        make_index([("createdAt", "1")], expire_after_seconds=60)
    """

    def _make(keys, name: str | None = None, **options: Any) -> Index:
        index_identity = identity if name is None else IndexIdentity(
            database=identity.database, collection=identity.collection, name=name
        )
        return Index(
            identity=index_identity,
            keys=[IndexKey(field=field, type=key_type) for field, key_type in keys],
            options=IndexOptions(**options),
        )

    return _make


# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


@pytest.fixture
def index_store() -> List[SON]:
    """In-memory listIndexes result shared by the mock collection."""
    return [SON([("v", 2), ("key", SON([("_id", 1)])), ("name", "_id_")])]


@pytest.fixture
def mock_index_collection(index_store: List[SON]) -> MagicMock:
    """Create a mock Motor collection whose index calls act on ``index_store``."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = "events"

    async def create_indexes(models, **kwargs):
        names = []
        for model in models:
            index_store.append(describe_as_server(model.document))
            names.append(model.document["name"])
        return names

    async def drop_index(name, **kwargs):
        for position, raw in enumerate(index_store):
            if raw["name"] == name:
                del index_store[position]
                return
        raise OperationFailure(f"index not found with name [{name}]", code=27)

    def list_indexes(**kwargs):
        return MagicMock(to_list=AsyncMock(return_value=list(index_store)))

    collection.create_indexes = AsyncMock(side_effect=create_indexes)
    collection.drop_index = AsyncMock(side_effect=drop_index)
    collection.list_indexes = MagicMock(side_effect=list_indexes)
    return collection


@pytest.fixture
def mock_mongo_client(mock_index_collection: MagicMock) -> MagicMock:
    """Create a mock Motor client; every database/collection lookup hits one collection."""
    database = MagicMock()
    database.__getitem__.return_value = mock_index_collection
    client = MagicMock()
    client.__getitem__.return_value = database
    return client


@pytest.fixture
def reconciler_config() -> ReconcilerConfig:
    """Provide a configuration with a test URI and default policies."""
    return ReconcilerConfig(mongo_uri="mongodb://localhost:27017")


@pytest.fixture
def index_manager(mock_mongo_client: MagicMock, reconciler_config: ReconcilerConfig) -> IndexManager:
    """Provide an IndexManager over the mock client."""
    return IndexManager(mock_mongo_client, reconciler_config)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables before each test."""
    env_vars_to_clear = [
        "MONGO_URI",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "MDB_RECONCILER_STRICT_KEY_TYPES",
        "MDB_RECONCILER_TOLERATE_MISSING_ON_DELETE",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield

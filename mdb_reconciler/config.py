"""
Configuration management for MDB_RECONCILER.

Settings can be passed directly or picked up from environment variables.
"""

import os

from .constants import DEFAULT_SERVER_SELECTION_TIMEOUT_MS
from .exceptions import ConfigurationError


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").lower() == "true"


class ReconcilerConfig:
    """
    Index reconciler configuration.

    Example:
        # Using environment variables
        config = ReconcilerConfig()
        manager = IndexManager.from_config(config)

        # Or using direct parameters
        config = ReconcilerConfig(
            mongo_uri="mongodb://localhost:27017",
            strict_key_types=True,
        )
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        server_selection_timeout_ms: int | None = None,
        strict_key_types: bool | None = None,
        tolerate_missing_on_delete: bool | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to MONGO_URI env var)
            server_selection_timeout_ms: Server selection timeout in ms
                (defaults to 5000 or MONGO_SERVER_SELECTION_TIMEOUT_MS)
            strict_key_types: Reject unknown index key types instead of
                treating them as ascending (defaults to false or
                MDB_RECONCILER_STRICT_KEY_TYPES)
            tolerate_missing_on_delete: Treat deleting an index that does not
                exist as success (defaults to true or
                MDB_RECONCILER_TOLERATE_MISSING_ON_DELETE)
        """
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", "")
        self.server_selection_timeout_ms = server_selection_timeout_ms or int(
            os.getenv(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS", str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS)
            )
        )
        self.strict_key_types = (
            strict_key_types
            if strict_key_types is not None
            else _env_flag("MDB_RECONCILER_STRICT_KEY_TYPES", False)
        )
        self.tolerate_missing_on_delete = (
            tolerate_missing_on_delete
            if tolerate_missing_on_delete is not None
            else _env_flag("MDB_RECONCILER_TOLERATE_MISSING_ON_DELETE", True)
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )

        if self.server_selection_timeout_ms < 1000:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1000, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

"""
Unit tests for ReconcilerConfig.

Tests environment variable defaults and validation.
"""

import pytest

from mdb_reconciler.config import ReconcilerConfig
from mdb_reconciler.exceptions import ConfigurationError


@pytest.mark.unit
class TestReconcilerConfig:
    """Test configuration loading."""

    def test_defaults(self):
        """Test defaults when nothing is set."""
        config = ReconcilerConfig()
        assert config.mongo_uri == ""
        assert config.server_selection_timeout_ms == 5000
        assert config.strict_key_types is False
        assert config.tolerate_missing_on_delete is True

    def test_environment_variables(self, monkeypatch):
        """Test settings are picked up from the environment."""
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
        monkeypatch.setenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "2500")
        monkeypatch.setenv("MDB_RECONCILER_STRICT_KEY_TYPES", "TRUE")
        monkeypatch.setenv("MDB_RECONCILER_TOLERATE_MISSING_ON_DELETE", "false")

        config = ReconcilerConfig()
        assert config.mongo_uri == "mongodb://db:27017"
        assert config.server_selection_timeout_ms == 2500
        assert config.strict_key_types is True
        assert config.tolerate_missing_on_delete is False

    def test_parameters_override_environment(self, monkeypatch):
        monkeypatch.setenv("MONGO_URI", "mongodb://env:27017")
        monkeypatch.setenv("MDB_RECONCILER_TOLERATE_MISSING_ON_DELETE", "false")

        config = ReconcilerConfig(
            mongo_uri="mongodb://param:27017", tolerate_missing_on_delete=True
        )
        assert config.mongo_uri == "mongodb://param:27017"
        assert config.tolerate_missing_on_delete is True

    def test_validate_requires_uri(self):
        with pytest.raises(ConfigurationError, match="mongo_uri is required") as exc:
            ReconcilerConfig().validate()
        assert exc.value.config_key == "mongo_uri"

    def test_validate_timeout(self):
        config = ReconcilerConfig(mongo_uri="mongodb://localhost", server_selection_timeout_ms=10)
        with pytest.raises(ConfigurationError, match="server_selection_timeout_ms"):
            config.validate()

    def test_validate_ok(self):
        ReconcilerConfig(mongo_uri="mongodb://localhost").validate()

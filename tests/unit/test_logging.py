"""
Unit tests for contextual logging.
"""

import logging

import pytest

from mdb_reconciler.indexes.types import IndexIdentity
from mdb_reconciler.observability import (clear_correlation_id,
                                          clear_index_context,
                                          get_correlation_id, get_logger,
                                          get_logging_context, log_operation,
                                          set_correlation_id,
                                          set_index_context)


@pytest.fixture(autouse=True)
def clean_context():
    """Make sure no context leaks between tests."""
    clear_correlation_id()
    clear_index_context()
    yield
    clear_correlation_id()
    clear_index_context()


@pytest.mark.unit
class TestLoggingContext:
    """Test correlation ID and index context handling."""

    def test_correlation_id_generated(self):
        correlation_id = set_correlation_id()
        assert correlation_id
        assert get_correlation_id() == correlation_id

    def test_correlation_id_explicit(self):
        set_correlation_id("req-1")
        assert get_logging_context()["correlation_id"] == "req-1"

    def test_index_context(self):
        set_index_context(IndexIdentity("app", "events", "idx"), operation="get_index")
        context = get_logging_context()
        assert context["database"] == "app"
        assert context["collection"] == "events"
        assert context["index_name"] == "idx"
        assert context["operation"] == "get_index"
        assert "timestamp" in context

    def test_cleared_context(self):
        set_index_context(IndexIdentity("app", "events", "idx"))
        clear_index_context()
        assert "index_name" not in get_logging_context()


@pytest.mark.unit
class TestLogOperation:
    """Test structured operation logging."""

    def test_success_message(self, caplog):
        logger = logging.getLogger("tests.logging")
        with caplog.at_level(logging.INFO):
            log_operation(logger, "create_index", duration_ms=12.5)
        record = caplog.records[-1]
        assert record.getMessage() == "Operation: create_index (duration: 12.50ms)"
        assert record.operation == "create_index"
        assert record.success is True
        assert record.duration_ms == 12.5

    def test_failure_message(self, caplog):
        logger = logging.getLogger("tests.logging")
        set_index_context(IndexIdentity("app", "events", "idx"))
        with caplog.at_level(logging.ERROR):
            log_operation(logger, "drop_index", level=logging.ERROR, success=False, error="boom")
        record = caplog.records[-1]
        assert record.getMessage() == "Operation failed: drop_index"
        assert record.error == "boom"
        assert record.index_name == "idx"

    def test_contextual_adapter(self, caplog):
        set_correlation_id("req-42")
        logger = get_logger("tests.logging")
        with caplog.at_level(logging.INFO):
            logger.info("hello")
        assert caplog.records[-1].correlation_id == "req-42"

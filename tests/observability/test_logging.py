"""Tests for correlation IDs and safe log helpers."""

import logging

from quizfunnel.observability.correlation import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from quizfunnel.observability.log_utils import safe_log_payload, safe_log_value


class TestCorrelationId:
    """Tests for correlation ID context helpers."""

    def teardown_method(self) -> None:
        clear_correlation_id()

    def test_set_keeps_given_id(self) -> None:
        """An inbound ID is kept as is."""
        assert set_correlation_id("req-123") == "req-123"
        assert get_correlation_id() == "req-123"

    def test_set_generates_id_when_missing(self) -> None:
        """A fresh ID is generated when none is given."""
        value = set_correlation_id()
        assert value
        assert get_correlation_id() == value

    def test_filter_stamps_records(self) -> None:
        """Records carry the active ID, or a dash when unset."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "-"

        set_correlation_id("job-7")
        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "job-7"


class TestSafeLogging:
    """Tests for safe_log_value and safe_log_payload."""

    def test_collections_are_summarized(self) -> None:
        """Lists and dicts log as sizes, not contents."""
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"

    def test_long_values_are_truncated(self) -> None:
        """Values past the limit are cut and annotated."""
        result = safe_log_value("x" * 20, max_length=5)
        assert result == "xxxxx... (truncated, 20 total)"

    def test_payload_is_compact_json(self) -> None:
        """Payloads render as one compact JSON line."""
        assert safe_log_payload({"type": "order.completed", "data": {}}) == (
            '{"type":"order.completed","data":{}}'
        )

    def test_payload_is_truncated(self) -> None:
        """Large provider bodies are truncated."""
        result = safe_log_payload({"html": "y" * 100}, max_length=10)
        assert result.startswith('{"html":"y')
        assert "truncated" in result

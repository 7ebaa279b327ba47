"""
Tests for structured logging.
"""

import io
import json
import logging
from datetime import datetime, timedelta

import pytest

from sutra_shared.logging import (
    clear_context,
    configure_logging,
    get_logger,
    request_id_var,
    set_tool_context,
)


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    configure_logging("sutra", "debug", stream=stream)
    yield stream
    clear_context()
    configure_logging("sutra", "info")


def test_defaults_to_stderr():
    """Test logs never go to stdout, which carries MCP frames."""
    import sys

    configure_logging("sutra")
    handlers = logging.getLogger().handlers
    assert handlers
    assert all(getattr(handler, "stream", None) is not sys.stdout for handler in handlers)


def test_emits_json_with_context(log_stream):
    """Test events are JSON with service and correlation fields."""
    request_id = set_tool_context("mahakalp_sf_constraints")

    get_logger("sutra.test").info("Tool call completed", count=3)

    line = log_stream.getvalue().strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "Tool call completed"
    assert event["service"] == "sutra"
    assert event["tool"] == "mahakalp_sf_constraints"
    assert event["request_id"] == request_id
    assert event["count"] == 3
    assert event["level"] == "info"


def test_clear_context():
    set_tool_context("mahakalp_sf_releases")
    clear_context()
    assert request_id_var.get() is None


def test_timestamp_is_iso(log_stream):
    """Test events carry an ISO-8601 UTC timestamp."""
    get_logger("sutra.test.timestamp").info("Server ready")

    event = json.loads(log_stream.getvalue().strip().splitlines()[-1])
    assert isinstance(event["timestamp"], str)
    parsed = datetime.fromisoformat(event["timestamp"].replace("Z", "+00:00"))
    assert parsed.utcoffset() == timedelta(0)

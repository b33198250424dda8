"""Tests for logging configuration."""

import json

from app.core.logging import configure_logging, get_logger, request_id_ctx


def test_request_id_context_variable():
    """request_id_ctx should store and retrieve values."""
    assert request_id_ctx.get() is None

    token = request_id_ctx.set("test-id-123")
    assert request_id_ctx.get() == "test-id-123"

    request_id_ctx.reset(token)
    assert request_id_ctx.get() is None


def test_json_events_carry_context(capsys):
    """JSON log lines include event name, level, service and request id."""
    configure_logging(log_level="DEBUG")
    token = request_id_ctx.set("req-abc")
    try:
        get_logger("test").info("dashboard.metrics_computed", range_value="2024-03")
    finally:
        request_id_ctx.reset(token)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "dashboard.metrics_computed"
    assert event["level"] == "info"
    assert event["request_id"] == "req-abc"
    assert event["service"] == "StorePulse"
    assert event["range_value"] == "2024-03"
    assert "timestamp" in event


def test_level_filtering(capsys):
    """Events below the configured level are dropped."""
    configure_logging(log_level="WARNING")

    get_logger("test").info("dashboard.ignored")

    assert "dashboard.ignored" not in capsys.readouterr().out

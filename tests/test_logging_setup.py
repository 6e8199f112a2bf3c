"""
Tests for logging_setup module.

Verifies:
- JSON structured logging format
- Component tagging
- Session ID correlation
- Quiet loggers
- Log level configuration
"""
import json
import logging
from io import StringIO
from datetime import datetime

import pytest

from logging_setup import (
    setup_logging,
    setup_logging_from_env,
    get_logger,
    Component,
    JSONFormatter,
    StructuredLogger,
)


@pytest.fixture
def capture_logs():
    """Capture log output to a string buffer."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(JSONFormatter())

    logger = logging.getLogger()
    logger.handlers = []
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield buffer

    logger.handlers = []


def test_json_formatter_basic(capture_logs):
    """Test basic JSON log formatting."""
    logger = get_logger(Component.DELIVERY)
    logger.info("Speech delivered", channel="primary")

    output = capture_logs.getvalue()
    log_entry = json.loads(output.strip())

    assert log_entry["severity"] == "info"
    assert log_entry["component"] == "delivery"
    assert log_entry["message"] == "Speech delivered"
    assert log_entry["channel"] == "primary"
    assert "timestamp" in log_entry


def test_json_formatter_timestamp_format(capture_logs):
    """Test that timestamp is in ISO8601 format."""
    logger = get_logger(Component.LOCK_GATE)
    logger.info("Timestamp test")

    log_entry = json.loads(capture_logs.getvalue().strip())

    dt = datetime.fromisoformat(log_entry["timestamp"].replace("Z", "+00:00"))
    assert dt is not None


def test_json_formatter_keeps_non_ascii(capture_logs):
    """Czech text is written as-is, not escaped."""
    logger = get_logger(Component.SESSION_EVENTS)
    logger.info("Announcing", text="Úkol dokončen.")

    output = capture_logs.getvalue()
    assert "Úkol dokončen." in output


def test_session_id_correlation(capture_logs):
    """Test that session_id is included when provided."""
    logger = get_logger(Component.SESSION_EVENTS, session_id="ses_123")
    logger.info("Capture cycle")

    log_entry = json.loads(capture_logs.getvalue().strip())

    assert log_entry["session_id"] == "ses_123"


def test_session_id_absent_when_not_provided(capture_logs):
    """Test that session_id is absent when not provided."""
    logger = get_logger(Component.SPEAK_TOOL)
    logger.info("No session")

    log_entry = json.loads(capture_logs.getvalue().strip())

    assert "session_id" not in log_entry


def test_with_session_creates_new_logger(capture_logs):
    """Test that with_session creates a new logger with session ID."""
    base_logger = get_logger(Component.SESSION_EVENTS)
    session_logger = base_logger.with_session("ses_456")

    session_logger.info("With session")

    log_entry = json.loads(capture_logs.getvalue().strip())

    assert log_entry["session_id"] == "ses_456"
    assert base_logger.session_id is None


def test_quiet_logger_drops_everything(capture_logs):
    """A quiet logger emits nothing, at any level."""
    logger = get_logger(Component.DELIVERY, quiet=True)
    logger.debug("debug")
    logger.info("info")
    logger.warning("warning")
    logger.error("error")

    assert capture_logs.getvalue() == ""


def test_quiet_is_inherited_by_with_session(capture_logs):
    logger = get_logger(Component.SESSION_EVENTS, quiet=True).with_session("ses_1")
    logger.warning("dropped")

    assert capture_logs.getvalue() == ""


def test_exception_logging(capture_logs):
    """Test that exception info is captured."""
    logger = get_logger(Component.HOST_CLIENT)

    try:
        raise ValueError("Test error")
    except ValueError:
        logger.exception("Caught exception")

    log_entry = json.loads(capture_logs.getvalue().strip())

    assert log_entry["severity"] == "error"
    assert "exception" in log_entry
    assert "ValueError" in log_entry["exception"]


def test_log_levels(capture_logs):
    """Test that log levels are respected."""
    logging.getLogger().setLevel(logging.WARNING)

    logger = get_logger(Component.DELIVERY)
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")

    lines = [line for line in capture_logs.getvalue().strip().split("\n") if line]

    assert len(lines) == 1
    assert json.loads(lines[0])["message"] == "Warning message"


def test_structured_logger_string_component(capture_logs):
    """Test StructuredLogger accepts plain string components."""
    logger = StructuredLogger("custom_component")
    logger.info("Custom")

    log_entry = json.loads(capture_logs.getvalue().strip())

    assert log_entry["component"] == "custom_component"


def test_setup_logging_configures_root():
    setup_logging(level="DEBUG", use_json=True)
    root = logging.getLogger()

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)

    root.handlers = []


def test_setup_logging_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("LOG_JSON", "false")

    setup_logging_from_env()
    root = logging.getLogger()

    assert root.level == logging.WARNING
    assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    root.handlers = []

"""Unit tests for logging configuration."""

from __future__ import annotations

import io
import json
import logging
from typing import Iterator

import pytest
import structlog

from recwire import Record, configure_logging, decode, get_logger


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Restore structlog and stdlib logging after each test."""
    yield
    structlog.reset_defaults()
    package_logger = logging.getLogger("recwire")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


class TestConfigureLogging:
    """Test structlog wiring."""

    def test_json_output(self, reset_logging: None) -> None:
        """Test events render as JSON lines."""
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream)
        get_logger("recwire.test").info("hello", answer=42)

        event = json.loads(stream.getvalue().strip())
        assert event["event"] == "hello"
        assert event["answer"] == 42
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_console_output(self, reset_logging: None) -> None:
        """Test console rendering."""
        stream = io.StringIO()
        configure_logging(level="INFO", stream=stream)
        get_logger("recwire.test").info("hello", answer=42)
        assert "hello" in stream.getvalue()
        assert "answer=42" in stream.getvalue()

    def test_level_filtering(self, reset_logging: None) -> None:
        """Test events below the level are dropped."""
        stream = io.StringIO()
        configure_logging(level="WARNING", stream=stream)
        get_logger("recwire.test").debug("quiet")
        assert stream.getvalue() == ""

    def test_unknown_level(self) -> None:
        """Test invalid level names."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="LOUD")

    def test_decode_diagnostics(self, reset_logging: None, Report: type[Record]) -> None:
        """Test skipped unknown fields are logged at debug level."""
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream)
        decode(Report, b"\x98\x06\x01")

        events = [json.loads(line) for line in stream.getvalue().splitlines()]
        skipped = [event for event in events if event["event"] == "unknown_fields_skipped"]
        assert len(skipped) == 1
        assert skipped[0]["record"] == "test.Report"
        assert skipped[0]["count"] == 1
        assert skipped[0]["level"] == "debug"

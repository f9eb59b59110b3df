"""
Unit tests for structured logging utility (cueclub/utils/logger.py)

Covers:
- JSON log formatting with required fields (timestamp, level, message, operation, context)
- Customer phone masking
- Log level filtering
- Log operation decorator
"""

import json
import logging
from datetime import date, datetime
from io import StringIO

import pytest

from cueclub.utils.logger import StructuredLogger, get_logger, log_operation, mask_phone


class TestMaskPhone:
    """Tests for phone number masking utility."""

    def test_international_format(self):
        """Test masking keeps the plus sign, two leading and four trailing digits."""
        result = mask_phone("+1234567890")
        assert result == "+12****7890"
        assert "3456" not in result

    def test_hyphenated_format(self):
        """Test masking ignores separators."""
        assert mask_phone("555-123-4567") == "55****4567"

    def test_empty_and_none(self):
        """Test missing phone numbers."""
        assert mask_phone("") == "unknown"
        assert mask_phone(None) == "unknown"

    def test_too_short(self):
        """Test phone numbers with fewer than eight digits."""
        assert mask_phone("123-45") == "invalid"


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    @pytest.fixture
    def logger_with_handler(self):
        """Fixture providing logger with string stream handler."""
        logger = StructuredLogger("cueclub.test_logger")
        logger.logger.handlers.clear()

        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.logger.addHandler(handler)
        logger.logger.setLevel(logging.DEBUG)

        yield logger, stream

        logger.logger.handlers.clear()

    def test_format_log_basic_fields(self, logger_with_handler):
        """Test log formatting includes required fields only."""
        logger, _ = logger_with_handler

        parsed = json.loads(logger._format_log("INFO", "Booking checked"))

        assert set(parsed) == {"timestamp", "level", "message"}
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Booking checked"

    def test_timestamp_is_utc_iso(self, logger_with_handler):
        """Test timestamp is in ISO format with Z suffix."""
        logger, _ = logger_with_handler

        timestamp = json.loads(logger._format_log("INFO", "Test"))["timestamp"]

        assert timestamp.endswith("Z")
        datetime.fromisoformat(timestamp.replace("Z", "+00:00"))

    def test_format_log_all_fields(self, logger_with_handler):
        """Test log formatting with every optional field."""
        logger, _ = logger_with_handler

        context = {"table_id": 3, "booking_id": 17}
        parsed = json.loads(
            logger._format_log(
                "ERROR",
                "Bill failed",
                operation="final_bill",
                context=context,
                duration_ms=45.678,
                error="bad rate",
            )
        )

        assert parsed["operation"] == "final_bill"
        assert parsed["context"] == context
        assert parsed["duration_ms"] == 45.68
        assert parsed["error"] == "bad rate"

    def test_context_with_dates_is_serializable(self, logger_with_handler):
        """Test dates in context are rendered as strings."""
        logger, _ = logger_with_handler

        parsed = json.loads(logger._format_log("INFO", "x", context={"date": date(2025, 12, 22)}))

        assert parsed["context"]["date"] == "2025-12-22"

    def test_methods_emit_one_json_line_each(self, logger_with_handler):
        """Test each logging method writes a parseable record at its level."""
        logger, stream = logger_with_handler

        logger.debug("d", operation="estimate")
        logger.info("i", duration_ms=12.5)
        logger.warning("w", error="overlap")
        logger.error("e", context={"table_id": 1})

        lines = [json.loads(line) for line in stream.getvalue().strip().split("\n")]

        assert [line["level"] for line in lines] == ["DEBUG", "INFO", "WARNING", "ERROR"]
        assert lines[0]["operation"] == "estimate"
        assert lines[1]["duration_ms"] == 12.5
        assert lines[2]["error"] == "overlap"
        assert lines[3]["context"] == {"table_id": 1}

    def test_debug_filtered_at_info(self, logger_with_handler):
        """Test debug records are dropped when the level is INFO."""
        logger, stream = logger_with_handler
        logger.logger.setLevel(logging.INFO)

        logger.debug("hidden")
        logger.info("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_explicit_level(self):
        """Test level argument overrides the default."""
        logger = StructuredLogger("cueclub.test_level", level="WARNING")
        assert logger.logger.level == logging.WARNING


class TestLogOperationDecorator:
    """Tests for log_operation decorator."""

    def test_returns_result(self):
        """Test decorator passes the return value through."""

        @log_operation("estimate")
        def estimate(hours):
            return hours * 25

        assert estimate(2) == 50

    def test_logs_and_reraises_failure(self, caplog):
        """Test decorator logs a failure record and re-raises."""

        @log_operation("final_bill")
        def failing(phone=None):
            raise ValueError("end before start")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError, match="end before start"):
                failing(phone="+1234567890")

        record = json.loads(caplog.records[-1].getMessage())
        assert record["operation"] == "final_bill"
        assert record["error"] == "end before start"
        assert record["context"]["phone_masked"] == "+12****7890"
        assert "duration_ms" in record

    def test_preserves_function_metadata(self):
        """Test decorator preserves function name and docstring."""

        @log_operation("noop")
        def my_function():
            """Docstring."""

        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "Docstring."


class TestGetLogger:
    """Tests for get_logger factory function."""

    def test_returns_named_structured_logger(self):
        logger = get_logger("cueclub.pricing")
        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "cueclub.pricing"

    def test_does_not_stack_handlers(self):
        """Test repeated construction reuses the first handler."""
        first = get_logger("cueclub.repeat")
        second = get_logger("cueclub.repeat")
        assert len(second.logger.handlers) == len(first.logger.handlers) == 1

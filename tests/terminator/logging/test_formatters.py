"""Tests for JSON and console log formatters."""

import json
import logging
import sys

import pytest

from terminator.logging.context import clear_log_context, set_log_context
from terminator.logging.formatters import ConsoleFormatter, JSONFormatter


def _make_record(
    msg="test message",
    level=logging.INFO,
    name="test.logger",
    exc_info=None,
    **extras,
):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    @pytest.fixture(autouse=True)
    def clear_context(self):
        clear_log_context()
        yield
        clear_log_context()

    def test_formats_basic_json_with_required_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")

    def test_includes_context_fields(self):
        set_log_context(shutdown_id="s-20261018-120000-abcd", phase="shutdown")
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["shutdown_id"] == "s-20261018-120000-abcd"
        assert output["phase"] == "shutdown"
        assert "component" not in output

    def test_source_location_for_error_only(self):
        formatter = JSONFormatter()
        info = json.loads(formatter.format(_make_record(level=logging.INFO)))
        error = json.loads(formatter.format(_make_record(level=logging.ERROR)))

        assert "file" not in info
        assert error["file"] == "test.py:42"

    def test_extra_fields_included(self):
        record = _make_record(handler="close_db", priority=2, error_location="app.py:10")
        output = json.loads(JSONFormatter().format(record))

        assert output["handler"] == "close_db"
        assert output["priority"] == 2
        assert output["error_location"] == "app.py:10"

    def test_unknown_extras_ignored(self):
        output = json.loads(JSONFormatter().format(_make_record(unrelated="x")))
        assert "unrelated" not in output

    def test_numeric_fields_coerced(self):
        record = _make_record(reserved_bytes="102400", duration_ms="12.5", handlers_failed=1.0)
        output = json.loads(JSONFormatter().format(record))

        assert output["reserved_bytes"] == 102400
        assert output["duration_ms"] == 12.5
        assert output["handlers_failed"] == 1
        assert isinstance(output["handlers_failed"], int)

    def test_invalid_numeric_becomes_null(self):
        output = json.loads(JSONFormatter().format(_make_record(priority="high")))
        assert output["priority"] is None

    def test_exception_info(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            exc_info = sys.exc_info()

        output = json.loads(
            JSONFormatter().format(_make_record(level=logging.ERROR, exc_info=exc_info))
        )

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "bad value"
        assert "Traceback" in output["exception"]["stacktrace"]


class TestConsoleFormatter:

    @pytest.fixture(autouse=True)
    def clear_context(self):
        clear_log_context()
        yield
        clear_log_context()

    @pytest.fixture
    def formatter(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        return formatter

    def test_basic_format(self, formatter):
        output = formatter.format(_make_record())
        assert " - INFO - test message" in output

    def test_includes_component_and_phase(self, formatter):
        set_log_context(component="api", phase="shutdown")
        output = formatter.format(_make_record())
        assert "[api]" in output
        assert "[shutdown]" in output

    def test_handler_tag(self, formatter):
        output = formatter.format(_make_record(handler="close_db", priority=1))
        assert "[close_db@1] test message" in output

    def test_handler_tag_without_priority(self, formatter):
        output = formatter.format(_make_record(handler="close_db"))
        assert "[close_db] test message" in output

    def test_shutdown_id_tag(self, formatter):
        set_log_context(shutdown_id="s-1")
        assert "[s-1]" in formatter.format(_make_record())

    def test_appends_traceback(self, formatter):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            exc_info = sys.exc_info()

        output = formatter.format(_make_record(level=logging.ERROR, exc_info=exc_info))
        assert "RuntimeError: boom" in output

    def test_colors_when_enabled(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = True
        output = formatter.format(_make_record(level=logging.WARNING))
        assert "\033[33mWARNING\033[0m" in output

"""
Unit tests for the logging setup.

Tests verify handler wiring, the JSON and console formatters, and that a log
directory that cannot be created falls back to console-only logging.
"""

import json
import logging
import sys

import pytest

from medeina.core.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    log_performance,
    setup_logging,
)


def make_record(msg="hello", level=logging.INFO, **extra):
    record = logging.LogRecord("medeina.test", level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestFormatters:
    def test_json_formatter_includes_context(self):
        output = JSONFormatter().format(make_record(context={"nric": "S1234567Q"}))
        data = json.loads(output)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "medeina.test"
        assert data["context"] == {"nric": "S1234567Q"}

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]

    def test_console_formatter_leaves_record_untouched(self):
        record = make_record()
        output = ConsoleFormatter("%(levelname)s %(message)s").format(record)
        assert "\033[32m" in output
        assert record.levelname == "INFO"


@pytest.mark.unit
class TestSetupLogging:
    def test_console_only(self, restore_root_logging):
        setup_logging(log_level="WARNING")

        root = restore_root_logging
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_file_handlers(self, restore_root_logging, tmp_path):
        setup_logging(log_level=logging.DEBUG, log_to_file=True, log_dir=tmp_path)

        logging.getLogger("medeina.test").error("written", extra={"context": {"a": 1}})
        for handler in restore_root_logging.handlers:
            handler.flush()

        lines = (tmp_path / "medeina.log").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["context"] == {"a": 1}
        assert (tmp_path / "medeina_errors.log").exists()

    def test_unusable_log_dir_falls_back_to_console(self, restore_root_logging, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")

        setup_logging(log_to_file=True, log_dir=blocker)

        assert len(restore_root_logging.handlers) == 1


@pytest.mark.unit
def test_log_performance(caplog):
    with caplog.at_level(logging.INFO, logger="medeina.performance"):
        log_performance("execute_command", 12.345, command="add")

    record = caplog.records[-1]
    assert record.name == "medeina.performance"
    assert record.context == {
        "function": "execute_command",
        "duration_ms": 12.35,
        "command": "add",
    }

"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

from habitledger.config import BaseConfig
from habitledger.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="habitledger.test",
        level=kwargs.pop("level", logging.INFO),
        pathname="test.py",
        lineno=42,
        msg=kwargs.pop("msg", "Test message"),
        args=(),
        exc_info=kwargs.pop("exc_info", None),
    )
    record.module = "test_module"
    record.funcName = "test_function"
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


def test_json_formatter():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "habitledger.test"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    log_data = json.loads(JSONFormatter().format(_record(habit_id=7, period_index=3)))

    assert log_data["extra"] == {"habit_id": 7, "period_index": 3}


def test_setup_logging(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITLEDGER_LOG_LEVEL", "DEBUG")
    config = BaseConfig()

    logger = setup_logging(config)

    assert logger.name == "habitledger"
    assert logger.level == logging.DEBUG
    assert (tmp_path / "logs").is_dir()
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)

    get_logger("services.tracker").info("Habit marked", extra={"habit_id": 1})
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "habitledger.log").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]
    assert entries[-1]["message"] == "Habit marked"
    assert entries[-1]["logger"] == "habitledger.services.tracker"
    assert entries[-1]["extra"] == {"habit_id": 1}

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    config = BaseConfig()

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_get_logger_namespaces_under_package():
    assert get_logger("cli").name == "habitledger.cli"
    assert get_logger("habitledger.services.habits").name == "habitledger.services.habits"

"""Tests for structured JSON logging."""

from __future__ import annotations

import json
import logging

import pytest

from task_tracker_service.logging import (
    PACKAGE_LOGGER_NAME,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="task_tracker_service.tests",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_formatter_emits_json_with_extra_fields() -> None:
    """Each record is one JSON object; extra= fields land under 'extra'."""
    formatter = JSONFormatter("task-tracker")
    output = json.loads(formatter.format(_record("Task created", task_id="t-1")))

    assert output["service"] == "task-tracker"
    assert output["level"] == "INFO"
    assert output["logger"] == "task_tracker_service.tests"
    assert output["message"] == "Task created"
    assert output["extra"] == {"task_id": "t-1"}


@pytest.mark.unit
def test_formatter_omits_extra_when_empty() -> None:
    """No 'extra' key when the record carries nothing extra."""
    formatter = JSONFormatter("task-tracker")
    output = json.loads(formatter.format(_record("plain")))
    assert "extra" not in output


@pytest.mark.unit
def test_get_logger_nests_under_package() -> None:
    """Foreign names are nested under the package logger; package names are kept."""
    assert get_logger("worker").name == f"{PACKAGE_LOGGER_NAME}.worker"
    assert get_logger("task_tracker_service.services").name == "task_tracker_service.services"


@pytest.mark.unit
def test_setup_logging_rejects_unknown_level(tmp_path) -> None:
    """Unknown log levels fail fast."""
    with pytest.raises(ValueError, match="Invalid log level"):
        setup_logging("VERBOSE", "task-tracker", str(tmp_path))


@pytest.mark.unit
def test_setup_logging_writes_daily_file(tmp_path) -> None:
    """Records reach a YYYY-MM-DD.log file in the log directory."""
    log_directory = tmp_path / "logs"
    logger = setup_logging("info", "task-tracker", str(log_directory))

    get_logger("tests").info("hello", extra={"answer": 42})
    for handler in logger.handlers:
        handler.flush()

    files = list(log_directory.glob("*.log"))
    assert len(files) == 1
    line = json.loads(files[0].read_text().strip().splitlines()[-1])
    assert line["message"] == "hello"
    assert line["extra"] == {"answer": 42}

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

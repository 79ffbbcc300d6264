"""Tests for logging setup."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from pactum.log import ConsoleFormatter, JSONLFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_pactum_logger() -> Iterator[None]:
    logger = logging.getLogger("pactum")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


def _record(message: str, level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("pactum.session", level, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_jsonl_fields(self) -> None:
        entry = json.loads(JSONLFormatter().format(_record("started", session_id="abc")))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "pactum.session"
        assert entry["message"] == "started"
        assert entry["session_id"] == "abc"
        assert entry["timestamp"].endswith("+00:00")

    def test_jsonl_exception(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record("failed", logging.ERROR)
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONLFormatter().format(record))
        assert entry["exception"] == {"type": "ValueError", "message": "bad"}

    def test_console_contains_level_and_message(self) -> None:
        out = ConsoleFormatter().format(_record("hello", logging.WARNING))
        assert "[pactum]" in out
        assert "WARNING" in out
        assert out.endswith("hello")


class TestSetupLogging:
    def test_console_only(self) -> None:
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "pactum"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert setup_logging().level == logging.WARNING

    def test_file_output(self, tmp_path: Path) -> None:
        logger = setup_logging(logging.INFO, log_dir=tmp_path / "logs")
        logging.getLogger("pactum.session").info("Mock server started")
        for handler in logger.handlers:
            handler.flush()

        lines = (tmp_path / "logs" / "pactum.log").read_text().splitlines()
        assert json.loads(lines[-1])["message"] == "Mock server started"

    def test_repeated_setup_does_not_duplicate_handlers(self) -> None:
        setup_logging(logging.INFO)
        assert len(setup_logging(logging.INFO).handlers) == 1

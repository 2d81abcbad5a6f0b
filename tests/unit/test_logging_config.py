"""
Unit Tests for Logging Configuration
"""

import json
import logging
import sys

import pytest

from studio_admin.utils.logging_config import AppLogger, ColoredFormatter, JSONFormatter


def make_record(level=logging.INFO, msg="hello", exc_info=None):
    return logging.LogRecord("studio_admin.test", level, __file__, 10, msg, None, exc_info)


class TestFormatters:

    def test_colored_formatter_restores_levelname(self):
        record = make_record(logging.WARNING)
        text = ColoredFormatter().format(record)
        assert "WARNING" in text
        assert record.levelname == "WARNING"

    def test_json_formatter_with_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = make_record(logging.ERROR, "failed", sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "ERROR"
        assert data["message"] == "failed"
        assert data["exception"]["type"] == "ValueError"


class TestAppLogger:

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        AppLogger.reset()
        yield
        AppLogger.reset()

    def test_setup_creates_log_files(self, tmp_path):
        AppLogger.setup(log_dir=tmp_path / "logs", level="INFO")
        logging.getLogger("studio_admin.test").error("boom")
        files = {p.name.split("_")[0] for p in (tmp_path / "logs").iterdir()}
        assert files == {"admin", "errors"}

    def test_setup_runs_once(self, tmp_path):
        AppLogger.setup(log_dir=tmp_path, level="INFO")
        handlers = list(logging.getLogger().handlers)
        AppLogger.setup(log_dir=tmp_path, level="DEBUG")
        assert logging.getLogger().handlers == handlers

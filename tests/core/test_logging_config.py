"""Tests for gembridge logging setup."""

import json
import logging

import pytest

from gembridge.core import logging_config
from gembridge.core.logging_config import JsonFormatter, configure_logging, set_level


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch):
    """Put the root logger back the way pytest left it."""
    for name in ("GEMBRIDGE_LOG_LEVEL", "GEMBRIDGE_LOG_FORMAT", "GEMBRIDGE_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    monkeypatch.setattr(logging_config, "_configured", False)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_from_argument(self):
        configure_logging(level="DEBUG", force=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMBRIDGE_LOG_LEVEL", "warning")

        configure_logging(force=True)

        assert logging.getLogger().level == logging.WARNING

    def test_second_call_ignored_without_force(self):
        configure_logging(level="ERROR", force=True)
        configure_logging(level="DEBUG")

        assert logging.getLogger().level == logging.ERROR

    def test_json_format(self):
        configure_logging(format="json", force=True)

        [handler] = logging.getLogger().handlers
        assert isinstance(handler.formatter, JsonFormatter)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "gateway.log"

        configure_logging(level="INFO", file_path=str(log_file), force=True)
        logging.getLogger("gembridge.test").info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()

    def test_noisy_loggers_quieted(self):
        configure_logging(level="DEBUG", force=True)

        assert logging.getLogger("aiohttp.access").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_fields_and_extra(self):
        record = logging.LogRecord(
            name="gembridge.gateway.server",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Incoming %s",
            args=("POST",),
            exc_info=None,
        )
        record.trace_id = "00001_120000_chat_hi"

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "gembridge.gateway.server"
        assert data["message"] == "Incoming POST"
        assert data["extra"] == {"trace_id": "00001_120000_chat_hi"}


class TestSetLevel:
    def test_named_logger(self):
        set_level("error", "gembridge.gateway")

        assert logging.getLogger("gembridge.gateway").level == logging.ERROR

        logging.getLogger("gembridge.gateway").setLevel(logging.NOTSET)

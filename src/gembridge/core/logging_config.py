"""Logging setup for gembridge.

Call ``configure_logging`` once at startup (the CLI does this); modules
just use ``logging.getLogger(__name__)``.

Environment Variables:
    GEMBRIDGE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    GEMBRIDGE_LOG_FORMAT: Output format ("text" or "json")
    GEMBRIDGE_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that are too chatty at DEBUG/INFO for normal use
NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "aiohttp.server")

# LogRecord attributes that are not user-supplied extras
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message"}

_configured = False


class JsonFormatter(logging.Formatter):
    """One JSON object per log line.

    {"timestamp": "...", "level": "INFO", "logger": "gembridge.gateway.server",
     "message": "...", "extra": {...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def _make_formatter(format: str) -> logging.Formatter:
    if format == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure root logging.

    Subsequent calls are ignored unless force=True. Arguments win over the
    GEMBRIDGE_LOG_* environment variables.

    Args:
        level: Log level. Defaults to GEMBRIDGE_LOG_LEVEL or "INFO".
        format: "text" or "json". Defaults to GEMBRIDGE_LOG_FORMAT or "text".
        file_path: Optional log file. Defaults to GEMBRIDGE_LOG_FILE.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("GEMBRIDGE_LOG_LEVEL", "INFO")
    format = format or os.environ.get("GEMBRIDGE_LOG_FORMAT", "text")  # type: ignore
    file_path = file_path or os.environ.get("GEMBRIDGE_LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    formatter = _make_formatter(format)  # type: ignore[arg-type]

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically __name__)."""
    return logging.getLogger(name)


def set_level(level: str, logger_name: str | None = None) -> None:
    """Set log level for a specific logger, or the root logger if None."""
    logging.getLogger(logger_name).setLevel(getattr(logging, level.upper()))

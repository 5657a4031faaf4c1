"""Shared infrastructure used across gembridge."""

from gembridge.core.logging_config import configure_logging, get_logger, set_level

__all__ = ["configure_logging", "get_logger", "set_level"]

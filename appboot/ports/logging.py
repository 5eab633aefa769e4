"""Log level port definition."""

from __future__ import annotations

import logging
from enum import Enum

__all__ = ["LogLevel", "TRACE"]

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_OFF = logging.CRITICAL + 10

_ALIASES = {"warning": "warn", "critical": "error", "none": "off"}


class LogLevel(str, Enum):
    """Severity filter accepted by the logger configurator.

    Parsing is case-insensitive so values can come straight from
    environment variables ("INFO", "debug", "Warning").
    """

    OFF = "off"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"

    @classmethod
    def _missing_(cls, value: object) -> LogLevel | None:
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return None

    @property
    def stdlib_level(self) -> int:
        """Equivalent level number for the stdlib logging module."""
        return {
            LogLevel.OFF: _OFF,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.TRACE: TRACE,
        }[self]

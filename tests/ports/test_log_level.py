"""Tests for log level parsing."""

import logging

import pytest

from appboot.ports.logging import TRACE, LogLevel

__all__ = []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("info", LogLevel.INFO),
        ("INFO", LogLevel.INFO),
        (" Debug ", LogLevel.DEBUG),
        ("warning", LogLevel.WARN),
        ("WARN", LogLevel.WARN),
        ("trace", LogLevel.TRACE),
        ("off", LogLevel.OFF),
    ],
)
def test_log_level_parses_case_insensitively(raw: str, expected: LogLevel) -> None:
    """Level names should parse regardless of case and common aliases."""
    assert LogLevel(raw) is expected


def test_log_level_rejects_unknown_name() -> None:
    """Unknown names should raise ValueError."""
    with pytest.raises(ValueError):
        LogLevel("verbose")


def test_log_level_maps_to_stdlib_levels() -> None:
    """Each level should map onto the stdlib numbering, OFF above everything."""
    assert LogLevel.ERROR.stdlib_level == logging.ERROR
    assert LogLevel.WARN.stdlib_level == logging.WARNING
    assert LogLevel.INFO.stdlib_level == logging.INFO
    assert LogLevel.DEBUG.stdlib_level == logging.DEBUG
    assert LogLevel.TRACE.stdlib_level == TRACE < logging.DEBUG
    assert LogLevel.OFF.stdlib_level > logging.CRITICAL
    assert logging.getLevelName(TRACE) == "TRACE"

"""Shared fixtures."""

from collections.abc import Iterator

import pytest

from appboot.adapters.driven.logging.logging_config import reset_logger

__all__ = []


@pytest.fixture(autouse=True)
def reset_logger_installation() -> Iterator[None]:
    """Undo any process-wide logger installed by a test."""
    yield
    reset_logger()

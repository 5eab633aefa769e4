"""Healthcheck validator for container orchestration."""

import logging
import os

from appboot.adapters.driven.config.settings import load_settings
from appboot.core.errors import ConfigError

__all__ = ["main"]

logger = logging.getLogger(__name__)


def _log_file_writable(path: str) -> bool:
    """Check write access without creating the file."""
    if os.path.exists(path):
        return os.path.isfile(path) and os.access(path, os.W_OK)
    parent = os.path.dirname(os.path.abspath(path))
    return os.path.isdir(parent) and os.access(parent, os.W_OK)


def main() -> int:
    """Validate the bootstrap environment without starting anything.

    Validates:
    - APPBOOT_* variables parse into valid levels, ports and overrides.
    - The configured log file (if any) is writable, or can be created.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    logging.basicConfig(level=logging.INFO)

    try:
        settings = load_settings()
        if settings.log_file and not _log_file_writable(settings.log_file):
            raise ConfigError(f"Log file {settings.log_file} is not writable")
    except ConfigError as exc:
        logger.error(f"Bootstrap healthcheck FAILED: {exc}")
        return 1

    logger.info("Bootstrap healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

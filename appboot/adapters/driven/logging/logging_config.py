"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from os import PathLike

from appboot.core.errors import ConfigError
from appboot.ports.logging import LogLevel

__all__ = ["LOG_FORMAT", "DATE_FORMAT", "configure_logger", "reset_logger"]

LOG_FORMAT = "%(asctime)s[%(name)s][%(levelname)s] %(message)s"
DATE_FORMAT = "[%Y-%m-%d][%H:%M:%S]"

LevelLike = LogLevel | str


@dataclass
class _Installation:
    """What configure_logger changed, so reset_logger can undo it."""

    handlers: list[logging.Handler]
    root_level: int
    module_levels: dict[str, int] = field(default_factory=dict)


_install_lock = threading.Lock()
_installation: _Installation | None = None


def _parse_level(value: LevelLike, what: str) -> LogLevel:
    try:
        return LogLevel(value)
    except ValueError as e:
        raise ConfigError(f"Invalid log level for {what}: {value!r}") from e


def configure_logger(
    output_file: str | PathLike[str] | None = None,
    minimum_level: LevelLike | None = None,
    per_module_levels: Mapping[str, LevelLike] | None = None,
) -> None:
    """Install the process-wide log configuration.

    Sets up:
    - Records rendered as ``[date][time][logger][LEVEL] message`` (local time).
    - Root logger at ``minimum_level`` (INFO when omitted).
    - Per-module overrides, e.g. ``{"aiohttp": "error"}`` to silence a noisy
      dependency while the rest stays at INFO. Child loggers inherit them.
    - Output to stdout, plus ``output_file`` in append mode when given.

    Nothing is installed unless every step succeeds.

    Args:
        output_file: Optional log file path; created if missing.
        minimum_level: Blanket severity filter.
        per_module_levels: Logger name to severity filter overrides.

    Raises:
        ConfigError: If a level is invalid, the file cannot be opened, or a
            logger has already been installed in this process.
    """
    global _installation

    level = LogLevel.INFO
    if minimum_level is not None:
        level = _parse_level(minimum_level, "minimum_level")
    overrides = {
        module: _parse_level(module_level, module)
        for module, module_level in (per_module_levels or {}).items()
    }

    with _install_lock:
        if _installation is not None:
            raise ConfigError("A logger has already been installed in this process")

        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if output_file is not None:
            try:
                handlers.append(logging.FileHandler(output_file, mode="a", encoding="utf-8"))
            except OSError as e:
                raise ConfigError(f"Cannot open log file {output_file}: {e}") from e

        root = logging.getLogger()
        installation = _Installation(handlers=handlers, root_level=root.level)
        for handler in handlers:
            handler.setFormatter(formatter)
            root.addHandler(handler)
        root.setLevel(level.stdlib_level)

        for module, module_level in overrides.items():
            module_logger = logging.getLogger(module)
            installation.module_levels[module] = module_logger.level
            module_logger.setLevel(module_level.stdlib_level)

        _installation = installation

    logging.getLogger(__name__).debug(
        f"Logger installed: level={level.value}, file={output_file or '<none>'}, "
        f"overrides={ {m: lvl.value for m, lvl in overrides.items()} }"
    )


def reset_logger() -> None:
    """Undo configure_logger, restoring the previous root level and handlers.

    Reset hook for test suites and embedding applications that need to
    reconfigure logging. A no-op when nothing is installed.
    """
    global _installation

    with _install_lock:
        if _installation is None:
            return
        root = logging.getLogger()
        for handler in _installation.handlers:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(_installation.root_level)
        for module, previous in _installation.module_levels.items():
            logging.getLogger(module).setLevel(previous)
        _installation = None

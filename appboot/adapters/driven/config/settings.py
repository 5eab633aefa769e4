"""Configuration loading from environment variables."""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from appboot.core.errors import ConfigError
from appboot.ports.logging import LogLevel

__all__ = ["Settings", "load_settings", "parse_module_levels"]

logger = logging.getLogger(__name__)

ENV_PREFIX = "APPBOOT_"


class Settings(BaseModel):
    """Bootstrap configuration.

    Attributes:
        log_file: Optional file receiving log records in addition to stdout.
        log_level: Blanket severity filter.
        log_levels: Per-logger severity overrides.
        health_host: Interface for the demo health endpoint.
        health_port: Port for the demo health endpoint; disabled when None.
    """

    log_file: str | None = Field(default=None, description="Optional log file path.")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Default log level.")
    log_levels: dict[str, LogLevel] = Field(
        default_factory=dict,
        description="Per-module log level overrides.",
    )
    health_host: str = Field(default="127.0.0.1", description="Health endpoint host.")
    health_port: int | None = Field(
        default=None,
        ge=0,
        le=65535,
        description="Health endpoint port. If not set, no endpoint is served.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> LogLevel:
        """Accept level names in any case.

        Args:
            v: Raw level value.

        Returns:
            Parsed level.

        Raises:
            ValueError: If the name is not a known level.
        """
        return LogLevel(v)

    @field_validator("log_levels", mode="before")
    @classmethod
    def validate_log_levels(cls, v: Any) -> dict[str, LogLevel]:
        """Accept either a mapping or a ``module=level,...`` string."""
        if isinstance(v, str):
            return parse_module_levels(v)
        return {module: LogLevel(level) for module, level in dict(v).items()}


def parse_module_levels(raw: str) -> dict[str, LogLevel]:
    """Parse ``"aiohttp=warn,my_app.db=debug"`` into an override mapping.

    Args:
        raw: Comma-separated ``module=level`` pairs. Blank entries are ignored.

    Returns:
        Mapping of logger name to level.

    Raises:
        ValueError: If an entry is malformed or names an unknown level.
    """
    levels: dict[str, LogLevel] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        module, sep, level = entry.partition("=")
        if not sep or not module.strip():
            raise ValueError(f"Expected module=level, got {entry!r}")
        levels[module.strip()] = LogLevel(level)
    return levels


def load_settings() -> Settings:
    """Load and validate settings from the environment (and a .env file).

    Optional environment variables:
    - APPBOOT_LOG_FILE: Path of an extra log file.
    - APPBOOT_LOG_LEVEL: off, error, warn, info, debug or trace.
    - APPBOOT_LOG_LEVELS: Per-module overrides, e.g. ``aiohttp=warn``.
    - APPBOOT_HEALTH_HOST: Interface for the demo health endpoint.
    - APPBOOT_HEALTH_PORT: Port for the demo health endpoint.

    Returns:
        Validated Settings object.

    Raises:
        ConfigError: If any variable is invalid.
    """
    load_dotenv()

    raw: dict[str, str] = {}
    for name in ("log_file", "log_level", "log_levels", "health_host", "health_port"):
        value = os.getenv(ENV_PREFIX + name.upper())
        if value:
            raw[name] = value

    try:
        settings = Settings(**raw)
    except ValidationError as e:
        fields = ", ".join(ENV_PREFIX + str(err["loc"][0]).upper() for err in e.errors())
        raise ConfigError(f"Invalid configuration in {fields}: {e}") from e

    logger.debug(
        f"Bootstrap configured: level={settings.log_level.value}, "
        f"file={settings.log_file or '<none>'}, "
        f"overrides={len(settings.log_levels)}, "
        f"health_port={settings.health_port or '<disabled>'}"
    )
    return settings

"""Error taxonomy for bootstrap and shutdown handling."""

__all__ = [
    "AppbootError",
    "BootstrapError",
    "ChannelClosedError",
    "ConfigError",
    "JoinError",
    "SignalError",
]


class AppbootError(Exception):
    """Base class for every error raised by appboot."""


class BootstrapError(AppbootError):
    """Startup failed; the caller should abort."""


class ConfigError(BootstrapError):
    """Logger or environment configuration is invalid or already installed."""


class SignalError(BootstrapError):
    """The OS (or event loop) rejected a signal registration."""


class JoinError(AppbootError):
    """The signal listener task ended abnormally (raised or was cancelled)."""


class ChannelClosedError(AppbootError):
    """The other side of the shutdown channel is gone."""

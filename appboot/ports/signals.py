"""Signal port definition (closed signal set and source interface)."""

from __future__ import annotations

import signal
from collections.abc import AsyncIterator
from enum import Enum
from typing import Protocol

__all__ = ["ShutdownSignal", "SignalSourcePort"]


class ShutdownSignal(Enum):
    """Closed set of OS signals observed by the shutdown bridge.

    Values are POSIX names rather than numbers so the enum can be imported
    on hosts lacking some of them (e.g. Windows has no SIGHUP/SIGQUIT).
    """

    RELOAD = "SIGHUP"
    TERMINATE = "SIGTERM"
    INTERRUPT = "SIGINT"
    QUIT = "SIGQUIT"

    @property
    def signum(self) -> int | None:
        """Host signal number, or None if the platform does not define it."""
        return getattr(signal, self.value, None)


class SignalSourcePort(Protocol):
    """Interface for a stream of received shutdown signals.

    Core iterates it until exhaustion; close() ends the iteration after
    already-received signals have been drained.
    """

    def __aiter__(self) -> AsyncIterator[ShutdownSignal]:
        """Return the async iterator over received signals."""
        ...

    def close(self) -> None:
        """Stop receiving signals. Must be idempotent."""
        ...

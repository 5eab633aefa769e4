"""Signal bridge for graceful shutdown."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from appboot.adapters.driving.signal_stream import SignalHandle, SignalStream
from appboot.core.channel import ShutdownReceiver, shutdown_channel
from appboot.core.errors import JoinError
from appboot.core.listener import handle_signals
from appboot.ports.signals import ShutdownSignal

__all__ = ["SIGNAL_SET", "ShutdownContext", "start_bridge"]

logger = logging.getLogger(__name__)

SIGNAL_SET = (
    ShutdownSignal.RELOAD,
    ShutdownSignal.TERMINATE,
    ShutdownSignal.INTERRUPT,
    ShutdownSignal.QUIT,
)


class ShutdownContext:
    """Owns the signal listener task and the handle able to stop it.

    Single use: once stop() has been called the context cannot be stopped
    again. Can also be used as an async context manager that stops on exit.
    """

    def __init__(self, handle: SignalHandle, task: asyncio.Task[None]) -> None:
        """Initialize the context.

        Args:
            handle: Control handle of the listener's signal stream.
            task: Background task running the listener loop.
        """
        self._handle: SignalHandle | None = handle
        self._task: asyncio.Task[None] | None = task

    @property
    def stopped(self) -> bool:
        """True once stop() has been called."""
        return self._task is None

    async def stop(self) -> None:
        """Close the signal stream and wait for the listener to exit.

        When this returns, the listener no longer sends notifications and the
        OS handlers for the signal set have been removed. Cancelling the
        caller does not cancel the listener.

        Raises:
            RuntimeError: If the context was already stopped.
            JoinError: If the listener task raised or was cancelled.
        """
        if self._handle is None or self._task is None:
            raise RuntimeError("ShutdownContext already stopped")
        handle, task = self._handle, self._task
        self._handle = self._task = None

        handle.close()
        await asyncio.wait({task})

        if task.cancelled():
            raise JoinError("Signal listener task was cancelled")
        exc = task.exception()
        if exc is not None:
            raise JoinError(f"Signal listener task failed: {exc!r}") from exc
        logger.info("Signal listener stopped")

    async def __aenter__(self) -> ShutdownContext:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.stopped:
            await self.stop()


def start_bridge() -> tuple[ShutdownContext, ShutdownReceiver]:
    """Start listening for SIGHUP, SIGTERM, SIGINT and SIGQUIT.

    Spawns one background task that logs reload requests and publishes
    exit code 0 on the returned receiver for every terminating signal.
    Returns immediately.

    On Docker/Kubernetes, SIGTERM is sent 30s before SIGKILL, leaving
    time for the application to drain before calling ``context.stop()``.

    Returns:
        Tuple of (context owning the listener, shutdown receiver).

    Raises:
        SignalError: If any signal of the set cannot be registered.
        RuntimeError: If called without a running event loop.
    """
    loop = asyncio.get_running_loop()
    signals = SignalStream(SIGNAL_SET)
    sender, receiver = shutdown_channel()
    task = loop.create_task(handle_signals(signals, sender), name="appboot-signal-listener")
    logger.info("Signal bridge started, waiting for shutdown requests")
    return ShutdownContext(signals.handle(), task), receiver

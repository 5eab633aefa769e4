"""OS signal subscription exposed as an async stream."""

from __future__ import annotations

import asyncio
import logging
import signal
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from appboot.core.errors import SignalError
from appboot.ports.signals import ShutdownSignal, SignalSourcePort

__all__ = ["SignalHandle", "SignalStream"]

logger = logging.getLogger(__name__)

# Signal numbers owned by a live stream, process-wide
_registered: set[int] = set()
_registry_lock = threading.Lock()

_END = object()


class SignalStream(SignalSourcePort):
    """Async iterator over signals delivered to the process.

    Handlers are installed on the running event loop with
    ``loop.add_signal_handler``, so signals are delivered as regular loop
    callbacks and queued in receipt order. Each signal number can be owned
    by a single live stream per process.

    Must be created from the loop's thread with a running loop.
    """

    def __init__(self, signals: Iterable[ShutdownSignal]) -> None:
        """Register handlers for the given signals.

        Args:
            signals: Signals to subscribe to.

        Raises:
            SignalError: If a signal is missing on this platform, already owned
                by another stream, or rejected by the event loop.
        """
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._signums: list[int] = []
        # Python-level handlers in place before registration, restored on release
        self._previous: dict[int, Any] = {}
        self._closed = False

        signals = tuple(signals)
        try:
            for sig in signals:
                self._register(sig)
        except SignalError:
            self._release()
            raise

        logger.debug(f"Registered handlers for {', '.join(s.value for s in signals)}")

    def _register(self, sig: ShutdownSignal) -> None:
        signum = sig.signum
        if signum is None:
            raise SignalError(f"{sig.value} is not available on this platform")

        with _registry_lock:
            if signum in _registered:
                raise SignalError(f"{sig.value} is already registered in this process")
            previous = signal.getsignal(signum)
            try:
                self._loop.add_signal_handler(signum, self._deliver, sig)
            except (ValueError, RuntimeError, NotImplementedError, OSError) as e:
                logger.warning(f"Registration of {sig.value} rejected: {e}")
                raise SignalError(f"Cannot register {sig.value}: {e}") from e
            _registered.add(signum)
            self._signums.append(signum)
            if previous is not None:
                self._previous[signum] = previous

    def _release(self) -> None:
        with _registry_lock:
            for signum in self._signums:
                self._loop.remove_signal_handler(signum)
                previous = self._previous.pop(signum, None)
                if previous is not None:
                    # asyncio resets to the default disposition, not the prior handler
                    signal.signal(signum, previous)
                _registered.discard(signum)
            self._signums.clear()

    def _deliver(self, sig: ShutdownSignal) -> None:
        """Loop callback run for every signal occurrence."""
        if not self._closed:
            self._queue.put_nowait(sig)

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._closed

    def handle(self) -> SignalHandle:
        """Return a control handle able to close this stream."""
        return SignalHandle(self)

    def close(self) -> None:
        """Remove the OS handlers and end the iteration.

        Signals received before the call are still yielded. Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        self._release()
        self._queue.put_nowait(_END)

    def __aiter__(self) -> SignalStream:
        return self

    async def __anext__(self) -> ShutdownSignal:
        item = await self._queue.get()
        if item is _END:
            self._queue.put_nowait(_END)
            raise StopAsyncIteration
        assert isinstance(item, ShutdownSignal)
        return item


@dataclass(frozen=True, slots=True)
class SignalHandle:
    """Lightweight control object bound to a SignalStream.

    Copies share the same stream; closing any of them closes the stream.
    """

    stream: SignalStream

    def close(self) -> None:
        """Request the stream's closure without waiting for in-flight work."""
        self.stream.close()

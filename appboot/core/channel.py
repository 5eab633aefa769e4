"""Unbounded async channel carrying shutdown notifications."""

from __future__ import annotations

import asyncio
import weakref
from dataclasses import dataclass, field

from appboot.core.errors import ChannelClosedError

__all__ = ["ShutdownReceiver", "ShutdownSender", "shutdown_channel"]

_DISCONNECTED = object()


@dataclass(slots=True)
class _ChannelState:
    """State shared by every sender and receiver of one channel."""

    queue: asyncio.Queue[object] = field(default_factory=asyncio.Queue)
    senders: int = 0
    receivers: int = 0

    def release_sender(self) -> None:
        self.senders -= 1
        if self.senders == 0:
            # Wakes blocked receivers once the queued values are consumed
            self.queue.put_nowait(_DISCONNECTED)

    def release_receiver(self) -> None:
        self.receivers -= 1


class ShutdownSender:
    """Sending half of the shutdown channel.

    Closing (or garbage collecting) the last sender disconnects the channel:
    receivers get the values already queued, then ChannelClosedError.
    """

    def __init__(self, state: _ChannelState) -> None:
        self._state = state
        state.senders += 1
        self._finalizer = weakref.finalize(self, state.release_sender)
        self._finalizer.atexit = False

    @property
    def closed(self) -> bool:
        """True once this sender has been closed."""
        return not self._finalizer.alive

    async def send(self, value: int) -> None:
        """Enqueue a value. Never suspends since the channel is unbounded.

        Args:
            value: Exit code to publish.

        Raises:
            ChannelClosedError: If this sender is closed or no receiver is left.
        """
        if self.closed:
            raise ChannelClosedError("Sender already closed")
        if self._state.receivers == 0:
            raise ChannelClosedError("All shutdown receivers have been dropped")
        self._state.queue.put_nowait(value)

    def clone(self) -> ShutdownSender:
        """Create another sender on the same channel."""
        if self.closed:
            raise ChannelClosedError("Cannot clone a closed sender")
        return ShutdownSender(self._state)

    def close(self) -> None:
        """Release this sender. Idempotent."""
        self._finalizer()


class ShutdownReceiver:
    """Receiving half of the shutdown channel, owned by the application."""

    def __init__(self, state: _ChannelState) -> None:
        self._state = state
        state.receivers += 1
        self._finalizer = weakref.finalize(self, state.release_receiver)
        self._finalizer.atexit = False

    @property
    def closed(self) -> bool:
        """True once this receiver has been closed."""
        return not self._finalizer.alive

    async def receive(self) -> int:
        """Wait for the next shutdown notification.

        Typically awaited alongside other work, e.g. inside
        ``asyncio.wait(..., return_when=FIRST_COMPLETED)``.

        Returns:
            The exit code published by the signal listener (always 0).

        Raises:
            ChannelClosedError: If the channel was disconnected before a value
                arrived, or this receiver was closed.
        """
        if self.closed:
            raise ChannelClosedError("Receiver already closed")
        item = await self._state.queue.get()
        return self._unwrap(item)

    def try_receive(self) -> int | None:
        """Return a pending notification without waiting, or None if none is queued.

        Raises:
            ChannelClosedError: If the channel is disconnected and drained.
        """
        if self.closed:
            raise ChannelClosedError("Receiver already closed")
        try:
            item = self._state.queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        return self._unwrap(item)

    def _unwrap(self, item: object) -> int:
        if item is _DISCONNECTED:
            # Leave the marker for other receivers and later calls
            self._state.queue.put_nowait(_DISCONNECTED)
            raise ChannelClosedError("Shutdown channel closed")
        assert isinstance(item, int)
        return item

    def clone(self) -> ShutdownReceiver:
        """Create another receiver on the same channel.

        Receivers compete for values: each notification is delivered once.
        """
        if self.closed:
            raise ChannelClosedError("Cannot clone a closed receiver")
        return ShutdownReceiver(self._state)

    def close(self) -> None:
        """Release this receiver. Idempotent."""
        self._finalizer()


def shutdown_channel() -> tuple[ShutdownSender, ShutdownReceiver]:
    """Create an unbounded shutdown channel.

    Returns:
        Tuple of (sender, receiver).
    """
    state = _ChannelState()
    return ShutdownSender(state), ShutdownReceiver(state)

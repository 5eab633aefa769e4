"""Listener loop translating OS signals into shutdown notifications."""

import logging
from typing import assert_never

from appboot.core.channel import ShutdownSender
from appboot.core.errors import ChannelClosedError
from appboot.ports.signals import ShutdownSignal, SignalSourcePort

__all__ = ["EXIT_CODE", "handle_signals"]

logger = logging.getLogger(__name__)

EXIT_CODE = 0


async def handle_signals(signals: SignalSourcePort, sender: ShutdownSender) -> None:
    """Consume the signal source until it is closed.

    State machine:
    - RELOAD: log it and keep listening (no reload action is taken).
    - TERMINATE / INTERRUPT / QUIT: log it, publish EXIT_CODE, keep listening.

    Every terminating signal produces exactly one notification, in receipt
    order. If all receivers have been dropped the loop stops listening.

    Args:
        signals: Source of received signals, owned exclusively by this loop.
        sender: Sending half of the shutdown channel.

    Notes:
        The source and sender are always closed on exit, so receivers see
        ChannelClosedError once pending notifications are consumed and the
        OS handlers are released even if the loop ends early.
    """
    try:
        async for sig in signals:
            if sig is ShutdownSignal.RELOAD:
                logger.info(f"{sig.value} received, reload requested (nothing to reload)")
            elif (
                sig is ShutdownSignal.TERMINATE
                or sig is ShutdownSignal.INTERRUPT
                or sig is ShutdownSignal.QUIT
            ):
                logger.info(f"{sig.value} received, doing friendly shutdown...")
                try:
                    await sender.send(EXIT_CODE)
                except ChannelClosedError:
                    logger.warning("Shutdown receiver dropped, signal listener stopping")
                    return
            else:
                assert_never(sig)
    finally:
        signals.close()
        sender.close()
        logger.debug("Signal listener exited")

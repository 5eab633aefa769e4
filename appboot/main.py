"""Bootstrap entrypoint and demo service."""

import asyncio
import logging
from collections.abc import Mapping
from os import PathLike

from appboot.adapters.driven.config.settings import load_settings
from appboot.adapters.driven.logging.logging_config import configure_logger
from appboot.adapters.driving.signals import ShutdownContext, start_bridge
from appboot.core.channel import ShutdownReceiver
from appboot.core.errors import BootstrapError, ChannelClosedError, JoinError
from appboot.ports.logging import LogLevel

__all__ = ["bootstrap", "bootstrap_from_env", "main"]

logger = logging.getLogger(__name__)


async def bootstrap(
    output_file: str | PathLike[str] | None = None,
    minimum_level: LogLevel | str | None = None,
    per_module_levels: Mapping[str, LogLevel | str] | None = None,
) -> tuple[ShutdownContext, ShutdownReceiver]:
    """Configure logging, then start the signal bridge.

    Call it once, as early as possible. Typical use::

        closer, exit_rx = await bootstrap("service.log")
        await exit_rx.receive()  # or race it against other work
        # ... application teardown ...
        await closer.stop()

    Args:
        output_file: Optional log file; logs always go to stdout.
        minimum_level: Default log level (INFO when omitted).
        per_module_levels: Per-logger level overrides.

    Returns:
        Tuple of (shutdown context, shutdown receiver).

    Raises:
        ConfigError: If the logger cannot be installed.
        SignalError: If the signal set cannot be registered.
    """
    configure_logger(output_file, minimum_level, per_module_levels)
    return start_bridge()


async def bootstrap_from_env() -> tuple[ShutdownContext, ShutdownReceiver]:
    """Bootstrap using the APPBOOT_* environment configuration.

    Raises:
        ConfigError: If the environment is invalid or the logger cannot be installed.
        SignalError: If the signal set cannot be registered.
    """
    settings = load_settings()
    return await bootstrap(settings.log_file, settings.log_level, settings.log_levels)


async def main() -> None:
    """Run the demo service.

    Startup sequence:
    1. Bootstrap logging and the signal bridge from the environment.
    2. Optionally serve the health endpoint.
    3. Wait for SIGTERM/SIGINT/SIGQUIT.
    4. Tear down the endpoint, then stop the signal listener.
    """
    try:
        settings = load_settings()
        closer, exit_rx = await bootstrap(
            settings.log_file, settings.log_level, settings.log_levels
        )
    except BootstrapError as exc:
        logging.basicConfig()
        logger.error(f"Bootstrap error: {exc}")
        return

    runner = None
    try:
        if settings.health_port is not None:
            # aiohttp is only required for the optional health endpoint
            from appboot.adapters.driven.http.health_server import start_health_server

            runner = await start_health_server(settings.health_host, settings.health_port)

        logger.info("Service running, send SIGTERM or press Ctrl+C to stop")
        await exit_rx.receive()
        logger.info("Shutdown process started")
    except ChannelClosedError:
        logger.warning("Signal listener ended without a shutdown request")
    finally:
        if runner is not None:
            await runner.cleanup()
        try:
            await closer.stop()
        except JoinError as e:
            logger.error(f"Signal listener did not stop cleanly: {e}", exc_info=True)

    logger.info("Bye")


if __name__ == "__main__":
    asyncio.run(main())

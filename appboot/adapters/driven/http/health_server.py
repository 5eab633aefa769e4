"""Minimal HTTP health endpoint served while the application runs."""

import logging

from aiohttp import web

__all__ = ["health", "start_health_server"]

logger = logging.getLogger(__name__)


async def health(request: web.Request) -> web.Response:
    """Report liveness."""
    return web.json_response({"status": "ok"})


async def start_health_server(host: str, port: int) -> web.AppRunner:
    """Serve ``GET /health`` until the returned runner is cleaned up.

    Args:
        host: Interface to bind.
        port: TCP port to bind (0 picks a free one).

    Returns:
        Started runner; call ``await runner.cleanup()`` on shutdown.
    """
    app = web.Application()
    app.router.add_get("/health", health)

    runner = web.AppRunner(app, handle_signals=False)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Health endpoint listening on {site.name}/health")
    return runner

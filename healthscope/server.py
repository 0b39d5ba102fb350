"""HTTP service answering on-demand health queries."""

from __future__ import annotations

import logging

from aiohttp import web

from healthscope.query import HealthQueryBridge

logger = logging.getLogger(__name__)

BRIDGE_KEY = web.AppKey("bridge", HealthQueryBridge)


async def handle_request(request: web.Request) -> web.Response:
    """GET /{instance} returns the folded health; anything else is 404."""
    instance = request.match_info.get("instance", "")
    if request.method != "GET" or not instance or "/" in instance:
        return web.Response(status=404)

    logger.info("%s health scope requested", instance)
    body = await request.app[BRIDGE_KEY].query(instance)
    return web.Response(status=200, text=body)


def create_app(bridge: HealthQueryBridge) -> web.Application:
    """Build the query application around a bridge."""
    app = web.Application()
    app[BRIDGE_KEY] = bridge
    app.router.add_route("*", "/{instance:.*}", handle_request)
    return app


async def serve(app: web.Application, host: str, port: int) -> web.AppRunner:
    """Start serving app on host:port and return the runner for cleanup."""
    runner = web.AppRunner(app, access_log=None)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("Server is running on %s:%s", host, port)
    return runner

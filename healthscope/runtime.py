"""Controller runtime facade."""

from __future__ import annotations

import logging
from typing import Optional

from aiohttp import web

from healthscope.aggregator import StatusAggregator
from healthscope.client import ResourceClient
from healthscope.config import ControllerConfig
from healthscope.health_server import LivenessServer
from healthscope.loop import AggregationLoop
from healthscope.query import HealthQueryBridge
from healthscope.server import create_app, serve

logger = logging.getLogger(__name__)


class HealthScopeController:
    """
    Facade for the health scope controller.

    Responsibilities:
    - Run the aggregation loop on its own thread
    - Serve the liveness probe
    - Serve on-demand health queries on the event loop
    """

    def __init__(self, config: ControllerConfig, client: ResourceClient) -> None:
        """Initialize controller from config and a namespaced client."""
        self._config = config
        self._client = client
        self._aggregator = StatusAggregator(client, default_interval=config.default_probe_interval)
        self._loop = AggregationLoop(client, self._aggregator, period=config.aggregation_period)
        self._bridge = HealthQueryBridge(client)
        self._liveness: Optional[LivenessServer] = None
        self._runner: Optional[web.AppRunner] = None

    async def start(self) -> None:
        """Start all controller components."""
        logger.info("starting server")
        self._liveness = LivenessServer(self._config.liveness_host, self._config.liveness_port)
        self._liveness.start()
        self._loop.start()
        self._runner = await serve(
            create_app(self._bridge),
            self._config.endpoint_host,
            self._config.endpoint_port,
        )

    async def stop(self) -> None:
        """Stop all controller components."""
        logger.info("stopping server")
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        self._loop.stop()
        if self._liveness is not None:
            self._liveness.stop()
            self._liveness = None

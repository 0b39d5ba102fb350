"""On-demand health queries bridged from blocking API calls to asyncio."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Optional

from healthscope.client import HEALTH_SCOPES, ResourceClient
from healthscope.errors import ClientError, QueryFetchFailure, ScopeSchemaError
from healthscope.models import HEALTHY, UNHEALTHY, Scope, ScopeStatus

logger = logging.getLogger(__name__)


def fold_health(status: Optional[ScopeStatus]) -> str:
    """
    Fold component statuses into a scope verdict.

    A component without a recorded status counts as healthy here, unlike
    aggregation where an unreadable component is recorded as unhealthy.
    """
    health = HEALTHY
    if status is None or status.components is None:
        return health

    for component in status.components:
        if component.status is not None and component.status != HEALTHY:
            health = UNHEALTHY
    return health


class HealthQueryBridge:
    """
    Runs the blocking fetch-and-fold for one instance on its own thread.

    Every query gets a dedicated thread and future, so a stalled API call
    never delays another query and the event loop keeps serving requests.
    """

    def __init__(self, client: ResourceClient) -> None:
        """Initialize bridge with a resource client."""
        self._client = client

    def evaluate(self, instance_name: str) -> str:
        """Fetch a scope and fold its health; errors are rendered as text."""
        try:
            status = self._fetch_status(instance_name)
        except QueryFetchFailure as exc:
            logger.error("health query for %s failed: %s", instance_name, exc)
            return str(exc)
        except Exception as exc:
            logger.exception("health query for %s failed unexpectedly", instance_name)
            return str(exc) or type(exc).__name__
        return fold_health(status)

    async def query(self, instance_name: str) -> str:
        """Evaluate a query without blocking the running event loop."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def work() -> None:
            result = self.evaluate(instance_name)
            try:
                loop.call_soon_threadsafe(_resolve, future, result)
            except RuntimeError:
                logger.debug("event loop closed before health query for %s completed", instance_name)

        threading.Thread(target=work, name=f"healthscope-query-{instance_name}", daemon=True).start()
        return await future

    def _fetch_status(self, instance_name: str) -> Optional[ScopeStatus]:
        try:
            raw = self._client.get(HEALTH_SCOPES, instance_name)
        except ClientError as exc:
            raise QueryFetchFailure(str(exc)) from exc

        try:
            return Scope.from_dict(raw).status
        except ScopeSchemaError as exc:
            raise QueryFetchFailure(f"invalid health scope {instance_name}: {exc}") from exc


def _resolve(future: "asyncio.Future[str]", result: str) -> None:
    if not future.done():
        future.set_result(result)

"""Status aggregation for a single scope."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from healthscope.client import COMPONENT_INSTANCES, HEALTH_SCOPES, ResourceClient
from healthscope.config import DEFAULT_PROBE_INTERVAL
from healthscope.errors import ClientError, ComponentFetchFailure, PatchFailure, UnsupportedProbe
from healthscope.gate import due_for_aggregation, format_rfc3339, utcnow
from healthscope.models import (
    POLL_STATUS_ENDPOINT,
    POLL_STATUS_METHOD,
    UNHEALTHY,
    ComponentRef,
    Scope,
    ScopeStatus,
)

logger = logging.getLogger(__name__)


class StatusAggregator:
    """
    Refreshes the per-component statuses of a scope and writes them back.

    Responsibilities:
    - Skip scopes whose probe interval has not elapsed
    - Read each referenced ComponentInstance's live status
    - Replace the scope's status block with the refreshed list and a new timestamp
    """

    def __init__(
        self,
        client: ResourceClient,
        default_interval: int = DEFAULT_PROBE_INTERVAL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize with the resource client and gate defaults."""
        self._client = client
        self._default_interval = default_interval
        self._clock = clock

    def aggregate(self, scope: Scope) -> bool:
        """
        Aggregate one scope.

        Returns True when a new status was written and False when the gate
        said the scope is not due yet. Raises UnsupportedProbe for unknown
        probe pairs and PatchFailure when the write-back fails.
        """
        interval = self._default_interval if scope.probe_interval is None else scope.probe_interval
        if not due_for_aggregation(scope.status, interval, now=self._clock()):
            return False

        logger.info("start to probe instance: %s", scope.name)
        if (scope.probe_method, scope.probe_endpoint) != (POLL_STATUS_METHOD, POLL_STATUS_ENDPOINT):
            raise UnsupportedProbe(scope.probe_method, scope.probe_endpoint)

        components = self._refresh_components(scope.status)
        status = ScopeStatus(
            components=components,
            last_aggregate_timestamp=format_rfc3339(self._clock()),
        )

        try:
            self._client.patch(HEALTH_SCOPES, scope.name, {"status": self._replacement(scope, status)})
        except ClientError as exc:
            raise PatchFailure(f"write back status of {scope.name} failed: {exc}") from exc

        scope.status = status
        scope.status_keys = frozenset(status.to_dict())
        return True

    def component_health(self, ref: ComponentRef) -> str:
        """Return the live status of a component, or unhealthy if it cannot be read."""
        try:
            instance = self._fetch_component(ref)
        except ComponentFetchFailure as exc:
            logger.error("get component instance failed: %s", exc)
            return UNHEALTHY

        status = instance.get("status")
        if not isinstance(status, str):
            return UNHEALTHY
        return status

    @staticmethod
    def _replacement(scope: Scope, status: ScopeStatus) -> dict:
        """Merge-patch body that leaves exactly the new status stored."""
        body = status.to_dict()
        for key in scope.status_keys - body.keys():
            body[key] = None
        return body

    def _fetch_component(self, ref: ComponentRef) -> dict:
        try:
            return self._client.get(COMPONENT_INSTANCES, ref.key)
        except ClientError as exc:
            raise ComponentFetchFailure(str(exc)) from exc

    def _refresh_components(self, status: Optional[ScopeStatus]) -> Optional[List[ComponentRef]]:
        if status is None or status.components is None:
            return None

        return [
            ComponentRef(
                name=ref.name,
                instance_name=ref.instance_name,
                status=self.component_health(ref),
            )
            for ref in status.components
        ]

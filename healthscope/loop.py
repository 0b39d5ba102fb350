"""Periodic aggregation loop over every scope in a namespace."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Optional

from healthscope.aggregator import StatusAggregator
from healthscope.client import HEALTH_SCOPES, ResourceClient
from healthscope.config import AGGREGATION_PERIOD
from healthscope.errors import ClientError, HealthScopeError, ListFailure
from healthscope.models import Scope

logger = logging.getLogger(__name__)

HEARTBEAT_EVERY = 10


@dataclass
class IterationReport:
    """Outcome of a single pass over the namespace."""

    scopes: int = 0
    aggregated: int = 0
    skipped: int = 0
    failed: int = 0
    list_failed: bool = False


class AggregationLoop:
    """
    Drives the StatusAggregator over all scopes on a fixed period.

    A failure while processing one scope is logged and never stops the
    loop; only stop() ends it.
    """

    def __init__(
        self,
        client: ResourceClient,
        aggregator: StatusAggregator,
        period: float = AGGREGATION_PERIOD,
    ) -> None:
        """Initialize loop with client, aggregator and sleep period."""
        self._client = client
        self._aggregator = aggregator
        self._period = period
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._iterations = 0

    def run_once(self) -> IterationReport:
        """List scopes once and aggregate each of them."""
        report = IterationReport()
        try:
            items = self._list_scopes()
        except ListFailure as exc:
            logger.error("get health scope list err: %s", exc)
            report.list_failed = True
            return report

        for raw in items:
            report.scopes += 1
            try:
                scope = Scope.from_dict(raw)
                if self._aggregator.aggregate(scope):
                    report.aggregated += 1
                else:
                    report.skipped += 1
            except HealthScopeError as exc:
                report.failed += 1
                logger.error("Error processing health scope: %s", exc)
            except Exception:
                report.failed += 1
                logger.exception("Unexpected error processing health scope")

        return report

    def run_forever(self) -> None:
        """Loop until stop() is called, sleeping a fixed period between passes."""
        logger.info("health scope aggregate loop started for namespace %s", self._client.namespace)
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("health scope aggregate iteration failed")
            self._iterations = (self._iterations + 1) % HEARTBEAT_EVERY
            if self._iterations == 0:
                logger.debug("health scope aggregate loop running...")
            self._stop.wait(self._period)
        logger.info("health scope aggregate loop stopped")

    def start(self) -> None:
        """Run the loop on a dedicated daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="healthscope-aggregate", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to exit and wait for the thread."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _list_scopes(self):
        try:
            return self._client.list(HEALTH_SCOPES)
        except ClientError as exc:
            raise ListFailure(str(exc)) from exc

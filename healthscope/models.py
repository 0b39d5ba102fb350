"""HealthScope resource models and wire-format conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from healthscope.schema import SchemaManager, default_schema

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"

POLL_STATUS_METHOD = "poll-status"
POLL_STATUS_ENDPOINT = ".status"


def combine_name(name: str, instance_name: str) -> str:
    """Return the ComponentInstance object name for a component reference."""
    return f"{name}-{instance_name}"


@dataclass
class ComponentRef:
    """One constituent workload of a scope and its last observed status."""

    name: str
    instance_name: str
    status: Optional[str] = None

    @property
    def key(self) -> str:
        return combine_name(self.name, self.instance_name)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ComponentRef":
        return cls(
            name=raw["name"],
            instance_name=raw["instanceName"],
            status=raw.get("status"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "instanceName": self.instance_name}
        if self.status is not None:
            data["status"] = self.status
        return data


@dataclass
class ScopeStatus:
    """Aggregated status block of a scope."""

    components: Optional[List[ComponentRef]] = None
    last_aggregate_timestamp: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> Optional["ScopeStatus"]:
        if raw is None:
            return None

        components = raw.get("components")
        return cls(
            components=None if components is None else [ComponentRef.from_dict(item) for item in components],
            last_aggregate_timestamp=raw.get("lastAggregateTimestamp"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.components is not None:
            data["components"] = [component.to_dict() for component in self.components]
        if self.last_aggregate_timestamp is not None:
            data["lastAggregateTimestamp"] = self.last_aggregate_timestamp
        return data


@dataclass
class Scope:
    """
    A HealthScope object: a named group of components whose combined
    health is tracked.

    ``probe_interval`` is left as None when the object does not set one so
    callers can apply their own default. ``status_keys`` lists the keys of
    the stored status block, including ones this controller does not model.
    """

    name: str
    namespace: Optional[str] = None
    probe_method: str = POLL_STATUS_METHOD
    probe_endpoint: str = POLL_STATUS_ENDPOINT
    probe_interval: Optional[int] = None
    status: Optional[ScopeStatus] = None
    status_keys: FrozenSet[str] = field(default=frozenset(), compare=False, repr=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], schema: SchemaManager = default_schema) -> "Scope":
        """Build a Scope from an API object, validating it first."""
        schema.validate(raw)

        metadata = raw["metadata"]
        spec = raw["spec"]
        return cls(
            name=metadata["name"],
            namespace=metadata.get("namespace"),
            probe_method=spec["probeMethod"],
            probe_endpoint=spec["probeEndpoint"],
            probe_interval=spec.get("probeInterval"),
            status=ScopeStatus.from_dict(raw.get("status")),
            status_keys=frozenset(raw.get("status") or ()),
        )

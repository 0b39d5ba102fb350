"""
Pytest configuration and fixtures for health scope tests.
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from healthscope.client import COMPONENT_INSTANCES, HEALTH_SCOPES, Resource, ResourceClient
from healthscope.errors import ClientError
from healthscope.models import combine_name

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeResourceClient(ResourceClient):
    """In-memory ResourceClient with failure injection."""

    def __init__(self, namespace: str = "default") -> None:
        super().__init__(namespace)
        self._objects: Dict[Tuple[Resource, str], Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self.patches: List[Tuple[Resource, str, Dict[str, Any]]] = []
        self.gets: List[Tuple[Resource, str]] = []
        self.fail_list = False
        self.fail_get: Set[str] = set()
        self.fail_patch: Set[str] = set()

    def add(self, resource: Resource, obj: Dict[str, Any]) -> None:
        with self._lock:
            self._objects[(resource, obj["metadata"]["name"])] = copy.deepcopy(obj)

    def stored(self, resource: Resource, name: str) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._objects[(resource, name)])

    def list(self, resource: Resource) -> List[Dict[str, Any]]:
        if self.fail_list:
            raise ClientError("connection refused", str(resource))
        with self._lock:
            return [copy.deepcopy(obj) for (kind, _), obj in self._objects.items() if kind == resource]

    def get(self, resource: Resource, name: str) -> Dict[str, Any]:
        with self._lock:
            self.gets.append((resource, name))
            if name in self.fail_get or (resource, name) not in self._objects:
                raise ClientError(f"{resource} {name} not found", str(resource), name)
            return copy.deepcopy(self._objects[(resource, name)])

    def patch(self, resource: Resource, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            if name in self.fail_patch or (resource, name) not in self._objects:
                raise ClientError(f"patch {name} rejected", str(resource), name)
            self.patches.append((resource, name, copy.deepcopy(body)))
            self._objects[(resource, name)] = merge_patch(self._objects[(resource, name)], body)
            return copy.deepcopy(self._objects[(resource, name)])


def merge_patch(target: Any, patch: Any) -> Any:
    """Apply a JSON merge patch (RFC 7386)."""
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)

    result = copy.deepcopy(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result.get(key), value)
    return result


def scope_object(
    name: str,
    components: Optional[List[Dict[str, Any]]] = None,
    last_aggregate: Optional[str] = None,
    probe_interval: Optional[int] = 10,
    method: str = "poll-status",
    endpoint: str = ".status",
) -> Dict[str, Any]:
    """Build a HealthScope object in API shape."""
    spec: Dict[str, Any] = {"probeMethod": method, "probeEndpoint": endpoint}
    if probe_interval is not None:
        spec["probeInterval"] = probe_interval

    obj: Dict[str, Any] = {
        "apiVersion": "core.oam.dev/v1alpha1",
        "kind": "HealthScope",
        "metadata": {"name": name, "namespace": "default"},
        "spec": spec,
    }
    if components is not None or last_aggregate is not None:
        status: Dict[str, Any] = {}
        if components is not None:
            status["components"] = components
        if last_aggregate is not None:
            status["lastAggregateTimestamp"] = last_aggregate
        obj["status"] = status
    return obj


def component_object(name: str, instance_name: str, status: Optional[str]) -> Dict[str, Any]:
    """Build a ComponentInstance object in API shape."""
    obj: Dict[str, Any] = {
        "apiVersion": "core.oam.dev/v1alpha1",
        "kind": "ComponentInstance",
        "metadata": {"name": combine_name(name, instance_name), "namespace": "default"},
    }
    if status is not None:
        obj["status"] = status
    return obj


def ago(seconds: int) -> str:
    return (NOW - timedelta(seconds=seconds)).isoformat()


@pytest.fixture
def fake_client() -> FakeResourceClient:
    return FakeResourceClient()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def two_component_scope(fake_client: FakeResourceClient) -> FakeResourceClient:
    """Scope s1 with a healthy and an unhealthy component, never aggregated."""
    fake_client.add(
        HEALTH_SCOPES,
        scope_object(
            "s1",
            components=[
                {"name": "a", "instanceName": "inst1"},
                {"name": "b", "instanceName": "inst2"},
            ],
        ),
    )
    fake_client.add(COMPONENT_INSTANCES, component_object("a", "inst1", "healthy"))
    fake_client.add(COMPONENT_INSTANCES, component_object("b", "inst2", "unhealthy"))
    return fake_client

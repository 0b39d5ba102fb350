"""
Namespaced resource client for the orchestration platform.

The aggregation engine only needs three verbs (list, get, patch) over a
handful of custom resources; ``ResourceClient`` captures that surface so
the engine can be exercised without a cluster.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config

from healthscope.errors import ClientError

logger = logging.getLogger(__name__)

MERGE_PATCH = "application/merge-patch+json"


@dataclass(frozen=True)
class Resource:
    """Identity of a custom resource type."""

    group: str
    version: str
    plural: str

    def __str__(self) -> str:
        return f"{self.plural}.{self.group}/{self.version}"


HEALTH_SCOPES = Resource(group="core.oam.dev", version="v1alpha1", plural="healthscopes")
COMPONENT_INSTANCES = Resource(group="core.oam.dev", version="v1alpha1", plural="componentinstances")


class ResourceClient(ABC):
    """Capability to list, get and patch resources within one namespace."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    @abstractmethod
    def list(self, resource: Resource) -> List[Dict[str, Any]]:
        """Return every object of the given resource in the namespace."""

    @abstractmethod
    def get(self, resource: Resource, name: str) -> Dict[str, Any]:
        """Return one object by name."""

    @abstractmethod
    def patch(self, resource: Resource, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a merge patch to one object and return the stored result."""


def load_kube_config(kubeconfig: Optional[str] = None) -> None:
    """Load cluster credentials, preferring in-cluster config inside a pod."""
    try:
        if kubeconfig:
            k8s_config.load_kube_config(config_file=kubeconfig)
        elif os.getenv("KUBERNETES_PORT"):
            k8s_config.load_incluster_config()
        else:
            k8s_config.load_kube_config()
    except (k8s_config.ConfigException, OSError) as exc:
        raise ClientError(f"Unable to load kubernetes configuration: {exc}") from exc


class KubernetesResourceClient(ResourceClient):
    """ResourceClient backed by the kubernetes CustomObjectsApi."""

    def __init__(self, namespace: str, api: Optional[k8s_client.CustomObjectsApi] = None) -> None:
        super().__init__(namespace)
        self._api = api if api is not None else k8s_client.CustomObjectsApi()

    @classmethod
    def from_config(cls, namespace: str, kubeconfig: Optional[str] = None) -> "KubernetesResourceClient":
        """Load credentials and build a client for the namespace."""
        load_kube_config(kubeconfig)
        logger.debug("Kubernetes client initialized for namespace %s", namespace)
        return cls(namespace)

    def list(self, resource: Resource) -> List[Dict[str, Any]]:
        try:
            result = self._api.list_namespaced_custom_object(
                group=resource.group,
                version=resource.version,
                namespace=self.namespace,
                plural=resource.plural,
            )
        except Exception as exc:
            raise ClientError(f"list {resource} in {self.namespace} failed: {exc}", str(resource)) from exc
        return list(result.get("items") or [])

    def get(self, resource: Resource, name: str) -> Dict[str, Any]:
        try:
            return self._api.get_namespaced_custom_object(
                group=resource.group,
                version=resource.version,
                namespace=self.namespace,
                plural=resource.plural,
                name=name,
            )
        except Exception as exc:
            raise ClientError(f"get {resource} {self.namespace}/{name} failed: {exc}", str(resource), name) from exc

    def patch(self, resource: Resource, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self._api.patch_namespaced_custom_object(
                group=resource.group,
                version=resource.version,
                namespace=self.namespace,
                plural=resource.plural,
                name=name,
                body=body,
                _content_type=MERGE_PATCH,
            )
        except Exception as exc:
            raise ClientError(f"patch {resource} {self.namespace}/{name} failed: {exc}", str(resource), name) from exc

"""Controller configuration model and environment loading."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from typing import Mapping, Optional, Tuple

from healthscope.errors import ConfigError

DEFAULT_NAMESPACE = "default"
DEFAULT_PROBE_INTERVAL = 30
AGGREGATION_PERIOD = 5.0
DEFAULT_ENDPOINT_ADDR = ":80"
DEFAULT_METRICS_ADDR = ":8080"


@dataclass(frozen=True)
class ControllerConfig:
    """Top-level configuration for the health scope controller."""

    namespace: str = DEFAULT_NAMESPACE
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 80
    liveness_host: str = "0.0.0.0"
    liveness_port: int = 8080
    aggregation_period: float = AGGREGATION_PERIOD
    default_probe_interval: int = DEFAULT_PROBE_INTERVAL
    kubeconfig: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ControllerConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ

        endpoint_host, endpoint_port = parse_address(
            env.get("HEALTHSCOPE_ENDPOINT_ADDR") or DEFAULT_ENDPOINT_ADDR
        )
        liveness_host, liveness_port = parse_address(
            env.get("HEALTHSCOPE_METRICS_ADDR") or DEFAULT_METRICS_ADDR
        )

        return cls(
            namespace=env.get("KUBERNETES_NAMESPACE") or DEFAULT_NAMESPACE,
            endpoint_host=endpoint_host,
            endpoint_port=endpoint_port,
            liveness_host=liveness_host,
            liveness_port=liveness_port,
            kubeconfig=env.get("KUBECONFIG") or None,
        )

    def with_overrides(self, **changes: object) -> "ControllerConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def parse_address(address: str) -> Tuple[str, int]:
    """Parse a ``[host]:port`` bind address; an empty host binds all interfaces."""
    if ":" not in address:
        raise ConfigError(f"Invalid address format: {address}")

    host, port_str = address.rsplit(":", 1)
    try:
        port = int(port_str)
    except ValueError as exc:
        raise ConfigError(f"Invalid port in address: {address}") from exc

    if not 0 <= port <= 65535:
        raise ConfigError(f"Port out of range in address: {address}")

    return host or "0.0.0.0", port

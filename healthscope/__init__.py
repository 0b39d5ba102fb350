"""Health scope controller package."""

__version__ = "0.1.0"

__all__ = [
    "HealthScopeController",
    "AggregationLoop",
    "IterationReport",
    "StatusAggregator",
    "HealthQueryBridge",
    "fold_health",
    "due_for_aggregation",
    "ResourceClient",
    "KubernetesResourceClient",
    "Resource",
    "HEALTH_SCOPES",
    "COMPONENT_INSTANCES",
    "ControllerConfig",
    "Scope",
    "ScopeStatus",
    "ComponentRef",
    "combine_name",
    "HealthScopeError",
    "ConfigError",
    "ClientError",
    "ScopeSchemaError",
    "ListFailure",
    "ComponentFetchFailure",
    "PatchFailure",
    "UnsupportedProbe",
    "TimestampParseFailure",
    "QueryFetchFailure",
]

from healthscope.runtime import HealthScopeController
from healthscope.loop import AggregationLoop, IterationReport
from healthscope.aggregator import StatusAggregator
from healthscope.query import HealthQueryBridge, fold_health
from healthscope.gate import due_for_aggregation
from healthscope.client import (
    COMPONENT_INSTANCES,
    HEALTH_SCOPES,
    KubernetesResourceClient,
    Resource,
    ResourceClient,
)
from healthscope.config import ControllerConfig
from healthscope.models import ComponentRef, Scope, ScopeStatus, combine_name
from healthscope.errors import (
    HealthScopeError,
    ConfigError,
    ClientError,
    ScopeSchemaError,
    ListFailure,
    ComponentFetchFailure,
    PatchFailure,
    UnsupportedProbe,
    TimestampParseFailure,
    QueryFetchFailure,
)

"""Custom exceptions for the health scope controller."""


class HealthScopeError(Exception):
    """Base class for controller errors."""


class ConfigError(HealthScopeError):
    """Raised when config is invalid or missing."""


class ClientError(HealthScopeError):
    """Raised when the orchestration API cannot be reached or a request fails."""

    def __init__(self, message: str, resource: str = "", name: str = "") -> None:
        super().__init__(message)
        self.resource = resource
        self.name = name


class ScopeSchemaError(HealthScopeError):
    """Raised when a scope object does not match the expected schema."""


class ListFailure(HealthScopeError):
    """Raised when listing scopes fails."""


class ComponentFetchFailure(HealthScopeError):
    """Raised when the live status of a component cannot be read."""


class PatchFailure(HealthScopeError):
    """Raised when writing an aggregated status back fails."""


class UnsupportedProbe(HealthScopeError):
    """Raised when a scope declares an unknown probe method/endpoint pair."""

    def __init__(self, method: str, endpoint: str) -> None:
        super().__init__(f"unknown probe-method {method} and probe-endpoint {endpoint}")
        self.method = method
        self.endpoint = endpoint


class TimestampParseFailure(HealthScopeError):
    """Raised when a lastAggregateTimestamp is not valid RFC3339."""


class QueryFetchFailure(HealthScopeError):
    """Raised when an on-demand query cannot read its scope."""

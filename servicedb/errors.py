"""Exception taxonomy for configuration loading and database provisioning."""

from __future__ import annotations


class ServiceDatabaseError(RuntimeError):
    """Base class for every provisioning failure."""


class SchemaValidationError(ServiceDatabaseError):
    """Raised when the services document violates the fixed schema."""


class ValidationError(ServiceDatabaseError):
    """Raised when a service field fails the semantic field rules."""


class ConfigurationLoadError(ServiceDatabaseError):
    """Raised when a schema-valid document cannot be turned into service entries."""


class ServiceNotFoundError(ServiceDatabaseError):
    """Raised when no configured service has the requested name."""


class EnvironmentVariableMissingError(ServiceDatabaseError):
    """Raised when a credential environment variable is not set."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"The {variable} environment variable is not set.")
        self.variable = variable


class DriverLoadError(ServiceDatabaseError):
    """Raised when the database driver module cannot be imported."""


class ConnectionFailure(ServiceDatabaseError):
    """Raised when the backend refuses or fails a connection attempt."""


class QueryError(ServiceDatabaseError):
    """Raised when a read query fails."""

    def __init__(self, message: str, *, sql: str) -> None:
        super().__init__(message)
        self.sql = sql


class ScriptNotFoundError(ServiceDatabaseError):
    """Raised when a DDL script resource does not exist."""


class DdlExecutionError(ServiceDatabaseError):
    """Raised when a create statement fails."""

    def __init__(self, message: str, *, statement: str) -> None:
        super().__init__(message)
        self.statement = statement


class ResourceCloseWarning(RuntimeWarning):
    """Category used when logging a failed resource release. Never raised."""


__all__ = [
    "ConfigurationLoadError",
    "ConnectionFailure",
    "DdlExecutionError",
    "DriverLoadError",
    "EnvironmentVariableMissingError",
    "QueryError",
    "ResourceCloseWarning",
    "SchemaValidationError",
    "ScriptNotFoundError",
    "ServiceDatabaseError",
    "ServiceNotFoundError",
    "ValidationError",
]

"""Provision and tear down per-service PostgreSQL databases."""

from __future__ import annotations

from .envnames import DETECTED_OS_TYPE, EnvironmentNameValidator, OsType, detect_os_type
from .errors import (
    ConfigurationLoadError,
    ConnectionFailure,
    DdlExecutionError,
    DriverLoadError,
    EnvironmentVariableMissingError,
    QueryError,
    ResourceCloseWarning,
    SchemaValidationError,
    ScriptNotFoundError,
    ServiceDatabaseError,
    ServiceNotFoundError,
    ValidationError,
)
from .models import ServiceEntry, ServiceRecord, ValidationResult
from .provisioner import Provisioner, clean_all
from .registry import ServiceRegistry
from .scripts import DdlAction, DdlScriptLoader
from .session import DatabaseSession, SessionHandle

__version__ = "0.1.0"

__all__ = [
    "ConfigurationLoadError",
    "ConnectionFailure",
    "DETECTED_OS_TYPE",
    "DatabaseSession",
    "DdlAction",
    "DdlExecutionError",
    "DdlScriptLoader",
    "DriverLoadError",
    "EnvironmentNameValidator",
    "EnvironmentVariableMissingError",
    "OsType",
    "Provisioner",
    "QueryError",
    "ResourceCloseWarning",
    "SchemaValidationError",
    "ScriptNotFoundError",
    "ServiceDatabaseError",
    "ServiceEntry",
    "ServiceNotFoundError",
    "ServiceRecord",
    "ServiceRegistry",
    "SessionHandle",
    "ValidationError",
    "ValidationResult",
    "__version__",
    "clean_all",
    "detect_os_type",
]

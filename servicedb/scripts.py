"""Locate and read per-service DDL scripts."""

from __future__ import annotations

from enum import Enum

from .errors import ScriptNotFoundError
from .resources import DEFAULT_RESOURCE_PACKAGE, resource_path


class DdlAction(str, Enum):
    """Script kinds run by a clean, in execution order."""

    DROP = "drop"
    CREATE = "create"


def script_name(action: DdlAction | str, service_name: str) -> str:
    value = action.value if isinstance(action, DdlAction) else action
    return f"{value}-{service_name}-db.ddl"


class DdlScriptLoader:
    """Reads ``<action>-<service>-db.ddl`` resources from a package namespace."""

    def __init__(self, package: str = DEFAULT_RESOURCE_PACKAGE) -> None:
        self._package = package

    @property
    def package(self) -> str:
        return self._package

    def load(self, action: DdlAction | str, service_name: str) -> tuple[str, ...]:
        """Return the script's lines in file order, without line terminators."""

        filename = script_name(action, service_name)
        resource = resource_path(self._package, filename)
        if resource is None:
            raise ScriptNotFoundError(f"The {filename} resource is not in the {self._package} package.")
        return tuple(resource.read_text(encoding="utf-8").splitlines())


__all__ = ["DdlAction", "DdlScriptLoader", "script_name"]

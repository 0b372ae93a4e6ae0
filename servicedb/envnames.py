"""Operating-system detection and environment variable name validation."""

from __future__ import annotations

import platform
import re
from enum import Enum


class OsType(str, Enum):
    """Operating system families recognised by the provisioner."""

    LINUX = "linux"
    WINDOWS = "windows"
    MACOS = "macos"
    OTHER = "other"

    @property
    def is_windows(self) -> bool:
        return self is OsType.WINDOWS


def detect_os_type(system_name: str | None = None) -> OsType:
    """Classify a platform name (defaults to the running interpreter's)."""

    name = (system_name if system_name is not None else platform.system() or "generic").lower()
    if "win" in name and "darwin" not in name:
        return OsType.WINDOWS
    if "nux" in name:
        return OsType.LINUX
    if "mac" in name or "darwin" in name:
        return OsType.MACOS
    return OsType.OTHER


DETECTED_OS_TYPE = detect_os_type()

# Windows names are upper case only; POSIX shells accept either case.
_WINDOWS_PATTERN = re.compile(r"[A-Z_][A-Z0-9_]+")
_POSIX_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]+")


class EnvironmentNameValidator:
    """Checks candidate strings against the environment variable grammar of an OS family."""

    def __init__(self, os_type: OsType = DETECTED_OS_TYPE) -> None:
        self._os_type = os_type
        self._pattern = _WINDOWS_PATTERN if os_type.is_windows else _POSIX_PATTERN

    @property
    def os_type(self) -> OsType:
        return self._os_type

    def is_valid(self, candidate: object) -> bool:
        if not isinstance(candidate, str):
            return False
        return self._pattern.fullmatch(candidate) is not None


__all__ = ["DETECTED_OS_TYPE", "EnvironmentNameValidator", "OsType", "detect_os_type"]

"""Provisioner settings loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel

from .resources import DEFAULT_RESOURCE_PACKAGE

CONFIG_FILE = Path.home() / ".config" / "servicedb" / "config.toml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ProvisionerConfig(BaseModel):
    """Shape of the provisioner settings file."""

    resource_package: str = DEFAULT_RESOURCE_PACKAGE
    services_file: str = "services.xml"
    driver: str = "asyncpg"
    connect_timeout: float | None = None
    log_level: str = "INFO"

    def with_resource_package(self, package: str) -> ProvisionerConfig:
        """Return a copy reading scripts and services from another package."""

        return self.model_copy(update={"resource_package": package})


def load_config(path: Path | None = None) -> ProvisionerConfig:
    """Load settings from disk; fall back to defaults if missing or unreadable."""

    try:
        data = _read_config_file(path or CONFIG_FILE)
    except FileNotFoundError:
        return ProvisionerConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return ProvisionerConfig()
    return ProvisionerConfig(**data)


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    for key in ("resource_package", "services_file", "driver"):
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            data[key] = value.strip()
    timeout = raw.get("connect_timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        data["connect_timeout"] = float(timeout)
    level = raw.get("log_level")
    if isinstance(level, str) and level.upper() in LOG_LEVELS:
        data["log_level"] = level.upper()
    return data


__all__ = ["CONFIG_FILE", "ProvisionerConfig", "load_config"]

"""Access to files shipped in the provisioning resource package."""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable

DEFAULT_RESOURCE_PACKAGE = "servicedb_resources"


def resource_path(package: str, name: str) -> Traversable | None:
    """Return the named resource in ``package``, or None when it does not exist."""

    try:
        root = resources.files(package)
    except ModuleNotFoundError:
        return None
    candidate = root.joinpath(name)
    if not candidate.is_file():
        return None
    return candidate


__all__ = ["DEFAULT_RESOURCE_PACKAGE", "resource_path"]

"""The parsed collection of configured services."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from .envnames import EnvironmentNameValidator
from .errors import ConfigurationLoadError, ServiceNotFoundError
from .models import ServiceEntry
from .resources import DEFAULT_RESOURCE_PACKAGE, resource_path
from .schema import validate_document

LOG = logging.getLogger(__name__)

SERVICES_FILE = "services.xml"


class ServiceRegistry:
    """Read-only, declaration-ordered view of the configured service entries."""

    def __init__(self, entries: Sequence[ServiceEntry] = ()) -> None:
        self._entries: tuple[ServiceEntry, ...] = tuple(entries)

    @classmethod
    def load(
        cls,
        text: str | bytes,
        *,
        validator: EnvironmentNameValidator | None = None,
        source: str = SERVICES_FILE,
    ) -> ServiceRegistry:
        """Validate ``text`` against the schema, then build and check every entry.

        Stops at the first invalid entry; the field error is chained as the
        cause of the ConfigurationLoadError.
        """

        document = validate_document(text)
        checker = validator or EnvironmentNameValidator()
        entries: list[ServiceEntry] = []
        for element in document.services:
            result = element.to_record().validate(checker)
            if result.error is not None:
                raise ConfigurationLoadError(
                    f"Failed to create the service databases from {source}: {result.error}"
                ) from result.error
            entries.append(result.unwrap())
        LOG.debug("Loaded service registry", extra={"source": source, "services": len(entries)})
        return cls(entries)

    @classmethod
    def load_resource(
        cls,
        name: str = SERVICES_FILE,
        *,
        package: str = DEFAULT_RESOURCE_PACKAGE,
        validator: EnvironmentNameValidator | None = None,
    ) -> ServiceRegistry:
        """Load the services document shipped as a resource of ``package``."""

        resource = resource_path(package, name)
        if resource is None:
            raise ConfigurationLoadError(f"The {name} resource is not in the {package} package.")
        return cls.load(resource.read_bytes(), validator=validator, source=name)

    def entries(self) -> tuple[ServiceEntry, ...]:
        return self._entries

    def find(self, service_name: str) -> ServiceEntry:
        for entry in self._entries:
            if entry.name == service_name:
                return entry
        raise ServiceNotFoundError(f'The database for service "{service_name}" is not defined.')

    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self._entries)

    def __iter__(self) -> Iterator[ServiceEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["SERVICES_FILE", "ServiceRegistry"]

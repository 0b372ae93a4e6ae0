"""Entry points used by the rest of the system: exists, clean and clean_all."""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from .config import ProvisionerConfig
from .models import ServiceEntry
from .registry import ServiceRegistry
from .scripts import DdlScriptLoader
from .session import DatabaseSession

LOG = logging.getLogger(__name__)

SessionFactory = Callable[[ServiceEntry], DatabaseSession]


def clean_all(registry: ServiceRegistry, session_factory: SessionFactory | None = None) -> None:
    """Clean every service in declared order, stopping at the first failure."""

    factory = session_factory or DatabaseSession
    for entry in registry.entries():
        factory(entry).clean()


class Provisioner:
    """Binds a service registry to sessions built from one configuration."""

    def __init__(
        self,
        *,
        config: ProvisionerConfig | None = None,
        registry: ServiceRegistry | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config or ProvisionerConfig()
        self._registry = registry
        self._environ = environ
        self._scripts = DdlScriptLoader(self._config.resource_package)

    @property
    def config(self) -> ProvisionerConfig:
        return self._config

    @property
    def registry(self) -> ServiceRegistry:
        """The service registry, loaded from the resource package on first use."""

        if self._registry is None:
            self._registry = ServiceRegistry.load_resource(
                self._config.services_file,
                package=self._config.resource_package,
            )
        return self._registry

    def session(self, entry: ServiceEntry) -> DatabaseSession:
        return DatabaseSession(
            entry,
            scripts=self._scripts,
            driver=self._config.driver,
            environ=self._environ,
            connect_timeout=self._config.connect_timeout,
        )

    def exists(self, service_name: str, table: str, column: str, value: object) -> bool:
        return self.session(self.registry.find(service_name)).exists(table, column, value)

    def clean(self, service_name: str) -> None:
        self.session(self.registry.find(service_name)).clean()

    def clean_all(self) -> None:
        registry = self.registry
        LOG.info("Cleaning service databases", extra={"services": len(registry)})
        clean_all(registry, self.session)


__all__ = ["Provisioner", "SessionFactory", "clean_all"]

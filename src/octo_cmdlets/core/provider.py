"""Octopus provider - the authenticated session handle."""

from functools import cached_property
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, SecretStr

from octo_cmdlets.client.http import OctopusClient
from octo_cmdlets.client.repositories import CollectionRepository, VariableSetRepository
from octo_cmdlets.core.cache import DEFAULT_CACHE_TTL, ResourceCache
from octo_cmdlets.resources import (
    EnvironmentResource,
    LibraryVariableSetResource,
    MachineResource,
    ProjectGroupResource,
    ProjectResource,
    ResourceKind,
)


class ApiKeyAuth(BaseModel):
    """API key authentication for Octopus."""

    api_key: SecretStr


class OctopusProvider(BaseModel):
    """Connection configuration and per-kind repositories for one server.

    For normal use, provide host and auth. For tests or embedding, use
    :meth:`from_client` to inject any object with ``get``/``post``/``put``/
    ``delete``.

    Examples:
        provider = OctopusProvider(
            host="https://octopus.company.com",
            auth=ApiKeyAuth(api_key="API-XXXXXXXX"),
        )
        provider.projects.find_all()
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    host: str | None = None
    auth: ApiKeyAuth | None = None
    verify_ssl: bool = True
    timeout: float = 30.0
    cache_ttl: float = DEFAULT_CACHE_TTL

    # Injected collaborators (for embedding / testing)
    _injected_client: Any = None
    _injected_cache: ResourceCache | None = None

    @classmethod
    def from_client(cls, client: Any, *, cache: ResourceCache | None = None) -> Self:
        """Create a provider around an already-configured transport."""
        provider = cls.model_construct()
        provider._injected_client = client
        provider._injected_cache = cache
        return provider

    def attach_cache(self, cache: ResourceCache) -> Self:
        """Use *cache* for collection reads; must be called before :attr:`cache` is read."""
        self._injected_cache = cache
        return self

    @cached_property
    def client(self) -> Any:
        """Get the transport client."""
        if self._injected_client is not None:
            return self._injected_client

        if self.host is None or self.auth is None:
            raise ValueError(
                "Either provide host+auth, or use OctopusProvider.from_client() "
                "to inject a client"
            )

        return OctopusClient(
            self.host,
            self.auth.api_key.get_secret_value(),
            verify_ssl=self.verify_ssl,
            timeout=self.timeout,
        )

    @cached_property
    def cache(self) -> ResourceCache:
        """Process-lifetime cache for full-collection reads."""
        if self._injected_cache is not None:
            return self._injected_cache
        return ResourceCache(ttl=self.cache_ttl)

    # Repositories for each resource kind
    @cached_property
    def projects(self) -> CollectionRepository[ProjectResource]:
        return CollectionRepository(self.client, ResourceKind.PROJECT)

    @cached_property
    def project_groups(self) -> CollectionRepository[ProjectGroupResource]:
        return CollectionRepository(self.client, ResourceKind.PROJECT_GROUP)

    @cached_property
    def environments(self) -> CollectionRepository[EnvironmentResource]:
        return CollectionRepository(self.client, ResourceKind.ENVIRONMENT)

    @cached_property
    def machines(self) -> CollectionRepository[MachineResource]:
        return CollectionRepository(self.client, ResourceKind.MACHINE)

    @cached_property
    def library_variable_sets(self) -> CollectionRepository[LibraryVariableSetResource]:
        return CollectionRepository(self.client, ResourceKind.LIBRARY_VARIABLE_SET)

    @cached_property
    def variable_sets(self) -> VariableSetRepository:
        return VariableSetRepository(self.client)

    def repository(self, kind: ResourceKind) -> CollectionRepository[Any]:
        """Return the listable repository serving *kind*.

        Variable sets are not listable; use :attr:`variable_sets` instead.
        """
        repositories: dict[ResourceKind, CollectionRepository[Any]] = {
            ResourceKind.PROJECT: self.projects,
            ResourceKind.PROJECT_GROUP: self.project_groups,
            ResourceKind.ENVIRONMENT: self.environments,
            ResourceKind.MACHINE: self.machines,
            ResourceKind.LIBRARY_VARIABLE_SET: self.library_variable_sets,
        }
        if kind not in repositories:
            raise ValueError(f"A {kind.label} cannot be listed or looked up by name")
        return repositories[kind]

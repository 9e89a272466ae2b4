"""Repositories over the server's resource endpoints, one per resource kind."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from octo_cmdlets.resources import (
    LibraryVariableSetResource,
    ProjectResource,
    Resource,
    ResourceKind,
    VariableSetResource,
    model_for,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Resource)

PAGE_SIZE = 30


class Transport(Protocol):
    """What a repository needs from the HTTP client."""

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any: ...

    def put(self, path: str, json: Any = None) -> Any: ...

    def delete(self, path: str) -> Any: ...


class Repository(Generic[R]):
    """Fetch, modify and delete single resources of one kind."""

    def __init__(self, client: Transport, kind: ResourceKind) -> None:
        self.client = client
        self.kind = kind
        self.model: type[R] = model_for(kind)  # type: ignore[assignment]

    def _parse(self, data: dict[str, Any]) -> R:
        return self.model.model_validate(data)

    def get(self, id_or_link: str) -> R:
        """Fetch one resource by id, or by a server-relative link."""
        path = id_or_link if id_or_link.startswith("/") else f"{self.kind.value}/{id_or_link}"
        return self._parse(self.client.get(path))

    def modify(self, resource: R) -> R:
        return self._parse(self.client.put(resource.link("Self"), json=resource.to_wire()))

    def delete(self, resource: R) -> None:
        self.client.delete(resource.link("Self"))


class CollectionRepository(Repository[R]):
    """A kind with a listing endpoint (``/api/<kind>/all``) and name search.

    Lookups by name compare case-insensitively and return the first match in
    server order.
    """

    def find_all(self) -> list[R]:
        """Fetch the full collection in one request."""
        items = self.client.get(f"{self.kind.value}/all") or []
        logger.debug("Fetched %d %s", len(items), self.kind.value)
        return [self._parse(item) for item in items]

    def find_by_name(self, name: str) -> R | None:
        """Page through a ``partialName`` search and return the exact match."""
        skip = 0
        while True:
            page = self.client.get(
                self.kind.value, params={"partialName": name, "skip": skip, "take": PAGE_SIZE}
            )
            items = page.get("Items") or []
            for item in items:
                if str(item.get("Name", "")).casefold() == name.casefold():
                    return self._parse(item)
            if not items or not page.get("Links", {}).get("Page.Next"):
                return None
            skip += len(items)

    def find_by_names(self, names: Iterable[str]) -> list[R]:
        found = (self.find_by_name(name) for name in names)
        return [r for r in found if r is not None]


class VariableSetRepository(Repository[VariableSetResource]):
    """Variable sets have no listing endpoint; they are reached from their owner."""

    def __init__(self, client: Transport) -> None:
        super().__init__(client, ResourceKind.VARIABLE_SET)

    def get_for(self, owner: ProjectResource | LibraryVariableSetResource) -> VariableSetResource:
        """Fetch the variable set owned by a project or library variable set."""
        return self.get(owner.link("Variables"))

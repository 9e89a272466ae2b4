"""Resource Locator: resolve names and ids into server resources.

Name matching is case-insensitive and exact, against the full collection of a
kind. When a server holds more than one resource whose names differ only by
case, :data:`ON_DUPLICATE` decides which one wins.

Unmatched names never fail a multi-name lookup: they are returned in
``Resolution.unresolved`` so callers can warn (or insist on strictness by
comparing counts).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Final

from octo_cmdlets.client.errors import OctopusNotFoundError
from octo_cmdlets.engine.errors import ResourceNotFoundError
from octo_cmdlets.engine.session import require_session
from octo_cmdlets.engine.types import ProjectSelection, Resolution
from octo_cmdlets.resources import ProjectResource, Resource, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from octo_cmdlets.core.cache import ResourceCache
    from octo_cmdlets.core.provider import OctopusProvider

logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    FIRST = "first"


ON_DUPLICATE: Final = DuplicatePolicy.FIRST
"""Same-name matches resolve to the first resource in server response order."""


def same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def exclude_by_name(resources: Iterable[Resource], names: Iterable[str]) -> list[Resource]:
    """Drop resources whose name case-insensitively equals any of *names*."""
    excluded = {n.casefold() for n in names}
    return [r for r in resources if r.name.casefold() not in excluded]


def _pick(matches: list[Any], kind: ResourceKind, name: str) -> Any:
    if not matches:
        return None
    if len(matches) > 1:
        logger.debug(
            "%d %ss named '%s'; policy %s keeps %s",
            len(matches),
            kind.label,
            name,
            ON_DUPLICATE.value,
            matches[0].id,
        )
    return matches[0]


class ResourceLocator:
    """Lookups over one session, optionally served from the session cache."""

    def __init__(
        self, session: OctopusProvider | None = None, cache: ResourceCache | None = None
    ) -> None:
        self.session = require_session(session)
        self._cache = cache

    @property
    def cache(self) -> ResourceCache:
        return self._cache if self._cache is not None else self.session.cache

    def find_all(self, kind: ResourceKind, *, cached: bool = False) -> list[Any]:
        """Full collection of *kind*; ``cached=True`` opts into the resource cache."""
        repository = self.session.repository(kind)
        if not cached:
            return repository.find_all()
        return list(self.cache.get_or_fetch(kind.value, repository.find_all))

    def _match(self, resources: Sequence[Any], kind: ResourceKind, name: str) -> Any:
        return _pick([r for r in resources if same_name(r.name, name)], kind, name)

    def find_by_name(self, kind: ResourceKind, name: str, *, cached: bool = False) -> Any:
        """Return the resource named *name* or raise :class:`ResourceNotFoundError`."""
        found = self._match(self.find_all(kind, cached=cached), kind, name)
        if found is None:
            raise ResourceNotFoundError(kind, name)
        return found

    def find_by_names(
        self, kind: ResourceKind, names: Iterable[str], *, cached: bool = False
    ) -> Resolution[Any]:
        """Resolve each name independently, in input order.

        A resource matched by several input names is returned once.
        """
        resources = self.find_all(kind, cached=cached)
        resolution: Resolution[Any] = Resolution(kind)
        seen: set[str | None] = set()
        for name in names:
            found = self._match(resources, kind, name)
            if found is None:
                resolution.unresolved.append(name)
            elif found.id not in seen:
                seen.add(found.id)
                resolution.resources.append(found)
        logger.debug(
            "Resolved %d %s name(s), %d unresolved",
            len(resolution.resources),
            kind.label,
            len(resolution.unresolved),
        )
        return resolution

    def find_by_id(self, kind: ResourceKind, resource_id: str) -> Any:
        try:
            return self.session.repository(kind).get(resource_id)
        except OctopusNotFoundError as e:
            raise ResourceNotFoundError(kind, resource_id) from e

    def find_by_ids(
        self, kind: ResourceKind, ids: Iterable[str], *, cached: bool = False
    ) -> Resolution[Any]:
        """Resolve ids in input order; missing ids land in ``unresolved``."""
        resolution: Resolution[Any] = Resolution(kind)
        by_id = {r.id: r for r in self.find_all(kind, cached=True)} if cached else None
        seen: set[str] = set()
        for resource_id in ids:
            if resource_id in seen:
                continue
            seen.add(resource_id)
            if by_id is not None:
                found = by_id.get(resource_id)
            else:
                try:
                    found = self.find_by_id(kind, resource_id)
                except ResourceNotFoundError:
                    found = None
            if found is None:
                resolution.unresolved.append(resource_id)
            else:
                resolution.resources.append(found)
        return resolution

    def filter_by_groups(
        self,
        projects: Iterable[ProjectResource],
        group_names: Iterable[str],
        *,
        cached: bool = False,
    ) -> Resolution[ProjectResource]:
        """Keep projects belonging to any of the named project groups.

        Group names that match nothing contribute no projects; if none match,
        the result is empty rather than an error.
        """
        groups = self.find_by_names(ResourceKind.PROJECT_GROUP, group_names, cached=cached)
        group_ids = set(groups.ids)
        kept = [p for p in projects if p.project_group_id in group_ids]
        return Resolution(ResourceKind.PROJECT, kept, list(groups.unresolved))

    def find_projects(
        self,
        names: Sequence[str] | None = None,
        *,
        groups: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        cached: bool = False,
    ) -> ProjectSelection:
        """Names (or every project) -> project-group filter -> exclusions."""
        selection = ProjectSelection()
        if names:
            by_name = self.find_by_names(ResourceKind.PROJECT, names, cached=cached)
            projects = by_name.resources
            selection.unresolved_names = by_name.unresolved
        else:
            projects = self.find_all(ResourceKind.PROJECT, cached=cached)

        if groups:
            grouped = self.filter_by_groups(projects, groups, cached=cached)
            projects = grouped.resources
            selection.unresolved_groups = grouped.unresolved

        if exclude:
            projects = exclude_by_name(projects, exclude)

        selection.projects = projects
        return selection

    def find_projects_by_id(self, ids: Sequence[str], *, cached: bool = False) -> ProjectSelection:
        resolution = self.find_by_ids(ResourceKind.PROJECT, ids, cached=cached)
        return ProjectSelection(
            projects=list(resolution.resources), unresolved_names=resolution.unresolved
        )

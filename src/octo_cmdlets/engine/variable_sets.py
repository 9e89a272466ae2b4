"""Variable-set and project operations composed from the engine parts.

Each operation resolves what it needs once, stages changes on the local
variable list and commits at most once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from octo_cmdlets.engine.batch import apply_to_each
from octo_cmdlets.engine.copier import copy_variables
from octo_cmdlets.engine.locator import ResourceLocator, same_name
from octo_cmdlets.engine.scope import build_scope, new_variable
from octo_cmdlets.engine.session import require_session
from octo_cmdlets.engine.types import (
    BatchResult,
    Diagnostic,
    DiagnosticCode,
    RemovalResult,
    RemovalState,
    VariableChangeResult,
)
from octo_cmdlets.resources import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from octo_cmdlets.core.provider import OctopusProvider
    from octo_cmdlets.engine.types import DiagnosticCallback
    from octo_cmdlets.resources import Variable, VariableSetResource

logger = logging.getLogger(__name__)

OWNER_KINDS: frozenset[ResourceKind] = frozenset(
    {ResourceKind.PROJECT, ResourceKind.LIBRARY_VARIABLE_SET}
)


def open_variable_set(
    locator: ResourceLocator, owner_kind: ResourceKind, owner_name: str
) -> VariableSetResource:
    """Fetch the variable set of a project or library variable set by owner name.

    Raises:
        ResourceNotFoundError: The owner does not exist.
    """
    if owner_kind not in OWNER_KINDS:
        raise ValueError(f"A {owner_kind.label} does not own a variable set")
    owner = locator.find_by_name(owner_kind, owner_name)
    variable_set = locator.session.variable_sets.get_for(owner)
    logger.debug(
        "Found variable set %s for %s '%s'", variable_set.id, owner_kind.label, owner.name
    )
    return variable_set


def commit(session: OctopusProvider, variable_set: VariableSetResource) -> VariableSetResource:
    """Write the whole local variable list back in one ``modify`` call."""
    saved = session.variable_sets.modify(variable_set)
    logger.info("Modified variable set %s", variable_set.id)
    return saved


def find_variables(
    owner_kind: ResourceKind,
    owner_name: str,
    names: Sequence[str] | None = None,
    *,
    session: OctopusProvider | None = None,
) -> list[Variable]:
    """Variables of an owner, optionally only those matching *names* (case-insensitive)."""
    locator = ResourceLocator(session)
    variables = open_variable_set(locator, owner_kind, owner_name).variables
    if not names:
        return variables
    return [v for v in variables if any(same_name(v.name, n) for n in names)]


def add_variable(
    owner_kind: ResourceKind,
    owner_name: str,
    name: str,
    value: str | None = None,
    *,
    sensitive: bool = False,
    environments: Sequence[str] = (),
    machines: Sequence[str] = (),
    roles: Sequence[str] = (),
    session: OctopusProvider | None = None,
    warn: DiagnosticCallback | None = None,
) -> VariableChangeResult:
    """Create one scoped variable in the owner's set and commit it."""
    locator = ResourceLocator(session)
    variable_set = open_variable_set(locator, owner_kind, owner_name)

    diagnostics: list[Diagnostic] = []

    def _warn(diagnostic: Diagnostic) -> None:
        diagnostics.append(diagnostic)
        if warn is not None:
            warn(diagnostic)

    variable = build_scope(
        locator,
        new_variable(name, value, sensitive=sensitive),
        environments=environments,
        machines=machines,
        roles=roles,
        warn=_warn,
    )
    variable_set.variables.append(variable)
    saved = commit(locator.session, variable_set)
    return VariableChangeResult(saved, applied=1, committed=True, diagnostics=diagnostics)


def copy_into(
    variables: Iterable[Variable],
    owner_kind: ResourceKind,
    owner_name: str,
    *,
    session: OctopusProvider | None = None,
    warn: DiagnosticCallback | None = None,
) -> VariableChangeResult:
    """Copy *variables* into the owner's set; commit once if anything was added.

    A failed commit loses every staged copy of this call.
    """
    locator = ResourceLocator(session)
    variable_set = open_variable_set(locator, owner_kind, owner_name)
    result = copy_variables(variables, variable_set, warn=warn)
    if not result.applied:
        return VariableChangeResult(variable_set, diagnostics=result.warnings)
    saved = commit(locator.session, variable_set)
    return VariableChangeResult(
        saved, applied=result.applied, committed=True, diagnostics=result.warnings
    )


def remove_variable(
    owner_kind: ResourceKind,
    owner_name: str,
    name: str,
    *,
    session: OctopusProvider | None = None,
) -> RemovalResult:
    """Remove the first variable named *name* from the owner's set.

    Searching -> Found -> Removed, or Searching -> NotFound. A missing variable
    is a warning and nothing is committed.
    """
    locator = ResourceLocator(session)
    variable_set = open_variable_set(locator, owner_kind, owner_name)

    result = RemovalResult(RemovalState.SEARCHING)
    index = next((i for i, v in enumerate(variable_set.variables) if v.name == name), None)
    if index is None:
        result.state = RemovalState.NOT_FOUND
        result.diagnostics.append(
            Diagnostic.warning(
                DiagnosticCode.NOT_FOUND,
                f"No variable with the name '{name}' in the {owner_kind.label} "
                f"'{owner_name}' was found.",
                subject=name,
            )
        )
        return result

    result.state = RemovalState.FOUND
    result.variable = variable_set.variables.pop(index)
    commit(locator.session, variable_set)
    result.state = RemovalState.REMOVED
    result.diagnostics.append(
        Diagnostic.info(f"Removed variable '{name}' from {owner_kind.label} '{owner_name}'.")
    )
    return result


def remove_projects(
    *,
    names: Sequence[str] = (),
    ids: Sequence[str] = (),
    session: OctopusProvider | None = None,
    progress: DiagnosticCallback | None = None,
) -> BatchResult:
    """Delete projects by name or by id, in input order.

    Names or ids that match nothing become warnings; the other deletions
    still happen. Pass names or ids, not both. A failed deletion stops the
    batch, but the cached project listing is still dropped.
    """
    if names and ids:
        raise ValueError("Pass project names or ids, not both")
    session = require_session(session)
    locator = ResourceLocator(session)
    if ids:
        resolution = locator.find_by_ids(ResourceKind.PROJECT, ids)
    else:
        resolution = locator.find_by_names(ResourceKind.PROJECT, names)

    warnings = resolution.warnings()
    if progress is not None:
        for diagnostic in warnings:
            progress(diagnostic)

    try:
        deleted = apply_to_each(
            resolution,
            session.projects.delete,
            verb="Deleting",
            kind=ResourceKind.PROJECT,
            progress=progress,
        )
    finally:
        if resolution.resources:
            session.cache.invalidate(ResourceKind.PROJECT.value)
    return BatchResult(processed=list(resolution), diagnostics=[*warnings, *deleted])

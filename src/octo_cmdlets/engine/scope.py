"""Scope Builder: attach environment, machine and role restrictions to a variable."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from octo_cmdlets.resources import ResourceKind, ScopeField, Variable, dedupe

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from octo_cmdlets.engine.locator import ResourceLocator
    from octo_cmdlets.engine.types import DiagnosticCallback

logger = logging.getLogger(__name__)

# Scope dimensions backed by a fetchable resource kind. Roles are plain strings.
_RESOLVED_DIMENSIONS: tuple[tuple[ScopeField, ResourceKind], ...] = (
    (ScopeField.ENVIRONMENT, ResourceKind.ENVIRONMENT),
    (ScopeField.MACHINE, ResourceKind.MACHINE),
)


def new_variable(name: str, value: str | None = None, *, sensitive: bool = False) -> Variable:
    """An unscoped variable, applicable everywhere."""
    return Variable(name=name, value=value, is_sensitive=sensitive)


def set_dimension(variable: Variable, field: ScopeField, ids: Iterable[str]) -> bool:
    """Restrict *variable* along *field* to *ids*.

    An empty id list leaves the dimension untouched: an empty restriction would
    not mean the same thing as "applies everywhere". Returns whether the scope
    was set.
    """
    value = dedupe(ids)
    if not value:
        return False
    variable.scope[field.value] = value
    return True


def build_scope(
    locator: ResourceLocator,
    variable: Variable,
    *,
    environments: Sequence[str] = (),
    machines: Sequence[str] = (),
    roles: Sequence[str] = (),
    warn: DiagnosticCallback | None = None,
) -> Variable:
    """Resolve scope names to ids and set them on *variable* in place.

    Calling again with the same inputs yields the same scope.
    """
    names_by_field = {ScopeField.ENVIRONMENT: environments, ScopeField.MACHINE: machines}
    for field, kind in _RESOLVED_DIMENSIONS:
        names = names_by_field[field]
        if not names:
            continue
        resolution = locator.find_by_names(kind, names)
        if warn is not None:
            for diagnostic in resolution.warnings():
                warn(diagnostic)
        if not set_dimension(variable, field, resolution.ids):
            logger.debug("No %s matched %s; %s scope omitted", kind.label, list(names), field.value)

    if roles:
        set_dimension(variable, ScopeField.ROLE, roles)

    return variable

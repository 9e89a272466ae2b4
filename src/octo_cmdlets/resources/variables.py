"""Variable, scope and variable-set resource models."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Annotated, ClassVar

from pydantic import AfterValidator, Field

from octo_cmdlets.resources.base import Resource, ResourceKind, WireModel


class ScopeField(str, Enum):
    """Scope dimensions a variable can be restricted along."""

    ENVIRONMENT = "Environment"
    MACHINE = "Machine"
    ROLE = "Role"
    CHANNEL = "Channel"
    ACTION = "Action"
    TENANT_TAG = "TenantTag"


def dedupe(values: Iterable[str]) -> list[str]:
    """Drop repeated values, keeping first-seen order."""
    return list(dict.fromkeys(values))


ScopeValue = Annotated[list[str], AfterValidator(dedupe)]
"""Ordered, deduplicated identifiers for one scope dimension."""


class Variable(WireModel):
    """A single variable inside a variable set.

    ``scope`` maps a :class:`ScopeField` value to the identifiers the variable
    is restricted to. A missing key means the variable applies everywhere along
    that dimension; an empty list is never stored.
    """

    id: str | None = None
    name: str
    value: str | None = Field(default=None, repr=False)
    is_sensitive: bool = False
    scope: dict[str, ScopeValue] = Field(default_factory=dict)

    def clone(self) -> Variable:
        """Deep copy suitable for adding to another set (server ``Id`` cleared)."""
        copy = self.model_copy(deep=True)
        copy.id = None
        return copy


class LibraryVariableSetResource(Resource):
    """A reusable, named variable set shared between projects."""

    kind: ClassVar[ResourceKind] = ResourceKind.LIBRARY_VARIABLE_SET

    description: str | None = None
    variable_set_id: str | None = None


class VariableSetResource(Resource):
    """The variables owned by one project or library variable set.

    Local edits to ``variables`` are invisible to the server until the whole
    set is committed with a single ``modify`` call.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.VARIABLE_SET

    owner_id: str | None = None
    version: int = 0
    variables: list[Variable] = Field(default_factory=list)

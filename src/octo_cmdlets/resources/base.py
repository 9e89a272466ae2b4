"""Base resource model for Octopus server entities."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

# Octopus links may carry RFC 6570 templates, e.g. ``/api/projects{/id}{?skip,take}``.
_LINK_TEMPLATE = re.compile(r"\{[^}]*\}")


class ResourceKind(str, Enum):
    """Fetchable resource kinds; the value is the REST collection segment."""

    PROJECT = "projects"
    PROJECT_GROUP = "projectgroups"
    ENVIRONMENT = "environments"
    MACHINE = "machines"
    LIBRARY_VARIABLE_SET = "libraryvariablesets"
    VARIABLE_SET = "variables"

    @property
    def label(self) -> str:
        """Human-readable singular name used in messages."""
        return _LABELS[self]


_LABELS: dict[ResourceKind, str] = {
    ResourceKind.PROJECT: "project",
    ResourceKind.PROJECT_GROUP: "project group",
    ResourceKind.ENVIRONMENT: "environment",
    ResourceKind.MACHINE: "machine",
    ResourceKind.LIBRARY_VARIABLE_SET: "library variable set",
    ResourceKind.VARIABLE_SET: "variable set",
}


class WireModel(BaseModel):
    """Model whose fields are PascalCase on the wire and snake_case in Python.

    Undeclared server fields are kept so a fetched object can be sent back on
    ``modify`` without dropping anything.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON payload the server expects."""
        return self.model_dump(mode="json", by_alias=True)


class Resource(WireModel):
    """A remote entity with a stable ``Id`` and hyperlink-style relations.

    ``Name`` is for display and lookup only; it is not guaranteed unique across
    the server.
    """

    kind: ClassVar[ResourceKind]

    id: str | None = None
    name: str = ""
    links: dict[str, str] = Field(default_factory=dict)

    def link(self, rel: str) -> str:
        """Return the relation URL path for *rel* with URI templates stripped."""
        try:
            href = self.links[rel]
        except KeyError as e:
            raise KeyError(f"{self.kind.label} '{self.name}' has no '{rel}' link") from e
        return _LINK_TEMPLATE.sub("", href)

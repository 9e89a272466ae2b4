"""Environment and machine resource models."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from octo_cmdlets.resources.base import Resource, ResourceKind


class EnvironmentResource(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.ENVIRONMENT

    description: str | None = None
    sort_order: int = 0


class MachineResource(Resource):
    """A deployment target registered with the server."""

    kind: ClassVar[ResourceKind] = ResourceKind.MACHINE

    roles: list[str] = Field(default_factory=list)
    environment_ids: list[str] = Field(default_factory=list)
    is_disabled: bool = False

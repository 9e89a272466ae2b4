"""Project and project group resource models."""

from __future__ import annotations

from typing import ClassVar

from octo_cmdlets.resources.base import Resource, ResourceKind


class ProjectGroupResource(Resource):
    """A named folder of projects."""

    kind: ClassVar[ResourceKind] = ResourceKind.PROJECT_GROUP

    description: str | None = None


class ProjectResource(Resource):
    """A deployable project.

    Its variables live in a separate variable set reached through the
    ``Variables`` link.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.PROJECT

    description: str | None = None
    project_group_id: str | None = None
    variable_set_id: str | None = None
    is_disabled: bool = False

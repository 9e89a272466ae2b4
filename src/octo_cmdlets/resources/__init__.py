"""Octopus resource models."""

from __future__ import annotations

from octo_cmdlets.resources.base import Resource, ResourceKind, WireModel
from octo_cmdlets.resources.infrastructure import EnvironmentResource, MachineResource
from octo_cmdlets.resources.project import ProjectGroupResource, ProjectResource
from octo_cmdlets.resources.variables import (
    LibraryVariableSetResource,
    ScopeField,
    ScopeValue,
    Variable,
    VariableSetResource,
    dedupe,
)

MODELS: dict[ResourceKind, type[Resource]] = {
    model.kind: model
    for model in (
        ProjectResource,
        ProjectGroupResource,
        EnvironmentResource,
        MachineResource,
        LibraryVariableSetResource,
        VariableSetResource,
    )
}


def model_for(kind: ResourceKind) -> type[Resource]:
    """Return the model class used to parse resources of *kind*."""
    return MODELS[kind]


__all__ = [
    "MODELS",
    "EnvironmentResource",
    "LibraryVariableSetResource",
    "MachineResource",
    "ProjectGroupResource",
    "ProjectResource",
    "Resource",
    "ResourceKind",
    "ScopeField",
    "ScopeValue",
    "Variable",
    "VariableSetResource",
    "WireModel",
    "dedupe",
    "model_for",
]

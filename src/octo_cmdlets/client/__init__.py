"""REST transport for the Octopus Deploy API."""

from octo_cmdlets.client.errors import OctopusApiError, OctopusNotFoundError
from octo_cmdlets.client.http import OctopusClient
from octo_cmdlets.client.repositories import (
    CollectionRepository,
    Repository,
    Transport,
    VariableSetRepository,
)

__all__ = [
    "CollectionRepository",
    "OctopusApiError",
    "OctopusClient",
    "OctopusNotFoundError",
    "Repository",
    "Transport",
    "VariableSetRepository",
]

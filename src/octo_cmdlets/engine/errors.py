"""Engine error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from octo_cmdlets.resources import ResourceKind


class EngineError(Exception):
    """Base exception for engine errors."""


class SessionNotEstablishedError(EngineError):
    """Raised when an operation runs before a session was connected."""

    def __init__(self) -> None:
        super().__init__(
            "Connection not established. Connect to your Octopus Deploy server first "
            "(set OCTO_HOST and OCTO_API_KEY, or call octo_cmdlets.engine.connect())."
        )


class ResourceNotFoundError(EngineError):
    """Raised when a required resource does not exist on the server."""

    def __init__(self, kind: ResourceKind, key: str) -> None:
        super().__init__(f"{kind.label.capitalize()} '{key}' was not found.")
        self.kind = kind
        self.key = key

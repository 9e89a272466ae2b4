"""Transport error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import requests


class OctopusApiError(Exception):
    """Raised when the server answers with an HTTP error status."""

    def __init__(self, status_code: int, message: str, *, url: str | None = None) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.url = url


class OctopusNotFoundError(OctopusApiError):
    """Raised for HTTP 404 responses."""


def error_for_response(response: requests.Response) -> OctopusApiError:
    """Build the matching error from a failed response.

    Octopus reports failures as ``{"ErrorMessage": ..., "Errors": [...]}``;
    the details are appended when present.
    """
    message = response.reason or "request failed"
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("ErrorMessage"):
        message = body["ErrorMessage"]
        details = [e for e in body.get("Errors") or [] if e]
        if details:
            message += " (" + "; ".join(details) + ")"

    cls = OctopusNotFoundError if response.status_code == 404 else OctopusApiError
    return cls(response.status_code, message, url=response.url)

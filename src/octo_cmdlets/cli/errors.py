"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    import requests

    from octo_cmdlets.client.errors import OctopusApiError
    from octo_cmdlets.config.loader import ConfigError
    from octo_cmdlets.engine.errors import ResourceNotFoundError, SessionNotEstablishedError

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, SessionNotEstablishedError):
        _err(f"No session: {exc}", fg=fg)
    elif isinstance(exc, ResourceNotFoundError):
        _err(f"Not found: {exc}", fg=fg)
    elif isinstance(exc, OctopusApiError):
        _err(f"Server error: {exc}", fg=fg)
        if exc.url:
            _err(f"  Request: {exc.url}", fg=fg)
    elif isinstance(exc, requests.RequestException):
        _err(f"Connection failed: {exc}", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1

"""Typer entry point for the ``octo`` command."""

from __future__ import annotations

import logging
import os
import sys

import typer

from octo_cmdlets import __version__

app = typer.Typer(
    name="octo",
    help="Manage projects and variables on an Octopus Deploy server.",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)

LOG_ENV = "OCTO_LOG"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# Index is the number of -v flags.
_VERBOSITY: tuple[int | None, ...] = (None, logging.INFO, logging.DEBUG)


def _log_level(verbose: int) -> int | None:
    """``OCTO_LOG`` wins over ``-v``; ``None`` leaves logging unconfigured."""
    name = os.environ.get(LOG_ENV, "").strip().upper()
    if not name:
        return _VERBOSITY[min(verbose, len(_VERBOSITY) - 1)]
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    typer.echo(f"WARNING: {LOG_ENV}={name!r} is not a log level; using INFO", err=True)
    return logging.INFO


def _setup_logging(level: int | None) -> None:
    if level is None:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
    package_logger = logging.getLogger("octo_cmdlets")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(level)
    package_logger.propagate = False


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"octo-cmdlets {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Log to stderr (-v info, -vv debug). OCTO_LOG overrides.",
    ),
) -> None:
    _ = version
    _setup_logging(_log_level(verbose))


# Commands register themselves on ``app`` at import time.
from octo_cmdlets.cli import commands as _commands  # noqa: E402, F401

"""Listing and diagnostic output rendering."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from octo_cmdlets.engine.types import Severity
from octo_cmdlets.resources import ProjectResource

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from octo_cmdlets.engine.types import Diagnostic
    from octo_cmdlets.resources import Resource, Variable

SENSITIVE_MASK = "********"


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def format_diagnostic(diagnostic: Diagnostic, *, color: bool = True) -> str:
    """Render ``WARNING: ...`` for warnings, the bare message otherwise."""
    if diagnostic.severity == Severity.WARNING:
        return styler(color)(f"WARNING: {diagnostic.message}", fg="yellow")
    return diagnostic.message


def echo_diagnostic(diagnostic: Diagnostic, *, color: bool = True) -> None:
    """Warnings go to stderr, progress lines to stdout."""
    typer.echo(
        format_diagnostic(diagnostic, color=color),
        err=diagnostic.severity == Severity.WARNING,
    )


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------


def format_value(variable: Variable) -> str:
    """Display value of a variable; sensitive values are always masked."""
    if variable.is_sensitive:
        return SENSITIVE_MASK
    return variable.value or ""


def format_scope(variable: Variable) -> str:
    """``Environment: Environments-1, Environments-2; Role: web`` or empty."""
    return "; ".join(f"{field}: {', '.join(ids)}" for field, ids in variable.scope.items())


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _render(table: Table, *, color: bool) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=not color, width=160, force_terminal=color)
    console.print(table)
    return buffer.getvalue().rstrip("\n")


def format_resources(resources: Sequence[Resource], *, color: bool = True) -> str:
    """Render resources as an ``Id | Name`` table (plus group for projects)."""
    if not resources:
        return "No matching resources."
    with_group = all(isinstance(r, ProjectResource) for r in resources)
    table = Table(show_edge=False)
    table.add_column("Id", no_wrap=True)
    table.add_column("Name")
    if with_group:
        table.add_column("Project group")
    for r in resources:
        row = [escape(r.id or ""), escape(r.name)]
        if with_group:
            row.append(escape(r.project_group_id or ""))  # type: ignore[attr-defined]
        table.add_row(*row)
    return _render(table, color=color)


def format_variables(variables: Sequence[Variable], *, color: bool = True) -> str:
    if not variables:
        return "No matching variables."
    table = Table(show_edge=False)
    table.add_column("Name", no_wrap=True)
    table.add_column("Value")
    table.add_column("Scope")
    table.add_column("Sensitive")
    for v in variables:
        table.add_row(
            escape(v.name),
            escape(format_value(v)),
            escape(format_scope(v)),
            "yes" if v.is_sensitive else "",
        )
    return _render(table, color=color)

"""CLI command implementations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from octo_cmdlets.cli import app
from octo_cmdlets.cli.errors import handle_error
from octo_cmdlets.resources import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from octo_cmdlets.core.provider import OctopusProvider
    from octo_cmdlets.engine.types import Diagnostic

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]

UseCache = Annotated[
    bool,
    typer.Option("--cache", help="Serve the full collection from the process-wide cache."),
]

Names = Annotated[
    list[str] | None,
    typer.Argument(help="Names to look up (case-insensitive)."),
]

Exclude = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Names to leave out of the results."),
]

ScopeEnvironments = Annotated[
    list[str] | None,
    typer.Option("--environment", "-e", help="Restrict the scope to these environments."),
]

ScopeMachines = Annotated[
    list[str] | None,
    typer.Option("--machine", "-m", help="Restrict the scope to these machines."),
]

ScopeRoles = Annotated[
    list[str] | None,
    typer.Option("--role", "-r", help="Restrict the scope to these roles."),
]

Sensitive = Annotated[
    bool,
    typer.Option("--sensitive", help="Mark the value as sensitive (never displayed)."),
]

_DEFAULT_CONFIG = Path("octo.yaml")


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _connect(config: Path) -> OctopusProvider:
    from octo_cmdlets.config import load, session_from_config

    return session_from_config(load(config))


def _warn_printer(color: bool) -> Callable[[Diagnostic], None]:
    from octo_cmdlets.cli.formatting import echo_diagnostic

    def _print(diagnostic: Diagnostic) -> None:
        echo_diagnostic(diagnostic, color=color)

    return _print


def _owner(
    project: str | None, library_set: str | None, *, prefix: str = ""
) -> tuple[ResourceKind, str]:
    """Pick the variable-set owner from mutually exclusive options."""
    from octo_cmdlets.config.loader import ConfigError

    if bool(project) == bool(library_set):
        raise ConfigError(f"specify exactly one of --{prefix}project or --{prefix}library-set")
    if project:
        return ResourceKind.PROJECT, project
    return ResourceKind.LIBRARY_VARIABLE_SET, library_set  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


@app.command("get-project")
def get_project(
    names: Names = None,
    group: Annotated[
        list[str] | None,
        typer.Option("--group", "-g", help="Only projects in these project groups."),
    ] = None,
    exclude: Exclude = None,
    project_id: Annotated[
        list[str] | None,
        typer.Option("--id", help="Project ids to retrieve (instead of names)."),
    ] = None,
    cache: UseCache = False,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """List projects by name, project group or id."""
    from octo_cmdlets.cli.formatting import echo_diagnostic, format_resources
    from octo_cmdlets.config.loader import ConfigError
    from octo_cmdlets.engine import ResourceLocator

    color = _use_color(no_color)

    if project_id and (names or group or exclude):
        exc = ConfigError("--id cannot be combined with names, --group or --exclude")
        raise typer.Exit(handle_error(exc, color=color))

    try:
        locator = ResourceLocator(_connect(config))
        if project_id:
            selection = locator.find_projects_by_id(project_id, cached=cache)
        else:
            selection = locator.find_projects(names, groups=group, exclude=exclude, cached=cache)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    for warning in selection.warnings():
        echo_diagnostic(warning, color=color)
    typer.echo(format_resources(selection.projects, color=color))


def _list_kind(
    kind: ResourceKind,
    names: list[str] | None,
    exclude: list[str] | None,
    *,
    cache: bool,
    config: Path,
    color: bool,
) -> None:
    from octo_cmdlets.cli.formatting import echo_diagnostic, format_resources
    from octo_cmdlets.engine import ResourceLocator, exclude_by_name

    try:
        locator = ResourceLocator(_connect(config))
        if names:
            resolution = locator.find_by_names(kind, names, cached=cache)
            resources, warnings = resolution.resources, resolution.warnings()
        else:
            resources, warnings = locator.find_all(kind, cached=cache), []
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if exclude:
        resources = exclude_by_name(resources, exclude)
    for warning in warnings:
        echo_diagnostic(warning, color=color)
    typer.echo(format_resources(resources, color=color))


@app.command("get-environment")
def get_environment(
    names: Names = None,
    exclude: Exclude = None,
    cache: UseCache = False,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """List environments."""
    _list_kind(
        ResourceKind.ENVIRONMENT,
        names,
        exclude,
        cache=cache,
        config=config,
        color=_use_color(no_color),
    )


@app.command("get-machine")
def get_machine(
    names: Names = None,
    exclude: Exclude = None,
    cache: UseCache = False,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """List machines (deployment targets)."""
    _list_kind(
        ResourceKind.MACHINE,
        names,
        exclude,
        cache=cache,
        config=config,
        color=_use_color(no_color),
    )


@app.command("get-variable")
def get_variable(
    project: Annotated[
        str | None, typer.Option("--project", "-p", help="Project owning the variables.")
    ] = None,
    library_set: Annotated[
        str | None,
        typer.Option("--library-set", "-l", help="Library variable set owning the variables."),
    ] = None,
    name: Annotated[
        list[str] | None, typer.Option("--name", "-n", help="Only variables with these names.")
    ] = None,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """List the variables of a project or library variable set."""
    from octo_cmdlets.cli.formatting import format_variables
    from octo_cmdlets.engine import find_variables

    color = _use_color(no_color)
    try:
        owner_kind, owner_name = _owner(project, library_set)
        variables = find_variables(owner_kind, owner_name, name, session=_connect(config))
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_variables(variables, color=color))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _add(
    owner_kind: ResourceKind,
    owner_name: str,
    name: str,
    value: str | None,
    *,
    sensitive: bool,
    environments: list[str] | None,
    machines: list[str] | None,
    roles: list[str] | None,
    config: Path,
    color: bool,
) -> None:
    from octo_cmdlets.engine import add_variable

    try:
        add_variable(
            owner_kind,
            owner_name,
            name,
            value,
            sensitive=sensitive,
            environments=environments or (),
            machines=machines or (),
            roles=roles or (),
            session=_connect(config),
            warn=_warn_printer(color),
        )
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(f"Added variable '{name}' to {owner_kind.label} '{owner_name}'.")


@app.command("add-variable")
def add_project_variable(
    project: Annotated[str, typer.Argument(help="Project to add the variable to.")],
    name: Annotated[str, typer.Argument(help="Name of the variable.")],
    value: Annotated[str | None, typer.Argument(help="Value of the variable.")] = None,
    environment: ScopeEnvironments = None,
    machine: ScopeMachines = None,
    role: ScopeRoles = None,
    sensitive: Sensitive = False,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Add a variable to a project."""
    _add(
        ResourceKind.PROJECT,
        project,
        name,
        value,
        sensitive=sensitive,
        environments=environment,
        machines=machine,
        roles=role,
        config=config,
        color=_use_color(no_color),
    )


@app.command("add-library-variable")
def add_library_variable(
    variable_set: Annotated[str, typer.Argument(help="Library variable set to add to.")],
    name: Annotated[str, typer.Argument(help="Name of the variable.")],
    value: Annotated[str | None, typer.Argument(help="Value of the variable.")] = None,
    environment: ScopeEnvironments = None,
    machine: ScopeMachines = None,
    role: ScopeRoles = None,
    sensitive: Sensitive = False,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Add a variable to a library variable set."""
    _add(
        ResourceKind.LIBRARY_VARIABLE_SET,
        variable_set,
        name,
        value,
        sensitive=sensitive,
        environments=environment,
        machines=machine,
        roles=role,
        config=config,
        color=_use_color(no_color),
    )


@app.command("copy-variable")
def copy_variable(
    from_project: Annotated[str | None, typer.Option("--from-project")] = None,
    from_library_set: Annotated[str | None, typer.Option("--from-library-set")] = None,
    to_project: Annotated[str | None, typer.Option("--to-project")] = None,
    to_library_set: Annotated[str | None, typer.Option("--to-library-set")] = None,
    name: Annotated[
        list[str] | None,
        typer.Option("--name", "-n", help="Only copy variables with these names."),
    ] = None,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Copy variables between projects and library variable sets.

    Variables whose name already exists in the target are skipped with a warning.
    """
    from octo_cmdlets.engine import copy_into, find_variables

    color = _use_color(no_color)
    try:
        source_kind, source_name = _owner(from_project, from_library_set, prefix="from-")
        target_kind, target_name = _owner(to_project, to_library_set, prefix="to-")
        session = _connect(config)
        variables = find_variables(source_kind, source_name, name, session=session)
        result = copy_into(
            variables, target_kind, target_name, session=session, warn=_warn_printer(color)
        )
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(
        f"Copied {result.applied} variable{'s' if result.applied != 1 else ''} "
        f"to {target_kind.label} '{target_name}'."
    )


@app.command("remove-variable")
def remove_variable_cmd(
    owner: Annotated[str, typer.Argument(help="Project (or library variable set) to edit.")],
    name: Annotated[str, typer.Argument(help="Name of the variable to remove.")],
    library_set: Annotated[
        bool,
        typer.Option("--library-set", help="OWNER names a library variable set."),
    ] = False,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Remove a variable by name (the first one, if several share it)."""
    from octo_cmdlets.cli.formatting import echo_diagnostic
    from octo_cmdlets.engine import remove_variable

    color = _use_color(no_color)
    owner_kind = ResourceKind.LIBRARY_VARIABLE_SET if library_set else ResourceKind.PROJECT
    try:
        result = remove_variable(owner_kind, owner, name, session=_connect(config))
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    for diagnostic in result.diagnostics:
        echo_diagnostic(diagnostic, color=color)


@app.command("remove-project")
def remove_project(
    names: Names = None,
    project_id: Annotated[
        list[str] | None,
        typer.Option("--id", help="Project ids to remove (instead of names)."),
    ] = None,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Remove projects by name or id."""
    from octo_cmdlets.config.loader import ConfigError
    from octo_cmdlets.engine import remove_projects

    color = _use_color(no_color)

    if bool(names) == bool(project_id):
        exc = ConfigError("specify project names or --id, but not both")
        raise typer.Exit(handle_error(exc, color=color))

    try:
        result = remove_projects(
            names=names or (),
            ids=project_id or (),
            session=_connect(config),
            progress=_warn_printer(color),
        )
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    count = len(result.processed)
    typer.echo(f"Deleted {count} project{'s' if count != 1 else ''}.")

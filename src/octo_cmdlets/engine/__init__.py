"""Scoped variable management, resource lookup and batch mutation."""

from octo_cmdlets.engine.batch import apply_to_each
from octo_cmdlets.engine.copier import copy_variables
from octo_cmdlets.engine.errors import (
    EngineError,
    ResourceNotFoundError,
    SessionNotEstablishedError,
)
from octo_cmdlets.engine.locator import (
    ON_DUPLICATE,
    DuplicatePolicy,
    ResourceLocator,
    exclude_by_name,
)
from octo_cmdlets.engine.scope import build_scope, new_variable, set_dimension
from octo_cmdlets.engine.session import (
    connect,
    disconnect,
    process_cache,
    require_session,
    reset_process_cache,
    retrieve_session,
)
from octo_cmdlets.engine.types import (
    BatchResult,
    CopyResult,
    Diagnostic,
    DiagnosticCode,
    ProjectSelection,
    RemovalResult,
    RemovalState,
    Resolution,
    Severity,
    VariableChangeResult,
)
from octo_cmdlets.engine.variable_sets import (
    add_variable,
    commit,
    copy_into,
    find_variables,
    open_variable_set,
    remove_projects,
    remove_variable,
)

__all__ = [
    "ON_DUPLICATE",
    "BatchResult",
    "CopyResult",
    "Diagnostic",
    "DiagnosticCode",
    "DuplicatePolicy",
    "EngineError",
    "ProjectSelection",
    "RemovalResult",
    "RemovalState",
    "Resolution",
    "ResourceLocator",
    "ResourceNotFoundError",
    "SessionNotEstablishedError",
    "Severity",
    "VariableChangeResult",
    "add_variable",
    "apply_to_each",
    "build_scope",
    "commit",
    "connect",
    "copy_into",
    "copy_variables",
    "disconnect",
    "exclude_by_name",
    "find_variables",
    "new_variable",
    "open_variable_set",
    "process_cache",
    "remove_projects",
    "remove_variable",
    "require_session",
    "reset_process_cache",
    "retrieve_session",
    "set_dimension",
]

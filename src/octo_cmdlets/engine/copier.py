"""Variable Copier: add variables to a set, skipping names already present."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from octo_cmdlets.engine.types import CopyResult, Diagnostic, DiagnosticCode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from octo_cmdlets.engine.types import DiagnosticCallback
    from octo_cmdlets.resources import Variable, VariableSetResource

logger = logging.getLogger(__name__)


def copy_variables(
    source: Iterable[Variable],
    target: VariableSetResource,
    *,
    warn: DiagnosticCallback | None = None,
) -> CopyResult:
    """Append deep copies of *source* to *target*'s local variable list.

    A variable whose name already exists in *target* (including one added
    earlier in the same call) is skipped with a name-conflict warning and the
    remaining items are still processed. Nothing is committed here.
    """
    result = CopyResult()
    existing = {v.name for v in target.variables}

    for variable in source:
        if variable.name in existing:
            diagnostic = Diagnostic.warning(
                DiagnosticCode.NAME_CONFLICT,
                f"Variable '{variable.name}' already exists.",
                subject=variable.name,
            )
            result.warnings.append(diagnostic)
            if warn is not None:
                warn(diagnostic)
            continue

        target.variables.append(variable.clone())
        existing.add(variable.name)
        result.applied += 1

    logger.debug("Copied %d variable(s), %d conflict(s)", result.applied, len(result.warnings))
    return result

"""Batch Mutation Driver.

Applies one action to each resolved resource in input order. The driver does
not catch anything: an action failure propagates with the transport's own
error, after the diagnostics of earlier items were already reported through
*progress*.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from octo_cmdlets.engine.types import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from octo_cmdlets.engine.types import DiagnosticCallback
    from octo_cmdlets.resources import Resource, ResourceKind

logger = logging.getLogger(__name__)


def apply_to_each(
    resources: Iterable[Resource],
    action: Callable[[Any], object],
    *,
    verb: str,
    kind: ResourceKind,
    progress: DiagnosticCallback | None = None,
) -> list[Diagnostic]:
    """Run *action* on each resource; an empty input is a no-op."""
    diagnostics: list[Diagnostic] = []
    for resource in resources:
        diagnostic = Diagnostic.info(f"{verb} {kind.label}: {resource.name}", subject=resource.id)
        logger.info("%s %s: %s", verb, kind.label, resource.name)
        if progress is not None:
            progress(diagnostic)
        action(resource)
        diagnostics.append(diagnostic)
    return diagnostics

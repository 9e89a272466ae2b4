"""Engine result types (resolutions, diagnostics, batch outcomes)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

from octo_cmdlets.resources import Resource, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from octo_cmdlets.resources import Variable, VariableSetResource

R = TypeVar("R", bound=Resource)


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"


class DiagnosticCode(str, Enum):
    APPLIED = "applied"
    NAME_CONFLICT = "name-conflict"
    NOT_FOUND = "not-found"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Diagnostic:
    """A per-item message produced by a batch or lookup."""

    severity: Severity
    code: DiagnosticCode
    message: str
    subject: str | None = None

    @classmethod
    def info(cls, message: str, *, subject: str | None = None) -> Diagnostic:
        return cls(Severity.INFO, DiagnosticCode.APPLIED, message, subject)

    @classmethod
    def warning(
        cls, code: DiagnosticCode, message: str, *, subject: str | None = None
    ) -> Diagnostic:
        return cls(Severity.WARNING, code, message, subject)


DiagnosticCallback = Callable[[Diagnostic], None]


def unresolved_warning(kind: ResourceKind, key: str) -> Diagnostic:
    return Diagnostic.warning(
        DiagnosticCode.UNRESOLVED, f"No {kind.label} '{key}' was found.", subject=key
    )


@dataclass
class Resolution(Generic[R]):
    """Resources matched by a lookup, plus the inputs that matched nothing.

    Iterating or sizing a resolution works over ``resources`` only.
    """

    kind: ResourceKind
    resources: list[R] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[R]:
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self.resources if r.id is not None]

    def warnings(self) -> list[Diagnostic]:
        return [unresolved_warning(self.kind, key) for key in self.unresolved]


@dataclass
class ProjectSelection:
    """Outcome of the name / group / exclude project pipeline."""

    projects: list[Resource] = field(default_factory=list)
    unresolved_names: list[str] = field(default_factory=list)
    unresolved_groups: list[str] = field(default_factory=list)

    def warnings(self) -> list[Diagnostic]:
        return [
            *(unresolved_warning(ResourceKind.PROJECT, n) for n in self.unresolved_names),
            *(unresolved_warning(ResourceKind.PROJECT_GROUP, g) for g in self.unresolved_groups),
        ]


@dataclass
class CopyResult:
    applied: int = 0
    warnings: list[Diagnostic] = field(default_factory=list)


class RemovalState(str, Enum):
    SEARCHING = "searching"
    FOUND = "found"
    NOT_FOUND = "not-found"
    REMOVED = "removed"


@dataclass
class RemovalResult:
    state: RemovalState
    variable: Variable | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class VariableChangeResult:
    """A variable set after local edits were committed (or skipped)."""

    variable_set: VariableSetResource
    applied: int = 0
    committed: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class BatchResult:
    processed: list[Resource] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

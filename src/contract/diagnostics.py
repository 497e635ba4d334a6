"""Diagnostic descriptors and records produced by the public API analyzer."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict

from symbols.location import Location

DiagnosticKind = Literal["NewApi", "DeletedApi"]

DECLARE_PUBLIC_API_RULE_ID = "RS0016"
REMOVE_DELETED_API_RULE_ID = "RS0017"


class DiagnosticSeverity(str, Enum):
    HIDDEN = "hidden"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A single reported issue."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    kind: DiagnosticKind
    severity: DiagnosticSeverity
    message: str
    symbol: str
    location: Location

    def display(self) -> str:
        return (
            f"{self.location.display()}: {self.severity.value} "
            f"{self.rule_id}: {self.message}"
        )

    def sort_key(self) -> tuple[str, int, int, str, str]:
        return (
            self.location.path,
            self.location.line_span.start_line,
            self.location.line_span.start_character,
            self.rule_id,
            self.message,
        )


@dataclass(frozen=True)
class DiagnosticDescriptor:
    """Static description of a diagnostic rule."""

    id: str
    kind: DiagnosticKind
    title: str
    message_format: str
    category: str
    default_severity: DiagnosticSeverity
    is_enabled_by_default: bool
    description: str

    def create(self, location: Location, symbol: str) -> Diagnostic:
        return Diagnostic(
            rule_id=self.id,
            kind=self.kind,
            severity=self.default_severity,
            message=self.message_format.format(symbol),
            symbol=symbol,
            location=location,
        )


DECLARE_NEW_API_RULE = DiagnosticDescriptor(
    id=DECLARE_PUBLIC_API_RULE_ID,
    kind="NewApi",
    title="Add public types and members to the declared API",
    message_format="Symbol '{}' is not part of the declared API.",
    category="ApiDesign",
    default_severity=DiagnosticSeverity.ERROR,
    is_enabled_by_default=True,
    description=(
        "All public types and members should be declared in PublicAPI.txt. "
        "This draws attention to API changes in reviews and source control "
        "history, and helps prevent breaking changes."
    ),
)

REMOVE_DELETED_API_RULE = DiagnosticDescriptor(
    id=REMOVE_DELETED_API_RULE_ID,
    kind="DeletedApi",
    title="Remove deleted types and members from the declared API",
    message_format=(
        "Symbol '{}' is part of the declared API, "
        "but is either not public or could not be found"
    ),
    category="ApiDesign",
    default_severity=DiagnosticSeverity.ERROR,
    is_enabled_by_default=True,
    description=(
        "When removing a public type or member the corresponding entry in "
        "PublicAPI.txt should also be removed. This draws attention to API "
        "changes in reviews and source control history, and helps prevent "
        "breaking changes."
    ),
)

SUPPORTED_DIAGNOSTICS = (DECLARE_NEW_API_RULE, REMOVE_DELETED_API_RULE)


class DiagnosticReporter(Protocol):
    def report(self, diagnostic: Diagnostic) -> None: ...


class DiagnosticBag:
    """Thread-safe reporter that keeps every diagnostic it receives."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._items.append(diagnostic)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._items)

    def sorted_diagnostics(self) -> list[Diagnostic]:
        return sorted(self.diagnostics, key=Diagnostic.sort_key)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [item for item in self.diagnostics if item.kind == kind]


__all__ = [
    "DECLARE_NEW_API_RULE",
    "DECLARE_PUBLIC_API_RULE_ID",
    "REMOVE_DELETED_API_RULE",
    "REMOVE_DELETED_API_RULE_ID",
    "SUPPORTED_DIAGNOSTICS",
    "Diagnostic",
    "DiagnosticBag",
    "DiagnosticDescriptor",
    "DiagnosticKind",
    "DiagnosticReporter",
    "DiagnosticSeverity",
]

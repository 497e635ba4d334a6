"""Load a host-produced symbol graph from JSONL.

Each line is one :class:`SymbolRecord`. Containers and associated symbols are
referenced by ``id`` and may appear anywhere in the file.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from symbols.location import Location
from symbols.model import (
    Accessibility,
    MethodKind,
    Modifier,
    Parameter,
    RefKind,
    Symbol,
    SymbolKind,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class SymbolGraphError(Exception):
    """Raised when a symbol graph file cannot be turned into a symbol tree."""

    def __init__(self, path: Path, message: str, line: int | None = None) -> None:
        self.path = path
        self.line = line
        self.message = message
        super().__init__(f"{self.location()}: {message}")

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"


class ParameterRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: str | None = None
    ref_kind: RefKind = RefKind.NONE
    is_params: bool = False
    is_this: bool = False
    default_value: str | None = None


class SymbolRecord(BaseModel):
    """Schema for one symbol graph line."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(default=SCHEMA_VERSION)
    id: str
    name: str
    kind: SymbolKind
    accessibility: Accessibility = Accessibility.PUBLIC
    container: str | None = Field(default=None, description="Id of the parent")
    associated: str | None = Field(
        default=None, description="Id of the property/event an accessor belongs to"
    )
    method_kind: MethodKind = MethodKind.ORDINARY
    modifiers: list[Modifier] = Field(default_factory=list)
    type_parameters: list[str] = Field(default_factory=list)
    parameters: list[ParameterRecord] = Field(default_factory=list)
    type: str | None = None
    constant_value: str | None = None
    explicit_interface: str | None = None
    has_getter: bool = False
    has_setter: bool = False
    locations: list[Location] = Field(default_factory=list)

    def to_symbol(self) -> Symbol:
        return Symbol(
            name=self.name,
            kind=self.kind,
            accessibility=self.accessibility,
            locations=list(self.locations),
            method_kind=self.method_kind,
            modifiers=frozenset(self.modifiers),
            type_parameters=tuple(self.type_parameters),
            parameters=tuple(
                Parameter(**parameter.model_dump()) for parameter in self.parameters
            ),
            type=self.type,
            constant_value=self.constant_value,
            explicit_interface=self.explicit_interface,
            has_getter=self.has_getter,
            has_setter=self.has_setter,
        )


def _read_records(path: Path) -> list[tuple[int, SymbolRecord]]:
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise SymbolGraphError(path, f"Failed to read file: {exc}.") from exc

    records: list[tuple[int, SymbolRecord]] = []
    with handle:
        for line_number, raw_line in enumerate(handle, 1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError as exc:
                msg = f"Invalid JSON: {exc}."
                raise SymbolGraphError(path, msg, line_number) from exc
            try:
                record = SymbolRecord.model_validate(data)
            except ValidationError as exc:
                msg = f"Schema validation failed: {exc}."
                raise SymbolGraphError(path, msg, line_number) from exc
            if record.schema_version != SCHEMA_VERSION:
                msg = (
                    "Schema version mismatch: "
                    f"expected {SCHEMA_VERSION}, got {record.schema_version}."
                )
                raise SymbolGraphError(path, msg, line_number)
            records.append((line_number, record))
    return records


def _reject_cycles(path: Path, records: list[tuple[int, SymbolRecord]]) -> None:
    parents = {record.id: record.container for _, record in records}
    for line_number, record in records:
        seen = {record.id}
        parent = record.container
        while parent is not None:
            if parent in seen:
                msg = f"Containment cycle through symbol {record.id!r}."
                raise SymbolGraphError(path, msg, line_number)
            seen.add(parent)
            parent = parents[parent]


def load_symbol_graph(path: Path) -> list[Symbol]:
    """Load ``path`` and return the root symbols in file order."""
    records = _read_records(path)

    symbols: dict[str, Symbol] = {}
    for line_number, record in records:
        if record.id in symbols:
            msg = f"Duplicate symbol id {record.id!r}."
            raise SymbolGraphError(path, msg, line_number)
        symbols[record.id] = record.to_symbol()

    for line_number, record in records:
        for reference in (record.container, record.associated):
            if reference is not None and reference not in symbols:
                msg = f"Unknown symbol id {reference!r} referenced by {record.id!r}."
                raise SymbolGraphError(path, msg, line_number)

    _reject_cycles(path, records)

    roots: list[Symbol] = []
    for _, record in records:
        symbol = symbols[record.id]
        if record.associated is not None:
            symbol.associated_symbol = symbols[record.associated]
        if record.container is None:
            roots.append(symbol)
        else:
            symbols[record.container].add_member(symbol)

    logger.debug("Loaded %d symbols (%d roots) from %s", len(symbols), len(roots), path)
    return roots


__all__ = [
    "SCHEMA_VERSION",
    "ParameterRecord",
    "SymbolGraphError",
    "SymbolRecord",
    "load_symbol_graph",
]

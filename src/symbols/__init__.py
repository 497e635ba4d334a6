"""Symbol graph model and loaders."""

from symbols.graph import SymbolGraphError, SymbolRecord, load_symbol_graph
from symbols.location import LinePositionSpan, Location, TextSpan
from symbols.model import (
    Accessibility,
    MethodKind,
    Modifier,
    Parameter,
    RefKind,
    Symbol,
    SymbolKind,
)

__all__ = [
    "Accessibility",
    "LinePositionSpan",
    "Location",
    "MethodKind",
    "Modifier",
    "Parameter",
    "RefKind",
    "Symbol",
    "SymbolGraphError",
    "SymbolKind",
    "SymbolRecord",
    "TextSpan",
    "load_symbol_graph",
]

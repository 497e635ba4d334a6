"""Symbol graph model.

Symbols are produced by a host (the tree-sitter adapter or a JSONL dump) and
form a tree through ``containing_symbol``. The analyzer only reads them; it
never builds or mutates a graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from symbols.location import Location


class SymbolKind(str, Enum):
    """Declaration kinds a host can report."""

    NAMESPACE = "namespace"
    NAMED_TYPE = "named_type"
    FIELD = "field"
    EVENT = "event"
    METHOD = "method"
    PROPERTY = "property"


class Accessibility(str, Enum):
    """Declared accessibility of a symbol."""

    NOT_APPLICABLE = "not_applicable"
    PRIVATE = "private"
    PROTECTED_AND_INTERNAL = "protected_and_internal"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_OR_INTERNAL = "protected_or_internal"
    PUBLIC = "public"


class MethodKind(str, Enum):
    ORDINARY = "ordinary"
    CONSTRUCTOR = "constructor"
    PROPERTY_GET = "property_get"
    PROPERTY_SET = "property_set"
    EVENT_ADD = "event_add"
    EVENT_REMOVE = "event_remove"


# Declaration order is rendering order.
class Modifier(str, Enum):
    STATIC = "static"
    ABSTRACT = "abstract"
    VIRTUAL = "virtual"
    SEALED = "sealed"
    OVERRIDE = "override"
    READONLY = "readonly"
    CONST = "const"


class RefKind(str, Enum):
    NONE = "none"
    REF = "ref"
    OUT = "out"
    IN = "in"


# Upper bound on parent-chain walks; containment is acyclic by construction.
MAX_CONTAINMENT_DEPTH = 256

EVENT_ACCESSOR_KINDS = frozenset({MethodKind.EVENT_ADD, MethodKind.EVENT_REMOVE})

ACCESSOR_SUFFIXES: dict[MethodKind, str] = {
    MethodKind.PROPERTY_GET: "get",
    MethodKind.PROPERTY_SET: "set",
    MethodKind.EVENT_ADD: "add",
    MethodKind.EVENT_REMOVE: "remove",
}


@dataclass(frozen=True)
class Parameter:
    """A method parameter as declared."""

    name: str
    type: str | None = None
    ref_kind: RefKind = RefKind.NONE
    is_params: bool = False
    is_this: bool = False
    default_value: str | None = None


@dataclass(eq=False)
class Symbol:
    """A declaration in the host's symbol tree.

    ``containing_symbol`` is a non-owning back reference to the parent.
    ``associated_symbol`` links property and event accessors to the property
    or event they belong to. Identity is object identity: two distinct
    declarations never compare equal even if they render the same.
    """

    name: str
    kind: SymbolKind
    accessibility: Accessibility = Accessibility.PUBLIC
    containing_symbol: Symbol | None = None
    locations: list[Location] = field(default_factory=list)
    method_kind: MethodKind = MethodKind.ORDINARY
    modifiers: frozenset[Modifier] = frozenset()
    type_parameters: tuple[str, ...] = ()
    parameters: tuple[Parameter, ...] = ()
    type: str | None = None
    constant_value: str | None = None
    explicit_interface: str | None = None
    associated_symbol: Symbol | None = None
    has_getter: bool = False
    has_setter: bool = False
    members: list[Symbol] = field(default_factory=list, repr=False)

    @property
    def containing_type(self) -> Symbol | None:
        """Nearest enclosing named type, or None when a namespace encloses."""
        parent = self.containing_symbol
        if parent is not None and parent.kind is SymbolKind.NAMED_TYPE:
            return parent
        return None

    @property
    def is_event_accessor(self) -> bool:
        return (
            self.kind is SymbolKind.METHOD
            and self.method_kind in EVENT_ACCESSOR_KINDS
        )

    def add_member(self, member: Symbol) -> Symbol:
        member.containing_symbol = self
        self.members.append(member)
        return member

    def walk(self) -> Iterator[Symbol]:
        """Yield this symbol and every descendant, depth first."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.members))


__all__ = [
    "ACCESSOR_SUFFIXES",
    "Accessibility",
    "EVENT_ACCESSOR_KINDS",
    "MAX_CONTAINMENT_DEPTH",
    "MethodKind",
    "Modifier",
    "Parameter",
    "RefKind",
    "Symbol",
    "SymbolKind",
]

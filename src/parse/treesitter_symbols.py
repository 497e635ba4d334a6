"""Tree-sitter based symbol graph producer for Python sources.

Each file becomes a namespace symbol named after its module; classes,
functions, properties and module/class level assignments hang below it.
Python has no access modifiers, so accessibility follows naming conventions:

- ``__dunder__`` members of classes are public, module-level dunders are not
- ``__name`` inside a class is private, ``_name`` is protected
- ``_name`` at module level is internal, as is every top-level name of a
  private module (``pkg/_impl.py``) or one left out of ``__all__``
"""

from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

from scan.files import find_python_files
from symbols.location import LinePositionSpan, Location, TextSpan
from symbols.model import (
    Accessibility,
    MethodKind,
    Modifier,
    Parameter,
    Symbol,
    SymbolKind,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

_PARSER: Parser | None = None

_WHITESPACE_RUN = re.compile(r"\s+")
_UPPER_CASE = re.compile(r"^_*[A-Z][A-Z0-9_]*$")
_CLASS_VAR = re.compile(r"^(?:typing\.)?ClassVar\[(.*)\]$")
_FINAL = re.compile(r"^(?:typing\.)?Final(?:\[(.*)\])?$")

_COMPOUND_STATEMENTS = frozenset(
    {
        "if_statement",
        "elif_clause",
        "else_clause",
        "try_statement",
        "except_clause",
        "finally_clause",
        "with_statement",
        "block",
    }
)
_LITERAL_TYPES = {
    "integer": "int",
    "float": "float",
    "string": "str",
    "concatenated_string": "str",
    "true": "bool",
    "false": "bool",
    "none": "None",
}
_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
_GENERIC_BASES = frozenset({"Generic", "Protocol"})
_PARAMETER_SEPARATORS = frozenset({"keyword_separator", "positional_separator"})


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Python language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_python_language())
        _PARSER = Parser(lang)

    return _PARSER


def module_name_for(relative_path: str) -> str:
    """Map a repository-relative path to a dotted module name.

    ``src/pkg/mod.py`` -> ``pkg.mod``; ``pkg/__init__.py`` -> ``pkg``.
    """
    parts = [part for part in relative_path.replace("\\", "/").split("/") if part]
    if len(parts) >= 2 and parts[0] == "src":
        parts = parts[1:]
    if parts and parts[-1].endswith(".py"):
        parts[-1] = parts[-1][:-3]
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts)


def _is_private_module(module_name: str) -> bool:
    return any(part.startswith("_") for part in module_name.split("."))


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


@dataclass
class _FileContext:
    relative_path: str
    source: bytes
    private_module: bool = False
    exported: frozenset[str] | None = None

    def raw(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode(
            "utf8", errors="replace"
        ).strip()

    def text(self, node: Node) -> str:
        """Source text of a name or annotation with whitespace runs collapsed."""
        return _WHITESPACE_RUN.sub(" ", self.raw(node))

    def value_text(self, node: Node) -> str:
        """Render a value expression without touching string contents.

        Literals holding strings are re-rendered from their evaluated value,
        so ``"a  b"`` and ``"a b"`` stay distinct and multi-line strings fit
        on one line.
        """
        raw = self.raw(node)
        if "'" not in raw and '"' not in raw:
            return self.text(node)
        try:
            value = ast.literal_eval(raw)
        except (ValueError, TypeError, SyntaxError):
            return self.text(node)
        if isinstance(value, str):
            return orjson.dumps(value).decode()
        return repr(value)

    def location(self, node: Node) -> Location:
        return Location(
            path=self.relative_path,
            span=TextSpan(start=node.start_byte, end=node.end_byte),
            line_span=LinePositionSpan(
                start_line=node.start_point[0],
                start_character=node.start_point[1],
                end_line=node.end_point[0],
                end_character=node.end_point[1],
            ),
        )

    def accessibility(self, name: str, *, in_class: bool) -> Accessibility:
        if in_class:
            if _is_dunder(name):
                return Accessibility.PUBLIC
            if name.startswith("__"):
                return Accessibility.PRIVATE
            if name.startswith("_"):
                return Accessibility.PROTECTED
            return Accessibility.PUBLIC

        if name.startswith("_") or self.private_module:
            return Accessibility.INTERNAL
        if self.exported is not None and name not in self.exported:
            return Accessibility.INTERNAL
        return Accessibility.PUBLIC


@dataclass
class _Scope:
    symbol: Symbol
    qualname: str
    in_class: bool
    enum_type: str | None = None
    properties: dict[str, Symbol] = field(default_factory=dict)
    fields: set[str] = field(default_factory=set)


def _iter_statements(node: Node) -> Iterator[Node]:
    """Yield statements of a block, descending into if/try/with bodies."""
    for child in node.named_children:
        if child.type in _COMPOUND_STATEMENTS:
            yield from _iter_statements(child)
        else:
            yield child


def _unwrap_definition(node: Node) -> tuple[Node, list[Node]]:
    if node.type != "decorated_definition":
        return node, []
    decorators = [child for child in node.named_children if child.type == "decorator"]
    definition = node.child_by_field_name("definition")
    return (definition if definition is not None else node), decorators


def _decorator_names(ctx: _FileContext, decorators: list[Node]) -> list[str]:
    names: list[str] = []
    for decorator in decorators:
        if not decorator.named_children:
            continue
        expression = decorator.named_children[0]
        if expression.type == "call":
            function = expression.child_by_field_name("function")
            if function is not None:
                expression = function
        names.append(ctx.text(expression))
    return names


def _last_segment(dotted: str) -> str:
    return dotted.rsplit(".", 1)[-1]


def _overloaded_names(ctx: _FileContext, block: Node) -> set[str]:
    names: set[str] = set()
    for statement in _iter_statements(block):
        definition, decorators = _unwrap_definition(statement)
        if definition.type != "function_definition":
            continue
        if "overload" in {_last_segment(n) for n in _decorator_names(ctx, decorators)}:
            name_node = definition.child_by_field_name("name")
            if name_node is not None:
                names.add(ctx.text(name_node))
    return names


def _read_exports(ctx: _FileContext, root: Node) -> frozenset[str] | None:
    """Return the literal contents of a module-level ``__all__``, if any."""
    for statement in _iter_statements(root):
        if statement.type != "expression_statement":
            continue
        for assignment in statement.named_children:
            if assignment.type != "assignment":
                continue
            left = assignment.child_by_field_name("left")
            right = assignment.child_by_field_name("right")
            if left is None or right is None or ctx.text(left) != "__all__":
                continue
            try:
                value = ast.literal_eval(ctx.raw(right))
            except (ValueError, SyntaxError):
                logger.debug("Non-literal __all__ in %s; ignoring", ctx.relative_path)
                return None
            if isinstance(value, (list, tuple)):
                return frozenset(item for item in value if isinstance(item, str))
    return None


def _populate(ctx: _FileContext, scope: _Scope, block: Node) -> None:
    overloaded = _overloaded_names(ctx, block)
    for statement in _iter_statements(block):
        definition, decorators = _unwrap_definition(statement)
        if definition.type == "class_definition":
            _add_class(ctx, scope, definition)
        elif definition.type == "function_definition":
            _add_function(ctx, scope, definition, decorators, overloaded)
        elif statement.type == "expression_statement":
            for assignment in statement.named_children:
                if assignment.type == "assignment":
                    _add_field(ctx, scope, assignment)


def _type_parameters(ctx: _FileContext, node: Node) -> tuple[str, ...]:
    declared = node.child_by_field_name("type_parameters")
    if declared is not None:
        return tuple(ctx.text(child) for child in declared.named_children)

    superclasses = node.child_by_field_name("superclasses")
    if superclasses is None:
        return ()
    for base in superclasses.named_children:
        if base.type != "subscript":
            continue
        value = base.child_by_field_name("value")
        if value is None or _last_segment(ctx.text(value)) not in _GENERIC_BASES:
            continue
        return tuple(
            ctx.text(child) for child in base.children_by_field_name("subscript")
        )
    return ()


def _is_enum_class(ctx: _FileContext, node: Node) -> bool:
    superclasses = node.child_by_field_name("superclasses")
    if superclasses is None:
        return False
    return any(
        base.type in ("identifier", "attribute")
        and _last_segment(ctx.text(base)) in _ENUM_BASES
        for base in superclasses.named_children
    )


def _add_class(ctx: _FileContext, scope: _Scope, node: Node) -> None:
    name_node = node.child_by_field_name("name")
    body = node.child_by_field_name("body")
    if name_node is None:
        return

    name = ctx.text(name_node)
    qualname = f"{scope.qualname}.{name}"
    symbol = scope.symbol.add_member(
        Symbol(
            name=name,
            kind=SymbolKind.NAMED_TYPE,
            accessibility=ctx.accessibility(name, in_class=scope.in_class),
            locations=[ctx.location(name_node)],
            type_parameters=_type_parameters(ctx, node),
        )
    )
    if body is None:
        return

    class_scope = _Scope(
        symbol=symbol,
        qualname=qualname,
        in_class=True,
        enum_type=qualname if _is_enum_class(ctx, node) else None,
    )
    _populate(ctx, class_scope, body)


def _parameter(ctx: _FileContext, node: Node) -> Parameter | None:
    kind = node.type
    if kind in ("identifier", "list_splat_pattern", "dictionary_splat_pattern"):
        return Parameter(name=ctx.text(node))
    if kind in _PARAMETER_SEPARATORS:
        return Parameter(name=ctx.text(node))

    annotation = node.child_by_field_name("type")
    value = node.child_by_field_name("value")
    if kind == "typed_parameter":
        if not node.named_children:
            return None
        name = ctx.text(node.named_children[0])
    elif kind in ("default_parameter", "typed_default_parameter"):
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = ctx.text(name_node)
    else:
        return None

    return Parameter(
        name=name,
        type=ctx.text(annotation) if annotation is not None else None,
        default_value=ctx.value_text(value) if value is not None else None,
    )


def _parameters(
    ctx: _FileContext, node: Node, *, drop_receiver: bool
) -> tuple[Parameter, ...]:
    parameters_node = node.child_by_field_name("parameters")
    if parameters_node is None:
        return ()

    parameters: list[Parameter] = []
    for child in parameters_node.named_children:
        parameter = _parameter(ctx, child)
        if parameter is not None:
            parameters.append(parameter)

    if drop_receiver and parameters and parameters[0].name.isidentifier():
        parameters = parameters[1:]
    return tuple(parameters)


def _add_function(
    ctx: _FileContext,
    scope: _Scope,
    node: Node,
    decorator_nodes: list[Node],
    overloaded: set[str],
) -> None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return

    name = ctx.text(name_node)
    decorators = _decorator_names(ctx, decorator_nodes)
    simple_decorators = {_last_segment(decorator) for decorator in decorators}
    if name in overloaded and "overload" not in simple_decorators:
        return

    accessibility = ctx.accessibility(name, in_class=scope.in_class)
    return_annotation = node.child_by_field_name("return_type")
    return_type = (
        ctx.text(return_annotation) if return_annotation is not None else None
    )
    location = ctx.location(name_node)

    modifiers: set[Modifier] = set()
    is_static = scope.in_class and bool(
        simple_decorators & {"staticmethod", "classmethod"}
    )
    if is_static:
        modifiers.add(Modifier.STATIC)
    if "abstractmethod" in simple_decorators:
        modifiers.add(Modifier.ABSTRACT)

    if scope.in_class and simple_decorators & {"property", "cached_property"}:
        prop = scope.symbol.add_member(
            Symbol(
                name=name,
                kind=SymbolKind.PROPERTY,
                accessibility=accessibility,
                locations=[location],
                modifiers=frozenset(modifiers),
                type=return_type,
                has_getter=True,
            )
        )
        scope.properties[name] = prop
        scope.symbol.add_member(
            Symbol(
                name=f"get_{name}",
                kind=SymbolKind.METHOD,
                method_kind=MethodKind.PROPERTY_GET,
                accessibility=accessibility,
                locations=[location],
                modifiers=frozenset(modifiers),
                type=return_type,
                associated_symbol=prop,
            )
        )
        return

    for decorator in decorators:
        owner, _, accessor = decorator.rpartition(".")
        if owner not in scope.properties or accessor not in ("setter", "deleter"):
            continue
        if accessor == "setter":
            prop = scope.properties[owner]
            prop.has_setter = True
            scope.symbol.add_member(
                Symbol(
                    name=f"set_{owner}",
                    kind=SymbolKind.METHOD,
                    method_kind=MethodKind.PROPERTY_SET,
                    accessibility=prop.accessibility,
                    locations=[location],
                    modifiers=frozenset(modifiers),
                    type=return_type,
                    associated_symbol=prop,
                )
            )
        return

    scope.symbol.add_member(
        Symbol(
            name=name,
            kind=SymbolKind.METHOD,
            accessibility=accessibility,
            locations=[location],
            modifiers=frozenset(modifiers),
            parameters=_parameters(
                ctx,
                node,
                drop_receiver=scope.in_class
                and "staticmethod" not in simple_decorators,
            ),
            type=return_type,
        )
    )


def _literal_type(ctx: _FileContext, node: Node) -> str | None:
    if node.type == "string" and any(
        child.type == "interpolation" for child in node.named_children
    ):
        return None
    if node.type == "unary_operator":
        argument = node.child_by_field_name("argument")
        if argument is not None and argument.type in ("integer", "float"):
            return _LITERAL_TYPES[argument.type]
        return None
    return _LITERAL_TYPES.get(node.type)


def _add_field(ctx: _FileContext, scope: _Scope, assignment: Node) -> None:
    left = assignment.child_by_field_name("left")
    if left is None or left.type != "identifier":
        return

    name = ctx.text(left)
    if _is_dunder(name) or name in scope.fields:
        return

    annotation = assignment.child_by_field_name("type")
    right = assignment.child_by_field_name("right")
    type_text = ctx.text(annotation) if annotation is not None else None

    modifiers: set[Modifier] = set()
    constant_value: str | None = None
    if type_text is not None:
        class_var = _CLASS_VAR.match(type_text)
        final = _FINAL.match(type_text)
        if class_var is not None:
            modifiers.add(Modifier.STATIC)
            type_text = class_var.group(1)
        elif final is not None:
            modifiers.add(Modifier.READONLY)
            type_text = final.group(1)

    if scope.enum_type is not None:
        if name.startswith("_") or annotation is not None or right is None:
            return
        constant_value = ctx.value_text(right)
        type_text = scope.enum_type
    elif right is not None and _UPPER_CASE.match(name):
        literal_type = _literal_type(ctx, right)
        if literal_type is not None:
            modifiers.discard(Modifier.READONLY)
            modifiers.add(Modifier.CONST)
            constant_value = ctx.value_text(right)
            type_text = type_text or literal_type

    scope.fields.add(name)
    scope.symbol.add_member(
        Symbol(
            name=name,
            kind=SymbolKind.FIELD,
            accessibility=ctx.accessibility(name, in_class=scope.in_class),
            locations=[ctx.location(left)],
            modifiers=frozenset(modifiers),
            type=type_text,
            constant_value=constant_value,
        )
    )


def extract_symbols_treesitter(
    file_path: Path,
    relative_path: str,
    module_name: str | None = None,
) -> Symbol | None:
    """Build the symbol tree of one Python file.

    Args:
        file_path: Absolute path to the Python file
        relative_path: Path relative to the analyzed root (used in locations)
        module_name: Dotted module name; derived from ``relative_path`` if None

    Returns:
        The namespace symbol of the module, or None if the file is unreadable.
    """
    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        logger.warning("Skipping unreadable source %s: %s", file_path, exc)
        return None

    if module_name is None:
        module_name = module_name_for(relative_path)

    tree = _get_parser().parse(source_bytes)
    root_node = tree.root_node

    ctx = _FileContext(
        relative_path=relative_path,
        source=source_bytes,
        private_module=_is_private_module(module_name),
    )
    ctx.exported = _read_exports(ctx, root_node)

    namespace = Symbol(
        name=module_name,
        kind=SymbolKind.NAMESPACE,
        locations=[Location(path=relative_path)],
    )
    module_scope = _Scope(symbol=namespace, qualname=module_name, in_class=False)
    _populate(ctx, module_scope, root_node)
    return namespace


def build_symbol_graph(
    root: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> list[Symbol]:
    """Return one namespace symbol per Python module under ``root``."""
    modules: list[Symbol] = []
    for file_path in find_python_files(
        root,
        include_patterns=include_patterns,
        exclude_patterns=exclude_patterns,
        nested_gitignore=nested_gitignore,
    ):
        relative_path = file_path.relative_to(root).as_posix()
        namespace = extract_symbols_treesitter(file_path, relative_path)
        if namespace is not None:
            modules.append(namespace)

    logger.debug("Built symbol graph for %d modules under %s", len(modules), root)
    return modules


__all__ = ["build_symbol_graph", "extract_symbols_treesitter", "module_name_for"]

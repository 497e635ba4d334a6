"""Render symbols to display strings under a :class:`DisplayFormat`."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from naming.formats import (
    PUBLIC_API_FORMAT,
    SHORT_NAME_FORMAT,
    SPECIAL_TYPE_NAMES,
    DisplayFormat,
    MemberOptions,
    ParameterOptions,
    PropertyStyle,
    TypeQualificationStyle,
)
from symbols.model import (
    ACCESSOR_SUFFIXES,
    MAX_CONTAINMENT_DEPTH,
    MethodKind,
    Modifier,
    RefKind,
    SymbolKind,
)

if TYPE_CHECKING:
    from symbols.model import Parameter, Symbol

_DOTTED_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*")

_TYPE_KINDS = frozenset({SymbolKind.NAMED_TYPE, SymbolKind.NAMESPACE})


def to_display_string(symbol: Symbol, fmt: DisplayFormat) -> str:
    """Render ``symbol`` according to ``fmt``."""
    if symbol.kind in _TYPE_KINDS:
        return _render_type_name(symbol, fmt)
    if symbol.kind is SymbolKind.METHOD:
        return _render_method(symbol, fmt)
    if symbol.kind is SymbolKind.PROPERTY:
        return _render_property(symbol, fmt)
    return _render_field_or_event(symbol, fmt)


def short_name(symbol: Symbol) -> str:
    return to_display_string(symbol, SHORT_NAME_FORMAT)


def signature_name(symbol: Symbol) -> str:
    return to_display_string(symbol, PUBLIC_API_FORMAT)


def render_type_reference(type_text: str, fmt: DisplayFormat) -> str:
    """Apply special type aliases to every dotted name inside ``type_text``."""
    if not fmt.use_special_types:
        return type_text
    return _DOTTED_NAME.sub(
        lambda match: SPECIAL_TYPE_NAMES.get(match.group(0), match.group(0)),
        type_text,
    )


def _simple_type_name(symbol: Symbol, fmt: DisplayFormat) -> str:
    if fmt.include_type_parameters and symbol.type_parameters:
        return f"{symbol.name}<{', '.join(symbol.type_parameters)}>"
    return symbol.name


def _render_type_name(symbol: Symbol, fmt: DisplayFormat) -> str:
    parts = [_simple_type_name(symbol, fmt)]
    if fmt.type_qualification is TypeQualificationStyle.NAME_ONLY:
        return parts[0]

    include_namespaces = (
        fmt.type_qualification
        is TypeQualificationStyle.NAME_AND_CONTAINING_TYPES_AND_NAMESPACES
    )
    global_prefix = ""
    parent = symbol.containing_symbol
    depth = 0
    while parent is not None and depth < MAX_CONTAINMENT_DEPTH:
        if parent.kind is SymbolKind.NAMESPACE:
            if not include_namespaces:
                break
            if parent.name:
                parts.append(parent.name)
            elif not fmt.omit_global_namespace:
                global_prefix = "global::"
        else:
            parts.append(_simple_type_name(parent, fmt))
        parent = parent.containing_symbol
        depth += 1

    return global_prefix + ".".join(reversed(parts))


def _member_path(symbol: Symbol, member_name: str, fmt: DisplayFormat) -> str:
    container = symbol.containing_symbol
    if (
        container is None
        or MemberOptions.INCLUDE_CONTAINING_TYPE not in fmt.member_options
    ):
        return member_name
    if container.kind is SymbolKind.NAMESPACE and (
        fmt.type_qualification
        is not TypeQualificationStyle.NAME_AND_CONTAINING_TYPES_AND_NAMESPACES
    ):
        return member_name
    prefix = _render_type_name(container, fmt)
    if not prefix:
        return member_name
    if prefix.endswith("::"):
        return prefix + member_name
    return f"{prefix}.{member_name}"


def _modifier_prefix(symbol: Symbol, fmt: DisplayFormat) -> str:
    if MemberOptions.INCLUDE_MODIFIERS not in fmt.member_options:
        return ""
    words = [modifier.value for modifier in Modifier if modifier in symbol.modifiers]
    if not words:
        return ""
    return " ".join(words) + " "


def _type_suffix(symbol: Symbol, fmt: DisplayFormat) -> str:
    if MemberOptions.INCLUDE_TYPE not in fmt.member_options or symbol.type is None:
        return ""
    return f" -> {render_type_reference(symbol.type, fmt)}"


def _render_method(symbol: Symbol, fmt: DisplayFormat) -> str:
    suffix = ACCESSOR_SUFFIXES.get(symbol.method_kind)
    if suffix is not None:
        return _render_accessor(symbol, suffix, fmt)

    if symbol.method_kind is MethodKind.CONSTRUCTOR and symbol.containing_type:
        name = symbol.containing_type.name
    else:
        name = symbol.name
    if (
        symbol.explicit_interface
        and MemberOptions.INCLUDE_EXPLICIT_INTERFACE in fmt.member_options
    ):
        name = f"{render_type_reference(symbol.explicit_interface, fmt)}.{name}"
    if fmt.include_type_parameters and symbol.type_parameters:
        name = f"{name}<{', '.join(symbol.type_parameters)}>"

    text = _modifier_prefix(symbol, fmt) + _member_path(symbol, name, fmt)
    if MemberOptions.INCLUDE_PARAMETERS in fmt.member_options:
        rendered = ", ".join(
            _render_parameter(parameter, fmt) for parameter in symbol.parameters
        )
        text += f"({rendered})"
    return text + _type_suffix(symbol, fmt)


def _render_accessor(symbol: Symbol, suffix: str, fmt: DisplayFormat) -> str:
    owner = symbol.associated_symbol
    if owner is None:
        base = _member_path(symbol, symbol.name, fmt)
    else:
        base = _member_path(owner, owner.name, fmt)
    return _modifier_prefix(symbol, fmt) + f"{base}.{suffix}" + _type_suffix(
        symbol, fmt
    )


def _render_property(symbol: Symbol, fmt: DisplayFormat) -> str:
    text = _modifier_prefix(symbol, fmt) + _member_path(symbol, symbol.name, fmt)
    if fmt.property_style is PropertyStyle.SHOW_READ_WRITE_DESCRIPTOR:
        accessors = []
        if symbol.has_getter:
            accessors.append("get;")
        if symbol.has_setter:
            accessors.append("set;")
        text += " { " + "".join(f"{accessor} " for accessor in accessors) + "}"
    return text + _type_suffix(symbol, fmt)


def _render_field_or_event(symbol: Symbol, fmt: DisplayFormat) -> str:
    text = _modifier_prefix(symbol, fmt) + _member_path(symbol, symbol.name, fmt)
    if (
        symbol.kind is SymbolKind.FIELD
        and symbol.constant_value is not None
        and MemberOptions.INCLUDE_CONSTANT_VALUE in fmt.member_options
    ):
        text += f" = {symbol.constant_value}"
    return text + _type_suffix(symbol, fmt)


def _render_parameter(parameter: Parameter, fmt: DisplayFormat) -> str:
    options = fmt.parameter_options
    words: list[str] = []
    if ParameterOptions.INCLUDE_EXTENSION_THIS in options and parameter.is_this:
        words.append("this")
    if ParameterOptions.INCLUDE_PARAMS_REF_OUT in options:
        if parameter.is_params:
            words.append("params")
        if parameter.ref_kind is not RefKind.NONE:
            words.append(parameter.ref_kind.value)
    if ParameterOptions.INCLUDE_TYPE in options and parameter.type:
        words.append(render_type_reference(parameter.type, fmt))
    if ParameterOptions.INCLUDE_NAME in options:
        words.append(parameter.name)
    text = " ".join(words)
    if (
        ParameterOptions.INCLUDE_DEFAULT_VALUE in options
        and parameter.default_value is not None
    ):
        text += f" = {parameter.default_value}"
    return text


__all__ = [
    "render_type_reference",
    "short_name",
    "signature_name",
    "to_display_string",
]

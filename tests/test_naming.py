from __future__ import annotations

from dataclasses import replace

from naming.formats import PUBLIC_API_FORMAT
from naming.render import (
    render_type_reference,
    short_name,
    signature_name,
    to_display_string,
)
from symbols.model import (
    MethodKind,
    Modifier,
    Parameter,
    RefKind,
    Symbol,
    SymbolKind,
)


def _namespace(name: str) -> Symbol:
    return Symbol(name=name, kind=SymbolKind.NAMESPACE)


def _type(
    name: str, container: Symbol | None = None, *type_parameters: str
) -> Symbol:
    symbol = Symbol(
        name=name, kind=SymbolKind.NAMED_TYPE, type_parameters=type_parameters
    )
    if container is not None:
        container.add_member(symbol)
    return symbol


def _method(container: Symbol, name: str, **kwargs: object) -> Symbol:
    return container.add_member(
        Symbol(name=name, kind=SymbolKind.METHOD, **kwargs)  # type: ignore[arg-type]
    )


def test_method_signature_is_fully_qualified_with_parameters() -> None:
    widget = _type("Widget", _namespace("Lib.Ui"))
    method = _method(
        widget,
        "Resize",
        parameters=(
            Parameter("width", "System.Int32"),
            Parameter("label", "string", default_value="null"),
        ),
        type="System.Void",
    )

    assert signature_name(method) == (
        "Lib.Ui.Widget.Resize(int width, string label = null) -> void"
    )
    assert short_name(method) == "Resize"


def test_parameterless_method_on_top_level_type() -> None:
    method = _method(_type("C"), "M", type="void")

    assert signature_name(method) == "C.M() -> void"


def test_generic_and_nested_type_names() -> None:
    outer = _type("Outer", _namespace("Lib"), "T")
    inner = _type("Inner", outer, "U")

    assert signature_name(outer) == "Lib.Outer<T>"
    assert signature_name(inner) == "Lib.Outer<T>.Inner<U>"
    assert short_name(inner) == "Inner<U>"


def test_modifiers_render_in_fixed_order() -> None:
    method = _method(
        _type("C"),
        "ToString",
        modifiers=frozenset({Modifier.OVERRIDE, Modifier.SEALED}),
        type="System.String",
    )

    assert signature_name(method) == "sealed override C.ToString() -> string"
    assert short_name(method) == "ToString"


def test_const_field_includes_value() -> None:
    field = _type("C").add_member(
        Symbol(
            name="Max",
            kind=SymbolKind.FIELD,
            modifiers=frozenset({Modifier.CONST}),
            constant_value="10",
            type="System.Int32",
        )
    )

    assert signature_name(field) == "const C.Max = 10 -> int"
    assert short_name(field) == "Max"


def test_property_and_accessors() -> None:
    owner = _type("C")
    prop = owner.add_member(
        Symbol(
            name="P",
            kind=SymbolKind.PROPERTY,
            type="int",
            has_getter=True,
            has_setter=True,
        )
    )
    getter = _method(
        owner,
        "get_P",
        method_kind=MethodKind.PROPERTY_GET,
        type="int",
        associated_symbol=prop,
    )
    setter = _method(
        owner,
        "set_P",
        method_kind=MethodKind.PROPERTY_SET,
        type="void",
        associated_symbol=prop,
    )

    assert signature_name(prop) == "C.P { get; set; } -> int"
    assert short_name(prop) == "P"
    assert signature_name(getter) == "C.P.get -> int"
    assert signature_name(setter) == "C.P.set -> void"
    assert short_name(getter) == "P.get"


def test_get_only_property_descriptor_differs_from_get_set() -> None:
    owner = _type("C")
    read_only = owner.add_member(
        Symbol(name="P", kind=SymbolKind.PROPERTY, type="int", has_getter=True)
    )
    read_write = Symbol(
        name="P",
        kind=SymbolKind.PROPERTY,
        type="int",
        has_getter=True,
        has_setter=True,
    )
    owner.add_member(read_write)

    assert signature_name(read_only) == "C.P { get; } -> int"
    assert signature_name(read_only) != signature_name(read_write)


def test_extension_and_parameter_markers() -> None:
    extensions = _type("Extensions", _namespace("Lib"))
    trim = _method(
        extensions,
        "Trim",
        modifiers=frozenset({Modifier.STATIC}),
        parameters=(Parameter("s", "string", is_this=True),),
        type="string",
    )
    parse = _method(
        extensions,
        "Parse",
        modifiers=frozenset({Modifier.STATIC}),
        parameters=(
            Parameter("values", "int[]", is_params=True),
            Parameter("result", "int", ref_kind=RefKind.OUT),
            Parameter("state", "int", ref_kind=RefKind.REF),
        ),
        type="bool",
    )

    assert signature_name(trim) == (
        "static Lib.Extensions.Trim(this string s) -> string"
    )
    assert signature_name(parse) == (
        "static Lib.Extensions.Parse("
        "params int[] values, out int result, ref int state) -> bool"
    )


def test_explicit_interface_implementation() -> None:
    method = _method(
        _type("Resource", _namespace("Lib")),
        "Dispose",
        explicit_interface="System.IDisposable",
        type="void",
    )

    assert signature_name(method) == (
        "Lib.Resource.System.IDisposable.Dispose() -> void"
    )
    assert short_name(method) == "Dispose"


def test_constructor_uses_type_name() -> None:
    owner = _type("Box", None, "T")
    ctor = _method(
        owner,
        ".ctor",
        method_kind=MethodKind.CONSTRUCTOR,
        parameters=(Parameter("value", "T"),),
        type="void",
    )

    assert signature_name(ctor) == "Box<T>.Box(T value) -> void"


def test_generic_method() -> None:
    method = _method(
        _type("C"),
        "Identity",
        type_parameters=("T",),
        parameters=(Parameter("value", "T"),),
        type="T",
    )

    assert signature_name(method) == "C.Identity<T>(T value) -> T"
    assert short_name(method) == "Identity<T>"


def test_event_and_event_accessor() -> None:
    owner = _type("C")
    event = owner.add_member(
        Symbol(name="Changed", kind=SymbolKind.EVENT, type="System.EventHandler")
    )
    adder = _method(
        owner,
        "add_Changed",
        method_kind=MethodKind.EVENT_ADD,
        type="void",
        associated_symbol=event,
    )

    assert signature_name(event) == "C.Changed -> System.EventHandler"
    assert signature_name(adder) == "C.Changed.add -> void"


def test_module_level_function_is_qualified_by_module() -> None:
    module = _namespace("pkg.mod")
    function = _method(
        module,
        "f",
        parameters=(Parameter("x", "int"), Parameter("*args")),
        type="int",
    )

    assert signature_name(function) == "pkg.mod.f(int x, *args) -> int"
    assert short_name(function) == "f"


def test_unknown_types_are_left_out() -> None:
    function = _method(_namespace("m"), "f", parameters=(Parameter("x"),))

    assert signature_name(function) == "m.f(x)"


def test_global_namespace_is_omitted_unless_requested() -> None:
    owner = _type("C", _namespace(""))
    with_global = replace(PUBLIC_API_FORMAT, omit_global_namespace=False)

    assert signature_name(owner) == "C"
    assert to_display_string(owner, with_global) == "global::C"


def test_special_type_aliases_apply_inside_type_arguments() -> None:
    rendered = render_type_reference(
        "System.Collections.Generic.Dictionary<System.String, System.Int32>",
        PUBLIC_API_FORMAT,
    )

    assert rendered == "System.Collections.Generic.Dictionary<string, int>"


def test_rendering_is_deterministic() -> None:
    method = _method(
        _type("C", _namespace("Lib")),
        "M",
        parameters=(Parameter("x", "int", default_value="1"),),
        type="void",
    )

    assert signature_name(method) == signature_name(method)
    assert short_name(method) == short_name(method)


def test_overloads_render_to_distinct_signatures() -> None:
    owner = _type("C")
    first = _method(owner, "M", parameters=(Parameter("x", "int"),), type="void")
    second = _method(
        owner, "M", parameters=(Parameter("x", "string"),), type="void"
    )

    assert signature_name(first) != signature_name(second)
    assert short_name(first) == short_name(second)

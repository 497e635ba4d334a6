"""Display formats used to render symbols to strings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, auto


class TypeQualificationStyle(Enum):
    NAME_ONLY = "name_only"
    NAME_AND_CONTAINING_TYPES = "name_and_containing_types"
    NAME_AND_CONTAINING_TYPES_AND_NAMESPACES = (
        "name_and_containing_types_and_namespaces"
    )


class PropertyStyle(Enum):
    NAME_ONLY = "name_only"
    SHOW_READ_WRITE_DESCRIPTOR = "show_read_write_descriptor"


class MemberOptions(Flag):
    NONE = 0
    INCLUDE_PARAMETERS = auto()
    INCLUDE_CONTAINING_TYPE = auto()
    INCLUDE_EXPLICIT_INTERFACE = auto()
    INCLUDE_MODIFIERS = auto()
    INCLUDE_CONSTANT_VALUE = auto()
    INCLUDE_TYPE = auto()


class ParameterOptions(Flag):
    NONE = 0
    INCLUDE_EXTENSION_THIS = auto()
    INCLUDE_PARAMS_REF_OUT = auto()
    INCLUDE_TYPE = auto()
    INCLUDE_NAME = auto()
    INCLUDE_DEFAULT_VALUE = auto()


# Framework type names rendered by their language keyword when
# ``use_special_types`` is set.
SPECIAL_TYPE_NAMES: dict[str, str] = {
    "System.Void": "void",
    "System.Object": "object",
    "System.String": "string",
    "System.Boolean": "bool",
    "System.Char": "char",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Int16": "short",
    "System.UInt16": "ushort",
    "System.Int32": "int",
    "System.UInt32": "uint",
    "System.Int64": "long",
    "System.UInt64": "ulong",
    "System.Single": "float",
    "System.Double": "double",
    "System.Decimal": "decimal",
    "builtins.object": "object",
    "builtins.str": "str",
    "builtins.bytes": "bytes",
    "builtins.bool": "bool",
    "builtins.int": "int",
    "builtins.float": "float",
    "builtins.complex": "complex",
    "builtins.list": "list",
    "builtins.dict": "dict",
    "builtins.set": "set",
    "builtins.tuple": "tuple",
    "NoneType": "None",
}


@dataclass(frozen=True)
class DisplayFormat:
    omit_global_namespace: bool = True
    type_qualification: TypeQualificationStyle = TypeQualificationStyle.NAME_ONLY
    property_style: PropertyStyle = PropertyStyle.NAME_ONLY
    include_type_parameters: bool = True
    member_options: MemberOptions = MemberOptions.NONE
    parameter_options: ParameterOptions = ParameterOptions.NONE
    use_special_types: bool = False


SHORT_NAME_FORMAT = DisplayFormat(
    omit_global_namespace=True,
    type_qualification=TypeQualificationStyle.NAME_ONLY,
    property_style=PropertyStyle.NAME_ONLY,
    include_type_parameters=True,
    member_options=MemberOptions.NONE,
    parameter_options=ParameterOptions.NONE,
    use_special_types=False,
)

PUBLIC_API_FORMAT = DisplayFormat(
    omit_global_namespace=True,
    type_qualification=TypeQualificationStyle.NAME_AND_CONTAINING_TYPES_AND_NAMESPACES,
    property_style=PropertyStyle.SHOW_READ_WRITE_DESCRIPTOR,
    include_type_parameters=True,
    member_options=(
        MemberOptions.INCLUDE_PARAMETERS
        | MemberOptions.INCLUDE_CONTAINING_TYPE
        | MemberOptions.INCLUDE_EXPLICIT_INTERFACE
        | MemberOptions.INCLUDE_MODIFIERS
        | MemberOptions.INCLUDE_CONSTANT_VALUE
        | MemberOptions.INCLUDE_TYPE
    ),
    parameter_options=(
        ParameterOptions.INCLUDE_EXTENSION_THIS
        | ParameterOptions.INCLUDE_PARAMS_REF_OUT
        | ParameterOptions.INCLUDE_TYPE
        | ParameterOptions.INCLUDE_NAME
        | ParameterOptions.INCLUDE_DEFAULT_VALUE
    ),
    use_special_types=True,
)


__all__ = [
    "DisplayFormat",
    "MemberOptions",
    "PUBLIC_API_FORMAT",
    "ParameterOptions",
    "PropertyStyle",
    "SHORT_NAME_FORMAT",
    "SPECIAL_TYPE_NAMES",
    "TypeQualificationStyle",
]

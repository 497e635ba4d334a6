"""Declared public API contract: the baseline store and its diagnostics."""

from contract.baseline import (
    PUBLIC_API_FILE_NAME,
    AdditionalFileError,
    AdditionalText,
    BaselineText,
    find_public_api_file,
    load_declared,
    locate,
    read_additional_files,
)
from contract.diagnostics import (
    DECLARE_NEW_API_RULE,
    REMOVE_DELETED_API_RULE,
    SUPPORTED_DIAGNOSTICS,
    Diagnostic,
    DiagnosticBag,
    DiagnosticDescriptor,
    DiagnosticSeverity,
)

__all__ = [
    "DECLARE_NEW_API_RULE",
    "PUBLIC_API_FILE_NAME",
    "REMOVE_DELETED_API_RULE",
    "SUPPORTED_DIAGNOSTICS",
    "AdditionalFileError",
    "AdditionalText",
    "BaselineText",
    "Diagnostic",
    "DiagnosticBag",
    "DiagnosticDescriptor",
    "DiagnosticSeverity",
    "find_public_api_file",
    "load_declared",
    "locate",
    "read_additional_files",
]

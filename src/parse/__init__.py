"""Parsing utilities for publicapi-core."""

from parse.treesitter_symbols import (
    build_symbol_graph,
    extract_symbols_treesitter,
    module_name_for,
)

__all__ = ["build_symbol_graph", "extract_symbols_treesitter", "module_name_for"]

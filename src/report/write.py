"""Render diagnostics as text lines or JSONL records.

Writers keep the order they are given; ``run_analysis`` already returns
diagnostics sorted by location.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import orjson

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contract.diagnostics import Diagnostic


def write_text(stream: TextIO, diagnostics: Sequence[Diagnostic]) -> None:
    """Write one ``path:line:col: severity id: message`` line per diagnostic."""
    for diagnostic in diagnostics:
        stream.write(diagnostic.display() + "\n")


def write_jsonl(stream: TextIO, diagnostics: Sequence[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        payload = diagnostic.model_dump(mode="json")
        stream.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode())
        stream.write("\n")

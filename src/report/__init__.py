"""Diagnostic report writers."""

from report.write import write_jsonl, write_text

__all__ = ["write_jsonl", "write_text"]

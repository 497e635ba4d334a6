"""Source location models shared by symbols and diagnostics."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TextSpan(BaseModel):
    """Half-open character range ``[start, end)`` inside a text."""

    model_config = ConfigDict(frozen=True)

    start: int = 0
    end: int = 0

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end == self.start


class LinePositionSpan(BaseModel):
    """Zero-based line/character positions of a span."""

    model_config = ConfigDict(frozen=True)

    start_line: int = 0
    start_character: int = 0
    end_line: int = 0
    end_character: int = 0


class Location(BaseModel):
    """A span inside a named file.

    ``Location.degenerate(path)`` still names the file but carries an empty
    span at offset zero; it is used when the exact text cannot be found.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    span: TextSpan = TextSpan()
    line_span: LinePositionSpan = LinePositionSpan()

    @classmethod
    def degenerate(cls, path: str) -> Location:
        return cls(path=path)

    @property
    def is_degenerate(self) -> bool:
        return self.span.is_empty and self.span.start == 0

    def display(self) -> str:
        """Render as ``path:line:col`` with one-based line and column."""
        return (
            f"{self.path}:{self.line_span.start_line + 1}"
            f":{self.line_span.start_character + 1}"
        )


__all__ = ["LinePositionSpan", "Location", "TextSpan"]

"""Baseline store for the declared public API.

The baseline is a plain text file (``PublicAPI.txt``) holding one signature
name per line. Blank lines are ignored; there is no other syntax.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from symbols.location import LinePositionSpan, Location, TextSpan

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

PUBLIC_API_FILE_NAME = "PublicAPI.txt"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TextLine:
    """One line of text; ``end`` excludes the line break."""

    number: int
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class AdditionalText:
    """A non-source input offered to an analysis session."""

    path: str
    text: str

    @property
    def file_name(self) -> str:
        return self.path.replace("\\", "/").rsplit("/", 1)[-1]


def iter_lines(text: str) -> Iterator[TextLine]:
    start = 0
    number = 0
    for match in _LINE_BREAK.finditer(text):
        yield TextLine(number, start, match.start(), text[start : match.start()])
        start = match.end()
        number += 1
    yield TextLine(number, start, len(text), text[start:])


def load_declared(text: str) -> frozenset[str]:
    """Return the set of non-blank, trimmed lines of ``text``."""
    declared: set[str] = set()
    for line in iter_lines(text):
        stripped = line.text.strip()
        if stripped:
            declared.add(stripped)
    return frozenset(declared)


def locate(text: str, signature: str) -> TextSpan | None:
    """Return the span of the first line whose trimmed content is ``signature``."""
    for line in iter_lines(text):
        stripped = line.text.strip()
        if stripped and stripped == signature:
            offset = line.start + line.text.index(stripped)
            return TextSpan(start=offset, end=offset + len(stripped))
    return None


@dataclass
class BaselineText:
    """The loaded baseline artifact of one session."""

    path: str
    text: str
    _line_starts: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._line_starts = [line.start for line in iter_lines(self.text)]

    @classmethod
    def from_additional_text(cls, additional: AdditionalText) -> BaselineText:
        return cls(path=additional.path, text=additional.text)

    def declared(self) -> frozenset[str]:
        return load_declared(self.text)

    def locate(self, signature: str) -> TextSpan | None:
        return locate(self.text, signature)

    def line_position_span(self, span: TextSpan) -> LinePositionSpan:
        start_line, start_character = self._position(span.start)
        end_line, end_character = self._position(span.end)
        return LinePositionSpan(
            start_line=start_line,
            start_character=start_character,
            end_line=end_line,
            end_character=end_character,
        )

    def location_of(self, signature: str) -> Location:
        """Locate ``signature``, falling back to a degenerate location."""
        span = self.locate(signature)
        if span is None:
            logger.debug("Could not locate %r in %s", signature, self.path)
            return Location.degenerate(self.path)
        return Location(
            path=self.path, span=span, line_span=self.line_position_span(span)
        )

    def _position(self, offset: int) -> tuple[int, int]:
        line = bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]


class AdditionalFileError(Exception):
    """Raised when an additional file exists but cannot be read as UTF-8 text."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def is_public_api_file_name(name: str) -> bool:
    return name.casefold() == PUBLIC_API_FILE_NAME.casefold()


def find_public_api_file(
    additional_files: Iterable[AdditionalText],
) -> AdditionalText | None:
    """Return the first additional file named ``PublicAPI.txt``, ignoring case."""
    for additional in additional_files:
        if is_public_api_file_name(additional.file_name):
            return additional
    return None


def read_additional_files(paths: Iterable[Path]) -> list[AdditionalText]:
    """Read UTF-8 additional files, skipping paths that do not exist."""
    files: list[AdditionalText] = []
    for path in paths:
        if not path.is_file():
            logger.debug("Additional file %s does not exist; skipping", path)
            continue
        try:
            text = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            msg = f"Not valid UTF-8 text: {exc}."
            raise AdditionalFileError(path, msg) from exc
        except OSError as exc:
            raise AdditionalFileError(path, f"Failed to read file: {exc}.") from exc
        files.append(AdditionalText(path=str(path), text=text))
    return files


__all__ = [
    "AdditionalFileError",
    "AdditionalText",
    "BaselineText",
    "PUBLIC_API_FILE_NAME",
    "TextLine",
    "find_public_api_file",
    "is_public_api_file_name",
    "iter_lines",
    "load_declared",
    "locate",
    "read_additional_files",
]

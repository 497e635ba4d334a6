from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contract.baseline import (
    AdditionalFileError,
    AdditionalText,
    BaselineText,
    find_public_api_file,
    iter_lines,
    load_declared,
    locate,
    read_additional_files,
)
from symbols.location import LinePositionSpan, TextSpan

if TYPE_CHECKING:
    from pathlib import Path


def test_load_declared_trims_and_skips_blank_lines() -> None:
    text = "C\r\n\r\n  C.M() -> void  \n\t\nC.M() -> void\rC.N() -> int"

    assert load_declared(text) == frozenset({"C", "C.M() -> void", "C.N() -> int"})


def test_load_declared_of_empty_text_is_empty() -> None:
    assert load_declared("") == frozenset()
    assert load_declared("\n\n   \n") == frozenset()


def test_iter_lines_handles_every_line_break_style() -> None:
    lines = list(iter_lines("a\r\nb\rc\nd"))

    assert [line.text for line in lines] == ["a", "b", "c", "d"]
    assert [line.start for line in lines] == [0, 3, 5, 7]
    assert [line.number for line in lines] == [0, 1, 2, 3]


def test_locate_returns_span_of_trimmed_content() -> None:
    text = "C\n   C.M() -> void \n"

    assert locate(text, "C.M() -> void") == TextSpan(start=5, end=18)


def test_locate_returns_first_match() -> None:
    text = "C\nC\n"

    assert locate(text, "C") == TextSpan(start=0, end=1)


def test_locate_missing_signature_returns_none() -> None:
    assert locate("C\n", "D") is None
    assert locate("CD\n", "C") is None


def test_baseline_location_of_reports_line_positions() -> None:
    baseline = BaselineText(path="PublicAPI.txt", text="A\r\nB -> int\n")

    location = baseline.location_of("B -> int")

    assert location.path == "PublicAPI.txt"
    assert location.span == TextSpan(start=3, end=11)
    assert location.line_span == LinePositionSpan(
        start_line=1, start_character=0, end_line=1, end_character=8
    )
    assert location.display() == "PublicAPI.txt:2:1"
    assert not location.is_degenerate


def test_baseline_location_of_unknown_signature_is_degenerate() -> None:
    baseline = BaselineText(path="PublicAPI.txt", text="A\n")

    location = baseline.location_of("B")

    assert location.path == "PublicAPI.txt"
    assert location.is_degenerate
    assert location.span.length == 0


def test_baseline_declared_matches_load_declared() -> None:
    text = "B\nA\n\nA\n"
    additional = AdditionalText("x/PublicAPI.txt", text)
    baseline = BaselineText.from_additional_text(additional)

    assert baseline.path == "x/PublicAPI.txt"
    assert baseline.declared() == load_declared(text)


def test_find_public_api_file_ignores_case_and_directories() -> None:
    files = [
        AdditionalText("docs/notes.txt", ""),
        AdditionalText("C:\\repo\\publicapi.TXT", "C"),
        AdditionalText("PublicAPI.txt", "D"),
    ]

    found = find_public_api_file(files)

    assert found is not None
    assert found.text == "C"


def test_find_public_api_file_requires_exact_name() -> None:
    files = [
        AdditionalText("PublicAPI.txt.bak", ""),
        AdditionalText("Unshipped.PublicAPI.txt", ""),
    ]

    assert find_public_api_file(files) is None
    assert find_public_api_file([]) is None


def test_read_additional_files_strips_bom_and_skips_missing(tmp_path: Path) -> None:
    baseline = tmp_path / "PublicAPI.txt"
    baseline.write_bytes("\ufeffC\nC.M() -> void\n".encode())

    files = read_additional_files([baseline, tmp_path / "missing.txt"])

    assert len(files) == 1
    assert files[0].path == str(baseline)
    assert files[0].text == "C\nC.M() -> void\n"


def test_read_additional_files_rejects_invalid_utf8(tmp_path: Path) -> None:
    baseline = tmp_path / "PublicAPI.txt"
    baseline.write_bytes(b"C\n\xff\xfe\n")

    with pytest.raises(AdditionalFileError, match="Not valid UTF-8 text") as excinfo:
        read_additional_files([baseline])

    assert excinfo.value.path == baseline

from __future__ import annotations

import pytest

from contract.baseline import AdditionalText
from contract.diagnostics import DiagnosticBag
from reconcile.analyzer import PublicApiAnalyzer, PublicApiSession, api_signature
from reconcile.cancellation import CancellationToken
from reconcile.driver import collect_public_api, run_analysis
from reconcile.errors import AnalysisCancelledError, SessionStateError
from symbols.location import LinePositionSpan, Location, TextSpan
from symbols.model import Accessibility, MethodKind, Symbol, SymbolKind


def _loc(path: str, line: int = 0, character: int = 0) -> Location:
    return Location(
        path=path,
        span=TextSpan(start=line * 100 + character, end=line * 100 + character + 1),
        line_span=LinePositionSpan(
            start_line=line,
            start_character=character,
            end_line=line,
            end_character=character + 1,
        ),
    )


def _type(name: str, *locations: Location) -> Symbol:
    return Symbol(name=name, kind=SymbolKind.NAMED_TYPE, locations=list(locations))


def _method(
    container: Symbol, name: str, *locations: Location, **kwargs: object
) -> Symbol:
    return container.add_member(
        Symbol(
            name=name,
            kind=SymbolKind.METHOD,
            locations=list(locations),
            **kwargs,  # type: ignore[arg-type]
        )
    )


def _baseline(text: str, path: str = "PublicAPI.txt") -> list[AdditionalText]:
    return [AdditionalText(path, text)]


def _session(text: str) -> tuple[PublicApiSession, DiagnosticBag]:
    bag = DiagnosticBag()
    session = PublicApiAnalyzer().start_session(_baseline(text), bag)
    assert session is not None
    return session, bag


def test_declared_method_produces_no_diagnostics() -> None:
    owner = _type("C", _loc("C.cs"))
    _method(owner, "M", _loc("C.cs", 2), type="void")

    result = run_analysis([owner], _baseline("C\nC.M() -> void\n"))

    assert result.ran
    assert result.ok
    assert result.examined == frozenset({"C", "C.M() -> void"})


def test_new_public_type_against_empty_baseline() -> None:
    owner = _type("C", _loc("C.cs", 3, 13))

    result = run_analysis([owner], _baseline(""))

    assert len(result.diagnostics) == 1
    diagnostic = result.diagnostics[0]
    assert diagnostic.rule_id == "RS0016"
    assert diagnostic.kind == "NewApi"
    assert diagnostic.symbol == "C"
    assert diagnostic.message == "Symbol 'C' is not part of the declared API."
    assert diagnostic.location == _loc("C.cs", 3, 13)


def test_removed_member_is_reported_at_its_baseline_line() -> None:
    owner = _type("C", _loc("C.cs"))
    text = "C\nC.Old() -> void\n"

    result = run_analysis([owner], _baseline(text))

    assert result.new_api == ()
    assert len(result.deleted_api) == 1
    diagnostic = result.deleted_api[0]
    assert diagnostic.rule_id == "RS0017"
    assert diagnostic.symbol == "C.Old() -> void"
    assert diagnostic.message == (
        "Symbol 'C.Old() -> void' is part of the declared API, "
        "but is either not public or could not be found"
    )
    assert diagnostic.location.path == "PublicAPI.txt"
    assert diagnostic.location.span == TextSpan(start=2, end=17)
    assert diagnostic.location.line_span.start_line == 1


def test_new_member_is_reported_once_per_location() -> None:
    owner = _type("C", _loc("a.cs"), _loc("b.cs"))
    _method(owner, "M", _loc("a.cs", 4), _loc("b.cs", 9), type="void")

    result = run_analysis([owner], _baseline("C\n"))

    assert [item.symbol for item in result.diagnostics] == ["M", "M"]
    assert {item.location.path for item in result.diagnostics} == {"a.cs", "b.cs"}
    assert {item.message for item in result.diagnostics} == {
        "Symbol 'M' is not part of the declared API."
    }


def test_event_is_reported_without_its_accessors() -> None:
    owner = _type("C", _loc("C.cs"))
    event = owner.add_member(
        Symbol(
            name="E",
            kind=SymbolKind.EVENT,
            type="System.EventHandler",
            locations=[_loc("C.cs", 5)],
        )
    )
    for kind, name in (
        (MethodKind.EVENT_ADD, "add_E"),
        (MethodKind.EVENT_REMOVE, "remove_E"),
    ):
        _method(
            owner,
            name,
            _loc("C.cs", 5),
            method_kind=kind,
            associated_symbol=event,
            type="void",
        )

    result = run_analysis([owner], _baseline("C\n"))

    assert [item.symbol for item in result.diagnostics] == ["E"]
    assert result.examined == frozenset({"C", "C.E -> System.EventHandler"})


def test_surface_round_trip_is_clean() -> None:
    namespace = Symbol(name="Lib", kind=SymbolKind.NAMESPACE)
    owner = namespace.add_member(_type("Widget", _loc("w.cs")))
    _method(owner, "Show", _loc("w.cs", 1), type="void")
    _method(
        owner, "Hide", _loc("w.cs", 2), accessibility=Accessibility.PRIVATE
    )
    prop = owner.add_member(
        Symbol(
            name="Size",
            kind=SymbolKind.PROPERTY,
            type="int",
            has_getter=True,
            locations=[_loc("w.cs", 3)],
        )
    )
    _method(
        owner,
        "get_Size",
        _loc("w.cs", 3),
        method_kind=MethodKind.PROPERTY_GET,
        associated_symbol=prop,
        type="int",
    )

    surface = collect_public_api([namespace])
    result = run_analysis([namespace], _baseline("\n".join(surface)))

    assert surface == [
        "Lib.Widget",
        "Lib.Widget.Show() -> void",
        "Lib.Widget.Size.get -> int",
    ]
    assert result.ok


def test_no_public_api_file_means_no_session() -> None:
    bag = DiagnosticBag()
    files = [AdditionalText("notes.txt", "C\n")]

    assert PublicApiAnalyzer().start_session(files, bag) is None
    assert PublicApiAnalyzer().start_session([], bag) is None

    result = run_analysis([_type("C", _loc("C.cs"))], files)
    assert not result.ran
    assert result.ok


def test_baseline_file_name_is_case_insensitive() -> None:
    result = run_analysis(
        [_type("C", _loc("C.cs"))],
        _baseline("C\n", path="src/publicapi.TXT"),
    )

    assert result.ran
    assert result.ok


def test_public_symbol_without_locations_is_examined_but_not_reported() -> None:
    session, bag = _session("")

    session.observe(_type("Generated"))
    session.finish()

    assert session.examined() == frozenset({"Generated"})
    assert len(bag) == 0


def test_non_public_and_namespace_symbols_are_ignored() -> None:
    namespace = Symbol(name="Lib", kind=SymbolKind.NAMESPACE, locations=[_loc("x")])
    hidden = namespace.add_member(
        Symbol(
            name="Hidden",
            kind=SymbolKind.NAMED_TYPE,
            accessibility=Accessibility.INTERNAL,
            locations=[_loc("x")],
        )
    )

    assert api_signature(namespace) is None
    assert api_signature(hidden) is None

    result = run_analysis([namespace], _baseline(""))
    assert result.ok
    assert result.examined == frozenset()


def test_duplicate_baseline_lines_report_one_deletion() -> None:
    result = run_analysis([], _baseline("C.Gone() -> void\nC.Gone() -> void\n"))

    assert [item.symbol for item in result.diagnostics] == ["C.Gone() -> void"]
    assert result.diagnostics[0].location.line_span.start_line == 0


def test_deleted_entries_are_reported_in_sorted_order() -> None:
    session, bag = _session("Zeta\nAlpha\nMid\n")

    session.finish()

    assert [item.symbol for item in bag.diagnostics] == ["Alpha", "Mid", "Zeta"]


def test_finish_twice_is_rejected() -> None:
    session, bag = _session("Gone\n")
    session.finish()

    with pytest.raises(SessionStateError):
        session.finish()
    assert len(bag) == 1


def test_observe_after_finish_is_rejected() -> None:
    session, _ = _session("")
    session.finish()

    with pytest.raises(SessionStateError):
        session.observe(_type("C", _loc("C.cs")))


def test_cancelled_session_stops_observing() -> None:
    token = CancellationToken()
    bag = DiagnosticBag()
    session = PublicApiAnalyzer().start_session(
        _baseline(""), bag, cancellation=token
    )
    assert session is not None

    session.observe(_type("A", _loc("a.cs")))
    token.cancel()

    assert token.is_cancelled
    with pytest.raises(AnalysisCancelledError):
        session.observe(_type("B", _loc("b.cs")))
    with pytest.raises(AnalysisCancelledError):
        session.finish()
    assert [item.symbol for item in bag.diagnostics] == ["A"]


def test_cancelled_run_raises_from_worker_threads() -> None:
    token = CancellationToken()
    token.cancel()
    roots = [_type(f"T{index}", _loc("t.cs", index)) for index in range(20)]

    with pytest.raises(AnalysisCancelledError):
        run_analysis(roots, _baseline(""), jobs=4, cancellation=token)


def test_diagnostics_are_sorted_by_location() -> None:
    roots = [_type("B", _loc("b.cs", 1)), _type("A", _loc("a.cs", 7))]

    result = run_analysis(roots, _baseline("Stale\n"))

    assert [item.location.path for item in result.diagnostics] == [
        "PublicAPI.txt",
        "a.cs",
        "b.cs",
    ]


def test_supported_diagnostics_are_exposed() -> None:
    ids = [rule.id for rule in PublicApiAnalyzer.supported_diagnostics]

    assert ids == ["RS0016", "RS0017"]

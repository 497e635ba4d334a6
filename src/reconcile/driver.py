"""Host-side driver that runs a full session over a symbol graph."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contract.diagnostics import Diagnostic, DiagnosticBag
from reconcile.analyzer import PublicApiAnalyzer, api_signature

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from contract.baseline import AdditionalText
    from reconcile.cancellation import CancellationToken
    from symbols.model import Symbol


@dataclass(frozen=True)
class AnalysisResult:
    ran: bool
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    examined: frozenset[str] = frozenset()

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def new_api(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.kind == "NewApi")

    @property
    def deleted_api(self) -> tuple[Diagnostic, ...]:
        return tuple(item for item in self.diagnostics if item.kind == "DeletedApi")


def iter_symbols(roots: Iterable[Symbol]) -> Iterator[Symbol]:
    for root in roots:
        yield from root.walk()


def run_analysis(
    roots: Iterable[Symbol],
    additional_files: Iterable[AdditionalText],
    *,
    jobs: int = 1,
    cancellation: CancellationToken | None = None,
) -> AnalysisResult:
    """Observe every symbol under ``roots`` and finish the session.

    With ``jobs > 1`` observation runs on a thread pool; ``finish`` runs only
    after every observation has completed.
    """
    bag = DiagnosticBag()
    session = PublicApiAnalyzer().start_session(
        additional_files, bag, cancellation=cancellation
    )
    if session is None:
        return AnalysisResult(ran=False)

    symbols = list(iter_symbols(roots))
    if jobs <= 1:
        for symbol in symbols:
            session.observe(symbol)
    else:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = [executor.submit(session.observe, symbol) for symbol in symbols]
            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    session.finish()
    return AnalysisResult(
        ran=True,
        diagnostics=tuple(bag.sorted_diagnostics()),
        examined=session.examined(),
    )


def collect_public_api(roots: Iterable[Symbol]) -> list[str]:
    """Return the sorted signature names of every public API symbol."""
    signatures: set[str] = set()
    for symbol in iter_symbols(roots):
        signature = api_signature(symbol)
        if signature is not None:
            signatures.add(signature)
    return sorted(signatures)


__all__ = ["AnalysisResult", "collect_public_api", "iter_symbols", "run_analysis"]

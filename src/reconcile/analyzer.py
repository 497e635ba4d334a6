"""Reconcile discovered public symbols against the declared baseline.

A host drives one :class:`PublicApiSession` per compilation unit:

1. ``PublicApiAnalyzer.start_session`` picks ``PublicAPI.txt`` out of the
   additional files (no file, no session).
2. ``PublicApiSession.observe`` is called once per discovered symbol, from
   any number of threads, in any order.
3. ``PublicApiSession.finish`` is called exactly once after every
   ``observe`` call has returned.

NewApi diagnostics are reported during (2); DeletedApi diagnostics during (3).
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from contract.baseline import BaselineText, find_public_api_file
from contract.diagnostics import (
    DECLARE_NEW_API_RULE,
    REMOVE_DELETED_API_RULE,
    SUPPORTED_DIAGNOSTICS,
)
from naming.render import short_name, signature_name
from reconcile.errors import SessionStateError
from rules.visibility import is_public_api
from symbols.model import SymbolKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.baseline import AdditionalText
    from contract.diagnostics import DiagnosticReporter
    from reconcile.cancellation import CancellationToken
    from symbols.model import Symbol

logger = logging.getLogger(__name__)

OBSERVED_KINDS = frozenset(
    {SymbolKind.NAMED_TYPE, SymbolKind.EVENT, SymbolKind.FIELD, SymbolKind.METHOD}
)


def api_signature(symbol: Symbol) -> str | None:
    """Return the signature name of ``symbol`` if it is declared public API."""
    if symbol.kind not in OBSERVED_KINDS:
        return None
    if symbol.is_event_accessor:
        return None
    if not is_public_api(symbol):
        return None
    return signature_name(symbol)


class PublicApiSession:
    """State of one analysis pass: the declared and examined signature sets."""

    def __init__(
        self,
        baseline: BaselineText,
        reporter: DiagnosticReporter,
        *,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._baseline = baseline
        self._declared = baseline.declared()
        self._reporter = reporter
        self._cancellation = cancellation
        self._lock = threading.Lock()
        self._examined: set[str] = set()
        self._finished = False
        self._new_api_count = 0

    @property
    def baseline(self) -> BaselineText:
        return self._baseline

    @property
    def declared(self) -> frozenset[str]:
        return self._declared

    def examined(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._examined)

    def observe(self, symbol: Symbol) -> None:
        """Record ``symbol`` and report it if it is public but undeclared."""
        if self._cancellation is not None:
            self._cancellation.raise_if_cancelled()

        signature = api_signature(symbol)
        if signature is None:
            return

        with self._lock:
            if self._finished:
                msg = f"Cannot observe {signature!r}: session already finished"
                raise SessionStateError(msg)

            self._examined.add(signature)
            if signature in self._declared:
                return

            display_name = short_name(symbol)
            for location in symbol.locations:
                self._reporter.report(
                    DECLARE_NEW_API_RULE.create(location, display_name)
                )
                self._new_api_count += 1

    def finish(self) -> None:
        """Report every declared signature that was never observed."""
        if self._cancellation is not None:
            self._cancellation.raise_if_cancelled()

        with self._lock:
            if self._finished:
                msg = "Session already finished"
                raise SessionStateError(msg)
            self._finished = True
            deleted = sorted(self._declared - self._examined)
            examined_count = len(self._examined)
            new_api_count = self._new_api_count

        for signature in deleted:
            location = self._baseline.location_of(signature)
            self._reporter.report(REMOVE_DELETED_API_RULE.create(location, signature))

        logger.info(
            "Public API session for %s: %d declared, %d examined, "
            "%d new API diagnostics, %d deleted API diagnostics",
            self._baseline.path,
            len(self._declared),
            examined_count,
            new_api_count,
            len(deleted),
        )


class PublicApiAnalyzer:
    """Entry point that opens sessions for compilation units with a baseline."""

    supported_diagnostics = SUPPORTED_DIAGNOSTICS

    def start_session(
        self,
        additional_files: Iterable[AdditionalText],
        reporter: DiagnosticReporter,
        *,
        cancellation: CancellationToken | None = None,
    ) -> PublicApiSession | None:
        additional = find_public_api_file(additional_files)
        if additional is None:
            logger.info("No PublicAPI.txt among additional files; skipping")
            return None

        baseline = BaselineText.from_additional_text(additional)
        session = PublicApiSession(baseline, reporter, cancellation=cancellation)
        logger.debug(
            "Loaded %d declared signatures from %s",
            len(session.declared),
            baseline.path,
        )
        return session


__all__ = [
    "OBSERVED_KINDS",
    "PublicApiAnalyzer",
    "PublicApiSession",
    "api_signature",
]

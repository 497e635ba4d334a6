"""Cooperative cancellation shared between a host and its sessions."""

from __future__ import annotations

import threading

from reconcile.errors import AnalysisCancelledError


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            msg = "Public API analysis was cancelled"
            raise AnalysisCancelledError(msg)


__all__ = ["CancellationToken"]

"""Exceptions raised by analysis sessions."""


class AnalysisCancelledError(Exception):
    """Raised when the host cancels a session between observations."""


class SessionStateError(Exception):
    """Raised when a session is driven out of order (e.g. observe after finish)."""

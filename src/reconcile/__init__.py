"""Public API reconciliation sessions."""

from reconcile.analyzer import PublicApiAnalyzer, PublicApiSession, api_signature
from reconcile.cancellation import CancellationToken
from reconcile.driver import AnalysisResult, collect_public_api, run_analysis
from reconcile.errors import AnalysisCancelledError, SessionStateError

__all__ = [
    "AnalysisCancelledError",
    "AnalysisResult",
    "CancellationToken",
    "PublicApiAnalyzer",
    "PublicApiSession",
    "SessionStateError",
    "api_signature",
    "collect_public_api",
    "run_analysis",
]

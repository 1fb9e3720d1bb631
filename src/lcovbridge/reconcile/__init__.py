"""Coverage reconciliation: LCOV records to workspace files, summaries and detail.

Usage:
    from lcovbridge.reconcile import ReconciliationSession

    session = ReconciliationSession(workspace_root)
    result = session.load(parse_lcov(report_path))
    for handle in result.handles:
        items = session.load_detailed_coverage(handle)
"""

from lcovbridge.reconcile.aggregate import EMPTY_TOTALS, CoverageTotals, aggregate
from lcovbridge.reconcile.details import (
    LINE_END,
    BranchMark,
    Declaration,
    DetailItem,
    LineRange,
    Position,
    Statement,
    synthesize,
)
from lcovbridge.reconcile.existence import ExistenceCache
from lcovbridge.reconcile.resolver import FileIdentity, PathResolver, resolve_path
from lcovbridge.reconcile.session import (
    CancelSignal,
    LoadResult,
    ReconciliationSession,
    ResolutionStep,
    SessionState,
)
from lcovbridge.reconcile.store import Ratio, RecordStore, SummaryHandle

__all__ = [
    # Aggregate
    "EMPTY_TOTALS",
    "CoverageTotals",
    "aggregate",
    # Details
    "LINE_END",
    "BranchMark",
    "Declaration",
    "DetailItem",
    "LineRange",
    "Position",
    "Statement",
    "synthesize",
    # Resolution
    "ExistenceCache",
    "FileIdentity",
    "PathResolver",
    "resolve_path",
    # Store
    "Ratio",
    "RecordStore",
    "SummaryHandle",
    # Session
    "CancelSignal",
    "LoadResult",
    "ReconciliationSession",
    "ResolutionStep",
    "SessionState",
]

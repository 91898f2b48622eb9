"""Services for reconciliation."""

from .assignment import DrivingSide, GreedyAssigner, assign_matches
from .batching import BatchScheduler, MatchingProgress
from .reconcile import ReconciliationOrchestrator, ReconciliationResult
from .reporting import (
    MatchStatistics,
    category_breakdown,
    match_statistics,
    unmatched_bookings,
    unmatched_expenses,
)

__all__ = [
    "DrivingSide",
    "GreedyAssigner",
    "assign_matches",
    "BatchScheduler",
    "MatchingProgress",
    "ReconciliationOrchestrator",
    "ReconciliationResult",
    "MatchStatistics",
    "match_statistics",
    "unmatched_bookings",
    "unmatched_expenses",
    "category_breakdown",
]

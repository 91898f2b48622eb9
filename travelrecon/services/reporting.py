"""Derived views over a set of accepted matches."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import asdict, dataclass

from travelrecon.models import BookingCategory, BookingRecord, ExpenseRecord
from travelrecon.services.assignment import booking_key, expense_key
from travelrecon.services.matching import ConfidenceBand, ConfidenceScorer, MatchResult
from travelrecon.services.matching.classification import resolve_category


@dataclass
class MatchStatistics:
    """Aggregate counts for a reconciliation run."""

    total_bookings: int
    total_expenses: int
    total_matches: int
    match_rate: float
    high_confidence: int
    medium_confidence: int
    low_confidence: int
    unmatched_bookings: int
    unmatched_expenses: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


def unmatched_bookings(
    bookings: Sequence[BookingRecord],
    matches: Sequence[MatchResult],
    booking_ids: Sequence[str] | None = None,
) -> list[BookingRecord]:
    """Bookings whose id never appears in the matches."""
    if booking_ids is None:
        booking_ids = [booking_key(b, i) for i, b in enumerate(bookings)]
    matched = {m.booking_id for m in matches}
    return [b for key, b in zip(booking_ids, bookings) if key not in matched]


def unmatched_expenses(
    expenses: Sequence[ExpenseRecord],
    matches: Sequence[MatchResult],
) -> list[ExpenseRecord]:
    """Expenses whose id never appears in the matches."""
    matched = {m.expense_id for m in matches}
    return [e for i, e in enumerate(expenses) if expense_key(e, i) not in matched]


def match_statistics(
    bookings: Sequence[BookingRecord],
    expenses: Sequence[ExpenseRecord],
    matches: Sequence[MatchResult],
    booking_ids: Sequence[str] | None = None,
) -> MatchStatistics:
    """Count matches by confidence band and the records left over."""
    scorer = ConfidenceScorer()
    bands = Counter(scorer.get_band(m.confidence) for m in matches)

    return MatchStatistics(
        total_bookings=len(bookings),
        total_expenses=len(expenses),
        total_matches=len(matches),
        match_rate=round(len(matches) / max(len(expenses), 1) * 100, 1),
        high_confidence=bands[ConfidenceBand.HIGH],
        medium_confidence=bands[ConfidenceBand.MEDIUM],
        low_confidence=bands[ConfidenceBand.LOW],
        unmatched_bookings=len(unmatched_bookings(bookings, matches, booking_ids)),
        unmatched_expenses=len(unmatched_expenses(expenses, matches)),
    )


def category_breakdown(bookings: Sequence[BookingRecord]) -> dict[BookingCategory, int]:
    """Booking counts per resolved category."""
    counts = Counter(resolve_category(b) for b in bookings)
    return {category: counts[category] for category in BookingCategory}

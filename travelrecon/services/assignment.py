"""Greedy at-most-one assignment of expenses to bookings."""

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal
from enum import Enum

from travelrecon.models import BookingRecord, ExpenseRecord, present
from travelrecon.services.matching import MatchCandidate, MatchResult, ScoringStrategy

logger = logging.getLogger(__name__)


class DrivingSide(str, Enum):
    """Side iterated by the greedy assignment."""

    EXPENSE = "expense"
    BOOKING = "booking"


def booking_key(booking: BookingRecord, index: int) -> str:
    """Booking id, or a positional fallback when the record has none."""
    return present(booking.id) or f"booking-{index}"


def expense_key(expense: ExpenseRecord, index: int) -> str:
    """Expense id, or a positional fallback when the record has none."""
    return present(expense.id) or f"expense-{index}"


def fallback_identifiers(
    bookings: Sequence[BookingRecord],
    expenses: Sequence[ExpenseRecord],
    booking_ids: Sequence[str] | None = None,
) -> list[str]:
    """Positional identifiers given to records that arrived without an id.

    Pass ``booking_ids`` when the bookings are a filtered view keyed by their
    position in a larger input.
    """
    if booking_ids is None:
        booking_ids = [booking_key(b, i) for i, b in enumerate(bookings)]
    fallbacks = [key for key, b in zip(booking_ids, bookings) if not present(b.id)]
    fallbacks += [expense_key(e, i) for i, e in enumerate(expenses) if not present(e.id)]
    if fallbacks:
        logger.warning(f"{len(fallbacks)} records have no id, using positional identifiers")
    return fallbacks


def validate_threshold(minimum_confidence: Decimal | float) -> Decimal:
    """Check a minimum confidence lies in [0, 1]."""
    threshold = Decimal(str(minimum_confidence))
    if not Decimal("0") <= threshold <= Decimal("1"):
        raise ValueError(f"minimum_confidence must be between 0-1, got {minimum_confidence}")
    return threshold


class GreedyAssigner:
    """Incremental greedy matcher holding the consumed sets of one run.

    Each driving record is scored against every unconsumed record on the
    other side. The strictly highest score wins, so on ties the first
    candidate in input order is kept. A winner at or above the threshold
    consumes both records.
    """

    def __init__(
        self,
        bookings: Sequence[BookingRecord],
        strategy: ScoringStrategy,
        minimum_confidence: Decimal | float,
        booking_ids: Sequence[str] | None = None,
    ):
        self.bookings = list(bookings)
        if booking_ids is None:
            booking_ids = [booking_key(b, i) for i, b in enumerate(self.bookings)]
        self.booking_ids = list(booking_ids)
        self.strategy = strategy
        self.minimum_confidence = validate_threshold(minimum_confidence)
        self.consumed_bookings: set[str] = set()
        self.consumed_expenses: set[str] = set()
        self.matches: list[MatchResult] = []

    def _score(
        self,
        booking: BookingRecord,
        booking_id: str,
        expense: ExpenseRecord,
        expense_id: str,
    ) -> MatchCandidate:
        result = self.strategy.score(booking, expense)
        return MatchCandidate(
            booking_id=booking_id,
            expense_id=expense_id,
            score=result.score,
            reasons=result.reasons,
            strategy=self.strategy.strategy_for(booking).name,
        )

    def _accept(self, best: MatchCandidate | None) -> MatchResult | None:
        if best is None or best.score < self.minimum_confidence:
            return None

        match = MatchResult.from_candidate(best)
        self.consumed_bookings.add(match.booking_id)
        self.consumed_expenses.add(match.expense_id)
        self.matches.append(match)
        return match

    def match_expense(self, expense: ExpenseRecord, expense_id: str) -> MatchResult | None:
        """Find and accept the best unconsumed booking for one expense."""
        if expense_id in self.consumed_expenses:
            return None

        best: MatchCandidate | None = None
        for booking, booking_id in zip(self.bookings, self.booking_ids):
            if booking_id in self.consumed_bookings:
                continue
            candidate = self._score(booking, booking_id, expense, expense_id)
            if best is None or candidate.score > best.score:
                best = candidate

        return self._accept(best)

    def match_booking(
        self,
        booking: BookingRecord,
        booking_id: str,
        expenses: Sequence[ExpenseRecord],
        expense_ids: Sequence[str],
    ) -> MatchResult | None:
        """Find and accept the best unconsumed expense for one booking."""
        if booking_id in self.consumed_bookings:
            return None

        best: MatchCandidate | None = None
        for expense, expense_id in zip(expenses, expense_ids):
            if expense_id in self.consumed_expenses:
                continue
            candidate = self._score(booking, booking_id, expense, expense_id)
            if best is None or candidate.score > best.score:
                best = candidate

        return self._accept(best)

    def match_expenses(self, expenses: Iterable[tuple[int, ExpenseRecord]]) -> list[MatchResult]:
        """Drive a run of (index, expense) pairs; returns the matches accepted."""
        accepted = []
        for index, expense in expenses:
            match = self.match_expense(expense, expense_key(expense, index))
            if match is not None:
                accepted.append(match)
        return accepted


def assign_matches(
    bookings: Sequence[BookingRecord],
    expenses: Sequence[ExpenseRecord],
    strategy: ScoringStrategy,
    minimum_confidence: Decimal | float,
    driving_side: DrivingSide | str = DrivingSide.EXPENSE,
    booking_ids: Sequence[str] | None = None,
) -> list[MatchResult]:
    """Match bookings and expenses one-to-one, greedily.

    Args:
        bookings: Normalized bookings
        expenses: Normalized expenses
        strategy: Pairwise scoring strategy
        minimum_confidence: Lowest accepted score, in [0, 1]
        driving_side: Side iterated in input order
        booking_ids: Booking identifiers, defaults to id or position in ``bookings``

    Returns:
        MatchResults in the order their driving records were processed

    Raises:
        ValueError: If the threshold or driving side is invalid
    """
    driving_side = DrivingSide(driving_side)
    assigner = GreedyAssigner(bookings, strategy, minimum_confidence, booking_ids=booking_ids)

    if driving_side == DrivingSide.EXPENSE:
        assigner.match_expenses(enumerate(expenses))
    else:
        expense_ids = [expense_key(e, i) for i, e in enumerate(expenses)]
        for booking, booking_id in zip(assigner.bookings, assigner.booking_ids):
            assigner.match_booking(booking, booking_id, expenses, expense_ids)

    logger.info(
        f"Assigned {len(assigner.matches)} matches "
        f"({len(bookings)} bookings, {len(expenses)} expenses, "
        f"strategy={strategy.name}, driving={driving_side.value})"
    )
    return assigner.matches

"""Reconciliation orchestrator - main workflow coordination."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from travelrecon.config import Settings, settings as default_settings
from travelrecon.models import BookingCategory, BookingRecord, ExpenseRecord
from travelrecon.services.assignment import (
    DrivingSide,
    assign_matches,
    booking_key,
    fallback_identifiers,
)
from travelrecon.services.batching import BatchScheduler
from travelrecon.services.matching import MatchResult, ScoringStrategy, get_strategy
from travelrecon.services.matching.classification import resolve_category
from travelrecon.services.reporting import (
    MatchStatistics,
    match_statistics,
    unmatched_bookings,
    unmatched_expenses,
)

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """Result of a reconciliation run."""

    strategy: str
    minimum_confidence: Decimal
    matches: list[MatchResult] = field(default_factory=list)
    unmatched_bookings: list[BookingRecord] = field(default_factory=list)
    unmatched_expenses: list[ExpenseRecord] = field(default_factory=list)
    statistics: MatchStatistics | None = None
    fallback_ids: list[str] = field(default_factory=list)
    category: BookingCategory | None = None
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        """Summary without the record lists."""
        return {
            "strategy": self.strategy,
            "minimum_confidence": str(self.minimum_confidence),
            "category": self.category.value if self.category else None,
            "matches": [m.to_dict() for m in self.matches],
            "statistics": self.statistics.to_dict() if self.statistics else None,
            "fallback_ids": list(self.fallback_ids),
            "duration_seconds": self.duration_seconds,
        }


class ReconciliationOrchestrator:
    """Runs matching passes over one dataset.

    Flow:
    1. Pick the strategy for the pass
    2. Assign matches (batched for the whole dataset, in one go per category)
    3. Derive unmatched records and statistics from the matches
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize orchestrator.

        Args:
            settings: Settings to use, defaults to the environment-loaded ones
        """
        self.settings = settings or default_settings
        self.strategy = get_strategy(self.settings.strategy, self.settings.flight_policy)

    async def reconcile(
        self,
        bookings: Sequence[BookingRecord],
        expenses: Sequence[ExpenseRecord],
        on_progress: Callable | None = None,
    ) -> ReconciliationResult:
        """Match the whole dataset in batches.

        The batch pass always iterates expenses; ``driving_side`` only
        applies to category passes.

        Args:
            bookings: Normalized bookings
            expenses: Normalized expenses
            on_progress: Optional progress callback, sync or async

        Returns:
            ReconciliationResult with matches and statistics
        """
        start_time = datetime.now(UTC)

        if self.settings.driving_side != DrivingSide.EXPENSE.value:
            logger.warning("Batch pass drives expenses, ignoring driving_side=booking")

        logger.info(
            f"Reconciling {len(bookings)} bookings against {len(expenses)} expenses "
            f"(strategy={self.strategy.name})"
        )

        scheduler = BatchScheduler(
            self.strategy,
            minimum_confidence=self.settings.batch_minimum_confidence,
            batch_size=self.settings.batch_size,
            require_valid_card=self.settings.require_valid_card,
        )
        matches = await scheduler.run(bookings, expenses, on_progress=on_progress)

        result = self._build_result(
            bookings,
            expenses,
            matches,
            strategy=self.strategy,
            minimum_confidence=scheduler.minimum_confidence,
        )
        result.duration_seconds = (datetime.now(UTC) - start_time).total_seconds()
        logger.info(
            f"Reconciliation complete: {len(matches)} matches in {result.duration_seconds:.2f}s"
        )
        return result

    def reconcile_category(
        self,
        bookings: Sequence[BookingRecord],
        expenses: Sequence[ExpenseRecord],
        category: BookingCategory | str,
    ) -> ReconciliationResult:
        """Match bookings of one resolved category against all expenses.

        Flights are scored with the configured flight policy, every other
        category with the generic strategy.

        Args:
            bookings: Normalized bookings of any category
            expenses: Normalized expenses
            category: Category to keep

        Returns:
            ReconciliationResult scoped to the category's bookings
        """
        start_time = datetime.now(UTC)
        category = BookingCategory(category)

        # Keyed by input position so fallback ids match the whole-dataset pass
        keyed = [
            (booking_key(b, i), b)
            for i, b in enumerate(bookings)
            if resolve_category(b) == category
        ]
        selected_ids = [key for key, _ in keyed]
        selected = [b for _, b in keyed]
        if category == BookingCategory.FLIGHT:
            strategy = get_strategy(self.settings.flight_policy)
        else:
            strategy = get_strategy("generic")

        logger.info(
            f"Reconciling {len(selected)} {category.value} bookings against "
            f"{len(expenses)} expenses (strategy={strategy.name})"
        )

        matches = assign_matches(
            selected,
            expenses,
            strategy,
            self.settings.category_minimum_confidence,
            driving_side=self.settings.driving_side,
            booking_ids=selected_ids,
        )

        result = self._build_result(
            selected,
            expenses,
            matches,
            strategy=strategy,
            minimum_confidence=self.settings.category_minimum_confidence,
            booking_ids=selected_ids,
        )
        result.category = category
        result.duration_seconds = (datetime.now(UTC) - start_time).total_seconds()
        return result

    def _build_result(
        self,
        bookings: Sequence[BookingRecord],
        expenses: Sequence[ExpenseRecord],
        matches: list[MatchResult],
        strategy: ScoringStrategy,
        minimum_confidence: Decimal,
        booking_ids: list[str] | None = None,
    ) -> ReconciliationResult:
        return ReconciliationResult(
            strategy=strategy.name,
            minimum_confidence=Decimal(str(minimum_confidence)),
            matches=matches,
            unmatched_bookings=unmatched_bookings(bookings, matches, booking_ids),
            unmatched_expenses=unmatched_expenses(expenses, matches),
            statistics=match_statistics(bookings, expenses, matches, booking_ids),
            fallback_ids=fallback_identifiers(bookings, expenses, booking_ids),
        )

"""Chunked matching that yields to the event loop between batches."""

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from travelrecon.models import BookingRecord, ExpenseRecord
from travelrecon.services.assignment import GreedyAssigner, booking_key, validate_threshold
from travelrecon.services.matching import MatchResult, ScoringStrategy
from travelrecon.services.matching.classification import has_valid_card

logger = logging.getLogger(__name__)


@dataclass
class MatchingProgress:
    """Snapshot reported after each batch."""

    total_expenses: int
    processed_expenses: int
    matches: list[MatchResult] = field(default_factory=list)
    is_complete: bool = False


class BatchScheduler:
    """Drives expense-side greedy matching in fixed-size chunks.

    Bookings are filtered once, up front, and never chunked. Between chunks
    the scheduler awaits ``asyncio.sleep(0)`` so other queued work can run;
    it gives responsiveness, not parallelism. A started run always completes.
    """

    DEFAULT_BATCH_SIZE = 50
    DEFAULT_MINIMUM_CONFIDENCE = Decimal("0.15")

    def __init__(
        self,
        strategy: ScoringStrategy,
        minimum_confidence: Decimal | float = DEFAULT_MINIMUM_CONFIDENCE,
        batch_size: int = DEFAULT_BATCH_SIZE,
        require_valid_card: bool = True,
    ):
        """Initialize scheduler.

        Args:
            strategy: Pairwise scoring strategy
            minimum_confidence: Lowest accepted score, in [0, 1]
            batch_size: Expenses per chunk, must be positive
            require_valid_card: Drop bookings without a usable card first
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.strategy = strategy
        self.minimum_confidence = validate_threshold(minimum_confidence)
        self.batch_size = batch_size
        self.require_valid_card = require_valid_card

    def filter_bookings(
        self, bookings: Sequence[BookingRecord]
    ) -> list[tuple[str, BookingRecord]]:
        """Bookings eligible for the run, keyed by their position in the input."""
        keyed = [(booking_key(b, i), b) for i, b in enumerate(bookings)]
        if not self.require_valid_card:
            return keyed
        eligible = [(key, b) for key, b in keyed if has_valid_card(b)]
        logger.info(f"{len(eligible)} of {len(bookings)} bookings have a usable card")
        return eligible

    async def run(
        self,
        bookings: Sequence[BookingRecord],
        expenses: Sequence[ExpenseRecord],
        on_progress: Callable | None = None,
    ) -> list[MatchResult]:
        """Match all expenses, reporting progress after every chunk.

        Args:
            bookings: Normalized bookings
            expenses: Normalized expenses
            on_progress: Function or coroutine function taking MatchingProgress

        Returns:
            All accepted matches in processing order
        """
        eligible = self.filter_bookings(bookings)
        assigner = GreedyAssigner(
            [b for _, b in eligible],
            self.strategy,
            self.minimum_confidence,
            booking_ids=[key for key, _ in eligible],
        )
        total = len(expenses)

        logger.info(f"Starting batch matching of {total} expenses (batch size {self.batch_size})")

        for start in range(0, total, self.batch_size):
            chunk = range(start, min(start + self.batch_size, total))
            accepted = assigner.match_expenses((i, expenses[i]) for i in chunk)
            processed = chunk.stop

            logger.debug(
                f"Batch {start // self.batch_size + 1}: {processed}/{total} processed, "
                f"{len(accepted)} new matches"
            )
            await self._report(
                on_progress,
                MatchingProgress(
                    total_expenses=total,
                    processed_expenses=processed,
                    matches=list(assigner.matches),
                ),
            )
            await asyncio.sleep(0)

        await self._report(
            on_progress,
            MatchingProgress(
                total_expenses=total,
                processed_expenses=total,
                matches=list(assigner.matches),
                is_complete=True,
            ),
        )

        logger.info(f"Batch matching complete: {len(assigner.matches)} matches")
        return assigner.matches

    async def _report(self, on_progress: Callable | None, progress: MatchingProgress) -> None:
        if on_progress is None:
            return
        outcome = on_progress(progress)
        if inspect.isawaitable(outcome):
            await outcome

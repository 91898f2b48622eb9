"""Per-booking strategy selection."""

from travelrecon.models import BookingRecord, ExpenseRecord

from .base import ScoringStrategy
from .classification import is_flight_booking
from .confidence import ScoreResult
from .flight import FlightStrategy
from .generic import GenericStrategy


class CategoryRoutingStrategy(ScoringStrategy):
    """Scores flights with the flight policy and everything else generically.

    Classification happens first, so the flight strategy only sees bookings
    that pass the flight heuristic.
    """

    name = "auto"

    def __init__(
        self,
        flight_strategy: ScoringStrategy | None = None,
        generic_strategy: ScoringStrategy | None = None,
    ):
        self.flight_strategy = flight_strategy or FlightStrategy()
        self.generic_strategy = generic_strategy or GenericStrategy()

    def strategy_for(self, booking: BookingRecord) -> ScoringStrategy:
        if is_flight_booking(booking):
            return self.flight_strategy
        return self.generic_strategy

    def score(self, booking: BookingRecord, expense: ExpenseRecord) -> ScoreResult:
        return self.strategy_for(booking).score(booking, expense)

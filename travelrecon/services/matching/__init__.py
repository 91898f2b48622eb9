"""Booking/expense matching engine."""

from .base import ScoreCard, ScoringStrategy
from .confidence import (
    ConfidenceBand,
    ConfidenceScorer,
    MatchCandidate,
    MatchResult,
    ScoreResult,
)
from .flight import CardGateFlightStrategy, FlightStrategy
from .generic import GenericStrategy
from .routing import CategoryRoutingStrategy

STRATEGIES: dict[str, type[ScoringStrategy]] = {
    GenericStrategy.name: GenericStrategy,
    FlightStrategy.name: FlightStrategy,
    CardGateFlightStrategy.name: CardGateFlightStrategy,
}


def get_strategy(name: str, flight_policy: str = FlightStrategy.name) -> ScoringStrategy:
    """Build a scoring strategy by name.

    Args:
        name: "auto", "generic", "flight" or "flight_card_gate"
        flight_policy: Flight strategy "auto" routes flight bookings to

    Raises:
        ValueError: If either name is unknown
    """
    if flight_policy not in (FlightStrategy.name, CardGateFlightStrategy.name):
        raise ValueError(f"Unknown flight policy: {flight_policy}")

    if name == CategoryRoutingStrategy.name:
        return CategoryRoutingStrategy(flight_strategy=STRATEGIES[flight_policy]())
    if name not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name}")
    return STRATEGIES[name]()


__all__ = [
    "CardGateFlightStrategy",
    "CategoryRoutingStrategy",
    "ConfidenceBand",
    "ConfidenceScorer",
    "FlightStrategy",
    "GenericStrategy",
    "MatchCandidate",
    "MatchResult",
    "ScoreCard",
    "ScoreResult",
    "ScoringStrategy",
    "get_strategy",
]

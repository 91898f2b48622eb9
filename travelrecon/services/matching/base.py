"""Base interface for booking/expense scoring strategies.

Strategies are interchangeable behind ``score()``; the assignment step only
sees the resulting score and reasons.
"""

from abc import ABC, abstractmethod

from travelrecon.models import BookingRecord, ExpenseRecord

from .confidence import ScoreResult, to_confidence


class ScoreCard:
    """Weighted running total over the criteria that could be evaluated.

    Each applicable criterion adds its weight to the maximum possible total
    whether or not it matched. Criteria missing a field on either side are
    never recorded, so they affect neither total.
    """

    def __init__(self) -> None:
        self.total = 0.0
        self.max_possible = 0.0
        self.reasons: list[str] = []

    def add(self, weight: float, subscore: float = 0.0, reason: str | None = None) -> None:
        """Record one applicable criterion."""
        self.max_possible += weight
        if subscore > 0:
            self.total += weight * subscore
            if reason:
                self.reasons.append(reason)

    @property
    def ratio(self) -> float:
        if self.max_possible <= 0:
            return 0.0
        return self.total / self.max_possible

    def result(self, factor: float = 1.0) -> ScoreResult:
        """Final score, optionally scaled by a confidence factor."""
        return ScoreResult(score=to_confidence(self.ratio * factor), reasons=list(self.reasons))


class ScoringStrategy(ABC):
    """Scores a single booking against a single expense.

    Implementations must return a score in [0, 1] and only list reasons for
    criteria that actually contributed.
    """

    name: str = "base"

    @abstractmethod
    def score(self, booking: BookingRecord, expense: ExpenseRecord) -> ScoreResult:
        """Score one booking/expense pair."""

    def strategy_for(self, booking: BookingRecord) -> "ScoringStrategy":
        """Strategy that actually scores this booking; routing strategies override."""
        return self

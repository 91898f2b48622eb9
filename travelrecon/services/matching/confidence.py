"""Confidence scoring for booking/expense matches."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

_CENT = Decimal("0.01")


def to_confidence(score: float | Decimal) -> Decimal:
    """Round a raw score to a two-decimal confidence clamped to [0, 1]."""
    value = Decimal(str(score)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return max(Decimal("0.00"), min(Decimal("1.00"), value))


class ConfidenceBand(str, Enum):
    """Reporting buckets for accepted matches."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class ScoreResult:
    """Score and reasons for one booking/expense pair."""

    score: Decimal
    reasons: list[str] = field(default_factory=list)


@dataclass
class MatchCandidate:
    """A scored pairing considered during assignment."""

    booking_id: str
    expense_id: str
    score: Decimal
    reasons: list[str] = field(default_factory=list)
    strategy: str | None = None


@dataclass(frozen=True)
class MatchResult:
    """An accepted booking/expense pairing."""

    expense_id: str
    booking_id: str
    confidence: Decimal
    reasons: tuple[str, ...] = ()
    strategy: str | None = None

    @classmethod
    def from_candidate(cls, candidate: MatchCandidate) -> "MatchResult":
        return cls(
            expense_id=candidate.expense_id,
            booking_id=candidate.booking_id,
            confidence=candidate.score,
            reasons=tuple(candidate.reasons),
            strategy=candidate.strategy,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "expense_id": self.expense_id,
            "booking_id": self.booking_id,
            "confidence": str(self.confidence),
            "reasons": list(self.reasons),
            "strategy": self.strategy,
            "band": ConfidenceScorer().get_band(self.confidence).value,
        }


class ConfidenceScorer:
    """Maps confidence scores to reporting bands."""

    THRESHOLDS = {
        ConfidenceBand.HIGH: Decimal("0.80"),
        ConfidenceBand.MEDIUM: Decimal("0.50"),
        ConfidenceBand.LOW: Decimal("0.00"),
    }

    def get_band(self, confidence: Decimal) -> ConfidenceBand:
        """Determine the band for a confidence score.

        Returns:
            HIGH for >= 0.8, MEDIUM for 0.5-0.8, LOW below 0.5
        """
        if confidence >= self.THRESHOLDS[ConfidenceBand.HIGH]:
            return ConfidenceBand.HIGH
        elif confidence >= self.THRESHOLDS[ConfidenceBand.MEDIUM]:
            return ConfidenceBand.MEDIUM
        else:
            return ConfidenceBand.LOW

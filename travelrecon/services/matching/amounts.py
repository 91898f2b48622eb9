"""Amount proximity scoring."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

# (max percent difference, score), checked in order
STANDARD_AMOUNT_BANDS: list[tuple[Decimal, float]] = [
    (Decimal("1"), 0.98),
    (Decimal("5"), 0.90),
    (Decimal("10"), 0.85),
    (Decimal("15"), 0.80),
]

FLIGHT_AMOUNT_BANDS: list[tuple[Decimal, float, str]] = [
    (Decimal("1"), 0.98, "Very close amount match (within 1%)"),
    (Decimal("5"), 0.90, "Close amount match (within 5%)"),
    (Decimal("10"), 0.85, "Good amount match (within 10%)"),
    (Decimal("15"), 0.75, "Possible amount match (within 15%)"),
]

CARD_GATE_AMOUNT_BANDS: list[tuple[Decimal, float]] = [
    (Decimal("1"), 0.98),
    (Decimal("5"), 0.90),
    (Decimal("10"), 0.80),
    (Decimal("15"), 0.70),
]

# Expense is roughly half the booking: one-way leg or deposit
PARTIAL_PAYMENT_RATIO = Decimal("0.5")
PARTIAL_PAYMENT_TOLERANCE = Decimal("0.05")
PARTIAL_PAYMENT_SCORE = 0.7


@dataclass
class AmountMatch:
    """Amount subscore with an optional explanation."""

    score: float
    reason: str | None = None


def as_decimal(value: Decimal | float | int | str | None) -> Decimal | None:
    """Coerce an amount to Decimal, None when absent or unparseable."""
    if value is None:
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def percent_difference(x: Decimal, y: Decimal) -> Decimal | None:
    """Absolute difference as a percentage of the mean, None when undefined."""
    mean = (x + y) / 2
    if mean <= 0:
        return None
    return abs(x - y) / mean * 100


def amounts_comparable(x: Decimal | float | None, y: Decimal | float | None) -> bool:
    """Check both amounts are usable and their relative difference is defined."""
    x, y = as_decimal(x), as_decimal(y)
    if x is None or y is None:
        return False
    return x == y or percent_difference(x, y) is not None


def _banded(x: Decimal | None, y: Decimal | None, bands: list[tuple[Decimal, float]]) -> float:
    x, y = as_decimal(x), as_decimal(y)
    if x is None or y is None:
        return 0.0
    if x == y:
        return 1.0

    diff = percent_difference(x, y)
    if diff is None:
        return 0.0
    for limit, score in bands:
        if diff <= limit:
            return score
    return 0.0


def amount_score(x: Decimal | None, y: Decimal | None) -> float:
    """Score two amounts by relative difference."""
    return _banded(x, y, STANDARD_AMOUNT_BANDS)


def card_gate_amount_score(x: Decimal | None, y: Decimal | None) -> float:
    """Amount score with the stricter bands of the card-gated flight policy."""
    return _banded(x, y, CARD_GATE_AMOUNT_BANDS)


def flight_amount_score(
    booking_amount: Decimal | None,
    expense_amount: Decimal | None,
) -> AmountMatch:
    """Score flight amounts, tolerating fees and split one-way charges.

    The partial payment pattern is only considered once every standard band
    has failed.
    """
    booking_amount = as_decimal(booking_amount)
    expense_amount = as_decimal(expense_amount)
    if booking_amount is None or expense_amount is None:
        return AmountMatch(score=0.0)

    if booking_amount == expense_amount:
        return AmountMatch(score=1.0, reason="Exact amount match")

    pair = f"{booking_amount:.2f} vs {expense_amount:.2f}"
    diff = percent_difference(booking_amount, expense_amount)
    if diff is not None:
        for limit, score, label in FLIGHT_AMOUNT_BANDS:
            if diff <= limit:
                return AmountMatch(score=score, reason=f"{label}: {pair}")

    if booking_amount != 0:
        ratio = expense_amount / booking_amount
        if abs(ratio - PARTIAL_PAYMENT_RATIO) < PARTIAL_PAYMENT_TOLERANCE:
            return AmountMatch(
                score=PARTIAL_PAYMENT_SCORE,
                reason=(
                    "Possible partial payment match "
                    f"(expense is ~50% of booking): {pair}"
                ),
            )

    return AmountMatch(score=0.0)

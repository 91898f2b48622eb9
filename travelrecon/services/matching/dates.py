"""Date proximity scoring."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

logger = logging.getLogger(__name__)

# Formats tried after ISO 8601, in order. Slash dates are read US-style.
DATE_FORMATS = [
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%m-%d-%Y",
    "%d %b %Y",
    "%d-%b-%Y",
]

# (max days apart, score), checked in order
STANDARD_DATE_BANDS: list[tuple[int, float]] = [
    (0, 1.0),
    (1, 0.95),
    (3, 0.9),
    (7, 0.8),
    (14, 0.6),
    (30, 0.4),
]

# Flights are charged days or weeks ahead of travel
FLIGHT_DATE_BANDS: list[tuple[int, float]] = [
    (0, 1.0),
    (2, 0.95),
    (7, 0.9),
    (30, 0.7),
    (90, 0.5),
]


@dataclass
class DateMatch:
    """Date subscore and the smallest gap found."""

    score: float
    days_apart: int | None = None


def parse_date(value: date | datetime | str | None) -> date | None:
    """Parse a date value, returning None when it cannot be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparseable date ignored: {text!r}")
    return None


def days_apart(
    booking_dates: Iterable[date | datetime | str | None],
    expense_dates: Iterable[date | datetime | str | None],
) -> int | None:
    """Smallest absolute day gap across all valid date pairs."""
    parsed_booking = [d for d in (parse_date(v) for v in booking_dates) if d is not None]
    parsed_expense = [d for d in (parse_date(v) for v in expense_dates) if d is not None]
    if not parsed_booking or not parsed_expense:
        return None

    return min(abs((b - e).days) for b in parsed_booking for e in parsed_expense)


def date_score(
    booking_dates: Iterable[date | datetime | str | None],
    expense_dates: Iterable[date | datetime | str | None],
    bands: list[tuple[int, float]] = STANDARD_DATE_BANDS,
) -> DateMatch:
    """Score the closest booking/expense date pair against a band table."""
    gap = days_apart(booking_dates, expense_dates)
    if gap is None:
        return DateMatch(score=0.0)

    for limit, score in bands:
        if gap <= limit:
            return DateMatch(score=score, days_apart=gap)
    return DateMatch(score=0.0, days_apart=gap)

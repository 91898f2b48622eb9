"""Normalized booking and expense records handed to the matching engine."""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

# Dates arrive as parsed values or as the raw strings the ingestion stage kept
DateValue = date | datetime | str

# Ingestion writes bracketed markers such as "[No card last 4 found]" into
# fields it could not fill
_SENTINEL_PATTERN = re.compile(r"^\[(no|invalid)\b.*\]$", re.IGNORECASE)


def is_missing(value: object) -> bool:
    """Check whether a field value carries no information."""
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or bool(_SENTINEL_PATTERN.match(stripped))
    return False


def present(value: str | None) -> str | None:
    """Return the value unless it is missing or an ingestion sentinel."""
    if is_missing(value):
        return None
    return value


class BookingCategory(str, Enum):
    """Booking categories."""

    FLIGHT = "Flight"
    HOTEL = "Hotel"
    CAR = "Car"
    RAIL = "Rail"
    OTHER = "Other"


@dataclass(frozen=True)
class BookingRecord:
    """Travel reservation from a travel management company."""

    id: str | None = None
    traveler_name: str | None = None
    merchant: str | None = None
    vendor: str | None = None
    travel_type: str | None = None
    origin: str | None = None
    destination: str | None = None
    card_type: str | None = None
    card_last4: str | None = None
    card_holder_name: str | None = None
    currency: str | None = None
    amount: Decimal | None = None
    expected_transaction_time: DateValue | None = None
    booking_date: DateValue | None = None
    departure_date: DateValue | None = None
    return_date: DateValue | None = None
    booking_reference: str | None = None
    category: BookingCategory | None = None

    @property
    def merchant_name(self) -> str | None:
        """Normalized merchant, falling back to the raw vendor name."""
        return present(self.merchant) or present(self.vendor)

    @property
    def candidate_dates(self) -> list[DateValue]:
        """Dates that may line up with the card charge."""
        return [
            d
            for d in (self.booking_date, self.departure_date, self.return_date)
            if not is_missing(d)
        ]

    def __repr__(self) -> str:
        return f"<BookingRecord {self.id} {self.category} {self.amount} {self.currency}>"


@dataclass(frozen=True)
class ExpenseRecord:
    """Line item from a corporate card or expense report."""

    id: str | None = None
    employee_name: str | None = None
    vendor: str | None = None
    description: str | None = None
    expense_type: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    card_last4: str | None = None
    expense_date: DateValue | None = None
    start_date: DateValue | None = None
    end_date: DateValue | None = None
    origin: str | None = None
    destination: str | None = None

    @property
    def candidate_dates(self) -> list[DateValue]:
        """Dates that may line up with the booking."""
        return [
            d for d in (self.expense_date, self.start_date, self.end_date) if not is_missing(d)
        ]

    def __repr__(self) -> str:
        return f"<ExpenseRecord {self.id} {self.amount} {self.currency}>"

"""Booking classification shared by strategies, category passes and statistics."""

import re

from travelrecon.config import (
    AIRLINE_CODES,
    AIRLINE_NAME_TO_CODE,
    AIRLINE_NAMES,
    TRAVEL_TYPE_ALIASES,
)
from travelrecon.models import BookingCategory, BookingRecord, present

from .text import normalize

# Generic words that mark a merchant as an airline whatever its name
AIRLINE_WORDS = ["airline", "airways", "air lines"]

# Matched at the start of a word, so "railcard" is rail and not car
_CATEGORY_KEYWORDS: list[tuple[re.Pattern, BookingCategory]] = [
    (re.compile(r"\bflight"), BookingCategory.FLIGHT),
    (re.compile(r"\bhotel"), BookingCategory.HOTEL),
    (re.compile(r"\bcar"), BookingCategory.CAR),
    (re.compile(r"\brail"), BookingCategory.RAIL),
    (re.compile(r"\btrain"), BookingCategory.RAIL),
    (re.compile(r"\bair"), BookingCategory.FLIGHT),
]

_AIRLINE_CODE_PATTERN = re.compile(r"\b(" + "|".join(map(re.escape, AIRLINE_CODES)) + r")\b")


def is_flight_booking(booking: BookingRecord) -> bool:
    """Check whether a booking resolves to the flight category."""
    return resolve_category(booking) == BookingCategory.FLIGHT


def is_airline_vendor(vendor: str | None) -> bool:
    """Check a vendor string for airline names, airline words or carrier codes."""
    text = normalize(vendor)
    if not text:
        return False
    if any(name in text for name in AIRLINE_NAMES + AIRLINE_WORDS):
        return True
    return bool(_AIRLINE_CODE_PATTERN.search(text))


def airline_code(merchant: str | None) -> str | None:
    """Carrier code of a known airline named in a merchant string."""
    text = normalize(merchant)
    if not text:
        return None
    for name, code in AIRLINE_NAME_TO_CODE.items():
        if name in text:
            return code.upper()
    return None


def resolve_category(booking: BookingRecord) -> BookingCategory:
    """Resolve the category of a booking.

    Order: explicit category, travel type keywords, airline merchant, and
    finally a booking with both route ends is taken to be a flight.
    """
    if booking.category is not None:
        return BookingCategory(booking.category)

    travel_type = normalize(present(booking.travel_type))
    for pattern, category in _CATEGORY_KEYWORDS:
        if pattern.search(travel_type):
            return category

    if is_airline_vendor(booking.merchant) or is_airline_vendor(booking.vendor):
        return BookingCategory.FLIGHT

    if present(booking.origin) and present(booking.destination):
        return BookingCategory.FLIGHT

    return BookingCategory.OTHER


def travel_type_group(text: str | None) -> set[str]:
    """Canonical travel-type groups a free-text type belongs to."""
    normalized = normalize(text)
    if not normalized:
        return set()
    return {
        group
        for group, aliases in TRAVEL_TYPE_ALIASES.items()
        if group in normalized or any(alias in normalized for alias in aliases)
    }


def travel_types_match(booking_type: str | None, expense_type: str | None) -> bool:
    """Check whether two free-text travel types describe the same kind of travel."""
    norm_booking = normalize(booking_type)
    norm_expense = normalize(expense_type)
    if not norm_booking or not norm_expense:
        return False
    if norm_booking == norm_expense:
        return True
    return bool(travel_type_group(norm_booking) & travel_type_group(norm_expense))


def has_valid_card(booking: BookingRecord) -> bool:
    """Mastercard bookings, or any known card type with known last-4 digits."""
    card_type = present(booking.card_type)
    if card_type and card_type.lower() == "mastercard":
        return True
    return bool(card_type and card_digits(booking.card_last4))


def card_digits(value: str | None) -> str | None:
    """Card last-4 digits without whitespace, None when unknown."""
    value = present(value)
    if value is None:
        return None
    return "".join(value.split())

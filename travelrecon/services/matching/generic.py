"""Generic scoring for any booking category."""

import logging

from travelrecon.models import BookingRecord, ExpenseRecord, present

from .amounts import amount_score, amounts_comparable
from .base import ScoreCard, ScoringStrategy
from .classification import card_digits, travel_types_match
from .confidence import ScoreResult
from .dates import date_score
from .references import reference_in_text
from .text import name_similarity, similarity

logger = logging.getLogger(__name__)


class GenericStrategy(ScoringStrategy):
    """Weighted scoring over the fields every booking type shares.

    Weights:
    - Card last 4 exact: 20
    - Booking reference in expense description: 20
    - Traveler/employee name (> 0.7): 15
    - Amount proximity (> 0.8): 15
    - Vendor (> 0.6): 10
    - Travel type: 10
    - Date proximity: 10
    - Origin, destination (> 0.7): 5 each
    """

    name = "generic"

    WEIGHTS = {
        "card": 20,
        "reference": 20,
        "name": 15,
        "amount": 15,
        "vendor": 10,
        "travel_type": 10,
        "date": 10,
        "origin": 5,
        "destination": 5,
    }

    NAME_THRESHOLD = 0.7
    AMOUNT_THRESHOLD = 0.8
    VENDOR_THRESHOLD = 0.6
    LOCATION_THRESHOLD = 0.7

    def score(self, booking: BookingRecord, expense: ExpenseRecord) -> ScoreResult:
        card = ScoreCard()
        weights = self.WEIGHTS

        booking_card = card_digits(booking.card_last4)
        expense_card = card_digits(expense.card_last4)
        if booking_card and expense_card:
            card.add(
                weights["card"],
                1.0 if booking_card == expense_card else 0.0,
                f"Card last 4 match: {booking_card}",
            )

        reference = present(booking.booking_reference)
        description = present(expense.description)
        if reference and description:
            card.add(
                weights["reference"],
                1.0 if reference_in_text(reference, description) else 0.0,
                f"Reference match: {reference}",
            )

        traveler = present(booking.traveler_name)
        employee = present(expense.employee_name)
        if traveler and employee:
            name_score = name_similarity(traveler, employee)
            card.add(
                weights["name"],
                name_score if name_score > self.NAME_THRESHOLD else 0.0,
                f"Name match: {traveler} / {employee}",
            )

        if amounts_comparable(booking.amount, expense.amount):
            amount = amount_score(booking.amount, expense.amount)
            card.add(
                weights["amount"],
                amount if amount > self.AMOUNT_THRESHOLD else 0.0,
                f"Amount match: {booking.amount} vs {expense.amount}",
            )

        merchant = booking.merchant_name
        vendor = present(expense.vendor)
        if merchant and vendor:
            vendor_score = similarity(merchant, vendor)
            card.add(
                weights["vendor"],
                vendor_score if vendor_score > self.VENDOR_THRESHOLD else 0.0,
                f"Vendor match: {merchant} / {vendor}",
            )

        booking_type = present(booking.travel_type) or (
            booking.category.value if booking.category else None
        )
        expense_type = present(expense.expense_type)
        if booking_type and expense_type:
            card.add(
                weights["travel_type"],
                1.0 if travel_types_match(booking_type, expense_type) else 0.0,
                f"Travel type match: {booking_type} / {expense_type}",
            )

        date_match = date_score(booking.candidate_dates, expense.candidate_dates)
        if date_match.days_apart is not None:
            card.add(
                weights["date"],
                date_match.score,
                f"Date alignment: {date_match.days_apart} days apart",
            )

        for leg in ("origin", "destination"):
            booking_place = present(getattr(booking, leg))
            expense_place = present(getattr(expense, leg))
            if booking_place and expense_place:
                place_score = similarity(booking_place, expense_place)
                card.add(
                    weights[leg],
                    place_score if place_score > self.LOCATION_THRESHOLD else 0.0,
                    f"{leg.capitalize()} match: {booking_place} / {expense_place}",
                )

        result = card.result()
        logger.debug(
            f"[generic] booking {booking.id} vs expense {expense.id}: "
            f"{result.score} ({card.total:.2f}/{card.max_possible})"
        )
        return result

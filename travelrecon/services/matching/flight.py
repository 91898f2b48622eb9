"""Flight-specialized scoring strategies."""

import logging

from travelrecon.config import AIRLINE_NAME_TO_CODE
from travelrecon.models import BookingRecord, ExpenseRecord, present

from .amounts import amounts_comparable, card_gate_amount_score, flight_amount_score
from .base import ScoreCard, ScoringStrategy
from .classification import airline_code, card_digits, is_flight_booking
from .confidence import ScoreResult, to_confidence
from .dates import FLIGHT_DATE_BANDS, date_score
from .references import extract_carrier_code, partial_flight_number_match, reference_in_text
from .route import match_route
from .text import normalize, similarity

logger = logging.getLogger(__name__)

# Keywords that, present in both merchant strings, indicate the same airline family
SHARED_AIRLINE_KEYWORDS = ["air", "airline", "airways", "flight"]


def airline_merchants_match(booking_merchant: str | None, expense_vendor: str | None) -> bool:
    """Loose airline merchant comparison.

    Airline merchant strings differ a lot between booking and card systems,
    so containment, shared airline keywords and name/carrier-code pairs all
    count as a match.
    """
    merchant = normalize(booking_merchant)
    vendor = normalize(expense_vendor)
    if not merchant or not vendor:
        return False

    if merchant == vendor or merchant in vendor or vendor in merchant:
        return True

    if any(keyword in merchant and keyword in vendor for keyword in SHARED_AIRLINE_KEYWORDS):
        return True

    merchant_tokens = set(merchant.split())
    vendor_tokens = set(vendor.split())
    for name, code in AIRLINE_NAME_TO_CODE.items():
        if (name in merchant and code in vendor_tokens) or (
            name in vendor and code in merchant_tokens
        ):
            return True
    return False


class FlightStrategy(ScoringStrategy):
    """Weighted scoring re-weighted toward flight evidence.

    Card digits dominate. Bookings that fail the flight heuristic are still
    scored, at NON_FLIGHT_FACTOR of the computed score.
    """

    name = "flight"

    WEIGHTS = {
        "card": 30,
        "carrier": 25,
        "reference": 20,
        "route": 15,
        "traveler": 15,
        "amount": 15,
        "card_holder": 15,
        "merchant": 10,
        "currency": 10,
        "date": 10,
    }

    # Partial flight-number matches earn this share of the reference weight
    PARTIAL_REFERENCE_SCORE = 0.75

    NAME_THRESHOLD = 0.7
    MERCHANT_THRESHOLD = 0.6
    NON_FLIGHT_FACTOR = 0.7

    def score(self, booking: BookingRecord, expense: ExpenseRecord) -> ScoreResult:
        card = ScoreCard()
        weights = self.WEIGHTS

        # Carrier code from the booking reference, else from the airline merchant
        booking_carrier = extract_carrier_code(present(booking.booking_reference))
        carrier_source = "reference"
        if not booking_carrier:
            booking_carrier = airline_code(booking.merchant_name)
            carrier_source = "merchant"
        expense_carrier = extract_carrier_code(expense.description)
        if booking_carrier and expense_carrier:
            card.add(
                weights["carrier"],
                1.0 if booking_carrier == expense_carrier else 0.0,
                f"Airline carrier code match: {booking_carrier} (from booking {carrier_source})",
            )

        reference = present(booking.booking_reference)
        description = present(expense.description)
        if reference and description:
            partial = partial_flight_number_match(reference, description)
            if reference_in_text(reference, description):
                card.add(weights["reference"], 1.0, f"Flight reference match: {reference}")
            elif partial:
                card.add(
                    weights["reference"],
                    self.PARTIAL_REFERENCE_SCORE,
                    f"Partial flight reference match: {partial[0]} in {partial[1]}",
                )
            else:
                card.add(weights["reference"])

        route = match_route(
            booking.origin, booking.destination, expense.origin, expense.destination
        )
        if route.comparable:
            card.add(weights["route"], route.score, "; ".join(route.reasons) or None)

        traveler = present(booking.traveler_name)
        employee = present(expense.employee_name)
        if traveler and employee:
            traveler_score = similarity(traveler, employee)
            card.add(
                weights["traveler"],
                traveler_score if traveler_score > self.NAME_THRESHOLD else 0.0,
                f"Traveler name match: {traveler} / {employee}",
            )

        if amounts_comparable(booking.amount, expense.amount):
            amount = flight_amount_score(booking.amount, expense.amount)
            card.add(weights["amount"], amount.score, amount.reason)

        booking_card = card_digits(booking.card_last4)
        expense_card = card_digits(expense.card_last4)
        if booking_card and expense_card:
            card.add(
                weights["card"],
                1.0 if booking_card == expense_card else 0.0,
                f"Card last 4 match: {booking_card}",
            )

        holder = present(booking.card_holder_name)
        if holder and employee:
            holder_score = similarity(holder, employee)
            card.add(
                weights["card_holder"],
                holder_score if holder_score > self.NAME_THRESHOLD else 0.0,
                f"Card holder name match: {holder} / {employee}",
            )

        merchant = booking.merchant_name
        vendor = present(expense.vendor)
        if merchant and vendor:
            merchant_score = similarity(merchant, vendor)
            card.add(
                weights["merchant"],
                merchant_score if merchant_score > self.MERCHANT_THRESHOLD else 0.0,
                f"Airline/vendor match: {merchant} / {vendor}",
            )

        booking_currency = present(booking.currency)
        expense_currency = present(expense.currency)
        if booking_currency and expense_currency:
            card.add(
                weights["currency"],
                1.0 if normalize(booking_currency) == normalize(expense_currency) else 0.0,
                f"Currency match: {booking_currency}",
            )

        date_match = date_score(
            [booking.expected_transaction_time],
            [expense.expense_date],
            bands=FLIGHT_DATE_BANDS,
        )
        if date_match.days_apart is not None:
            card.add(
                weights["date"],
                date_match.score,
                f"Date proximity match: {date_match.days_apart} days difference",
            )

        factor = 1.0
        if not is_flight_booking(booking):
            factor = self.NON_FLIGHT_FACTOR
            logger.debug(f"[flight] booking {booking.id} fails flight criteria, scaled by {factor}")

        result = card.result(factor)
        logger.debug(
            f"[flight] booking {booking.id} vs expense {expense.id}: "
            f"{result.score} ({card.total:.2f}/{card.max_possible})"
        )
        return result


class CardGateFlightStrategy(ScoringStrategy):
    """Flight scoring where matching card digits are a hard requirement.

    A pair whose card digits differ, or where either side has none, scores 0
    with no reasons. Otherwise card (60), merchant (20) and amount (20).
    """

    name = "flight_card_gate"

    WEIGHTS = {
        "card": 60,
        "merchant": 20,
        "amount": 20,
    }

    def score(self, booking: BookingRecord, expense: ExpenseRecord) -> ScoreResult:
        booking_card = card_digits(booking.card_last4)
        expense_card = card_digits(expense.card_last4)
        if not booking_card or not expense_card or booking_card != expense_card:
            return ScoreResult(score=to_confidence(0))

        card = ScoreCard()
        card.add(self.WEIGHTS["card"], 1.0, f"Card last 4 match: {booking_card}")

        merchant = booking.merchant_name
        vendor = present(expense.vendor)
        if merchant and vendor:
            card.add(
                self.WEIGHTS["merchant"],
                1.0 if airline_merchants_match(merchant, vendor) else 0.0,
                f"Merchant match: {merchant} / {vendor}",
            )

        if amounts_comparable(booking.amount, expense.amount):
            amount = card_gate_amount_score(booking.amount, expense.amount)
            if amount == 1.0:
                currency = present(booking.currency) or ""
                reason = f"Exact amount match: {booking.amount:.2f} {currency}".strip()
            else:
                reason = f"Close amount match: {booking.amount:.2f} vs {expense.amount:.2f}"
            card.add(self.WEIGHTS["amount"], amount, reason)

        return card.result()

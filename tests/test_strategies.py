"""Tests for scoring strategies."""

from dataclasses import replace
from decimal import Decimal

import pytest

from travelrecon.models import BookingCategory, BookingRecord, ExpenseRecord
from travelrecon.services.matching import (
    CardGateFlightStrategy,
    CategoryRoutingStrategy,
    ConfidenceBand,
    ConfidenceScorer,
    FlightStrategy,
    GenericStrategy,
    ScoreCard,
    get_strategy,
)
from travelrecon.services.matching.confidence import to_confidence
from travelrecon.services.matching.flight import airline_merchants_match

ALL_STRATEGIES = [GenericStrategy(), FlightStrategy(), CardGateFlightStrategy()]

# (strategy, booking field, expense counterpart used by no other criterion)
ONE_SIDED_FIELDS = [
    (GenericStrategy(), "card_last4", "card_last4"),
    (GenericStrategy(), "traveler_name", "employee_name"),
    (GenericStrategy(), "amount", "amount"),
    (GenericStrategy(), "merchant", "vendor"),
    (GenericStrategy(), "origin", "origin"),
    (FlightStrategy(), "card_last4", "card_last4"),
    (FlightStrategy(), "card_holder_name", None),
    (FlightStrategy(), "traveler_name", None),
    (FlightStrategy(), "currency", "currency"),
    (FlightStrategy(), "expected_transaction_time", "expense_date"),
    (FlightStrategy(), "amount", "amount"),
    (FlightStrategy(), "origin", "origin"),
    (CardGateFlightStrategy(), "merchant", "vendor"),
    (CardGateFlightStrategy(), "amount", "amount"),
]


class TestScoreCard:
    """Tests for ScoreCard and confidence rounding."""

    def test_ratio_over_applicable_criteria(self):
        """Test unmatched criteria count toward the maximum only."""
        card = ScoreCard()
        card.add(10, 1.0, "matched")
        card.add(10, 0.0, "ignored")
        assert card.ratio == 0.5
        assert card.reasons == ["matched"]

    def test_empty_card(self):
        """Test a card with no criteria scores 0."""
        assert ScoreCard().result().score == Decimal("0.00")

    def test_to_confidence(self):
        """Test rounding half up and clamping to [0, 1]."""
        assert to_confidence(0.125) == Decimal("0.13")
        assert to_confidence(1.5) == Decimal("1.00")
        assert to_confidence(-0.2) == Decimal("0.00")

    @pytest.mark.parametrize(
        "confidence,band",
        [
            (Decimal("0.95"), ConfidenceBand.HIGH),
            (Decimal("0.80"), ConfidenceBand.HIGH),
            (Decimal("0.65"), ConfidenceBand.MEDIUM),
            (Decimal("0.15"), ConfidenceBand.LOW),
        ],
    )
    def test_bands(self, confidence, band):
        """Test confidence band thresholds."""
        assert ConfidenceScorer().get_band(confidence) == band


class TestCommonProperties:
    """Properties every strategy must hold."""

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: s.name)
    def test_score_bounds(self, strategy, bookings, expenses):
        """Test every score lies in [0, 1]."""
        for booking in bookings:
            for expense in expenses:
                result = strategy.score(booking, expense)
                assert Decimal("0") <= result.score <= Decimal("1")

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: s.name)
    def test_nothing_comparable_scores_zero(self, strategy):
        """Test empty records score 0 with no reasons."""
        result = strategy.score(BookingRecord(id="B"), ExpenseRecord(id="E"))
        assert result.score == Decimal("0.00")
        assert result.reasons == []

    @pytest.mark.parametrize(
        "strategy,booking_field,expense_field",
        ONE_SIDED_FIELDS,
        ids=lambda value: getattr(value, "name", value),
    )
    def test_one_sided_field_is_neutral(
        self, strategy, booking_field, expense_field, delta_booking, delta_expense
    ):
        """Test a field unknown on one side scores as if unknown on both."""
        missing = Decimal("NaN") if booking_field == "amount" else "[No value]"
        one_sided = strategy.score(
            replace(delta_booking, **{booking_field: missing}), delta_expense
        )

        expense = delta_expense
        if expense_field:
            expense = replace(delta_expense, **{expense_field: None})
        neither = strategy.score(replace(delta_booking, **{booking_field: None}), expense)

        assert one_sided == neither

    def test_missing_fields_are_neutral(self):
        """Test sentinel fields do not lower a perfect score."""
        strategy = GenericStrategy()
        booking = BookingRecord(amount=Decimal("100"))
        expense = ExpenseRecord(amount=Decimal("100"))
        baseline = strategy.score(booking, expense).score

        with_sentinel = replace(booking, card_last4="[No card last 4 found]", traveler_name="")
        assert baseline == Decimal("1.00")
        assert strategy.score(with_sentinel, replace(expense, card_last4="1234")).score == baseline

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: s.name)
    def test_undefined_amount_difference_is_neutral(self, strategy, delta_booking, delta_expense):
        """Test amounts with no defined relative difference are not scored."""
        refund = strategy.score(
            replace(delta_booking, amount=Decimal("-10")),
            replace(delta_expense, amount=Decimal("-5")),
        )
        no_amounts = strategy.score(
            replace(delta_booking, amount=None), replace(delta_expense, amount=None)
        )
        assert refund == no_amounts

    def test_no_reasons_for_unrelated_pair(self, delta_booking, coffee_expense):
        """Test an unrelated pair scores 0 with no reasons."""
        result = GenericStrategy().score(delta_booking, coffee_expense)
        assert result.score == Decimal("0.00")
        assert result.reasons == []


class TestGenericStrategy:
    """Tests for GenericStrategy."""

    def test_matching_pair(self, hotel_booking, hotel_expense):
        """Test a matching hotel pair scores high with reasons."""
        result = GenericStrategy().score(hotel_booking, hotel_expense)
        assert result.score >= Decimal("0.95")
        assert "Card last 4 match: 5678" in result.reasons
        assert "Date alignment: 1 days apart" in result.reasons

    def test_card_mismatch_lowers_score(self, hotel_booking, hotel_expense):
        """Test differing card digits lower the score."""
        matched = GenericStrategy().score(hotel_booking, hotel_expense).score
        mismatched = GenericStrategy().score(
            hotel_booking, replace(hotel_expense, card_last4="0000")
        ).score
        assert mismatched < matched


class TestFlightStrategy:
    """Tests for FlightStrategy."""

    def test_delta_example(self, delta_booking, delta_expense):
        """Test a fully described Delta booking against its charge."""
        result = FlightStrategy().score(delta_booking, delta_expense)
        assert result.score >= Decimal("0.9")
        assert "Card last 4 match: 1234" in result.reasons
        assert "Flight reference match: DL1234" in result.reasons
        assert "Airline carrier code match: DL (from booking reference)" in result.reasons

    @pytest.mark.parametrize("strategy_name", ["flight", "auto"])
    def test_delta_example_without_reference(self, strategy_name):
        """Test the carrier code comes from the airline merchant without a reference."""
        booking = BookingRecord(
            card_last4="1234",
            merchant="Delta Air Lines",
            amount=Decimal("450.75"),
            currency="USD",
        )
        expense = ExpenseRecord(
            card_last4="1234",
            vendor="Delta Airlines",
            amount=Decimal("450.75"),
            description="Flight DL1234 SFO-JFK",
        )

        result = get_strategy(strategy_name).score(booking, expense)

        assert result.score >= Decimal("0.9")
        assert "Card last 4 match: 1234" in result.reasons
        assert "Airline carrier code match: DL (from booking merchant)" in result.reasons

    def test_merchant_carrier_mismatch(self):
        """Test a different carrier in the description is a failed criterion."""
        booking = BookingRecord(merchant="Delta Air Lines", category=BookingCategory.FLIGHT)
        expense = ExpenseRecord(description="Flight UA905")

        result = FlightStrategy().score(booking, expense)

        assert result.score == Decimal("0.00")
        assert result.reasons == []

    def test_card_mismatch_still_scores(self, delta_booking, delta_expense):
        """Test the weighted policy still scores a card mismatch."""
        expense = replace(delta_expense, card_last4="9999")
        result = FlightStrategy().score(delta_booking, expense)
        assert Decimal("0.5") < result.score < Decimal("0.9")
        assert not any(r.startswith("Card last 4") for r in result.reasons)

    def test_non_flight_penalty(self):
        """Test non-flight bookings are scaled down."""
        booking = BookingRecord(id="B", merchant="Hilton", amount=Decimal("100"))
        expense = ExpenseRecord(id="E", amount=Decimal("100"))
        assert FlightStrategy().score(booking, expense).score == Decimal("0.70")

        flight = replace(booking, category=BookingCategory.FLIGHT)
        assert FlightStrategy().score(flight, expense).score == Decimal("1.00")

    def test_airline_merchant_is_not_penalised(self):
        """Test a booking that resolves to Flight by its merchant is scored as a flight."""
        booking = BookingRecord(id="B", merchant="Lufthansa", amount=Decimal("100"))
        expense = ExpenseRecord(id="E", amount=Decimal("100"))

        assert FlightStrategy().score(booking, expense).score == Decimal("1.00")
        assert CategoryRoutingStrategy().strategy_for(booking).name == "flight"

    def test_partial_flight_reference(self):
        """Test a near-identical flight number earns part of the reference weight."""
        booking = BookingRecord(booking_reference="UA1234", category=BookingCategory.FLIGHT)
        expense = ExpenseRecord(description="Flight UA1235")
        result = FlightStrategy().score(booking, expense)
        # carrier 25 + partial reference 15 of 45
        assert result.score == Decimal("0.89")
        assert "Partial flight reference match: ua1234 in ua1235" in result.reasons

    def test_partial_payment(self, delta_booking):
        """Test half the booking amount scores as a partial payment."""
        expense = ExpenseRecord(amount=delta_booking.amount / 2)
        result = FlightStrategy().score(delta_booking, expense)
        assert result.score == Decimal("0.70")
        assert any("partial payment" in r for r in result.reasons)


class TestCardGateFlightStrategy:
    """Tests for CardGateFlightStrategy."""

    def test_delta_example(self, delta_booking, delta_expense):
        """Test the Delta pair passes the gate with a perfect score."""
        result = CardGateFlightStrategy().score(delta_booking, delta_expense)
        assert result.score == Decimal("1.00")
        assert result.reasons[0] == "Card last 4 match: 1234"

    @pytest.mark.parametrize("card_last4", ["9999", None, "[No card last 4 found]"])
    def test_card_gate(self, delta_booking, delta_expense, card_last4):
        """Test differing or unknown card digits score exactly 0."""
        expense = replace(delta_expense, card_last4=card_last4)
        result = CardGateFlightStrategy().score(delta_booking, expense)
        assert result.score == Decimal("0.00")
        assert result.reasons == []

    def test_diverges_from_weighted_policy(self, delta_booking, delta_expense):
        """Test the gate and the weighted policy disagree on a card mismatch."""
        expense = replace(delta_expense, card_last4="9999")
        assert FlightStrategy().score(delta_booking, expense).score > Decimal("0")
        assert CardGateFlightStrategy().score(delta_booking, expense).score == Decimal("0")

    @pytest.mark.parametrize(
        "merchant,vendor,expected",
        [
            ("Delta Air Lines", "DELTA AIR LINES", True),
            ("Delta", "Delta Air Lines Atlanta", True),
            ("Lufthansa Airways", "Swiss Airways", True),
            ("Delta Air Lines", "DL 0062345", True),
            ("Delta Air Lines", "Hilton Hotels", False),
        ],
    )
    def test_airline_merchants(self, merchant, vendor, expected):
        """Test loose airline merchant comparison."""
        assert airline_merchants_match(merchant, vendor) is expected


class TestStrategySelection:
    """Tests for routing and the strategy registry."""

    def test_routing_by_category(self, delta_booking, hotel_booking):
        """Test flights and hotels are routed to different strategies."""
        strategy = CategoryRoutingStrategy()
        assert strategy.strategy_for(delta_booking).name == "flight"
        assert strategy.strategy_for(hotel_booking).name == "generic"

    def test_routed_score_matches_delegate(self, hotel_booking, hotel_expense):
        """Test routing returns the delegate's score unchanged."""
        routed = CategoryRoutingStrategy().score(hotel_booking, hotel_expense)
        assert routed == GenericStrategy().score(hotel_booking, hotel_expense)

    def test_get_strategy(self):
        """Test strategy lookup and the auto flight policy."""
        assert get_strategy("generic").name == "generic"
        auto = get_strategy("auto", flight_policy="flight_card_gate")
        assert auto.flight_strategy.name == "flight_card_gate"

    @pytest.mark.parametrize("name,policy", [("bogus", "flight"), ("auto", "bogus")])
    def test_unknown_names(self, name, policy):
        """Test unknown strategy or policy names are rejected."""
        with pytest.raises(ValueError):
            get_strategy(name, flight_policy=policy)

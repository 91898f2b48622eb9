"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from travelrecon.config import Settings
from travelrecon.models import BookingCategory, BookingRecord, ExpenseRecord


@pytest.fixture
def delta_booking():
    """Round-trip Delta flight booked through the travel agency."""
    return BookingRecord(
        id="BK-1001",
        traveler_name="John Smith",
        merchant="Delta Air Lines",
        travel_type="Flight",
        origin="SFO",
        destination="JFK",
        card_type="Visa",
        card_last4="1234",
        card_holder_name="John Smith",
        currency="USD",
        amount=Decimal("450.75"),
        expected_transaction_time="2024-03-01",
        booking_date="2024-03-01",
        departure_date="2024-03-10",
        booking_reference="DL1234",
        category=BookingCategory.FLIGHT,
    )


@pytest.fixture
def delta_expense():
    """Card charge for the Delta flight."""
    return ExpenseRecord(
        id="EX-2001",
        employee_name="John Smith",
        vendor="Delta Airlines",
        description="Flight DL1234 SFO-JFK",
        expense_type="Airfare",
        amount=Decimal("450.75"),
        currency="USD",
        card_last4="1234",
        expense_date="2024-03-02",
        origin="SFO",
        destination="JFK",
    )


@pytest.fixture
def hotel_booking():
    """Hotel stay paid with a Mastercard."""
    return BookingRecord(
        id="BK-1002",
        traveler_name="Jane Doe",
        merchant="Hilton",
        travel_type="Hotel",
        card_type="Mastercard",
        card_last4="5678",
        currency="USD",
        amount=Decimal("320.00"),
        booking_date="2024-03-05",
        category=BookingCategory.HOTEL,
    )


@pytest.fixture
def hotel_expense():
    """Expense report line for the hotel stay."""
    return ExpenseRecord(
        id="EX-2002",
        employee_name="Jane Doe",
        vendor="Hilton Hotels",
        description="Hotel stay",
        expense_type="Lodging",
        amount=Decimal("320.00"),
        currency="USD",
        card_last4="5678",
        expense_date="2024-03-06",
    )


@pytest.fixture
def car_booking():
    """Car rental with no matching expense."""
    return BookingRecord(
        id="BK-1003",
        traveler_name="Bob Lee",
        merchant="Hertz",
        travel_type="Car rental",
        card_type="Amex",
        card_last4="9012",
        currency="USD",
        amount=Decimal("89.99"),
        booking_date="2024-03-10",
        category=BookingCategory.CAR,
    )


@pytest.fixture
def coffee_expense():
    """Expense unrelated to any booking."""
    return ExpenseRecord(
        id="EX-2003",
        employee_name="Alice Wong",
        vendor="Starbucks",
        description="Coffee",
        expense_type="Meals",
        amount=Decimal("4.50"),
        currency="USD",
        card_last4="3333",
        expense_date="2024-07-01",
    )


@pytest.fixture
def bookings(delta_booking, hotel_booking, car_booking):
    """Three bookings, two of which have a matching expense."""
    return [delta_booking, hotel_booking, car_booking]


@pytest.fixture
def expenses(delta_expense, hotel_expense, coffee_expense):
    """Three expenses, two of which have a matching booking."""
    return [delta_expense, hotel_expense, coffee_expense]


@pytest.fixture
def test_settings():
    """Settings with defaults and a small batch size."""
    return Settings(batch_size=2)

"""Record models."""

from .records import BookingCategory, BookingRecord, ExpenseRecord, is_missing, present

__all__ = ["BookingCategory", "BookingRecord", "ExpenseRecord", "is_missing", "present"]

"""Expose ORM models."""
from .availability_rule import AvailabilityRule
from .blackout_period import BlackoutPeriod
from .booking import Booking, BookingStatus
from .listing import Listing

__all__ = [
    "AvailabilityRule",
    "BlackoutPeriod",
    "Booking",
    "BookingStatus",
    "Listing",
]

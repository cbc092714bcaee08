"""Schemas for calendar projection and booking-range validation."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ..models.booking import BookingStatus
from ..services.conflicts import ConflictKind, ValidationResult
from .availability import AvailabilityRulesResponse, BlackoutOut


class ValidateBookingRangeRequest(BaseModel):
    check_in: date
    check_out: date


class ConflictingRange(BaseModel):
    kind: ConflictKind
    start_date: date
    end_date: date
    end_inclusive: bool
    reference_id: str | None = None


class ValidateBookingRangeResponse(BaseModel):
    listing_id: str
    check_in: date
    check_out: date
    valid: bool
    conflict_kinds: list[ConflictKind] = Field(default_factory=list)
    conflicting_ranges: list[ConflictingRange] = Field(default_factory=list)
    suggested_check_out: date | None = None
    message: str | None = None

    @classmethod
    def from_result(
        cls,
        listing_id: str,
        check_in: date,
        check_out: date,
        result: ValidationResult,
    ) -> "ValidateBookingRangeResponse":
        return cls(
            listing_id=listing_id,
            check_in=check_in,
            check_out=check_out,
            valid=result.valid,
            conflict_kinds=sorted(result.conflict_kinds, key=lambda kind: kind.value),
            conflicting_ranges=[
                ConflictingRange(
                    kind=conflict.kind,
                    start_date=conflict.start,
                    end_date=conflict.end,
                    end_inclusive=conflict.end_inclusive,
                    reference_id=conflict.reference_id,
                )
                for conflict in result.conflicts
            ],
            suggested_check_out=result.suggested_check_out,
            message=result.message,
        )


class UnavailableDatesResponse(BaseModel):
    listing_id: str
    window_start: date
    window_end: date
    dates: list[date]


class BookedRange(BaseModel):
    check_in_date: date
    check_out_date: date
    status: BookingStatus


class ListingCalendarResponse(BaseModel):
    listing_id: str
    window_start: date
    window_end: date
    unavailable_check_in_dates: list[date]
    booked_ranges: list[BookedRange]
    blackout_periods: list[BlackoutOut]
    availability: AvailabilityRulesResponse


class CheckInAvailabilityResponse(BaseModel):
    listing_id: str
    day: date
    available: bool


class QuoteRequest(BaseModel):
    check_in: date
    check_out: date


class QuoteResponse(BaseModel):
    listing_id: str
    days: int
    price_per_day: Decimal
    total_price: Decimal

"""Calendar and booking-range validation endpoints."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import calendar as calendar_schema
from ..services import calendar as calendar_service

router = APIRouter()


@router.get("/{listing_id}/unavailable-dates", response_model=calendar_schema.UnavailableDatesResponse)
async def get_unavailable_dates(
    listing_id: str,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
) -> calendar_schema.UnavailableDatesResponse:
    """Return dates in the window that cannot be chosen as a check-in."""

    return await calendar_service.get_unavailable_check_in_dates(listing_id, start, end, session)


@router.get("/{listing_id}/calendar", response_model=calendar_schema.ListingCalendarResponse)
async def get_calendar(
    listing_id: str,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
) -> calendar_schema.ListingCalendarResponse:
    """Return unavailable check-in dates, booked ranges, blackouts and the weekday policy."""

    return await calendar_service.get_listing_calendar(listing_id, start, end, session)


@router.get("/{listing_id}/check-in/{day}", response_model=calendar_schema.CheckInAvailabilityResponse)
async def get_check_in_availability(
    listing_id: str,
    day: date,
    session: AsyncSession = Depends(get_session),
) -> calendar_schema.CheckInAvailabilityResponse:
    """Return whether a single day can start a rental."""

    return await calendar_service.check_in_availability(listing_id, day, session)


@router.post("/{listing_id}/validate-range", response_model=calendar_schema.ValidateBookingRangeResponse)
async def validate_range(
    listing_id: str,
    payload: calendar_schema.ValidateBookingRangeRequest,
    session: AsyncSession = Depends(get_session),
) -> calendar_schema.ValidateBookingRangeResponse:
    """Pre-flight a proposed check-in/check-out range."""

    return await calendar_service.validate_booking_range(listing_id, payload, session)


@router.post("/{listing_id}/quote", response_model=calendar_schema.QuoteResponse)
async def quote(
    listing_id: str,
    payload: calendar_schema.QuoteRequest,
    session: AsyncSession = Depends(get_session),
) -> calendar_schema.QuoteResponse:
    """Return the rental price for a range."""

    return await calendar_service.quote_booking(listing_id, payload, session)

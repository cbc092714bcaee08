"""Read-side availability operations: snapshots, validation, calendar projection."""
from __future__ import annotations

from datetime import date, timedelta

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..models.listing import Listing
from ..repositories import availability_rules as rules_repo
from ..repositories import blackouts as blackouts_repo
from ..repositories import bookings as bookings_repo
from ..repositories import listings as listings_repo
from ..schemas import availability as availability_schemas
from ..schemas import calendar as schemas
from . import pricing
from .blackouts import BlackoutWindow
from .conflicts import ListingSnapshot, validate_range
from .ledger import OCCUPYING_STATUSES, OccupiedRange
from .policy import WeekdayPolicy
from .projector import is_check_in_available, unavailable_check_in_dates

ONE_DAY = timedelta(days=1)


async def get_listing_or_404(session: AsyncSession, listing_id: str) -> Listing:
    listing = await listings_repo.get_by_id(session, listing_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    return listing


def ensure_accepting_bookings(listing: Listing) -> None:
    if listing.status != "active":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Listing is not accepting bookings")


def reject_past_check_in(check_in: date) -> None:
    if check_in < date.today():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Check-in date is in the past")


async def load_policy(session: AsyncSession, listing: Listing) -> WeekdayPolicy:
    weekdays = await rules_repo.list_weekdays(session, listing_id=listing.id)
    return WeekdayPolicy.from_storage(listing.availability_restricted, weekdays)


async def load_snapshot(
    session: AsyncSession,
    listing: Listing,
    *,
    from_day: date,
    to_day: date | None = None,
) -> ListingSnapshot:
    """Read policy, blackouts and occupying bookings relevant from ``from_day`` on.

    ``to_day`` bounds the read inclusively; leave it open when barriers after
    the range matter, as they do for check-out suggestions.
    """

    policy = await load_policy(session, listing)
    periods = await blackouts_repo.list_for_listing(
        session,
        listing_id=listing.id,
        ending_on_or_after=from_day,
        starting_on_or_before=to_day,
    )
    bookings = await bookings_repo.list_by_status(
        session,
        listing_id=listing.id,
        statuses=OCCUPYING_STATUSES,
        overlapping_start=from_day,
        overlapping_end=to_day + ONE_DAY if to_day is not None and to_day < date.max else None,
    )
    return ListingSnapshot.build(
        listing.id,
        policy,
        blackouts=[
            BlackoutWindow(start=item.start_date, end=item.end_date, id=item.id, reason=item.reason)
            for item in periods
        ],
        bookings=[
            OccupiedRange(
                check_in=item.check_in_date,
                check_out=item.check_out_date,
                status=item.status,
                booking_id=item.id,
            )
            for item in bookings
        ],
    )


def resolve_window(window_start: date | None, window_end: date | None) -> tuple[date, date]:
    """Fill in the default calendar window and reject inverted or oversized ones."""

    start = window_start or date.today()
    if window_end is not None:
        end = window_end
    elif (date.max - start).days > settings.calendar_window_days:
        end = start + timedelta(days=settings.calendar_window_days)
    else:
        end = date.max
    if end < start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Window end is before window start")
    if (end - start).days + 1 > settings.max_calendar_window_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Window may span at most {settings.max_calendar_window_days} days",
        )
    return start, end


def policy_response(listing_id: str, policy: WeekdayPolicy) -> availability_schemas.AvailabilityRulesResponse:
    return availability_schemas.AvailabilityRulesResponse(
        listing_id=listing_id,
        mode=policy.mode,
        weekdays=sorted(policy.weekdays),
    )


async def validate_booking_range(
    listing_id: str,
    payload: schemas.ValidateBookingRangeRequest,
    session: AsyncSession,
) -> schemas.ValidateBookingRangeResponse:
    """Pre-flight check of a proposed range; conflicts come back in the body.

    Listings that are not accepting bookings and past check-in dates are
    refused here with the same errors the booking gate raises.
    """

    listing = await get_listing_or_404(session, listing_id)
    ensure_accepting_bookings(listing)
    reject_past_check_in(payload.check_in)
    snapshot = await load_snapshot(session, listing, from_day=min(payload.check_in, payload.check_out))
    result = validate_range(snapshot, payload.check_in, payload.check_out)
    return schemas.ValidateBookingRangeResponse.from_result(
        listing_id, payload.check_in, payload.check_out, result
    )


async def get_unavailable_check_in_dates(
    listing_id: str,
    window_start: date | None,
    window_end: date | None,
    session: AsyncSession,
) -> schemas.UnavailableDatesResponse:
    start, end = resolve_window(window_start, window_end)
    listing = await get_listing_or_404(session, listing_id)
    snapshot = await load_snapshot(session, listing, from_day=start, to_day=end)
    return schemas.UnavailableDatesResponse(
        listing_id=listing_id,
        window_start=start,
        window_end=end,
        dates=unavailable_check_in_dates(snapshot, start, end),
    )


async def get_listing_calendar(
    listing_id: str,
    window_start: date | None,
    window_end: date | None,
    session: AsyncSession,
) -> schemas.ListingCalendarResponse:
    """Everything the booking date picker draws, read once."""

    start, end = resolve_window(window_start, window_end)
    listing = await get_listing_or_404(session, listing_id)
    snapshot = await load_snapshot(session, listing, from_day=start, to_day=end)
    return schemas.ListingCalendarResponse(
        listing_id=listing_id,
        window_start=start,
        window_end=end,
        unavailable_check_in_dates=unavailable_check_in_dates(snapshot, start, end),
        booked_ranges=[
            schemas.BookedRange(check_in_date=item.check_in, check_out_date=item.check_out, status=item.status)
            for item in snapshot.bookings
        ],
        blackout_periods=[
            availability_schemas.BlackoutOut(
                id=window.id or "",
                listing_id=listing_id,
                start_date=window.start,
                end_date=window.end,
                reason=window.reason,
            )
            for window in snapshot.blackouts
        ],
        availability=policy_response(listing_id, snapshot.policy),
    )


async def check_in_availability(
    listing_id: str,
    day: date,
    session: AsyncSession,
) -> schemas.CheckInAvailabilityResponse:
    listing = await get_listing_or_404(session, listing_id)
    snapshot = await load_snapshot(session, listing, from_day=day, to_day=day)
    return schemas.CheckInAvailabilityResponse(
        listing_id=listing_id,
        day=day,
        available=is_check_in_available(snapshot, day),
    )


async def quote_booking(
    listing_id: str,
    payload: schemas.QuoteRequest,
    session: AsyncSession,
) -> schemas.QuoteResponse:
    listing = await get_listing_or_404(session, listing_id)
    try:
        days = pricing.rental_days(payload.check_in, payload.check_out)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return schemas.QuoteResponse(
        listing_id=listing_id,
        days=days,
        price_per_day=listing.price_per_day,
        total_price=pricing.calculate_total_price(listing.price_per_day, payload.check_in, payload.check_out),
    )

"""Booking submission gate and status changes."""
from __future__ import annotations

from datetime import date
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..models.booking import BOOKING_OVERLAP_CONSTRAINT, BookingStatus
from ..repositories import bookings as bookings_repo
from ..repositories import listings as listings_repo
from ..schemas import bookings as schemas
from ..schemas.calendar import ValidateBookingRangeResponse
from . import pricing
from .calendar import ensure_accepting_bookings, load_snapshot, reject_past_check_in
from .conflicts import ConflictKind, validate_range
from .ledger import can_transition
from .locks import ListingBusyError, listing_locks

logger = logging.getLogger(__name__)

# Only the owner accepts a request; either party may cancel or mark the rental done.
OWNER_ONLY_TARGETS = frozenset({BookingStatus.CONFIRMED})


async def create_booking(
    listing_id: str,
    payload: schemas.BookingCreateRequest,
    renter_id: str,
    session: AsyncSession,
) -> schemas.BookingOut:
    """Validate and persist a booking as one step per listing.

    The range is re-validated against a snapshot read while the listing row is
    locked, so two submissions for overlapping ranges cannot both pass.
    """

    reject_past_check_in(payload.check_in)

    try:
        async with listing_locks.hold(listing_id, timeout=settings.booking_lock_timeout_seconds):
            async with session.begin():
                listing = await listings_repo.lock_for_update(session, listing_id)
                if listing is None:
                    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
                ensure_accepting_bookings(listing)
                if listing.owner_id == renter_id:
                    raise HTTPException(
                        status_code=status.HTTP_403_FORBIDDEN, detail="Owners cannot book their own listing"
                    )

                snapshot = await load_snapshot(session, listing, from_day=payload.check_in)
                result = validate_range(snapshot, payload.check_in, payload.check_out)
                if not result.valid:
                    validation = ValidateBookingRangeResponse.from_result(
                        listing_id, payload.check_in, payload.check_out, result
                    )
                    logger.warning(
                        "Booking rejected for listing %s %s..%s: %s",
                        listing_id,
                        payload.check_in.isoformat(),
                        payload.check_out.isoformat(),
                        ",".join(kind.value for kind in validation.conflict_kinds),
                    )
                    status_code = (
                        status.HTTP_400_BAD_REQUEST
                        if ConflictKind.INVALID_RANGE in result.conflict_kinds
                        else status.HTTP_409_CONFLICT
                    )
                    raise HTTPException(
                        status_code=status_code,
                        detail={
                            "code": "booking_conflict",
                            "message": result.message,
                            "validation": validation.model_dump(mode="json"),
                        },
                    )

                booking = await bookings_repo.create_booking(
                    session,
                    listing_id=listing_id,
                    renter_id=renter_id,
                    owner_id=listing.owner_id,
                    check_in_date=payload.check_in,
                    check_out_date=payload.check_out,
                    total_price=pricing.calculate_total_price(
                        listing.price_per_day, payload.check_in, payload.check_out
                    ),
                    payment_intent_id=payload.payment_intent_id,
                )
    except ListingBusyError as exc:
        logger.warning("Booking submission timed out waiting on listing %s", listing_id)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Listing is busy, retry") from exc
    except IntegrityError as exc:
        if BOOKING_OVERLAP_CONSTRAINT not in str(exc.orig):
            raise
        logger.warning("Booking for listing %s rejected by storage overlap constraint", listing_id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": "booking_conflict",
                "message": "Those dates were just booked by someone else.",
                "validation": None,
            },
        ) from exc

    logger.info(
        "Booking %s created for listing %s %s..%s",
        booking.id,
        listing_id,
        booking.check_in_date.isoformat(),
        booking.check_out_date.isoformat(),
    )
    return schemas.BookingOut.model_validate(booking)


async def advance_booking_status(
    booking_id: str,
    payload: schemas.BookingStatusRequest,
    acting_user_id: str,
    session: AsyncSession,
) -> schemas.BookingOut:
    """Move a booking along pending -> confirmed -> completed, or cancel it.

    Completion is only accepted once the check-out date has been reached.
    """

    async with session.begin():
        booking = await bookings_repo.get_by_id(session, booking_id)
        if booking is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

        if acting_user_id not in (booking.owner_id, booking.renter_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a party to this booking")
        if payload.status in OWNER_ONLY_TARGETS and acting_user_id != booking.owner_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Only the listing owner may confirm a booking"
            )

        current = BookingStatus(booking.status)
        if current != payload.status:
            if not can_transition(current, payload.status):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail={
                        "code": "invalid_transition",
                        "message": f"Cannot move a {current.value} booking to {payload.status.value}",
                    },
                )
            if payload.status == BookingStatus.COMPLETED and booking.check_out_date > date.today():
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail={
                        "code": "invalid_transition",
                        "message": "A booking cannot be completed before its rental period has ended",
                    },
                )
            booking.status = payload.status
            session.add(booking)

    if current != payload.status:
        logger.info("Booking %s moved %s -> %s by %s", booking_id, current.value, payload.status.value, acting_user_id)
    return schemas.BookingOut.model_validate(booking)

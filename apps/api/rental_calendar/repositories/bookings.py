"""Booking persistence helpers."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.booking import Booking, BookingStatus


async def list_by_status(
    session: AsyncSession,
    *,
    listing_id: str,
    statuses: Iterable[BookingStatus],
    overlapping_start: date | None = None,
    overlapping_end: date | None = None,
) -> list[Booking]:
    """Return bookings in the given statuses, ordered by check-in.

    When bounds are supplied only bookings whose ``[check_in, check_out)``
    overlaps ``[overlapping_start, overlapping_end)`` are returned; either bound
    may be left open.
    """

    stmt = select(Booking).where(
        Booking.listing_id == listing_id,
        Booking.status.in_(list(statuses)),
    )
    if overlapping_start is not None:
        stmt = stmt.where(Booking.check_out_date > overlapping_start)
    if overlapping_end is not None:
        stmt = stmt.where(Booking.check_in_date < overlapping_end)
    stmt = stmt.order_by(Booking.check_in_date.asc(), Booking.check_out_date.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, booking_id: str) -> Booking | None:
    return await session.get(Booking, booking_id)


async def create_booking(
    session: AsyncSession,
    *,
    listing_id: str,
    renter_id: str,
    owner_id: str,
    check_in_date: date,
    check_out_date: date,
    total_price: Decimal,
    payment_intent_id: str | None = None,
) -> Booking:
    """Persist a new pending booking and return it."""

    booking = Booking(
        id=str(uuid4()),
        listing_id=listing_id,
        renter_id=renter_id,
        owner_id=owner_id,
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        total_price=total_price,
        status=BookingStatus.PENDING,
        payment_intent_id=payment_intent_id,
    )
    session.add(booking)
    await session.flush()
    return booking

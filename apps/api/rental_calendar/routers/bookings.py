"""Booking submission and status endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.deps import get_acting_user_id
from ..db.session import get_session
from ..schemas import bookings as bookings_schema
from ..services import bookings as bookings_service

router = APIRouter()


@router.post(
    "/listings/{listing_id}/bookings",
    response_model=bookings_schema.BookingOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    listing_id: str,
    payload: bookings_schema.BookingCreateRequest,
    acting_user_id: str = Depends(get_acting_user_id),
    session: AsyncSession = Depends(get_session),
) -> bookings_schema.BookingOut:
    """Submit a booking; the range is re-validated before it is stored."""

    return await bookings_service.create_booking(listing_id, payload, acting_user_id, session)


@router.post("/bookings/{booking_id}/status", response_model=bookings_schema.BookingOut)
async def update_status(
    booking_id: str,
    payload: bookings_schema.BookingStatusRequest,
    acting_user_id: str = Depends(get_acting_user_id),
    session: AsyncSession = Depends(get_session),
) -> bookings_schema.BookingOut:
    return await bookings_service.advance_booking_status(booking_id, payload, acting_user_id, session)

"""Schemas for booking submission and status changes."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..models.booking import BookingStatus


class BookingCreateRequest(BaseModel):
    check_in: date
    check_out: date
    payment_intent_id: str | None = Field(default=None)


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    listing_id: str
    renter_id: str
    owner_id: str
    check_in_date: date
    check_out_date: date
    total_price: Decimal
    status: BookingStatus
    payment_intent_id: str | None = None
    created_at: datetime | None = None


class BookingStatusRequest(BaseModel):
    status: BookingStatus

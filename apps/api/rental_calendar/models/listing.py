"""Listing model."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .availability_rule import AvailabilityRule
    from .blackout_period import BlackoutPeriod
    from .booking import Booking


class Listing(Base):
    """Rental item offered by an owner.

    Only the columns the availability engine needs are mapped here; listing
    CRUD lives with the marketplace front end.
    """

    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive', 'archived')", name="status"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, default="active", nullable=False)
    # False: any weekday is a pickup day. True: only the weekdays in availability_rules.
    availability_restricted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    availability_rules: Mapped[list["AvailabilityRule"]] = relationship(
        "AvailabilityRule", back_populates="listing", cascade="all, delete-orphan"
    )
    blackout_periods: Mapped[list["BlackoutPeriod"]] = relationship(
        "BlackoutPeriod", back_populates="listing", cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="listing")

"""Availability rule model."""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .listing import Listing


class AvailabilityRule(Base):
    """Weekday on which a listing may be picked up (0 = Sunday ... 6 = Saturday)."""

    __tablename__ = "availability_rules"
    __table_args__ = (CheckConstraint("weekday >= 0 AND weekday <= 6", name="weekday_range"),)

    listing_id: Mapped[str] = mapped_column(
        ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True
    )
    weekday: Mapped[int] = mapped_column(SmallInteger, primary_key=True)

    listing: Mapped["Listing"] = relationship("Listing", back_populates="availability_rules")

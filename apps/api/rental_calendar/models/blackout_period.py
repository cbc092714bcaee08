"""Blackout period model."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .listing import Listing

# Installed by scripts/bootstrap_db.py; see install_exclusion_constraints there.
BLACKOUT_OVERLAP_CONSTRAINT = "ex_blackout_periods_no_overlap"


class BlackoutPeriod(Base):
    """Owner-declared unavailable range, inclusive on both ends."""

    __tablename__ = "blackout_periods"
    __table_args__ = (CheckConstraint("end_date > start_date", name="end_after_start"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    listing_id: Mapped[str] = mapped_column(
        ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    listing: Mapped["Listing"] = relationship("Listing", back_populates="blackout_periods")

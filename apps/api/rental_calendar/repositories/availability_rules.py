"""Weekday availability rule persistence."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.availability_rule import AvailabilityRule


async def list_weekdays(session: AsyncSession, *, listing_id: str) -> list[int]:
    """Return the weekdays stored for a listing, ascending."""

    stmt = (
        select(AvailabilityRule.weekday)
        .where(AvailabilityRule.listing_id == listing_id)
        .order_by(AvailabilityRule.weekday.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def replace_weekdays(session: AsyncSession, *, listing_id: str, weekdays: Iterable[int]) -> list[int]:
    """Delete every rule for the listing and insert the given weekdays.

    Callers run this inside a transaction so readers never observe the gap.
    """

    await session.execute(delete(AvailabilityRule).where(AvailabilityRule.listing_id == listing_id))
    stored = sorted(set(weekdays))
    for weekday in stored:
        session.add(AvailabilityRule(listing_id=listing_id, weekday=weekday))
    await session.flush()
    return stored

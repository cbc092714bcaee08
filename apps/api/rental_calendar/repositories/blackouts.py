"""Blackout period persistence."""
from __future__ import annotations

from datetime import date
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.blackout_period import BlackoutPeriod


async def list_for_listing(
    session: AsyncSession,
    *,
    listing_id: str,
    ending_on_or_after: date | None = None,
    starting_on_or_before: date | None = None,
) -> list[BlackoutPeriod]:
    """Return blackout periods for a listing ordered by start date."""

    stmt = select(BlackoutPeriod).where(BlackoutPeriod.listing_id == listing_id)
    if ending_on_or_after is not None:
        stmt = stmt.where(BlackoutPeriod.end_date >= ending_on_or_after)
    if starting_on_or_before is not None:
        stmt = stmt.where(BlackoutPeriod.start_date <= starting_on_or_before)
    stmt = stmt.order_by(BlackoutPeriod.start_date.asc(), BlackoutPeriod.end_date.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(session: AsyncSession, blackout_id: str) -> BlackoutPeriod | None:
    return await session.get(BlackoutPeriod, blackout_id)


async def create_blackout(
    session: AsyncSession,
    *,
    listing_id: str,
    start_date: date,
    end_date: date,
    reason: str | None = None,
) -> BlackoutPeriod:
    """Persist a new blackout period and return it."""

    period = BlackoutPeriod(
        id=str(uuid4()),
        listing_id=listing_id,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
    )
    session.add(period)
    await session.flush()
    return period


async def delete_blackout(session: AsyncSession, period: BlackoutPeriod) -> None:
    await session.delete(period)
    await session.flush()

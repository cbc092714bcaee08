"""Listing lookups needed by the availability engine."""
from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.listing import Listing


async def get_by_id(session: AsyncSession, listing_id: str) -> Listing | None:
    """Return a listing by identifier."""

    stmt: Select[tuple[Listing]] = select(Listing).where(Listing.id == listing_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def lock_for_update(session: AsyncSession, listing_id: str) -> Listing | None:
    """Return the listing row locked until the surrounding transaction ends.

    Writers touching the listing's calendar take this lock first so their
    read-validate-insert sequences run one at a time per listing.
    """

    stmt = select(Listing).where(Listing.id == listing_id).with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()

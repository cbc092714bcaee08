"""Owner-side availability management: pickup weekdays and blackout periods."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..models.blackout_period import BLACKOUT_OVERLAP_CONSTRAINT
from ..models.listing import Listing
from ..repositories import availability_rules as rules_repo
from ..repositories import blackouts as blackouts_repo
from ..repositories import listings as listings_repo
from ..schemas import availability as schemas
from .blackouts import BlackoutWindow, find_overlapping_blackout
from .calendar import get_listing_or_404, load_policy, policy_response
from .locks import ListingBusyError, listing_locks
from .policy import WeekdayPolicy

logger = logging.getLogger(__name__)


async def get_availability_rules(listing_id: str, session: AsyncSession) -> schemas.AvailabilityRulesResponse:
    listing = await get_listing_or_404(session, listing_id)
    policy = await load_policy(session, listing)
    return policy_response(listing_id, policy)


async def set_availability_rules(
    listing_id: str,
    payload: schemas.AvailabilityRulesRequest,
    acting_user_id: str,
    session: AsyncSession,
) -> schemas.AvailabilityRulesResponse:
    """Replace the listing's pickup weekdays in one transaction."""

    policy = WeekdayPolicy.open() if payload.is_open else WeekdayPolicy.restricted(payload.weekdays or [])

    async with session.begin():
        listing = await _locked_listing_for_owner(session, listing_id, acting_user_id)
        await rules_repo.replace_weekdays(session, listing_id=listing_id, weekdays=policy.weekdays)
        listing.availability_restricted = not policy.is_open
        session.add(listing)

    logger.info(
        "Availability rules replaced for listing %s: mode=%s weekdays=%s",
        listing_id,
        policy.mode,
        sorted(policy.weekdays),
    )
    return policy_response(listing_id, policy)


async def list_blackout_periods(listing_id: str, session: AsyncSession) -> schemas.BlackoutListResponse:
    await get_listing_or_404(session, listing_id)
    periods = await blackouts_repo.list_for_listing(session, listing_id=listing_id)
    return schemas.BlackoutListResponse(
        listing_id=listing_id,
        items=[schemas.BlackoutOut.model_validate(period) for period in periods],
    )


async def add_blackout_period(
    listing_id: str,
    payload: schemas.BlackoutCreateRequest,
    acting_user_id: str,
    session: AsyncSession,
) -> schemas.BlackoutOut:
    """Create a blackout period unless it collides with an existing one.

    The overlap check and the insert run under the listing's critical section;
    the storage exclusion constraint backs it up across processes.
    """

    try:
        async with listing_locks.hold(listing_id, timeout=settings.booking_lock_timeout_seconds):
            async with session.begin():
                await _locked_listing_for_owner(session, listing_id, acting_user_id)
                existing = await blackouts_repo.list_for_listing(session, listing_id=listing_id)
                colliding = find_overlapping_blackout(
                    [_window(period) for period in existing], payload.start_date, payload.end_date
                )
                if colliding is not None:
                    raise _overlap_conflict(colliding)
                period = await blackouts_repo.create_blackout(
                    session,
                    listing_id=listing_id,
                    start_date=payload.start_date,
                    end_date=payload.end_date,
                    reason=payload.reason,
                )
    except ListingBusyError as exc:
        logger.warning("Blackout creation timed out waiting on listing %s", listing_id)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Listing is busy, retry") from exc
    except IntegrityError as exc:
        if BLACKOUT_OVERLAP_CONSTRAINT not in str(exc.orig):
            raise
        existing = await blackouts_repo.list_for_listing(session, listing_id=listing_id)
        colliding = find_overlapping_blackout(
            [_window(period) for period in existing], payload.start_date, payload.end_date
        )
        raise _overlap_conflict(colliding) from exc

    logger.info(
        "Blackout %s added to listing %s: %s..%s",
        period.id,
        listing_id,
        period.start_date.isoformat(),
        period.end_date.isoformat(),
    )
    return schemas.BlackoutOut.model_validate(period)


async def remove_blackout_period(blackout_id: str, acting_user_id: str, session: AsyncSession) -> None:
    async with session.begin():
        period = await blackouts_repo.get_by_id(session, blackout_id)
        if period is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blackout period not found")
        listing = await listings_repo.get_by_id(session, period.listing_id)
        _ensure_owner(listing, acting_user_id)
        await blackouts_repo.delete_blackout(session, period)

    logger.info("Blackout %s removed from listing %s", blackout_id, period.listing_id)


async def _locked_listing_for_owner(session: AsyncSession, listing_id: str, acting_user_id: str) -> Listing:
    listing = await listings_repo.lock_for_update(session, listing_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    _ensure_owner(listing, acting_user_id)
    return listing


def _ensure_owner(listing: Listing | None, acting_user_id: str) -> None:
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    if listing.owner_id != acting_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the listing owner may change availability")


def _window(period) -> BlackoutWindow:
    return BlackoutWindow(start=period.start_date, end=period.end_date, id=period.id, reason=period.reason)


def _overlap_conflict(colliding: BlackoutWindow | None) -> HTTPException:
    logger.warning("Rejected overlapping blackout; collides with %s", colliding.id if colliding else "unknown")
    conflicting_period = None
    if colliding is not None:
        conflicting_period = {
            "id": colliding.id,
            "start_date": colliding.start.isoformat(),
            "end_date": colliding.end.isoformat(),
            "reason": colliding.reason,
        }
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "code": "overlap_conflict",
            "message": "This date range overlaps with an existing blackout period",
            "conflicting_period": conflicting_period,
        },
    )

"""Owner endpoints for pickup weekdays and blackout periods."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.deps import get_acting_user_id
from ..db.session import get_session
from ..schemas import availability as availability_schema
from ..services import availability as availability_service

router = APIRouter()


@router.get("/listings/{listing_id}/availability-rules", response_model=availability_schema.AvailabilityRulesResponse)
async def get_rules(
    listing_id: str,
    session: AsyncSession = Depends(get_session),
) -> availability_schema.AvailabilityRulesResponse:
    return await availability_service.get_availability_rules(listing_id, session)


@router.put("/listings/{listing_id}/availability-rules", response_model=availability_schema.AvailabilityRulesResponse)
async def put_rules(
    listing_id: str,
    payload: availability_schema.AvailabilityRulesRequest,
    acting_user_id: str = Depends(get_acting_user_id),
    session: AsyncSession = Depends(get_session),
) -> availability_schema.AvailabilityRulesResponse:
    """Replace the pickup weekdays for a listing."""

    return await availability_service.set_availability_rules(listing_id, payload, acting_user_id, session)


@router.get("/listings/{listing_id}/blackouts", response_model=availability_schema.BlackoutListResponse)
async def list_blackouts(
    listing_id: str,
    session: AsyncSession = Depends(get_session),
) -> availability_schema.BlackoutListResponse:
    return await availability_service.list_blackout_periods(listing_id, session)


@router.post(
    "/listings/{listing_id}/blackouts",
    response_model=availability_schema.BlackoutOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_blackout(
    listing_id: str,
    payload: availability_schema.BlackoutCreateRequest,
    acting_user_id: str = Depends(get_acting_user_id),
    session: AsyncSession = Depends(get_session),
) -> availability_schema.BlackoutOut:
    """Take an inclusive date range off the listing's calendar."""

    return await availability_service.add_blackout_period(listing_id, payload, acting_user_id, session)


@router.delete("/blackouts/{blackout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blackout(
    blackout_id: str,
    acting_user_id: str = Depends(get_acting_user_id),
    session: AsyncSession = Depends(get_session),
) -> Response:
    await availability_service.remove_blackout_period(blackout_id, acting_user_id, session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""HTTP-level tests with the service layer stubbed out."""
from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from rental_calendar.db.session import get_session
from rental_calendar.main import app
from rental_calendar.schemas import availability as availability_schema
from rental_calendar.schemas import calendar as calendar_schema
from rental_calendar.services import availability as availability_service
from rental_calendar.services import calendar as calendar_service
from rental_calendar.services.conflicts import ConflictKind


async def _fake_session():
    yield AsyncMock()


@pytest.fixture
def client():
    app.dependency_overrides[get_session] = _fake_session
    transport = ASGITransport(app=app)
    yield AsyncClient(transport=transport, base_url="http://testserver")
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_validate_range_returns_conflict_as_body(client, monkeypatch):
    validate = AsyncMock(
        return_value=calendar_schema.ValidateBookingRangeResponse(
            listing_id="listing-1",
            check_in=date(2025, 3, 1),
            check_out=date(2025, 3, 12),
            valid=False,
            conflict_kinds=[ConflictKind.BOOKING_CONFLICT],
            suggested_check_out=date(2025, 3, 9),
            message="Cannot book during this period.",
        )
    )
    monkeypatch.setattr(calendar_service, "validate_booking_range", validate)

    async with client:
        response = await client.post(
            "/api/listings/listing-1/validate-range",
            json={"check_in": "2025-03-01", "check_out": "2025-03-12"},
        )

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["conflict_kinds"] == ["booking_conflict"]
    assert body["suggested_check_out"] == "2025-03-09"
    assert validate.await_args.args[0] == "listing-1"


@pytest.mark.asyncio
async def test_unavailable_dates_passes_window(client, monkeypatch):
    project = AsyncMock(
        return_value=calendar_schema.UnavailableDatesResponse(
            listing_id="listing-1",
            window_start=date(2025, 3, 1),
            window_end=date(2025, 3, 31),
            dates=[date(2025, 3, 8)],
        )
    )
    monkeypatch.setattr(calendar_service, "get_unavailable_check_in_dates", project)

    async with client:
        response = await client.get(
            "/api/listings/listing-1/unavailable-dates", params={"start": "2025-03-01", "end": "2025-03-31"}
        )

    assert response.status_code == 200
    assert response.json()["dates"] == ["2025-03-08"]
    assert project.await_args.args[1:3] == (date(2025, 3, 1), date(2025, 3, 31))


@pytest.mark.asyncio
async def test_mutations_require_acting_user(client, monkeypatch):
    monkeypatch.setattr(availability_service, "set_availability_rules", AsyncMock())

    async with client:
        response = await client.put("/api/listings/listing-1/availability-rules", json={"weekdays": [5]})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_put_rules_forwards_acting_user(client, monkeypatch):
    set_rules = AsyncMock(
        return_value=availability_schema.AvailabilityRulesResponse(
            listing_id="listing-1", mode="restricted", weekdays=[5]
        )
    )
    monkeypatch.setattr(availability_service, "set_availability_rules", set_rules)

    async with client:
        response = await client.put(
            "/api/listings/listing-1/availability-rules",
            json={"weekdays": [5]},
            headers={"X-User-Id": "owner-1"},
        )

    assert response.status_code == 200
    assert response.json() == {"listing_id": "listing-1", "mode": "restricted", "weekdays": [5]}
    assert set_rules.await_args.args[2] == "owner-1"


@pytest.mark.asyncio
async def test_put_rules_rejects_bad_weekday(client):
    async with client:
        response = await client.put(
            "/api/listings/listing-1/availability-rules",
            json={"weekdays": [9]},
            headers={"X-User-Id": "owner-1"},
        )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_blackout_returns_no_content(client, monkeypatch):
    remove = AsyncMock(return_value=None)
    monkeypatch.setattr(availability_service, "remove_blackout_period", remove)

    async with client:
        response = await client.delete("/api/blackouts/bo-1", headers={"X-User-Id": "owner-1"})

    assert response.status_code == 204
    remove.assert_awaited_once()


@pytest.mark.asyncio
async def test_storage_failure_is_surfaced(client, monkeypatch):
    monkeypatch.setattr(
        calendar_service,
        "check_in_availability",
        AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))),
    )

    async with client:
        response = await client.get("/api/listings/listing-1/check-in/2025-03-08")

    assert response.status_code == 503
    assert response.json() == {"detail": "storage_unavailable"}

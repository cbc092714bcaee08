"""Schemas for owner-managed availability: weekday rules and blackout periods."""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..services.blackouts import validate_blackout_bounds


class AvailabilityRulesRequest(BaseModel):
    """Replace a listing's pickup weekdays.

    ``weekdays=None`` opens every weekday. A list, even an empty one, restricts
    pickups to exactly those weekdays unless ``restricted`` is explicitly false.
    """

    weekdays: list[int] | None = Field(default=None, description="0 = Sunday ... 6 = Saturday")
    restricted: bool | None = Field(default=None)

    @field_validator("weekdays")
    @classmethod
    def _check_weekdays(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return None
        invalid = sorted({day for day in value if not 0 <= day <= 6})
        if invalid:
            raise ValueError(f"weekdays must be between 0 and 6, got {invalid}")
        return sorted(set(value))

    @model_validator(mode="after")
    def _check_consistency(self) -> "AvailabilityRulesRequest":
        if self.restricted is False and self.weekdays:
            raise ValueError("weekdays cannot be listed when restricted is false")
        return self

    @property
    def is_open(self) -> bool:
        if self.restricted is not None:
            return not self.restricted
        return self.weekdays is None


class AvailabilityRulesResponse(BaseModel):
    listing_id: str
    mode: Literal["open", "restricted"]
    weekdays: list[int] = Field(default_factory=list)


class BlackoutCreateRequest(BaseModel):
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def _check_bounds(self) -> "BlackoutCreateRequest":
        validate_blackout_bounds(self.start_date, self.end_date)
        return self


class BlackoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    listing_id: str
    start_date: date
    end_date: date
    reason: str | None = None
    created_at: datetime | None = None


class BlackoutListResponse(BaseModel):
    listing_id: str
    items: list[BlackoutOut]

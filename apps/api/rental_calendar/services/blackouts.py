"""Blackout period rules: inclusive date ranges an owner has taken off the calendar."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class BlackoutWindow:
    """Inclusive ``[start, end]`` blackout for one listing."""

    start: date
    end: date
    id: str | None = None
    reason: str | None = None

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end

    def intersects(self, start: date, end: date) -> bool:
        """Inclusive-inclusive intersection with ``[start, end]``."""

        return start <= self.end and end >= self.start


def validate_blackout_bounds(start: date, end: date) -> None:
    """Raise ``ValueError`` unless ``end`` is strictly after ``start``."""

    if end <= start:
        raise ValueError("End date must be after start date")


def is_date_blacked_out(blackouts: Iterable[BlackoutWindow], day: date) -> bool:
    return any(window.covers(day) for window in blackouts)


def find_overlapping_blackout(
    existing: Iterable[BlackoutWindow],
    start: date,
    end: date,
) -> BlackoutWindow | None:
    """Return the earliest existing window colliding with ``[start, end]``.

    A shared boundary day counts as a collision.
    """

    colliding = [window for window in existing if window.intersects(start, end)]
    if not colliding:
        return None
    return min(colliding, key=lambda window: window.start)


def blackouts_touching_range(
    blackouts: Iterable[BlackoutWindow],
    check_in: date,
    check_out: date,
) -> list[BlackoutWindow]:
    """Return windows containing any occupied day of ``[check_in, check_out)``."""

    return sorted(
        (window for window in blackouts if window.start < check_out and window.end >= check_in),
        key=lambda window: window.start,
    )


def order_blackouts(blackouts: Sequence[BlackoutWindow]) -> list[BlackoutWindow]:
    return sorted(blackouts, key=lambda window: (window.start, window.end))

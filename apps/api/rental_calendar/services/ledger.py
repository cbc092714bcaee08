"""Booking ledger rules shared by every conflict and calendar computation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ..models.booking import BookingStatus

# The one definition of which bookings hold their dates. Cancelled bookings
# release them; completed ones keep their historical range blocked.
OCCUPYING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.COMPLETED}
)

STATUS_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def is_occupying(status: BookingStatus | str) -> bool:
    return BookingStatus(status) in OCCUPYING_STATUSES


def can_transition(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    return BookingStatus(target) in STATUS_TRANSITIONS[BookingStatus(current)]


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Half-open overlap test: the end day of either range is never occupied."""

    return a_start < b_end and b_start < a_end


@dataclass(frozen=True, slots=True)
class OccupiedRange:
    """Dates held by a booking, ``[check_in, check_out)``."""

    check_in: date
    check_out: date
    status: BookingStatus
    booking_id: str | None = None

    def covers(self, day: date) -> bool:
        return self.check_in <= day < self.check_out

    def overlaps(self, check_in: date, check_out: date) -> bool:
        return ranges_overlap(self.check_in, self.check_out, check_in, check_out)


def occupying_ranges(ranges: Iterable[OccupiedRange]) -> list[OccupiedRange]:
    """Drop non-occupying bookings and order the rest by check-in."""

    return sorted(
        (item for item in ranges if is_occupying(item.status)),
        key=lambda item: (item.check_in, item.check_out),
    )

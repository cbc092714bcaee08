"""Booking-range validation and check-out suggestions.

Everything here is a pure function of a :class:`ListingSnapshot`: the listing's
weekday policy, its blackout windows and its occupying bookings as read at one
moment. The same code backs the pre-submission check the calendar UI calls and
the authoritative gate that runs before a booking row is written.
"""
from __future__ import annotations

import bisect
import enum
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from .blackouts import BlackoutWindow, blackouts_touching_range, is_date_blacked_out, order_blackouts
from .ledger import OccupiedRange, occupying_ranges
from .policy import WEEKDAY_NAMES, WeekdayPolicy, check_in_weekday, is_eligible_check_in_day

ONE_DAY = timedelta(days=1)


class ConflictKind(str, enum.Enum):
    INVALID_RANGE = "invalid_range"
    PICKUP_DAY_NOT_ALLOWED = "pickup_day_not_allowed"
    BOOKING_CONFLICT = "booking_conflict"
    BLACKOUT_CONFLICT = "blackout_conflict"


@dataclass(frozen=True, slots=True)
class ListingSnapshot:
    """Availability inputs for one listing, already filtered and ordered."""

    listing_id: str
    policy: WeekdayPolicy
    blackouts: tuple[BlackoutWindow, ...] = ()
    bookings: tuple[OccupiedRange, ...] = ()

    @classmethod
    def build(
        cls,
        listing_id: str,
        policy: WeekdayPolicy,
        blackouts: Iterable[BlackoutWindow] = (),
        bookings: Iterable[OccupiedRange] = (),
    ) -> "ListingSnapshot":
        return cls(
            listing_id=listing_id,
            policy=policy,
            blackouts=tuple(order_blackouts(list(blackouts))),
            bookings=tuple(occupying_ranges(bookings)),
        )


@dataclass(frozen=True, slots=True)
class Conflict:
    """One obstruction found inside a proposed range."""

    kind: ConflictKind
    start: date
    end: date
    end_inclusive: bool
    reference_id: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    conflict_kinds: frozenset[ConflictKind] = frozenset()
    conflicts: tuple[Conflict, ...] = field(default_factory=tuple)
    suggested_check_out: date | None = None
    message: str | None = None

    @property
    def valid(self) -> bool:
        return not self.conflict_kinds

    @property
    def blocks_check_in(self) -> bool:
        """True when the check-in day itself is unusable (calendar grey-out)."""

        return bool(
            self.conflict_kinds
            & {
                ConflictKind.PICKUP_DAY_NOT_ALLOWED,
                ConflictKind.BOOKING_CONFLICT,
                ConflictKind.BLACKOUT_CONFLICT,
            }
        )


VALID = ValidationResult()


def is_day_occupied(snapshot: ListingSnapshot, day: date) -> bool:
    return any(item.covers(day) for item in snapshot.bookings)


def suggest_latest_check_out(snapshot: ListingSnapshot, check_in: date) -> date | None:
    """Return the day before the first barrier strictly after ``check_in``.

    A barrier is an occupying booking's check-in or a blackout's start date.
    Both sequences are kept sorted, so each source is a single bisect.
    ``None`` means nothing lies ahead and the rental may run open-ended.
    """

    candidates: list[date] = []

    booking_starts = [item.check_in for item in snapshot.bookings]
    index = bisect.bisect_right(booking_starts, check_in)
    if index < len(booking_starts):
        candidates.append(booking_starts[index])

    blackout_starts = [window.start for window in snapshot.blackouts]
    index = bisect.bisect_right(blackout_starts, check_in)
    if index < len(blackout_starts):
        candidates.append(blackout_starts[index])

    if not candidates:
        return None
    return min(candidates) - ONE_DAY


def validate_range(snapshot: ListingSnapshot, check_in: date, check_out: date) -> ValidationResult:
    """Decide whether ``[check_in, check_out)`` can be booked.

    Conflicts are returned, never raised.
    """

    if check_out <= check_in:
        return ValidationResult(
            conflict_kinds=frozenset({ConflictKind.INVALID_RANGE}),
            message="Check-out date must be after check-in date.",
        )

    if not is_eligible_check_in_day(snapshot.policy, check_in):
        weekday = WEEKDAY_NAMES[check_in_weekday(check_in)]
        return ValidationResult(
            conflict_kinds=frozenset({ConflictKind.PICKUP_DAY_NOT_ALLOWED}),
            message=f"Pickup is not available on {weekday}.",
        )

    conflicts: list[Conflict] = []
    for window in blackouts_touching_range(snapshot.blackouts, check_in, check_out):
        conflicts.append(
            Conflict(
                kind=ConflictKind.BLACKOUT_CONFLICT,
                start=window.start,
                end=window.end,
                end_inclusive=True,
                reference_id=window.id,
            )
        )
    for item in snapshot.bookings:
        if item.overlaps(check_in, check_out):
            conflicts.append(
                Conflict(
                    kind=ConflictKind.BOOKING_CONFLICT,
                    start=item.check_in,
                    end=item.check_out,
                    end_inclusive=False,
                    reference_id=item.booking_id,
                )
            )

    if not conflicts:
        return VALID

    kinds = frozenset(conflict.kind for conflict in conflicts)
    suggestion = _usable_suggestion(snapshot, check_in)
    return ValidationResult(
        conflict_kinds=kinds,
        conflicts=tuple(conflicts),
        suggested_check_out=suggestion,
        message=describe_conflict(kinds, check_in, check_out, suggestion),
    )


def _usable_suggestion(snapshot: ListingSnapshot, check_in: date) -> date | None:
    # A suggestion only helps when the check-in day itself is free and the
    # suggested range is non-empty.
    if is_date_blacked_out(snapshot.blackouts, check_in) or is_day_occupied(snapshot, check_in):
        return None
    suggestion = suggest_latest_check_out(snapshot, check_in)
    if suggestion is None or suggestion <= check_in:
        return None
    return suggestion


def describe_conflict(
    kinds: frozenset[ConflictKind],
    check_in: date,
    check_out: date,
    suggestion: date | None,
) -> str:
    """Render the renter-facing explanation for a conflicting range."""

    labels = []
    if ConflictKind.BOOKING_CONFLICT in kinds:
        labels.append("existing bookings")
    if ConflictKind.BLACKOUT_CONFLICT in kinds:
        labels.append("owner blackout periods")
    conflict_type = " and ".join(labels)

    if suggestion is None:
        return f"Cannot book this date range due to {conflict_type}."
    return (
        f"Cannot book during this period. There are {conflict_type} between "
        f"{check_in.isoformat()} and {check_out.isoformat()}. "
        f"You can book until {suggestion.isoformat()}."
    )

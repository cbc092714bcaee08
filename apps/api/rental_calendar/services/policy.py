"""Weekday pickup policy for a listing."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal

PolicyMode = Literal["open", "restricted"]

SUNDAY = 0
SATURDAY = 6
WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def check_in_weekday(day: date) -> int:
    """Return the weekday number used by availability rules (Sunday = 0)."""

    return day.isoweekday() % 7


@dataclass(frozen=True, slots=True)
class WeekdayPolicy:
    """Either every weekday is a pickup day, or only an explicit (possibly empty) set is.

    ``restricted(frozenset())`` means the owner accepts no new pickups at all,
    which is not the same thing as never having configured a policy.
    """

    mode: PolicyMode
    weekdays: frozenset[int] = frozenset()

    @classmethod
    def open(cls) -> "WeekdayPolicy":
        return cls(mode="open")

    @classmethod
    def restricted(cls, weekdays: Iterable[int]) -> "WeekdayPolicy":
        days = frozenset(weekdays)
        invalid = sorted(day for day in days if not SUNDAY <= day <= SATURDAY)
        if invalid:
            raise ValueError(f"Weekdays must be between 0 and 6, got {invalid}")
        return cls(mode="restricted", weekdays=days)

    @classmethod
    def from_storage(cls, restricted: bool, weekdays: Iterable[int]) -> "WeekdayPolicy":
        """Build a policy from the listing flag and its stored rule rows."""

        days = list(weekdays)
        if restricted or days:
            return cls.restricted(days)
        return cls.open()

    @property
    def is_open(self) -> bool:
        return self.mode == "open"

    def allows(self, day: date) -> bool:
        if self.is_open:
            return True
        return check_in_weekday(day) in self.weekdays


def is_eligible_check_in_day(policy: WeekdayPolicy, day: date) -> bool:
    """Return True if ``day`` may start a rental under ``policy``.

    Only the check-in day is subject to the weekday policy; check-out may fall
    on any day.
    """

    return policy.allows(day)

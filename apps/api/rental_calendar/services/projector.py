"""Expand a listing snapshot into the dates that cannot start a rental."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator

from .conflicts import ListingSnapshot

ONE_DAY = timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day in ``[start, end]`` inclusive."""

    if end < start:
        return
    current = start
    while True:
        yield current
        if current == end:
            return
        current += ONE_DAY


def _mark_span(marked: set[date], span_start: date, span_last: date, window_start: date, window_end: date) -> None:
    first = max(span_start, window_start)
    last = min(span_last, window_end)
    marked.update(iter_days(first, last))


def unavailable_check_in_dates(
    snapshot: ListingSnapshot,
    window_start: date,
    window_end: date,
) -> list[date]:
    """Return, in order, the days in ``[window_start, window_end]`` that cannot be a check-in.

    A day is excluded when the weekday policy forbids pickup, a blackout covers
    it, or an occupying booking holds it. A day reported here is exactly a day
    for which ``validate_range(snapshot, day, day + 1 day)`` reports a conflict.
    """

    if window_end < window_start:
        return []

    marked: set[date] = set()
    for window in snapshot.blackouts:
        _mark_span(marked, window.start, window.end, window_start, window_end)
    for item in snapshot.bookings:
        _mark_span(marked, item.check_in, item.check_out - ONE_DAY, window_start, window_end)

    if not snapshot.policy.is_open:
        marked.update(day for day in iter_days(window_start, window_end) if not snapshot.policy.allows(day))

    return sorted(marked)


def is_check_in_available(snapshot: ListingSnapshot, day: date) -> bool:
    return not unavailable_check_in_dates(snapshot, day, day)

"""Range validation, check-out suggestions and their agreement with the calendar."""
from datetime import date, timedelta

import pytest

from rental_calendar.models.booking import BookingStatus
from rental_calendar.services.blackouts import BlackoutWindow
from rental_calendar.services.conflicts import (
    ConflictKind,
    ListingSnapshot,
    suggest_latest_check_out,
    validate_range,
)
from rental_calendar.services.ledger import OccupiedRange
from rental_calendar.services.policy import WeekdayPolicy
from rental_calendar.services.projector import iter_days, unavailable_check_in_dates

ONE_DAY = timedelta(days=1)


def _snapshot(policy=None, blackouts=(), bookings=()):
    return ListingSnapshot.build("listing-1", policy or WeekdayPolicy.open(), blackouts, bookings)


def _booking(check_in, check_out, status=BookingStatus.CONFIRMED, booking_id="bk-1"):
    return OccupiedRange(check_in=check_in, check_out=check_out, status=status, booking_id=booking_id)


def test_check_out_must_follow_check_in():
    result = validate_range(_snapshot(), date(2025, 3, 5), date(2025, 3, 5))

    assert not result.valid
    assert result.conflict_kinds == {ConflictKind.INVALID_RANGE}
    assert result.suggested_check_out is None


def test_pickup_day_not_allowed_names_the_weekday():
    snapshot = _snapshot(policy=WeekdayPolicy.restricted({5}))

    result = validate_range(snapshot, date(2025, 3, 8), date(2025, 3, 10))

    assert result.conflict_kinds == {ConflictKind.PICKUP_DAY_NOT_ALLOWED}
    assert result.message == "Pickup is not available on Saturday."
    assert validate_range(snapshot, date(2025, 3, 7), date(2025, 3, 10)).valid


def test_check_out_day_has_no_weekday_restriction():
    snapshot = _snapshot(policy=WeekdayPolicy.restricted({5}))

    assert validate_range(snapshot, date(2025, 3, 7), date(2025, 3, 8)).valid


def test_check_in_inside_existing_booking_conflicts_without_suggestion():
    snapshot = _snapshot(bookings=[_booking(date(2025, 3, 10), date(2025, 3, 15))])

    result = validate_range(snapshot, date(2025, 3, 12), date(2025, 3, 20))

    assert result.conflict_kinds == {ConflictKind.BOOKING_CONFLICT}
    assert result.suggested_check_out is None
    assert result.message == "Cannot book this date range due to existing bookings."
    assert result.conflicts[0].reference_id == "bk-1"


def test_suggestion_is_day_before_next_booking():
    snapshot = _snapshot(bookings=[_booking(date(2025, 3, 10), date(2025, 3, 15))])

    assert suggest_latest_check_out(snapshot, date(2025, 3, 1)) == date(2025, 3, 9)

    result = validate_range(snapshot, date(2025, 3, 1), date(2025, 3, 12))
    assert result.conflict_kinds == {ConflictKind.BOOKING_CONFLICT}
    assert result.suggested_check_out == date(2025, 3, 9)
    assert result.message == (
        "Cannot book during this period. There are existing bookings between "
        "2025-03-01 and 2025-03-12. You can book until 2025-03-09."
    )


def test_range_touching_blackout_start_conflicts():
    snapshot = _snapshot(blackouts=[BlackoutWindow(start=date(2025, 4, 1), end=date(2025, 4, 5), id="bo-1")])

    result = validate_range(snapshot, date(2025, 3, 28), date(2025, 4, 2))

    assert result.conflict_kinds == {ConflictKind.BLACKOUT_CONFLICT}
    conflict = result.conflicts[0]
    assert (conflict.start, conflict.end, conflict.end_inclusive) == (date(2025, 4, 1), date(2025, 4, 5), True)
    assert result.suggested_check_out == date(2025, 3, 31)


def test_checking_out_on_blackout_start_is_allowed():
    snapshot = _snapshot(blackouts=[BlackoutWindow(start=date(2025, 4, 1), end=date(2025, 4, 5))])

    assert validate_range(snapshot, date(2025, 3, 28), date(2025, 4, 1)).valid


def test_back_to_back_booking_is_valid():
    snapshot = _snapshot(bookings=[_booking(date(2025, 3, 10), date(2025, 3, 15))])

    assert validate_range(snapshot, date(2025, 3, 15), date(2025, 3, 18)).valid
    assert validate_range(snapshot, date(2025, 3, 5), date(2025, 3, 10)).valid


def test_cancelled_bookings_do_not_block():
    snapshot = _snapshot(bookings=[_booking(date(2025, 3, 10), date(2025, 3, 15), BookingStatus.CANCELLED)])

    assert validate_range(snapshot, date(2025, 3, 11), date(2025, 3, 13)).valid


def test_both_conflict_kinds_are_reported_together():
    snapshot = _snapshot(
        blackouts=[BlackoutWindow(start=date(2025, 3, 20), end=date(2025, 3, 22))],
        bookings=[_booking(date(2025, 3, 10), date(2025, 3, 15))],
    )

    result = validate_range(snapshot, date(2025, 3, 5), date(2025, 3, 25))

    assert result.conflict_kinds == {ConflictKind.BOOKING_CONFLICT, ConflictKind.BLACKOUT_CONFLICT}
    assert result.suggested_check_out == date(2025, 3, 9)
    assert "existing bookings and owner blackout periods" in result.message


def test_no_barrier_means_no_suggestion():
    snapshot = _snapshot(bookings=[_booking(date(2025, 3, 1), date(2025, 3, 5))])

    assert suggest_latest_check_out(snapshot, date(2025, 3, 10)) is None


def test_suggestion_skipped_when_barrier_is_next_day():
    snapshot = _snapshot(bookings=[_booking(date(2025, 3, 11), date(2025, 3, 15))])

    result = validate_range(snapshot, date(2025, 3, 10), date(2025, 3, 13))

    assert result.conflict_kinds == {ConflictKind.BOOKING_CONFLICT}
    assert result.suggested_check_out is None


GRID_START = date(2025, 3, 1)
GRID_END = date(2025, 3, 31)


def _grid_snapshots():
    blackouts = [
        BlackoutWindow(start=date(2025, 3, 18), end=date(2025, 3, 20), id="bo-1"),
        BlackoutWindow(start=date(2025, 3, 27), end=date(2025, 3, 28), id="bo-2"),
    ]
    bookings = [
        _booking(date(2025, 3, 4), date(2025, 3, 7), booking_id="bk-1"),
        _booking(date(2025, 3, 7), date(2025, 3, 9), BookingStatus.PENDING, booking_id="bk-2"),
        _booking(date(2025, 3, 12), date(2025, 3, 14), BookingStatus.CANCELLED, booking_id="bk-3"),
        _booking(date(2025, 3, 22), date(2025, 3, 25), BookingStatus.COMPLETED, booking_id="bk-4"),
    ]
    return [
        _snapshot(WeekdayPolicy.open(), blackouts, bookings),
        _snapshot(WeekdayPolicy.restricted({1, 3, 5}), blackouts, bookings),
        _snapshot(WeekdayPolicy.restricted(set()), blackouts, bookings),
        _snapshot(WeekdayPolicy.open()),
    ]


@pytest.mark.parametrize("snapshot", _grid_snapshots())
def test_calendar_agrees_with_single_day_validation(snapshot):
    unavailable = set(unavailable_check_in_dates(snapshot, GRID_START, GRID_END))

    for day in iter_days(GRID_START, GRID_END):
        result = validate_range(snapshot, day, day + ONE_DAY)
        assert (day in unavailable) is result.blocks_check_in, day
        assert result.blocks_check_in is not result.valid


@pytest.mark.parametrize("snapshot", _grid_snapshots()[:2])
def test_suggested_check_out_is_bookable_and_tight(snapshot):
    seen_suggestion = False
    for check_in in iter_days(GRID_START, GRID_END):
        for length in range(1, 15):
            result = validate_range(snapshot, check_in, check_in + timedelta(days=length))
            if result.valid or result.suggested_check_out is None:
                continue
            seen_suggestion = True
            suggestion = result.suggested_check_out
            assert validate_range(snapshot, check_in, suggestion).valid
            # One turnover day separates the suggestion from the next obstruction.
            assert not validate_range(snapshot, check_in, suggestion + 2 * ONE_DAY).valid
    assert seen_suggestion

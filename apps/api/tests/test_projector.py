from datetime import date, timedelta

from rental_calendar.models.booking import BookingStatus
from rental_calendar.services.blackouts import BlackoutWindow
from rental_calendar.services.conflicts import ListingSnapshot
from rental_calendar.services.ledger import OccupiedRange
from rental_calendar.services.policy import WeekdayPolicy
from rental_calendar.services.projector import is_check_in_available, iter_days, unavailable_check_in_dates


def test_booking_days_exclude_check_out_and_blackouts_include_end():
    snapshot = ListingSnapshot.build(
        "listing-1",
        WeekdayPolicy.open(),
        blackouts=[BlackoutWindow(start=date(2025, 4, 1), end=date(2025, 4, 2))],
        bookings=[OccupiedRange(date(2025, 3, 29), date(2025, 3, 31), BookingStatus.CONFIRMED)],
    )

    dates = unavailable_check_in_dates(snapshot, date(2025, 3, 28), date(2025, 4, 3))

    assert dates == [date(2025, 3, 29), date(2025, 3, 30), date(2025, 4, 1), date(2025, 4, 2)]


def test_spans_are_clipped_to_the_window():
    snapshot = ListingSnapshot.build(
        "listing-1",
        WeekdayPolicy.open(),
        blackouts=[BlackoutWindow(start=date(2025, 1, 1), end=date(2025, 12, 31))],
    )

    dates = unavailable_check_in_dates(snapshot, date(2025, 6, 1), date(2025, 6, 3))

    assert dates == [date(2025, 6, 1), date(2025, 6, 2), date(2025, 6, 3)]


def test_restricted_policy_greys_out_other_weekdays():
    snapshot = ListingSnapshot.build("listing-1", WeekdayPolicy.restricted({5}))

    dates = unavailable_check_in_dates(snapshot, date(2025, 3, 2), date(2025, 3, 8))

    assert date(2025, 3, 7) not in dates
    assert len(dates) == 6


def test_inverted_window_is_empty():
    snapshot = ListingSnapshot.build("listing-1", WeekdayPolicy.restricted(set()))

    assert unavailable_check_in_dates(snapshot, date(2025, 3, 8), date(2025, 3, 2)) == []


def test_single_day_availability():
    snapshot = ListingSnapshot.build(
        "listing-1",
        WeekdayPolicy.open(),
        bookings=[OccupiedRange(date(2025, 3, 10), date(2025, 3, 12), BookingStatus.PENDING)],
    )

    assert not is_check_in_available(snapshot, date(2025, 3, 11))
    assert is_check_in_available(snapshot, date(2025, 3, 12))


def test_iter_days_is_inclusive():
    assert list(iter_days(date(2025, 2, 27), date(2025, 3, 1))) == [
        date(2025, 2, 27),
        date(2025, 2, 28),
        date(2025, 3, 1),
    ]


def test_iter_days_stops_on_last_representable_day():
    assert list(iter_days(date.max - timedelta(days=1), date.max)) == [date.max - timedelta(days=1), date.max]
    assert list(iter_days(date.max, date.min)) == []


def test_window_ending_on_last_representable_day():
    snapshot = ListingSnapshot.build("listing-1", WeekdayPolicy.restricted(set()))

    dates = unavailable_check_in_dates(snapshot, date.max - timedelta(days=2), date.max)

    assert dates[-1] == date.max
    assert len(dates) == 3

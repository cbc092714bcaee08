"""Rental price quotes."""
from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def rental_days(check_in: date, check_out: date) -> int:
    """Number of days billed for ``[check_in, check_out)``."""

    if check_out <= check_in:
        raise ValueError("Check-out date must be after check-in date")
    return (check_out - check_in).days


def calculate_total_price(price_per_day: Decimal, check_in: date, check_out: date) -> Decimal:
    total = Decimal(price_per_day) * rental_days(check_in, check_out)
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)

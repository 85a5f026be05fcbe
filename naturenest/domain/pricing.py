"""Reservation pricing.

total_price = nights * price_per_night * guests, where nights counts both
boundary days: a stay from the 15th to the 17th is three nights.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 19.99 from becoming 19.989999...
    return Decimal(str(value))


def count_nights(start_date: date, end_date: date) -> int:
    return (end_date - start_date).days + 1


def calculate_price(
    *,
    start_date: date,
    end_date: date,
    price_per_night,
    number_of_guests: int,
) -> Decimal:
    nights = count_nights(start_date, end_date)
    if nights < 1:
        raise ValueError("end_date before start_date")
    total = nights * to_decimal(price_per_night) * number_of_guests
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)

"""Aggregate income and nights booked from completed reservations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Protocol

from naturenest.domain.pricing import CENTS, count_nights, to_decimal


class PricedRange(Protocol):
    start_date: date
    end_date: date
    total_price: Decimal


@dataclass(frozen=True)
class PropertyStats:
    total_nights_booked: int
    total_income: Decimal
    completed_reservations: int


def is_completed(reservation: PricedRange, today: date) -> bool:
    return reservation.end_date <= today


def compute_property_stats(
    reservations: Iterable[PricedRange],
    *,
    today: date | None = None,
) -> PropertyStats:
    today = today or date.today()
    nights = 0
    income = Decimal("0")
    completed = 0
    for reservation in reservations:
        if not is_completed(reservation, today):
            continue
        completed += 1
        nights += count_nights(reservation.start_date, reservation.end_date)
        income += to_decimal(reservation.total_price)
    return PropertyStats(
        total_nights_booked=nights,
        total_income=income.quantize(CENTS),
        completed_reservations=completed,
    )

"""Reservation availability: date validation and per-day capacity accounting.

Date ranges are inclusive on both ends. Two ranges overlap when
``a.start <= b.end and a.end >= b.start``, so a range ending on the day
another one starts shares that day and both guest counts apply to it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Protocol

from naturenest.core.errors import CapacityExceededError, ValidationError
from naturenest.observability.logging import get_logger

logger = get_logger(__name__)


class BookedRange(Protocol):
    """Anything carrying a reservation's dates and head count.

    ORM ``Reservation`` rows satisfy this directly.
    """

    start_date: date
    end_date: date
    number_of_guests: int


@dataclass(frozen=True)
class OverlapQuery:
    """Reservations of ``property_id`` that touch ``[start_date, end_date]``.

    ``exclude_id`` drops the reservation being updated from the result.
    """

    property_id: int
    start_date: date
    end_date: date
    exclude_id: int | None = None


@dataclass(frozen=True)
class DayAvailability:
    day: date
    total_guests: int
    available_slots: int


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def ranges_overlap(
    a_start: date, a_end: date, b_start: date, b_end: date
) -> bool:
    return a_start <= b_end and a_end >= b_start


def validate_dates(
    start_date: date,
    end_date: date,
    *,
    today: date | None = None,
) -> None:
    """Reject a start in the past or an end before the start."""
    today = today or date.today()
    if start_date < today:
        raise ValidationError(
            "start_date cannot be in the past",
            {"start_date": start_date.isoformat(), "today": today.isoformat()},
        )
    if end_date < start_date:
        raise ValidationError(
            "end_date must be on or after start_date",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


def validate_guests(number_of_guests: int) -> None:
    if number_of_guests < 1:
        raise ValidationError(
            "number_of_guests must be at least 1",
            {"number_of_guests": number_of_guests},
        )


def daily_guest_counts(
    start_date: date,
    end_date: date,
    number_of_guests: int,
    existing: Iterable[BookedRange],
) -> Mapping[date, int]:
    """Guests present on each day of the range if the request were accepted."""
    counts = {day: number_of_guests for day in iter_days(start_date, end_date)}
    for other in existing:
        if not ranges_overlap(start_date, end_date, other.start_date, other.end_date):
            continue
        first = max(start_date, other.start_date)
        last = min(end_date, other.end_date)
        for day in iter_days(first, last):
            counts[day] += other.number_of_guests
    return MappingProxyType(counts)


def check_availability(
    *,
    capacity: int,
    start_date: date,
    end_date: date,
    number_of_guests: int,
    existing: Iterable[BookedRange],
) -> Mapping[date, DayAvailability]:
    """Per-day breakdown for the range, or CapacityExceededError.

    ``existing`` must already exclude the reservation being updated; rows
    that do not overlap the range are ignored.
    """
    validate_guests(number_of_guests)
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")

    counts = daily_guest_counts(start_date, end_date, number_of_guests, existing)
    breakdown = {
        day: DayAvailability(
            day=day,
            total_guests=total,
            available_slots=capacity - total,
        )
        for day, total in counts.items()
    }

    overbooked = [
        (day, -slot.available_slots)
        for day, slot in breakdown.items()
        if slot.available_slots < 0
    ]
    if overbooked:
        logger.info(
            "capacity exceeded",
            extra={
                "extra_fields": {
                    "capacity": capacity,
                    "requested_guests": number_of_guests,
                    "overbooked_days": [d.isoformat() for d, _ in overbooked],
                }
            },
        )
        raise CapacityExceededError(overbooked, capacity)

    return MappingProxyType(breakdown)

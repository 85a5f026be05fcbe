"""Unit tests for availability checks. Pure functions, no database."""

import json
import logging
from dataclasses import dataclass
from datetime import date

import pytest

from naturenest.core.errors import CapacityExceededError, ValidationError
from naturenest.domain.availability import (
    DayAvailability,
    check_availability,
    daily_guest_counts,
    iter_days,
    ranges_overlap,
    validate_dates,
)


@dataclass
class Booked:
    start_date: date
    end_date: date
    number_of_guests: int


def d(day: int) -> date:
    return date(2024, 3, day)


# ── validate_dates ─────────────────────────────────────────────────────


class TestValidateDates:
    def test_today_to_later_is_valid(self):
        validate_dates(d(15), d(17), today=d(15))

    def test_single_day_is_valid(self):
        validate_dates(d(15), d(15), today=d(10))

    def test_start_in_past_rejected(self):
        with pytest.raises(ValidationError, match="past"):
            validate_dates(d(14), d(17), today=d(15))

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="on or after"):
            validate_dates(d(17), d(16), today=d(1))

    def test_defaults_to_real_today(self):
        with pytest.raises(ValidationError):
            validate_dates(date(2000, 1, 1), date(2000, 1, 2))


# ── overlap helpers ────────────────────────────────────────────────────


class TestOverlap:
    def test_shared_boundary_day_overlaps(self):
        assert ranges_overlap(d(10), d(15), d(15), d(20))
        assert ranges_overlap(d(15), d(20), d(10), d(15))

    def test_adjacent_ranges_do_not_overlap(self):
        assert not ranges_overlap(d(10), d(14), d(15), d(20))

    def test_contained_range_overlaps(self):
        assert ranges_overlap(d(10), d(20), d(12), d(13))

    def test_iter_days_inclusive(self):
        assert list(iter_days(d(1), d(3))) == [d(1), d(2), d(3)]
        assert list(iter_days(d(5), d(5))) == [d(5)]


# ── check_availability ─────────────────────────────────────────────────


class TestCheckAvailability:
    def test_overlapping_request_over_capacity_fails(self):
        existing = [Booked(d(15), d(20), 3)]

        with pytest.raises(CapacityExceededError) as exc_info:
            check_availability(
                capacity=4,
                start_date=d(17),
                end_date=d(19),
                number_of_guests=2,
                existing=existing,
            )

        err = exc_info.value
        assert [day for day, _ in err.overbooked] == [d(17), d(18), d(19)]
        assert all(over == 1 for _, over in err.overbooked)
        assert err.meta["overbooked_days"][0] == {"date": "2024-03-17", "overage": 1}

    def test_non_overlapping_request_succeeds_regardless_of_existing(self):
        existing = [Booked(d(15), d(20), 4)]

        breakdown = check_availability(
            capacity=4,
            start_date=d(21),
            end_date=d(25),
            number_of_guests=4,
            existing=existing,
        )

        assert list(breakdown) == [d(21), d(22), d(23), d(24), d(25)]
        assert all(slot.available_slots == 0 for slot in breakdown.values())

    def test_breakdown_reports_totals_per_day(self):
        existing = [Booked(d(15), d(16), 1)]

        breakdown = check_availability(
            capacity=4,
            start_date=d(16),
            end_date=d(17),
            number_of_guests=2,
            existing=existing,
        )

        assert breakdown[d(16)] == DayAvailability(d(16), total_guests=3, available_slots=1)
        assert breakdown[d(17)] == DayAvailability(d(17), total_guests=2, available_slots=2)

    def test_breakdown_is_read_only(self):
        breakdown = check_availability(
            capacity=2,
            start_date=d(1),
            end_date=d(1),
            number_of_guests=1,
            existing=[],
        )
        with pytest.raises(TypeError):
            breakdown[d(2)] = DayAvailability(d(2), 0, 2)

    def test_single_day_request_counts_that_day(self):
        with pytest.raises(CapacityExceededError) as exc_info:
            check_availability(
                capacity=3,
                start_date=d(10),
                end_date=d(10),
                number_of_guests=2,
                existing=[Booked(d(10), d(10), 2)],
            )
        assert exc_info.value.overbooked == [(d(10), 1)]

    def test_shared_boundary_day_sums(self):
        # A ends on the 15th, request starts on the 15th
        existing = [Booked(d(10), d(15), 2)]

        with pytest.raises(CapacityExceededError) as exc_info:
            check_availability(
                capacity=3,
                start_date=d(15),
                end_date=d(18),
                number_of_guests=2,
                existing=existing,
            )
        assert exc_info.value.overbooked == [(d(15), 1)]

    def test_multiple_reservations_same_day_sum(self):
        existing = [
            Booked(d(1), d(5), 1),
            Booked(d(3), d(3), 1),
            Booked(d(3), d(8), 1),
        ]

        counts = daily_guest_counts(d(2), d(4), 1, existing)

        assert dict(counts) == {d(2): 2, d(3): 4, d(4): 3}

    def test_request_alone_above_capacity_fails_every_day(self):
        with pytest.raises(CapacityExceededError) as exc_info:
            check_availability(
                capacity=2,
                start_date=d(1),
                end_date=d(2),
                number_of_guests=5,
                existing=[],
            )
        assert exc_info.value.overbooked == [(d(1), 3), (d(2), 3)]

    def test_rows_outside_range_are_ignored(self):
        breakdown = check_availability(
            capacity=2,
            start_date=d(10),
            end_date=d(11),
            number_of_guests=2,
            existing=[Booked(d(1), d(9), 2), Booked(d(12), d(20), 2)],
        )
        assert breakdown[d(10)].available_slots == 0

    def test_zero_guests_rejected(self):
        with pytest.raises(ValidationError):
            check_availability(
                capacity=2,
                start_date=d(1),
                end_date=d(2),
                number_of_guests=0,
                existing=[],
            )

    def test_adding_then_removing_restores_availability(self):
        base = [Booked(d(1), d(10), 1)]
        added = Booked(d(4), d(6), 2)

        before = check_availability(
            capacity=5, start_date=d(1), end_date=d(10), number_of_guests=1, existing=base
        )
        with_added = check_availability(
            capacity=5,
            start_date=d(1),
            end_date=d(10),
            number_of_guests=1,
            existing=base + [added],
        )
        after = check_availability(
            capacity=5,
            start_date=d(1),
            end_date=d(10),
            number_of_guests=1,
            existing=[b for b in base + [added] if b is not added],
        )

        assert with_added[d(5)].available_slots == before[d(5)].available_slots - 2
        assert dict(after) == dict(before)


def test_capacity_rejection_is_logged_as_json(caplog):
    from naturenest.domain import availability
    from naturenest.observability.logging import JsonFormatter

    availability.logger.addHandler(caplog.handler)
    try:
        with pytest.raises(CapacityExceededError):
            check_availability(
                capacity=4,
                start_date=d(17),
                end_date=d(18),
                number_of_guests=2,
                existing=[Booked(d(15), d(20), 3)],
            )
    finally:
        availability.logger.removeHandler(caplog.handler)

    record = next(r for r in caplog.records if r.getMessage() == "capacity exceeded")
    assert record.levelno == logging.INFO
    payload = json.loads(JsonFormatter().format(record))
    assert payload["capacity"] == 4
    assert payload["requested_guests"] == 2
    assert payload["overbooked_days"] == ["2024-03-17", "2024-03-18"]

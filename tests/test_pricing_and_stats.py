"""Unit tests for price and property stats calculations."""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

import pytest

from naturenest.domain.pricing import calculate_price, count_nights, to_decimal
from naturenest.domain.stats import compute_property_stats


@dataclass
class Priced:
    start_date: date
    end_date: date
    total_price: Decimal


class TestPricing:
    def test_three_night_stay_two_guests(self):
        # 15th..17th counts both boundary days: 3 nights
        total = calculate_price(
            start_date=date(2024, 3, 15),
            end_date=date(2024, 3, 17),
            price_per_night=100,
            number_of_guests=2,
        )
        assert total == Decimal("600.00")

    def test_single_day_is_one_night(self):
        assert count_nights(date(2024, 3, 15), date(2024, 3, 15)) == 1

    @pytest.mark.parametrize("length", [0, 1, 6, 30, 365])
    def test_nights_always_at_least_one(self, length):
        start = date(2024, 1, 1)
        assert count_nights(start, start + timedelta(days=length)) == length + 1

    def test_result_is_decimal_in_cents(self):
        total = calculate_price(
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 1),
            price_per_night=19.99,
            number_of_guests=3,
        )
        assert isinstance(total, Decimal)
        assert total == Decimal("59.97")
        assert total.as_tuple().exponent == -2

    def test_end_before_start_raises(self):
        with pytest.raises(ValueError):
            calculate_price(
                start_date=date(2024, 3, 2),
                end_date=date(2024, 2, 28),
                price_per_night=10,
                number_of_guests=1,
            )

    def test_to_decimal_keeps_float_literal(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(Decimal("2.50")) == Decimal("2.50")


class TestPropertyStats:
    def test_only_completed_reservations_count(self):
        today = date(2024, 3, 20)
        reservations = [
            Priced(date(2024, 3, 1), date(2024, 3, 3), Decimal("300.00")),
            # ends today: completed
            Priced(date(2024, 3, 18), date(2024, 3, 20), Decimal("150.50")),
            # still running
            Priced(date(2024, 3, 19), date(2024, 3, 22), Decimal("999.00")),
        ]

        stats = compute_property_stats(reservations, today=today)

        assert stats.completed_reservations == 2
        assert stats.total_nights_booked == 6
        assert stats.total_income == Decimal("450.50")

    def test_no_reservations(self):
        stats = compute_property_stats([], today=date(2024, 1, 1))
        assert stats.total_nights_booked == 0
        assert stats.total_income == Decimal("0.00")
        assert stats.completed_reservations == 0

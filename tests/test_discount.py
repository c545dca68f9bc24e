"""Tests for Discount codes."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from payments.domain.errors import InvalidValueError
from payments.domain.models import Discount

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


class TestPercentage:

    @pytest.mark.parametrize("percentage", [0, 100, "12.5", Decimal("99.99")])
    def test_bounds_inclusive(self, percentage):
        Discount("CODE", percentage)

    @pytest.mark.parametrize("percentage", [-1, "-0.01", "-0.004", "100.004", "100.01", 150])
    def test_out_of_range(self, percentage):
        with pytest.raises(InvalidValueError, match="between 0 and 100") as exc:
            Discount("CODE", percentage)
        assert exc.value.field == "percentage"

    def test_rounded_after_bounds_check(self):
        assert Discount("CODE", "99.996").percentage == Decimal("100.00")
        assert str(Discount("CODE", Decimal("-0")).percentage) == "0.00"

    def test_non_numeric(self):
        with pytest.raises(InvalidValueError):
            Discount("CODE", "ten")


class TestUsage:

    def test_unlimited_never_exhausted(self):
        assert Discount("CODE", 10, current_usages=10_000).is_exhausted() is False

    def test_exhausted_when_usages_reach_cap(self):
        assert Discount("CODE", 10, max_usages=5, current_usages=5).is_exhausted() is True
        assert Discount("CODE", 10, max_usages=5, current_usages=6).is_exhausted() is True

    def test_one_use_left(self):
        discount = Discount("CODE", 10, max_usages=5, current_usages=4)
        assert discount.is_exhausted() is False
        assert discount.is_valid(NOW) is True


class TestExpiry:

    def test_no_expiry(self):
        assert Discount("CODE", 10).is_expired(NOW) is False

    def test_future_expiry(self):
        discount = Discount("CODE", 10, valid_until=NOW + timedelta(seconds=1))
        assert discount.is_expired(NOW) is False

    def test_expires_at_the_instant(self):
        discount = Discount("CODE", 10, valid_until=NOW)
        assert discount.is_expired(NOW) is True
        assert discount.is_valid(NOW) is False

    def test_naive_timestamps_compared_as_utc(self):
        discount = Discount("CODE", 10, valid_until=datetime(2025, 3, 14, 13, 0))
        assert discount.is_expired(NOW) is False
        assert discount.is_expired(datetime(2025, 3, 14, 13, 0, 1)) is True

    def test_defaults_to_current_time(self):
        past = datetime(2000, 1, 1, tzinfo=timezone.utc)
        assert Discount("CODE", 10, valid_until=past).is_expired() is True


class TestAmounts:

    def test_discount_amount(self):
        discount = Discount("SPRING10", 10)
        assert discount.calculate_discount_amount(Decimal("123.45"), NOW) == Decimal("12.35")
        assert discount.calculate_final_amount(Decimal("123.45"), NOW) == Decimal("111.10")

    def test_accepts_plain_numbers(self):
        assert Discount("HALF", 50).calculate_discount_amount(99, NOW) == Decimal("49.50")

    def test_full_discount(self):
        assert Discount("FREE", 100).calculate_final_amount("80.00", NOW) == Decimal("0.00")

    def test_invalid_discount_gives_nothing(self):
        discount = Discount("OLD", 10, valid_until=NOW - timedelta(days=1))
        assert discount.calculate_discount_amount(Decimal("100"), NOW) == Decimal("0.00")
        assert discount.calculate_final_amount(Decimal("100"), NOW) == Decimal("100.00")

    def test_exhausted_discount_gives_nothing(self):
        discount = Discount("USED", 10, max_usages=1, current_usages=1)
        assert discount.calculate_discount_amount(Decimal("100"), NOW) == Decimal("0.00")


def test_to_dict():
    discount = Discount("SPRING10", 10, max_usages=3, valid_until=NOW)
    assert discount.to_dict() == {
        "code": "SPRING10",
        "percentage": "10.00",
        "max_usages": 3,
        "current_usages": 0,
        "valid_until": "2025-03-14T12:00:00+00:00",
    }

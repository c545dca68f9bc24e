# payments/domain/models/discount.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from payments.domain.errors import InvalidValueError
from payments.domain.models.money import parse_decimal, to_decimal

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Discount:
    """Percentage discount code with optional usage cap and expiry."""

    code: str
    percentage: Decimal
    max_usages: int | None = None
    current_usages: int = 0
    valid_until: datetime | None = None

    def __post_init__(self) -> None:
        raw = parse_decimal(self.percentage, field="percentage")
        if raw < 0 or raw > 100:
            raise InvalidValueError(
                "Discount percentage must be between 0 and 100", field="percentage",
            )
        object.__setattr__(self, "percentage", to_decimal(raw, field="percentage").copy_abs())

    def is_exhausted(self) -> bool:
        return self.max_usages is not None and self.current_usages >= self.max_usages

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.valid_until is None:
            return False
        now = now or datetime.now(timezone.utc)
        valid_until = self.valid_until
        # Compare naive timestamps as UTC
        if valid_until.tzinfo is None:
            valid_until = valid_until.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return not now < valid_until

    def is_valid(self, now: datetime | None = None) -> bool:
        return not self.is_exhausted() and not self.is_expired(now)

    def calculate_discount_amount(self, original_amount: Any, now: datetime | None = None) -> Decimal:
        if not self.is_valid(now):
            return Decimal("0.00")
        original = to_decimal(original_amount)
        return (original * self.percentage / 100).quantize(_CENT, rounding=ROUND_HALF_UP)

    def calculate_final_amount(self, original_amount: Any, now: datetime | None = None) -> Decimal:
        return to_decimal(original_amount) - self.calculate_discount_amount(original_amount, now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "percentage": str(self.percentage),
            "max_usages": self.max_usages,
            "current_usages": self.current_usages,
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
        }

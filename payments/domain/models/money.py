# payments/domain/models/money.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from payments.domain.errors import InvalidValueError

# Currencies the payment processor charges in whole units
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})

_CENT = Decimal("0.01")


def parse_decimal(value: Any, field: str = "amount") -> Decimal:
    """Coerce int/float/str/Decimal into a finite, unrounded Decimal."""
    if isinstance(value, bool):
        raise InvalidValueError(f"Invalid {field}: {value!r}", field=field)
    try:
        # str() keeps 0.1 as 0.1 instead of its binary float expansion
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidValueError(f"Invalid {field}: {value!r}", field=field) from exc
    if not dec.is_finite():
        raise InvalidValueError(f"Invalid {field}: {value!r}", field=field)
    return dec


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Coerce int/float/str/Decimal into a 2-place Decimal."""
    return parse_decimal(value, field).quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """Non-negative amount with 2-decimal fixed-point semantics."""

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        # Sign is checked before rounding: -0.004 must not pass as -0.00
        raw = parse_decimal(self.amount)
        if raw < 0:
            raise InvalidValueError("Amount cannot be negative", field="amount")
        amount = to_decimal(raw).copy_abs()

        currency = (self.currency or "").strip().upper()
        if len(currency) != 3:
            raise InvalidValueError("Currency must be 3-letter ISO code", field="currency")

        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", currency)

    @property
    def is_zero_decimal(self) -> bool:
        return self.currency in ZERO_DECIMAL_CURRENCIES

    def to_smallest_unit(self) -> int:
        if self.is_zero_decimal:
            return int(self.amount)
        return int(self.amount * 100)

    @classmethod
    def from_smallest_unit(cls, units: int, currency: str) -> Money:
        divisor = 1 if currency.strip().upper() in ZERO_DECIMAL_CURRENCIES else 100
        return cls(Decimal(int(units)) / divisor, currency)

    def to_dict(self) -> dict[str, Any]:
        return {"amount": str(self.amount), "currency": self.currency}

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

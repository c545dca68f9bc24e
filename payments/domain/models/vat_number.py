# payments/domain/models/vat_number.py

from __future__ import annotations

from dataclasses import dataclass

from payments.domain.errors import InvalidValueError
from payments.domain.services.vat_rates import EU_COUNTRIES
from payments.domain.services.vat_validation import (
    is_valid_polish_nip,
    is_valid_vat_format,
    normalize_vat_number,
)


@dataclass(frozen=True)
class VatNumber:
    """Prefixed VAT identification number, e.g. ``PL5260001246``."""

    country_prefix: str
    number: str

    def __post_init__(self) -> None:
        prefix = (self.country_prefix or "").strip().upper()
        if len(prefix) != 2:
            raise InvalidValueError("Country code must be 2-letter ISO code", field="vat_number")

        number = normalize_vat_number(self.number)
        if not number:
            raise InvalidValueError("VAT number cannot be empty", field="vat_number")

        if not is_valid_vat_format(prefix, number):
            raise InvalidValueError(f"Invalid VAT number format for {prefix}", field="vat_number")
        if prefix == "PL" and not is_valid_polish_nip(number):
            raise InvalidValueError("Invalid Polish NIP checksum", field="vat_number")

        object.__setattr__(self, "country_prefix", prefix)
        object.__setattr__(self, "number", number)

    @classmethod
    def parse(cls, value: str) -> VatNumber:
        """Split a prefixed string such as ``"DE 123 456 789"``."""
        value = normalize_vat_number(value)
        return cls(value[:2], value[2:])

    def is_eu(self) -> bool:
        return self.country_prefix in EU_COUNTRIES

    def __str__(self) -> str:
        return f"{self.country_prefix}{self.number}"

# payments/domain/models/customer.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from payments.domain.errors import InvalidValueError
from payments.domain.models.country import Country
from payments.domain.models.vat_number import VatNumber


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    postal_code: str
    country: Country
    state_province: str | None = None

    def __post_init__(self) -> None:
        # Plain ISO codes are accepted for convenience
        country = self.country if isinstance(self.country, Country) else Country(self.country)
        if country.requires_state_province() and not self.state_province:
            raise InvalidValueError(
                f"State/Province is required for {country.code}", field="state_province",
            )
        object.__setattr__(self, "country", country)

    def to_dict(self) -> dict[str, Any]:
        return {
            "street": self.street,
            "city": self.city,
            "postal_code": self.postal_code,
            "country": self.country.to_dict(),
            "state_province": self.state_province,
        }


@dataclass(frozen=True)
class Customer:
    first_name: str
    last_name: str
    email: str
    address: Address
    company_name: str | None = None
    vat_number: VatNumber | None = None
    phone: str | None = None

    @property
    def is_business(self) -> bool:
        return self.vat_number is not None or self.company_name is not None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def display_name(self) -> str:
        return self.company_name if self.company_name is not None else self.full_name

    @property
    def country(self) -> Country:
        return self.address.country

    def to_dict(self) -> dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "address": self.address.to_dict(),
            "company_name": self.company_name,
            "vat_number": str(self.vat_number) if self.vat_number else None,
            "phone": self.phone,
            "is_business": self.is_business,
            "display_name": self.display_name,
        }

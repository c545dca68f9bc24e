# payments/domain/models/country.py

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from payments.domain.errors import InvalidValueError
from payments.domain.services.country_reference import get_country_reference
from payments.domain.services.vat_rates import (
    STATE_PROVINCE_COUNTRIES,
    is_eu_country,
    vat_rate_for,
)


@dataclass(frozen=True)
class Country:
    """ISO 3166-1 alpha-2 country, resolved against the reference table."""

    code: str
    name: str = field(init=False, compare=False)
    is_eu: bool = field(init=False, compare=False)

    def __post_init__(self) -> None:
        code = (self.code or "").strip().upper()
        if len(code) != 2:
            raise InvalidValueError("Country code must be 2-letter ISO code", field="country")

        name = get_country_reference().name_for(code)
        if name is None:
            raise InvalidValueError(f"Invalid country code: {code}", field="country")

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "is_eu", is_eu_country(code))

    @property
    def vat_rate(self) -> Decimal:
        return vat_rate_for(self.code)

    def requires_state_province(self) -> bool:
        return self.code in STATE_PROVINCE_COUNTRIES

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "name": self.name, "is_eu": self.is_eu}

    def __str__(self) -> str:
        return self.code

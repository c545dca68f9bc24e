# payments/domain/services/vat_rates.py
"""
Hardcoded VAT reference data for invoicing.

Standard rates for EU member states; countries missing from
``EU_VAT_RATES`` fall back to ``DEFAULT_EU_VAT_RATE``. Non-EU countries are
invoiced without VAT.
"""

from __future__ import annotations

from decimal import Decimal

# Seller's home jurisdiction
DOMESTIC_COUNTRY = "PL"
DOMESTIC_CURRENCY = "PLN"
DOMESTIC_VAT_RATE = Decimal("0.23")

EU_COUNTRIES = frozenset({
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR",
    "DE", "GR", "HU", "IE", "IT", "LV", "LT", "LU", "MT", "NL",
    "PL", "PT", "RO", "SK", "SI", "ES", "SE",
})

DEFAULT_EU_VAT_RATE = Decimal("0.20")

EU_VAT_RATES: dict[str, Decimal] = {
    "BE": Decimal("0.21"), "CZ": Decimal("0.21"), "LV": Decimal("0.21"),
    "LT": Decimal("0.21"), "NL": Decimal("0.21"), "ES": Decimal("0.21"),
    "HR": Decimal("0.25"), "DK": Decimal("0.25"), "SE": Decimal("0.25"),
    "CY": Decimal("0.19"), "DE": Decimal("0.19"), "RO": Decimal("0.19"),
    "EE": Decimal("0.22"), "IT": Decimal("0.22"), "SI": Decimal("0.22"),
    "FI": Decimal("0.24"), "GR": Decimal("0.24"),
    "HU": Decimal("0.27"),
    "IE": Decimal("0.23"), "PL": Decimal("0.23"), "PT": Decimal("0.23"),
    "LU": Decimal("0.17"),
    "MT": Decimal("0.18"),
}

# Addresses in these countries must carry a state / province
STATE_PROVINCE_COUNTRIES = frozenset({"US", "CA", "AU", "BR", "MX", "IN", "MY", "AR"})


def is_eu_country(code: str) -> bool:
    return code.upper() in EU_COUNTRIES


def vat_rate_for(code: str) -> Decimal:
    """Destination VAT rate for ``code`` (0 outside the EU)."""
    code = code.upper()
    if code not in EU_COUNTRIES:
        return Decimal("0")
    return EU_VAT_RATES.get(code, DEFAULT_EU_VAT_RATE)

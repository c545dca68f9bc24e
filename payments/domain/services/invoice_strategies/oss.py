# payments/domain/services/invoice_strategies/oss.py
"""
EU consumer outside Poland: One-Stop-Shop invoice.

Digital services sold to EU consumers are taxed at the customer's local
rate. The invoice is bilingual (Polish + the customer's language) and the
place of supply is established from IP address and billing address.
"""

from __future__ import annotations

from typing import Any

from payments.domain.models.invoice import InvoiceRequest
from payments.domain.services.invoice_strategies.base import (
    SALE_DATE_FORMAT,
    InvoiceStrategy,
    Payload,
    money_value,
    rate_value,
)
from payments.domain.services.vat_rates import DOMESTIC_COUNTRY

INVOICE_LANGUAGES = {
    "DE": "de",
    "AT": "de",
    "FR": "fr",
    "BE": "fr",
    "LU": "fr",
    "ES": "es",
    "IT": "it",
    "NL": "nl",
    "SE": "sv",
    "DK": "da",
    "FI": "fi",
    "PL": "pl",
}
DEFAULT_INVOICE_LANGUAGE = "en"


def language_for_country(code: str) -> str:
    return INVOICE_LANGUAGES.get(code.upper(), DEFAULT_INVOICE_LANGUAGE)


class OSSInvoiceStrategy(InvoiceStrategy):

    @property
    def endpoint(self) -> str:
        return "/fakturaoss.json"

    def supports(self, request: InvoiceRequest) -> bool:
        country = request.customer.address.country
        return country.is_eu and country.code != DOMESTIC_COUNTRY and not request.customer.is_business

    def build_payload(self, request: InvoiceRequest) -> Payload:
        country = request.customer.address.country
        return {
            "DataSprzedazy": self.sale_date(request),
            "FormatDatySprzedazy": SALE_DATE_FORMAT,
            "DataWystawienia": self.issue_date(request),
            "Jezyk": language_for_country(country.code),
            "Waluta": request.amount.currency,
            "LiczOd": "BRT",
            "RodzajPodpisuOdbiorcy": "BWO",
            "WidocznyNumerBdo": False,
            "SprzedazUslug": True,
            "UstalenieMiejscaUslugi1": "IP",
            "UstalenieMiejscaUslugi2": "BillingAddress",
            "KrajDostawy": country.code,
            "KrajWysylki": DOMESTIC_COUNTRY,
            "Pozycje": [self._position(request)],
            "Kontrahent": self._customer(request),
        }

    def _position(self, request: InvoiceRequest) -> dict[str, Any]:
        position: dict[str, Any] = {
            "NazwaPelna": request.product_name,
            "NazwaPelnaObca": request.product_name,
            "Jednostka": "szt.",
            "JednostkaObca": "pcs",
            "CenaJednostkowa": money_value(request.original_amount),
            "Ilosc": 1,
            "StawkaVat": rate_value(request.customer.address.country.vat_rate),
            "TypStawkiVat": "POD",
        }
        if request.discount is not None and request.discount.percentage > 0:
            position["Rabat"] = float(request.discount.percentage)
        return position

    def _customer(self, request: InvoiceRequest) -> dict[str, Any]:
        customer = request.customer
        address = customer.address
        return {
            "Nazwa": customer.full_name,
            "Kraj": address.country.name,
            "Miejscowosc": address.city,
            "KodPocztowy": address.postal_code,
            "Ulica": address.street,
            "Email": customer.email,
        }

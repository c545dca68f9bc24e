# payments/domain/services/invoice_strategies/domestic.py
"""
Domestic invoice (``faktura krajowa``): Polish customer paying in PLN.

Full VAT invoice at the domestic rate with a single line item.
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
from payments.domain.services.vat_rates import (
    DOMESTIC_COUNTRY,
    DOMESTIC_CURRENCY,
    DOMESTIC_VAT_RATE,
)

# payment method tag -> iFirma ``SposobZaplaty`` code; anything else is a transfer
PAYMENT_METHOD_CODES = {
    "cash": "GTK",
    "card": "KAR",
    "paypal": "PAL",
    "p24": "P24",
}
DEFAULT_PAYMENT_METHOD_CODE = "PRZ"


def map_payment_method(method: str | None) -> str:
    return PAYMENT_METHOD_CODES.get(method or "transfer", DEFAULT_PAYMENT_METHOD_CODE)


class DomesticInvoiceStrategy(InvoiceStrategy):

    @property
    def endpoint(self) -> str:
        return "/fakturakraj.json"

    def supports(self, request: InvoiceRequest) -> bool:
        return (
            request.customer.address.country.code == DOMESTIC_COUNTRY
            and request.amount.currency == DOMESTIC_CURRENCY
        )

    def build_payload(self, request: InvoiceRequest) -> Payload:
        return {
            "Zaplacono": money_value(request.amount),
            "LiczOd": "BRT",
            "SplitPayment": False,
            "DataWystawienia": self.issue_date(request),
            "DataSprzedazy": self.sale_date(request),
            "FormatDatySprzedazy": SALE_DATE_FORMAT,
            "TerminPlatnosci": self.today(),
            "SposobZaplaty": map_payment_method(request.payment_method),
            "RodzajPodpisuOdbiorcy": "BWO",
            "WidocznyNumerGios": False,
            "Pozycje": [self._position(request)],
            "Kontrahent": self._customer(request),
        }

    def _customer(self, request: InvoiceRequest) -> dict[str, Any]:
        customer = request.customer
        result = {
            "Nazwa": customer.display_name,
            "Ulica": customer.address.street,
            "NIP": customer.vat_number.number if customer.vat_number else None,
            "KodPocztowy": customer.address.postal_code,
            "KodKraju": customer.address.country.code,
            "Miejscowosc": customer.address.city,
            "Email": customer.email,
            "OsobaFizyczna": not customer.is_business,
        }
        return {k: v for k, v in result.items() if v is not None}

    def _position(self, request: InvoiceRequest) -> dict[str, Any]:
        position = {
            "StawkaVat": rate_value(DOMESTIC_VAT_RATE),
            "Ilosc": 1,
            "CenaJednostkowa": money_value(request.original_amount),
            "NazwaPelna": request.product_name,
            "Jednostka": "szt.",
            "TypStawkiVat": "PRC",
            "Rabat": float(request.discount.percentage) if request.discount else None,
        }
        return {k: v for k, v in position.items() if v is not None}

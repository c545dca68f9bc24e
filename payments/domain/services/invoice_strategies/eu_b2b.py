# payments/domain/services/invoice_strategies/eu_b2b.py
"""
EU business customer outside Poland: service export under reverse charge
(art. 28b). The buyer settles VAT in their own country, so the invoice
carries no VAT line and no line-item array.
"""

from __future__ import annotations

from typing import Any

from payments.domain.models.invoice import InvoiceRequest
from payments.domain.services.invoice_strategies.base import (
    SALE_DATE_FORMAT,
    InvoiceStrategy,
    Payload,
    money_value,
)
from payments.domain.services.vat_rates import DOMESTIC_COUNTRY


class EUB2BInvoiceStrategy(InvoiceStrategy):

    @property
    def endpoint(self) -> str:
        return "/fakturaeksportuslugue.json"

    def supports(self, request: InvoiceRequest) -> bool:
        country = request.customer.address.country
        return country.is_eu and country.code != DOMESTIC_COUNTRY and request.customer.is_business

    def build_payload(self, request: InvoiceRequest) -> Payload:
        return {
            "NazwaUslugi": request.product_name,
            "Zaplacono": money_value(request.amount),
            "DataWystawienia": self.issue_date(request),
            "DataSprzedazy": self.sale_date(request),
            "FormatDatySprzedazy": SALE_DATE_FORMAT,
            "DataObowiazkuPodatkowego": self.today(),
            "SposobZaplaty": "PRZ",
            "Kontrahent": self._customer(request),
        }

    def _customer(self, request: InvoiceRequest) -> dict[str, Any]:
        customer = request.customer
        address = customer.address

        result: dict[str, Any] = {
            "Nazwa": customer.display_name,
            "Ulica": address.street,
            "KodPocztowy": address.postal_code,
            "KodKraju": address.country.code,
            "Miejscowosc": address.city,
            "Email": customer.email,
            "OsobaFizyczna": False,
        }
        if customer.vat_number is not None:
            result["NIP"] = str(customer.vat_number)
        if address.state_province is not None:
            result["Wojewodztwo"] = address.state_province
        return result

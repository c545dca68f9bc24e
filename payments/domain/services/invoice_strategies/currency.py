# payments/domain/services/invoice_strategies/currency.py

from __future__ import annotations

from payments.domain.models.invoice import InvoiceRequest
from payments.domain.services.invoice_strategies.base import Payload
from payments.domain.services.invoice_strategies.domestic import DomesticInvoiceStrategy
from payments.domain.services.vat_rates import DOMESTIC_COUNTRY, DOMESTIC_CURRENCY


class CurrencyInvoiceStrategy(DomesticInvoiceStrategy):
    """Domestic sale settled in a foreign currency (``faktura walutowa``)."""

    @property
    def endpoint(self) -> str:
        return "/fakturawaluta.json"

    def supports(self, request: InvoiceRequest) -> bool:
        return (
            request.customer.address.country.code == DOMESTIC_COUNTRY
            and request.amount.currency != DOMESTIC_CURRENCY
        )

    def build_payload(self, request: InvoiceRequest) -> Payload:
        payload = super().build_payload(request)
        payload["TypSprzedazy"] = "KRAJOWA"
        payload["Waluta"] = request.amount.currency
        return payload

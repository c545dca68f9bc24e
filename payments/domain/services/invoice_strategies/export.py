# payments/domain/services/invoice_strategies/export.py

from __future__ import annotations

from typing import Any

from payments.domain.models.invoice import InvoiceRequest
from payments.domain.services.invoice_strategies.base import (
    SALE_DATE_FORMAT,
    InvoiceStrategy,
    Payload,
)
from payments.domain.services.vat_rates import DOMESTIC_COUNTRY


class ExportInvoiceStrategy(InvoiceStrategy):
    """Service export outside the EU: no VAT, country given by name."""

    @property
    def endpoint(self) -> str:
        return "/fakturaeksportuslug.json"

    def supports(self, request: InvoiceRequest) -> bool:
        country = request.customer.address.country
        return not country.is_eu and country.code != DOMESTIC_COUNTRY

    def build_payload(self, request: InvoiceRequest) -> Payload:
        return {
            "NazwaUslugi": request.product_name,
            "UslugaSwiadczonaTrybArt28b": False,
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
            "Kraj": address.country.name,
            "Miejscowosc": address.city,
            "Email": customer.email,
        }
        if address.state_province is not None:
            result["Wojewodztwo"] = address.state_province
        return result

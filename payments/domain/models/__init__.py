# payments/domain/models/__init__.py
"""Value objects and DTOs shared by the invoicing and payment clients."""

from payments.domain.models.country import Country
from payments.domain.models.customer import Address, Customer
from payments.domain.models.discount import Discount
from payments.domain.models.invoice import InvoiceRequest, InvoiceResult
from payments.domain.models.money import Money
from payments.domain.models.payment import (
    PaymentIntent,
    PaymentRequest,
    PaymentResult,
    WebhookEvent,
)
from payments.domain.models.vat_number import VatNumber

__all__ = [
    "Address",
    "Country",
    "Customer",
    "Discount",
    "InvoiceRequest",
    "InvoiceResult",
    "Money",
    "PaymentIntent",
    "PaymentRequest",
    "PaymentResult",
    "VatNumber",
    "WebhookEvent",
]

# payments/__init__.py
"""
Payments and invoicing.

Usage::

    from payments import IFirmaClient, InvoiceRequest

    client = IFirmaClient.from_settings()
    result = client.create_invoice(request)
"""

from payments.domain.errors import (
    InvalidValueError,
    InvoiceConfigurationError,
    InvoiceEncodingError,
    InvoiceError,
    InvoiceProviderError,
    NoInvoiceStrategyError,
    PaymentError,
    WebhookSignatureError,
)
from payments.domain.models import (
    Address,
    Country,
    Customer,
    Discount,
    InvoiceRequest,
    InvoiceResult,
    Money,
    PaymentIntent,
    PaymentRequest,
    PaymentResult,
    VatNumber,
    WebhookEvent,
)
from payments.domain.services.invoice_strategies import InvoiceStrategy, InvoiceStrategySelector
from payments.infrastructure.external.ifirma_client import IFirmaClient
from payments.infrastructure.external.stripe_client import StripeClient

__all__ = [
    "Address",
    "Country",
    "Customer",
    "Discount",
    "IFirmaClient",
    "InvalidValueError",
    "InvoiceConfigurationError",
    "InvoiceEncodingError",
    "InvoiceError",
    "InvoiceProviderError",
    "InvoiceRequest",
    "InvoiceResult",
    "InvoiceStrategy",
    "InvoiceStrategySelector",
    "Money",
    "NoInvoiceStrategyError",
    "PaymentError",
    "PaymentIntent",
    "PaymentRequest",
    "PaymentResult",
    "StripeClient",
    "VatNumber",
    "WebhookEvent",
    "WebhookSignatureError",
]

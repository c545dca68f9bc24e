# payments/domain/services/invoice_strategies/__init__.py
"""
Invoice jurisdiction routing.

Each strategy owns one iFirma invoicing regime; ``InvoiceStrategySelector``
picks the first one that applies to a request.
"""

from payments.domain.services.invoice_strategies.base import Clock, InvoiceStrategy, Payload
from payments.domain.services.invoice_strategies.currency import CurrencyInvoiceStrategy
from payments.domain.services.invoice_strategies.domestic import DomesticInvoiceStrategy
from payments.domain.services.invoice_strategies.eu_b2b import EUB2BInvoiceStrategy
from payments.domain.services.invoice_strategies.export import ExportInvoiceStrategy
from payments.domain.services.invoice_strategies.oss import OSSInvoiceStrategy
from payments.domain.services.invoice_strategies.selector import (
    InvoiceStrategySelector,
    default_strategies,
)

__all__ = [
    "Clock",
    "CurrencyInvoiceStrategy",
    "DomesticInvoiceStrategy",
    "EUB2BInvoiceStrategy",
    "ExportInvoiceStrategy",
    "InvoiceStrategy",
    "InvoiceStrategySelector",
    "OSSInvoiceStrategy",
    "Payload",
    "default_strategies",
]

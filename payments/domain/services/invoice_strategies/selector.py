# payments/domain/services/invoice_strategies/selector.py

from __future__ import annotations

import logging
from typing import Iterable

from payments.domain.errors import NoInvoiceStrategyError
from payments.domain.models.invoice import InvoiceRequest
from payments.domain.services.invoice_strategies.base import Clock, InvoiceStrategy
from payments.domain.services.invoice_strategies.currency import CurrencyInvoiceStrategy
from payments.domain.services.invoice_strategies.domestic import DomesticInvoiceStrategy
from payments.domain.services.invoice_strategies.eu_b2b import EUB2BInvoiceStrategy
from payments.domain.services.invoice_strategies.export import ExportInvoiceStrategy
from payments.domain.services.invoice_strategies.oss import OSSInvoiceStrategy

logger = logging.getLogger("invoice_strategies")


def default_strategies(clock: Clock | None = None) -> list[InvoiceStrategy]:
    """Built-in regimes in priority order."""
    return [
        CurrencyInvoiceStrategy(clock),  # PL customer, foreign currency
        DomesticInvoiceStrategy(clock),  # PL customer, PLN
        EUB2BInvoiceStrategy(clock),     # EU business, reverse charge
        OSSInvoiceStrategy(clock),       # EU consumer, destination VAT
        ExportInvoiceStrategy(clock),    # outside the EU
    ]


class InvoiceStrategySelector:
    """Ordered first-match dispatch over invoice strategies.

    The list order is the only tie-break: the first strategy whose
    ``supports()`` returns True wins. Strategies registered at runtime are
    placed in front of everything already registered.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        strategies: Iterable[InvoiceStrategy] | None = None,
    ) -> None:
        self._strategies = list(strategies) if strategies is not None else default_strategies(clock)

    @property
    def strategies(self) -> tuple[InvoiceStrategy, ...]:
        return tuple(self._strategies)

    def get_strategy(self, request: InvoiceRequest) -> InvoiceStrategy:
        for strategy in self._strategies:
            if strategy.supports(request):
                logger.debug("Invoice strategy selected: %s", type(strategy).__name__)
                return strategy
        raise NoInvoiceStrategyError(request.customer.address.country.code)

    def add_strategy(self, strategy: InvoiceStrategy) -> None:
        self._strategies.insert(0, strategy)
        logger.info("Registered invoice strategy %s (%s)", type(strategy).__name__, strategy.endpoint)

# payments/domain/services/invoice_strategies/base.py

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from payments.domain.models.invoice import InvoiceRequest
from payments.domain.models.money import Money

Clock = Callable[[], date]
Payload = dict[str, Any]

# iFirma: sale date given as a full day ("dzienny")
SALE_DATE_FORMAT = "DZN"


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def money_value(money: Money) -> float:
    """iFirma expects amounts as JSON numbers, not strings."""
    return float(money.amount)


def rate_value(rate: Decimal) -> float:
    return float(rate)


class InvoiceStrategy(ABC):
    """One invoicing regime: when it applies and which payload it produces.

    Strategies hold no per-call state. The clock is only read when the
    request leaves issue/sale dates unset.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or date.today

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """iFirma API path, relative to the base URL (e.g. ``/fakturakraj.json``)."""
        raise NotImplementedError

    @abstractmethod
    def supports(self, request: InvoiceRequest) -> bool:
        raise NotImplementedError

    @abstractmethod
    def build_payload(self, request: InvoiceRequest) -> Payload:
        raise NotImplementedError

    def today(self) -> str:
        return format_date(self._clock())

    def issue_date(self, request: InvoiceRequest) -> str:
        return format_date(request.issue_date) if request.issue_date else self.today()

    def sale_date(self, request: InvoiceRequest) -> str:
        return format_date(request.sale_date) if request.sale_date else self.today()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self.endpoint!r})"

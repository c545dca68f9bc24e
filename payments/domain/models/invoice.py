# payments/domain/models/invoice.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from payments.domain.models.customer import Customer
from payments.domain.models.discount import Discount
from payments.domain.models.money import Money


@dataclass(frozen=True)
class InvoiceRequest:
    """Everything needed to issue one invoice for a settled charge."""

    customer: Customer
    amount: Money
    original_amount: Money
    product_name: str
    discount: Discount | None = None
    issue_date: date | None = None
    sale_date: date | None = None
    payment_method: str | None = "transfer"
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def discount_amount(self) -> Money:
        value = 0
        if self.discount is not None:
            value = self.discount.calculate_discount_amount(self.original_amount.amount)
        return Money(value, self.amount.currency)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer": self.customer.to_dict(),
            "amount": self.amount.to_dict(),
            "original_amount": self.original_amount.to_dict(),
            "product_name": self.product_name,
            "discount": self.discount.to_dict() if self.discount else None,
            "issue_date": self.issue_date.isoformat() if self.issue_date else None,
            "sale_date": self.sale_date.isoformat() if self.sale_date else None,
            "payment_method": self.payment_method,
            "metadata": dict(self.metadata),
        }


class InvoiceResult(BaseModel):
    """Outcome of one invoicing attempt."""

    model_config = ConfigDict(frozen=True)

    success: bool
    invoice_id: str | None = None
    invoice_number: str | None = None
    pdf_url: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @property
    def has_error(self) -> bool:
        return self.error_message is not None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

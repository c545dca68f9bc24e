# payments/domain/models/payment.py
"""
Payment-side DTOs exchanged with the payment gateway client.

``PaymentIntent`` is the only object in the domain that changes after
construction: the gateway reports status transitions for an intent the
caller already holds, so its ``status`` lives in a small mutable cell while
every other field stays read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from payments.domain.models.customer import Customer
from payments.domain.models.discount import Discount
from payments.domain.models.money import Money

PENDING_STATUSES = frozenset({"processing", "requires_action", "requires_payment_method"})
FAILED_STATUSES = frozenset({"canceled", "payment_failed"})


@dataclass(frozen=True)
class PaymentRequest:
    amount: Money
    customer: Customer
    description: str
    metadata: dict[str, Any] = field(default_factory=dict)
    return_url: str | None = None
    cancel_url: str | None = None
    discount: Discount | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount.to_smallest_unit(),
            "currency": self.amount.currency,
            "description": self.description,
            "customer": self.customer.to_dict(),
            "metadata": {
                **self.metadata,
                "customer_email": self.customer.email,
                "discount_code": self.discount.code if self.discount else None,
                "discount_percentage": str(self.discount.percentage) if self.discount else None,
            },
            "return_url": self.return_url,
            "cancel_url": self.cancel_url,
        }


class _StatusCell:
    """Single mutable slot holding the gateway-reported status."""

    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _StatusCell) and other.value == self.value

    def __repr__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str
    amount: Money
    _status: _StatusCell = field(repr=False)
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    @classmethod
    def create(
        cls,
        id: str,
        client_secret: str,
        amount: Money,
        status: str,
        metadata: dict[str, Any] | None = None,
        created_at: datetime | None = None,
    ) -> PaymentIntent:
        return cls(id, client_secret, amount, _StatusCell(status), dict(metadata or {}), created_at)

    @property
    def status(self) -> str:
        return self._status.value

    def update_status(self, status: str) -> None:
        self._status.value = status

    @property
    def is_succeeded(self) -> bool:
        return self.status == "succeeded"

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    @property
    def is_failed(self) -> bool:
        return self.status in FAILED_STATUSES

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount.to_dict(),
            "status": self.status,
            "metadata": dict(self.metadata),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class PaymentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    transaction_id: str
    status: str
    amount: Money
    metadata: dict[str, Any] = Field(default_factory=dict)
    error_message: str | None = None
    processed_at: datetime | None = None

    @property
    def has_error(self) -> bool:
        return self.error_message is not None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class WebhookEvent(BaseModel):
    """Provider-agnostic view of an incoming webhook."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    data: dict[str, Any]
    source: str
    created_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_payment_event(self) -> bool:
        return self.type.startswith("payment_intent.")

    @property
    def is_invoice_event(self) -> bool:
        return self.type.startswith("invoice.")

    @property
    def event_object(self) -> Any:
        return self.data.get("object")

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime | None) -> str | None:
        return value.strftime("%Y-%m-%d %H:%M:%S") if value else None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

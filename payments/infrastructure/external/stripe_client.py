# payments/infrastructure/external/stripe_client.py
"""
Stripe payment gateway client.

Creates, retrieves and refunds PaymentIntents over the Stripe REST API
(form-encoded requests, bearer authentication) and verifies signed webhooks.

Webhook signatures use the ``Stripe-Signature`` header format:
  t=<unix timestamp>,v1=<hex HMAC-SHA256 of "<timestamp>.<payload>">
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
from loguru import logger

from payments.core.config import Settings, settings
from payments.domain.errors import PaymentError, WebhookSignatureError
from payments.domain.models.money import Money
from payments.domain.models.payment import (
    PaymentIntent,
    PaymentRequest,
    PaymentResult,
    WebhookEvent,
)

STRIPE_API_BASE = "https://api.stripe.com/v1"

_TIMEOUT = 30
_DEFAULT_TOLERANCE = 300


def _timestamp(value: int | None) -> datetime | None:
    return datetime.fromtimestamp(value, tz=timezone.utc) if value else None


class StripeClient:
    """Client for the Stripe PaymentIntents / Refunds API."""

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        api_base: str = STRIPE_API_BASE,
        http_client: httpx.Client | None = None,
        timeout: float = _TIMEOUT,
        tolerance: int = _DEFAULT_TOLERANCE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.tolerance = tolerance
        self._http_client = http_client
        self._clock = clock

    def __repr__(self) -> str:
        return f"StripeClient(api_base={self.api_base!r})"

    @classmethod
    def is_configured(cls) -> bool:
        return bool(
            settings.STRIPE_SECRET_KEY.get_secret_value()
            and settings.STRIPE_WEBHOOK_SECRET.get_secret_value()
        )

    @classmethod
    def from_settings(cls, config: Settings | None = None, **kwargs: Any) -> StripeClient:
        config = config or settings
        return cls(
            secret_key=config.STRIPE_SECRET_KEY.get_secret_value(),
            webhook_secret=config.STRIPE_WEBHOOK_SECRET.get_secret_value(),
            api_base=config.STRIPE_API_BASE,
            timeout=config.STRIPE_TIMEOUT,
            tolerance=config.STRIPE_WEBHOOK_TOLERANCE,
            **kwargs,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._secret_key}"}

    def _request(self, method: str, path: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make an HTTP request to the Stripe API."""
        url = f"{self.api_base}{path}"
        logger.info("Stripe {} {}", method, path)

        if self._http_client is not None:
            r = self._http_client.request(method, url, headers=self._headers(), data=data)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                r = client.request(method, url, headers=self._headers(), data=data)

        try:
            body = r.json()
        except ValueError:
            body = None
        is_object = isinstance(body, dict)
        if not is_object:
            body = {"raw": r.text[:500]}

        if r.status_code >= 400:
            error = body.get("error")
            message = error.get("message") if isinstance(error, dict) else error
            message = message if isinstance(message, str) and message else f"HTTP {r.status_code}"
            logger.error("Stripe HTTP error: {} {} -> {} {}", method, path, r.status_code, message)
            raise PaymentError.gateway_error(
                "stripe", message, status_code=r.status_code, response=body,
            )
        if not is_object:
            logger.error("Stripe returned a non-object body: {} {} -> {}", method, path, r.status_code)
            raise PaymentError.gateway_error(
                "stripe", "Invalid response body", status_code=r.status_code, response=body,
            )
        return body

    # ----------------------------------------------------------------
    # Payment intents
    # ----------------------------------------------------------------

    def _prepare_metadata(self, request: PaymentRequest) -> dict[str, str]:
        customer = request.customer
        address = customer.address
        metadata = {
            "email": customer.email,
            "first_name": customer.first_name,
            "last_name": customer.last_name,
            "company_name": customer.company_name,
            "nip": str(customer.vat_number) if customer.vat_number else None,
            "street": address.street,
            "city": address.city,
            "postal_code": address.postal_code,
            "country": address.country.code,
            "state_province": address.state_province,
            "discount_code": request.discount.code if request.discount else None,
            "discount_percentage": str(request.discount.percentage) if request.discount else None,
        }
        return {k: str(v) for k, v in metadata.items() if v}

    def create_payment_intent(self, request: PaymentRequest) -> PaymentIntent:
        metadata = self._prepare_metadata(request)
        form: dict[str, Any] = {
            "amount": request.amount.to_smallest_unit(),
            "currency": request.amount.currency.lower(),
            "description": request.description,
            "receipt_email": request.customer.email,
        }
        form.update({f"metadata[{k}]": v for k, v in metadata.items()})

        data = self._request("POST", "/payment_intents", data=form)

        client_secret = data.get("client_secret")
        if client_secret is None:
            raise PaymentError("Payment intent client secret is null", context={"intent_id": data.get("id")})

        logger.info("Stripe payment intent created: {} ({})", data["id"], data.get("status"))
        return PaymentIntent.create(
            id=data["id"],
            client_secret=client_secret,
            amount=request.amount,
            status=data["status"],
            metadata=metadata,
            created_at=_timestamp(data.get("created")),
        )

    def retrieve_payment_intent(self, payment_id: str) -> dict[str, Any]:
        return self._request("GET", f"/payment_intents/{payment_id}")

    def process_payment(self, intent: PaymentIntent) -> PaymentResult:
        """Refresh ``intent`` from Stripe and report whether it succeeded."""
        data = self.retrieve_payment_intent(intent.id)
        intent.update_status(data["status"])
        return self._payment_result(data, intent.amount)

    def get_payment_status(self, payment_id: str) -> PaymentResult:
        data = self.retrieve_payment_intent(payment_id)
        amount = Money.from_smallest_unit(data["amount"], data["currency"].upper())
        return self._payment_result(data, amount)

    def _payment_result(self, data: dict[str, Any], amount: Money) -> PaymentResult:
        last_error = data.get("last_payment_error") or {}
        return PaymentResult(
            success=data["status"] == "succeeded",
            transaction_id=data["id"],
            status=data["status"],
            amount=amount,
            metadata=data.get("metadata") or {},
            error_message=last_error.get("message"),
            processed_at=datetime.now(timezone.utc),
        )

    def refund_payment(self, payment_id: str, amount: Money | None = None) -> PaymentResult:
        """Refund a PaymentIntent, fully or by ``amount``."""
        form: dict[str, Any] = {"payment_intent": payment_id}
        if amount is not None:
            form["amount"] = amount.to_smallest_unit()

        data = self._request("POST", "/refunds", data=form)
        logger.info("Stripe refund {} for {}: {}", data["id"], payment_id, data.get("status"))
        return PaymentResult(
            success=data.get("status") == "succeeded",
            transaction_id=data["id"],
            status="refunded",
            amount=Money.from_smallest_unit(data["amount"], data["currency"].upper()),
            metadata={"refund_id": data["id"]},
            processed_at=datetime.now(timezone.utc),
        )

    # ----------------------------------------------------------------
    # Webhooks
    # ----------------------------------------------------------------

    def verify_webhook_signature(self, payload: str | bytes, signature: str) -> bool:
        """Return True for an authentic, fresh payload; raise otherwise."""
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")

        timestamp: int | None = None
        candidates: list[str] = []
        for item in (signature or "").split(","):
            key, _, value = item.strip().partition("=")
            if key == "t":
                try:
                    timestamp = int(value)
                except ValueError as exc:
                    raise WebhookSignatureError("Invalid webhook signature header") from exc
            elif key == "v1":
                candidates.append(value)

        if timestamp is None or not candidates:
            raise WebhookSignatureError("Invalid webhook signature header")

        expected = hmac.new(
            self._webhook_secret.encode("utf-8"),
            f"{timestamp}.{payload}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        if not any(hmac.compare_digest(expected, candidate) for candidate in candidates):
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")

        if self.tolerance and self._clock() - timestamp > self.tolerance:
            raise WebhookSignatureError(
                "Webhook timestamp outside the tolerance zone", context={"timestamp": timestamp},
            )
        return True

    def construct_event(self, payload: str | bytes, signature: str) -> WebhookEvent:
        """Verify ``payload`` and parse it into a ``WebhookEvent``."""
        self.verify_webhook_signature(payload, signature)
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise PaymentError("Invalid webhook payload") from exc

        event = WebhookEvent(
            id=data["id"],
            type=data["type"],
            data=data.get("data") or {},
            source="stripe",
            created_at=_timestamp(data.get("created")),
            metadata={"livemode": data.get("livemode", False), "api_version": data.get("api_version")},
        )
        logger.info("Stripe webhook verified: {} ({})", event.id, event.type)
        return event

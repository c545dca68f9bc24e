# payments/domain/errors.py
"""
Typed errors raised by the invoicing and payment layers.

Transport failures from httpx are never wrapped here: they reach the caller
unchanged so the HTTP layer's own retry/timeout policy stays in charge.
"""

from __future__ import annotations

from typing import Any


class InvalidValueError(ValueError):
    """Raised when a value object or DTO is constructed from invalid input."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvoiceError(Exception):
    """Base class for invoicing failures."""

    def __init__(self, message: str = "", context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    @classmethod
    def invalid_customer_data(cls, field: str) -> InvoiceError:
        return cls(f"Invalid customer data: {field}", context={"field": field})

    @classmethod
    def unsupported_country(cls, country: str) -> InvoiceError:
        return cls(f"Unsupported country for invoicing: {country}", context={"country": country})

    @classmethod
    def api_error(cls, service: str, error: str) -> InvoiceError:
        return cls(f"Invoice API error ({service}): {error}", context={"service": service})


class InvoiceConfigurationError(InvoiceError):
    """Client credentials are malformed. Raised at construction, never retried."""


class InvoiceEncodingError(InvoiceError):
    """The invoice payload could not be serialized to UTF-8 JSON."""


class InvoiceProviderError(InvoiceError):
    """The invoicing provider rejected the request (non-zero response code)."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        endpoint: str | None = None,
        response: dict[str, Any] | None = None,
    ):
        super().__init__(message, context={"code": code, "endpoint": endpoint, "response": response or {}})
        self.code = code
        self.endpoint = endpoint
        self.response = response or {}


class NoInvoiceStrategyError(InvoiceError):
    """No registered strategy accepted the invoice request."""

    def __init__(self, country_code: str):
        super().__init__(
            f"No appropriate invoice strategy found for country: {country_code}",
            context={"country": country_code},
        )
        self.country_code = country_code


class PaymentError(Exception):
    """Base class for payment gateway failures."""

    def __init__(self, message: str = "", context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    @classmethod
    def invalid_amount(cls, amount: Any) -> PaymentError:
        return cls(f"Invalid payment amount: {amount}", context={"amount": str(amount)})

    @classmethod
    def unsupported_currency(cls, currency: str) -> PaymentError:
        return cls(f"Unsupported currency: {currency}", context={"currency": currency})

    @classmethod
    def gateway_error(cls, gateway: str, error: str, **context: Any) -> PaymentError:
        return cls(f"Payment gateway error ({gateway}): {error}", context={"gateway": gateway, **context})


class WebhookSignatureError(PaymentError):
    """A webhook payload failed signature or timestamp verification."""

# payments/infrastructure/external/ifirma_client.py
"""
iFirma invoicing API client.

Picks the invoicing regime for a request, serialises the regime's payload
and sends it to the matching iFirma endpoint.

Authentication: every request carries
  Authentication: IAPIS user=<username>, hmac-sha1=<hex digest>
where the digest is an HMAC-SHA1 (key = hex-decoded invoice key) over
  <request URL> + <username> + <key name> + <request body>

Response envelope:
  {"response": {"Kod": 0, "Identyfikator": ..., "Numer": ..., "Informacja": ...}}
``Kod`` 0 means the invoice was issued; anything else is a rejection.

Transport failures (connect errors, timeouts, non-2xx statuses) are raised by
httpx and propagate unchanged.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from payments.core.config import Settings, settings
from payments.domain.errors import (
    InvoiceConfigurationError,
    InvoiceEncodingError,
    InvoiceProviderError,
)
from payments.domain.models.invoice import InvoiceRequest, InvoiceResult
from payments.domain.services.invoice_strategies import InvoiceStrategy, InvoiceStrategySelector

logger = logging.getLogger("ifirma_client")

DEFAULT_API_URL = "https://www.ifirma.pl/iapi"

_TIMEOUT = 30

AUTH_SCHEME = "IAPIS"
# Key names mixed into the signature base
INVOICE_KEY_NAME = "faktura"
DOCUMENT_KEY_NAME = "document-request"

DEFAULT_DOCUMENT_PATH = "/fakturakraj"

# endpoint fragment -> path the issued PDF is served from
_PDF_PATHS = (
    ("fakturaoss", "/fakturaoss"),
    ("fakturaeksport", "/fakturaeksport"),
)


def decode_invoice_key(hex_key: str) -> bytes:
    """Decode the hex-encoded invoice key from the iFirma panel."""
    if len(hex_key) % 2 != 0:
        raise InvoiceConfigurationError("Invalid invoice key format")
    try:
        return bytes.fromhex(hex_key)
    except ValueError as exc:
        raise InvoiceConfigurationError("Invalid invoice key format") from exc


def serialize_payload(payload: dict[str, Any]) -> bytes:
    """Canonical request body: UTF-8 JSON, non-ASCII and ``/`` left unescaped."""
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        # UnicodeEncodeError (lone surrogates) is a ValueError too
        raise InvoiceEncodingError("Failed to encode invoice data as JSON") from exc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def pdf_path_for_endpoint(endpoint: str) -> str:
    for fragment, path in _PDF_PATHS:
        if fragment in endpoint:
            return path
    return DEFAULT_DOCUMENT_PATH


class IFirmaClient:
    """Client for the iFirma invoicing API."""

    def __init__(
        self,
        username: str,
        invoice_key: str,
        api_url: str = DEFAULT_API_URL,
        http_client: httpx.Client | None = None,
        selector: InvoiceStrategySelector | None = None,
        timeout: float = _TIMEOUT,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._key = decode_invoice_key(invoice_key)
        self.username = username
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client
        self._selector = selector or InvoiceStrategySelector()
        self._now = now or _utcnow

    def __repr__(self) -> str:
        return f"IFirmaClient(username={self.username!r}, api_url={self.api_url!r})"

    @classmethod
    def is_configured(cls) -> bool:
        """Check if iFirma credentials are available."""
        return bool(settings.IFIRMA_USERNAME and settings.IFIRMA_INVOICE_KEY.get_secret_value())

    @classmethod
    def from_settings(cls, config: Settings | None = None, **kwargs: Any) -> IFirmaClient:
        config = config or settings
        return cls(
            username=config.IFIRMA_USERNAME,
            invoice_key=config.IFIRMA_INVOICE_KEY.get_secret_value(),
            api_url=config.IFIRMA_API_URL,
            timeout=config.IFIRMA_TIMEOUT,
            **kwargs,
        )

    @property
    def selector(self) -> InvoiceStrategySelector:
        return self._selector

    # ----------------------------------------------------------------
    # Signing
    # ----------------------------------------------------------------

    def sign(self, url: str, key_name: str, body: bytes = b"") -> str:
        """Lowercase hex HMAC-SHA1 over URL + username + key name + body."""
        message = f"{url}{self.username}{key_name}".encode("utf-8") + body
        return hmac.new(self._key, message, hashlib.sha1).hexdigest()

    def authentication_header(self, digest: str) -> str:
        return f"{AUTH_SCHEME} user={self.username}, hmac-sha1={digest}"

    # ----------------------------------------------------------------
    # Transport
    # ----------------------------------------------------------------

    def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: bytes | None = None,
    ) -> httpx.Response:
        if self._http_client is not None:
            response = self._http_client.request(method, url, headers=headers, content=content)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(method, url, headers=headers, content=content)
        response.raise_for_status()
        logger.info("iFirma response status=%d", response.status_code)
        return response

    # ----------------------------------------------------------------
    # Invoices
    # ----------------------------------------------------------------

    def prepare_content(self, request: InvoiceRequest) -> tuple[InvoiceStrategy, bytes]:
        """Select the regime for ``request`` and serialise its payload."""
        strategy = self._selector.get_strategy(request)
        return strategy, serialize_payload(strategy.build_payload(request))

    def create_invoice(self, request: InvoiceRequest) -> InvoiceResult:
        """Issue an invoice for ``request``.

        Raises
        ------
        NoInvoiceStrategyError
            No registered strategy accepts the request.
        InvoiceEncodingError
            The payload cannot be serialised.
        InvoiceProviderError
            iFirma answered with a non-zero ``Kod`` or an unreadable body.
        """
        strategy, body = self.prepare_content(request)
        endpoint = strategy.endpoint
        url = f"{self.api_url}{endpoint}"

        headers = {
            "Authentication": self.authentication_header(self.sign(url, INVOICE_KEY_NAME, body)),
            "Content-Type": "application/json; charset=UTF-8",
        }
        logger.info("iFirma POST %s (%s)", endpoint, type(strategy).__name__)

        response = self._request("POST", url, headers=headers, content=body)
        try:
            data = response.json()
        except ValueError as exc:
            raise InvoiceProviderError(
                "Invoice creation failed: response is not valid JSON",
                endpoint=endpoint,
            ) from exc
        return self.parse_response(data, endpoint)

    def parse_response(self, data: Any, endpoint: str) -> InvoiceResult:
        body = data.get("response") if isinstance(data, dict) else None
        if not isinstance(body, dict):
            raise InvoiceProviderError(
                "Invoice creation failed: malformed response",
                endpoint=endpoint,
                response=data if isinstance(data, dict) else None,
            )

        code = body.get("Kod")
        if code == 0 and not isinstance(code, bool):
            identifier = body.get("Identyfikator")
            if identifier is None or identifier == "":
                logger.error("iFirma accepted invoice without an identifier: %s", endpoint)
                raise InvoiceProviderError(
                    "Invoice creation failed: missing invoice identifier",
                    code=code,
                    endpoint=endpoint,
                    response=body,
                )
            invoice_id = str(identifier)
            number = body.get("Numer")
            logger.info("iFirma invoice issued id=%s number=%s", invoice_id, number)
            return InvoiceResult(
                success=True,
                invoice_id=invoice_id,
                invoice_number=str(number) if number is not None else None,
                pdf_url=self.build_pdf_url(invoice_id, endpoint),
                metadata={"endpoint": endpoint, "message": body.get("Informacja")},
                created_at=self._now(),
            )

        message = body.get("Informacja") or "Unknown error"
        logger.error("iFirma rejected invoice: %s -> Kod=%s %s", endpoint, code, message)
        raise InvoiceProviderError(
            f"Invoice creation failed: {message}",
            code=code,
            endpoint=endpoint,
            response=body,
        )

    def build_pdf_url(self, invoice_id: str, endpoint: str) -> str:
        """Download URL of an issued invoice, derived from the issuing endpoint."""
        return f"{self.api_url}{pdf_path_for_endpoint(endpoint)}/{invoice_id}.pdf"

    def get_invoice_pdf(self, invoice_id: str, document_path: str = DEFAULT_DOCUMENT_PATH) -> bytes:
        """Download the PDF of an issued invoice."""
        url = f"{self.api_url}{document_path}/{invoice_id}.pdf"
        headers = {"Authentication": self.authentication_header(self.sign(url, DOCUMENT_KEY_NAME))}
        logger.info("iFirma GET %s/%s.pdf", document_path, invoice_id)
        return self._request("GET", url, headers=headers).content

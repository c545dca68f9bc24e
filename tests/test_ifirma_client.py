"""Tests for the iFirma invoicing client: signing, transport and response handling."""

import hashlib
import hmac
import json
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest
from pydantic import SecretStr

from payments.core.config import Settings
from payments.domain.errors import (
    InvoiceConfigurationError,
    InvoiceEncodingError,
    InvoiceProviderError,
    NoInvoiceStrategyError,
)
from payments.domain.services.invoice_strategies import InvoiceStrategySelector
from payments.infrastructure.external.ifirma_client import (
    IFirmaClient,
    decode_invoice_key,
    pdf_path_for_endpoint,
    serialize_payload,
)

API_URL = "https://www.ifirma.pl/iapi"
USERNAME = "testuser"
INVOICE_KEY = "1234567890123456"

OK_RESPONSE = {"response": {"Kod": 0, "Identyfikator": 12345, "Numer": "FV/1/2025", "Informacja": "OK"}}


def _expected_signature(url: str, key_name: str, body: bytes = b"") -> str:
    message = f"{url}{USERNAME}{key_name}".encode("utf-8") + body
    return hmac.new(bytes.fromhex(INVOICE_KEY), message, hashlib.sha1).hexdigest()


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code=200, json_body=None, content=None):
        self.requests = []
        self.status_code = status_code
        self.json_body = OK_RESPONSE if json_body is None and content is None else json_body
        self.content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)


@pytest.fixture
def make_client(clock):
    def _make(handler, **kwargs):
        http = httpx.Client(transport=httpx.MockTransport(handler))
        kwargs.setdefault("selector", InvoiceStrategySelector(clock))
        return IFirmaClient(USERNAME, INVOICE_KEY, api_url=API_URL, http_client=http, **kwargs)

    return _make


# ═══════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════


class TestInvoiceKey:

    def test_decode(self):
        assert decode_invoice_key("00ff10") == b"\x00\xff\x10"

    def test_odd_length_rejected_at_construction(self):
        with pytest.raises(InvoiceConfigurationError, match="Invalid invoice key format"):
            IFirmaClient(USERNAME, "123")

    def test_non_hex_rejected(self):
        with pytest.raises(InvoiceConfigurationError, match="Invalid invoice key format"):
            IFirmaClient(USERNAME, "zz12")

    def test_repr_hides_key(self):
        client = IFirmaClient(USERNAME, INVOICE_KEY, api_url=API_URL + "/")
        assert INVOICE_KEY not in repr(client)
        assert client.api_url == API_URL


class TestFromSettings:

    def _settings(self, **overrides):
        values = {
            "IFIRMA_USERNAME": USERNAME,
            "IFIRMA_INVOICE_KEY": INVOICE_KEY,
            "IFIRMA_API_URL": "https://sandbox.example.com/iapi",
            "IFIRMA_TIMEOUT": 5,
        }
        values.update(overrides)
        return Settings(**values)

    def test_from_settings(self):
        client = IFirmaClient.from_settings(self._settings())
        assert client.username == USERNAME
        assert client.api_url == "https://sandbox.example.com/iapi"
        assert client.timeout == 5

    def test_invoice_key_is_secret(self):
        config = self._settings()
        assert isinstance(config.IFIRMA_INVOICE_KEY, SecretStr)
        assert INVOICE_KEY not in repr(config)

    def test_is_configured(self):
        with patch("payments.infrastructure.external.ifirma_client.settings", self._settings()):
            assert IFirmaClient.is_configured() is True
        with patch(
            "payments.infrastructure.external.ifirma_client.settings",
            self._settings(IFIRMA_INVOICE_KEY=""),
        ):
            assert IFirmaClient.is_configured() is False


# ═══════════════════════════════════════════════════════════════════
# Signing and serialisation
# ═══════════════════════════════════════════════════════════════════


class TestSigning:

    def test_signature_matches_reference_hmac(self):
        client = IFirmaClient(USERNAME, INVOICE_KEY, api_url=API_URL)
        url = f"{API_URL}/fakturakraj.json"
        body = b'{"Zaplacono": 123.45}'

        assert client.sign(url, "faktura", body) == _expected_signature(url, "faktura", body)

    def test_signature_is_lowercase_hex(self):
        digest = IFirmaClient(USERNAME, INVOICE_KEY).sign("u", "faktura", b"x")
        assert len(digest) == 40
        assert digest == digest.lower()
        int(digest, 16)

    def test_signature_depends_on_every_component(self):
        client = IFirmaClient(USERNAME, INVOICE_KEY)
        base = client.sign("https://a/x.json", "faktura", b"{}")
        assert client.sign("https://a/y.json", "faktura", b"{}") != base
        assert client.sign("https://a/x.json", "document-request", b"{}") != base
        assert client.sign("https://a/x.json", "faktura", b"{ }") != base
        assert IFirmaClient("other", INVOICE_KEY).sign("https://a/x.json", "faktura", b"{}") != base

    def test_header_format(self):
        client = IFirmaClient(USERNAME, INVOICE_KEY)
        assert client.authentication_header("abc123") == "IAPIS user=testuser, hmac-sha1=abc123"


class TestSerialisation:

    def test_non_ascii_and_slash_unescaped(self):
        body = serialize_payload({"Nazwa": "Zażółć gęślą jaźń", "Numer": "FV/1/2025"})
        assert "Zażółć gęślą jaźń".encode("utf-8") in body
        assert b"FV/1/2025" in body
        assert b"\\u" not in body

    def test_lone_surrogate_rejected(self):
        with pytest.raises(InvoiceEncodingError):
            serialize_payload({"Nazwa": "\ud800"})

    def test_non_finite_number_rejected(self):
        with pytest.raises(InvoiceEncodingError):
            serialize_payload({"Zaplacono": float("nan")})

    def test_unserialisable_value_rejected(self):
        with pytest.raises(InvoiceEncodingError):
            serialize_payload({"Zaplacono": object()})


# ═══════════════════════════════════════════════════════════════════
# create_invoice
# ═══════════════════════════════════════════════════════════════════


class TestCreateInvoice:

    def test_success(self, make_client, make_request):
        recorder = Recorder()
        result = make_client(recorder).create_invoice(make_request())

        assert result.success is True
        assert result.invoice_id == "12345"
        assert result.invoice_number == "FV/1/2025"
        assert result.pdf_url == f"{API_URL}/fakturakraj/12345.pdf"
        assert result.metadata == {"endpoint": "/fakturakraj.json", "message": "OK"}
        assert result.created_at is not None
        assert result.has_error is False

    def test_request_is_signed_over_sent_body(self, make_client, make_request):
        recorder = Recorder()
        make_client(recorder).create_invoice(make_request())

        (request,) = recorder.requests
        url = f"{API_URL}/fakturakraj.json"
        assert request.method == "POST"
        assert str(request.url) == url
        assert request.headers["Content-Type"] == "application/json; charset=UTF-8"
        assert request.headers["Authentication"] == (
            f"IAPIS user={USERNAME}, hmac-sha1={_expected_signature(url, 'faktura', request.content)}"
        )
        assert json.loads(request.content)["Zaplacono"] == 123.45

    def test_body_keeps_polish_characters(self, make_client, make_request):
        recorder = Recorder()
        make_client(recorder).create_invoice(make_request(product_name="Szkolenie: zarządzanie/ryzyko"))

        body = recorder.requests[0].content
        assert "Szkolenie: zarządzanie/ryzyko".encode("utf-8") in body

    @pytest.mark.parametrize(
        "country,currency,business,endpoint,pdf_path",
        [
            ("PL", "EUR", False, "/fakturawaluta.json", "/fakturakraj"),
            ("DE", "EUR", True, "/fakturaeksportuslugue.json", "/fakturaeksport"),
            ("DE", "EUR", False, "/fakturaoss.json", "/fakturaoss"),
            ("US", "USD", False, "/fakturaeksportuslug.json", "/fakturaeksport"),
        ],
    )
    def test_routes_to_regime_endpoint(self, make_client, make_request, country, currency, business, endpoint, pdf_path):
        recorder = Recorder()
        result = make_client(recorder).create_invoice(make_request(country, currency, business=business))

        assert recorder.requests[0].url.path == f"/iapi{endpoint}"
        assert result.pdf_url == f"{API_URL}{pdf_path}/12345.pdf"

    def test_provider_rejection(self, make_client, make_request):
        recorder = Recorder(json_body={"response": {"Kod": 1, "Informacja": "Invalid customer data"}})
        with pytest.raises(InvoiceProviderError, match="Invoice creation failed: Invalid customer data") as exc:
            make_client(recorder).create_invoice(make_request())

        assert exc.value.code == 1
        assert exc.value.endpoint == "/fakturakraj.json"
        assert exc.value.response["Informacja"] == "Invalid customer data"

    def test_rejection_without_message(self, make_client, make_request):
        recorder = Recorder(json_body={"response": {"Kod": 201}})
        with pytest.raises(InvoiceProviderError, match="Unknown error"):
            make_client(recorder).create_invoice(make_request())

    @pytest.mark.parametrize("body", [{}, {"response": None}, {"response": "OK"}, []])
    def test_malformed_envelope(self, make_client, make_request, body):
        with pytest.raises(InvoiceProviderError, match="malformed response"):
            make_client(Recorder(json_body=body)).create_invoice(make_request())

    @pytest.mark.parametrize(
        "body",
        [{"Kod": 0}, {"Kod": 0, "Identyfikator": None, "Numer": "FV/1/2025"}, {"Kod": 0, "Identyfikator": ""}],
    )
    def test_success_without_identifier(self, make_client, make_request, body):
        with pytest.raises(InvoiceProviderError, match="missing invoice identifier") as exc:
            make_client(Recorder(json_body={"response": body})).create_invoice(make_request())
        assert exc.value.code == 0
        assert exc.value.endpoint == "/fakturakraj.json"

    def test_parse_response_without_identifier(self):
        client = IFirmaClient(USERNAME, INVOICE_KEY, api_url=API_URL)
        with pytest.raises(InvoiceProviderError, match="missing invoice identifier"):
            client.parse_response({"response": {"Kod": 0}}, "/fakturakraj.json")

    def test_created_at_from_injected_clock(self, make_client, make_request):
        issued = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)
        result = make_client(Recorder(), now=lambda: issued).create_invoice(make_request())
        assert result.created_at == issued

    def test_boolean_code_is_not_success(self, make_client, make_request):
        recorder = Recorder(json_body={"response": {"Kod": False, "Identyfikator": 1}})
        with pytest.raises(InvoiceProviderError):
            make_client(recorder).create_invoice(make_request())

    def test_non_json_response(self, make_client, make_request):
        with pytest.raises(InvoiceProviderError, match="not valid JSON"):
            make_client(Recorder(content=b"<html>maintenance</html>")).create_invoice(make_request())

    def test_http_error_propagates(self, make_client, make_request):
        with pytest.raises(httpx.HTTPStatusError):
            make_client(Recorder(status_code=500, json_body={})).create_invoice(make_request())

    def test_transport_error_propagates(self, make_client, make_request):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            make_client(handler).create_invoice(make_request())

    def test_encoding_failure_sends_nothing(self, make_client, make_request):
        recorder = Recorder()
        with pytest.raises(InvoiceEncodingError):
            make_client(recorder).create_invoice(make_request(product_name="\ud800"))
        assert recorder.requests == []

    def test_no_strategy_sends_nothing(self, make_client, make_request):
        recorder = Recorder()
        client = make_client(recorder, selector=InvoiceStrategySelector(strategies=[]))
        with pytest.raises(NoInvoiceStrategyError):
            client.create_invoice(make_request())
        assert recorder.requests == []

    def test_prepare_content(self, make_client, make_request):
        strategy, body = make_client(Recorder()).prepare_content(make_request("DE", "EUR"))
        assert strategy.endpoint == "/fakturaoss.json"
        assert json.loads(body)["Jezyk"] == "de"

    def test_default_selector(self):
        assert len(IFirmaClient(USERNAME, INVOICE_KEY).selector.strategies) == 5


# ═══════════════════════════════════════════════════════════════════
# PDFs
# ═══════════════════════════════════════════════════════════════════


class TestPdf:

    @pytest.mark.parametrize(
        "endpoint,path",
        [
            ("/fakturakraj.json", "/fakturakraj"),
            ("/fakturawaluta.json", "/fakturakraj"),
            ("/fakturaoss.json", "/fakturaoss"),
            ("/fakturaeksportuslug.json", "/fakturaeksport"),
            ("/fakturaeksportuslugue.json", "/fakturaeksport"),
        ],
    )
    def test_pdf_path_for_endpoint(self, endpoint, path):
        assert pdf_path_for_endpoint(endpoint) == path

    def test_build_pdf_url(self):
        client = IFirmaClient(USERNAME, INVOICE_KEY, api_url=API_URL)
        assert client.build_pdf_url("77", "/fakturaoss.json") == f"{API_URL}/fakturaoss/77.pdf"

    def test_get_invoice_pdf(self, make_client):
        recorder = Recorder(content=b"%PDF-1.4 test")
        pdf = make_client(recorder).get_invoice_pdf("12345")

        assert pdf == b"%PDF-1.4 test"
        (request,) = recorder.requests
        url = f"{API_URL}/fakturakraj/12345.pdf"
        assert request.method == "GET"
        assert str(request.url) == url
        assert request.headers["Authentication"] == (
            f"IAPIS user={USERNAME}, hmac-sha1={_expected_signature(url, 'document-request')}"
        )

    def test_get_invoice_pdf_other_regime(self, make_client):
        recorder = Recorder(content=b"%PDF")
        make_client(recorder).get_invoice_pdf("9", document_path="/fakturaoss")
        assert recorder.requests[0].url.path == "/iapi/fakturaoss/9.pdf"

    def test_get_invoice_pdf_not_found(self, make_client):
        with pytest.raises(httpx.HTTPStatusError):
            make_client(Recorder(status_code=404, content=b"")).get_invoice_pdf("1")

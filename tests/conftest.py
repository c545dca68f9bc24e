"""Shared test fixtures for the payments / invoicing test suite."""

from datetime import date
from decimal import Decimal

import pytest

from payments.domain.models import (
    Address,
    Customer,
    Discount,
    InvoiceRequest,
    Money,
    VatNumber,
)

FIXED_DATE = date(2025, 3, 14)

# Valid Polish NIP (mod-11 check digit 6)
VALID_NIP = "5260001246"

# State/province is mandatory for these countries
_STATES = {"US": "CA", "CA": "ON", "AU": "NSW", "BR": "SP", "MX": "CDMX", "IN": "MH", "MY": "SGR", "AR": "BA"}


@pytest.fixture
def clock():
    """Frozen 'today' for payload dates."""
    return lambda: FIXED_DATE


@pytest.fixture
def make_customer():
    """Build a customer in ``country``; business when company/VAT given."""

    def _make(
        country: str = "PL",
        company_name: str | None = None,
        vat_number: VatNumber | None = None,
        state_province: str | None = None,
    ) -> Customer:
        address = Address(
            street="ul. Testowa 123",
            city="Warszawa",
            postal_code="00-001",
            country=country,
            state_province=state_province or _STATES.get(country),
        )
        return Customer(
            first_name="Jan",
            last_name="Kowalski",
            email="jan@example.com",
            address=address,
            company_name=company_name,
            vat_number=vat_number,
        )

    return _make


@pytest.fixture
def make_request(make_customer):
    """Build an InvoiceRequest; extra kwargs go to InvoiceRequest."""

    def _make(
        country: str = "PL",
        currency: str = "PLN",
        amount: str = "123.45",
        business: bool = False,
        customer: Customer | None = None,
        **kwargs,
    ) -> InvoiceRequest:
        if customer is None:
            customer = make_customer(country, company_name="Acme Sp. z o.o." if business else None)
        money = Money(Decimal(amount), currency)
        kwargs.setdefault("original_amount", money)
        return InvoiceRequest(
            customer=customer,
            amount=money,
            product_name=kwargs.pop("product_name", "Kurs online"),
            **kwargs,
        )

    return _make


@pytest.fixture
def ten_percent() -> Discount:
    return Discount(code="SPRING10", percentage=Decimal("10"))

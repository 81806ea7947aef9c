"""
Shared fixtures.

Every component is wired over an in-memory store; nothing touches the
network and only the JSON store tests touch the filesystem (tmp_path).
"""

from datetime import date

import pytest

from invoicebook.config import AppSettings, LedgerSettings, Settings, StorageSettings, WalletSettings
from invoicebook.models import Customer, CustomerSnapshot, Invoice, InvoiceItem, Product
from invoicebook.orchestrator import create_app_components
from invoicebook.services.storage import InMemoryStore


def make_settings(stock_edit_policy: str = "preserve") -> Settings:
    return Settings(
        storage_override=StorageSettings(backend="memory", key_prefix="warrick_"),
        ledger_override=LedgerSettings(stock_edit_policy=stock_edit_policy),
        wallet_override=WalletSettings(),
        app_override=AppSettings(audit_enabled=True, audit_max_events=1000),
    )


def make_invoice(*items: InvoiceItem, customer: str = "Rahim Uddin", **kwargs) -> Invoice:
    return Invoice(
        date=kwargs.pop("date", date(2024, 5, 1)),
        customer=CustomerSnapshot(name=customer, email="01711 000000", address="Dhaka"),
        items=list(items),
        **kwargs,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def app(store):
    return create_app_components(make_settings(), store=store)


@pytest.fixture
def reconcile_app(store):
    return create_app_components(make_settings("reconcile"), store=store)


@pytest.fixture
def pen(app):
    return app.records.save_product(Product(name="Pen", price=10.0, stock=100))


@pytest.fixture
def widget(app):
    return app.records.save_product(Product(name="Widget", price=5.0, stock=10))


@pytest.fixture
def customer(app):
    return app.records.save_customer(
        Customer(name="Rahim Uddin", phone="01711 000000", address="Mirpur, Dhaka")
    )


@pytest.fixture
def invoice_factory():
    return make_invoice

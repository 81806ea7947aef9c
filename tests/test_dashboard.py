"""
Tests for records maintenance, the dashboard summary and app wiring.
"""

import json

import pytest
from datetime import date, datetime, timezone

from invoicebook.config import Settings, StorageSettings
from invoicebook.ledger.records import RecordValidationError
from invoicebook.models import AuditEventType, Customer, InvoiceItem, Product
from invoicebook.orchestrator import create_app_components
from invoicebook.services.storage import InMemoryStore, JsonDirectoryStore


class TestRecords:
    """Products, customers and the business profile."""

    def test_save_product_upserts(self, app):
        """Test the first save adds, the next one replaces."""
        pen = app.records.save_product(Product(name="Pen", price=10, stock=5))
        app.records.save_product(pen.model_copy(update={"stock": 50}))
        assert app.products.count() == 1
        assert app.products.require(pen.id).stock == 50

    def test_delete_product_and_customer(self, app, pen, customer):
        """Test deletes return the removed record."""
        assert app.records.delete_product(pen.id).id == pen.id
        assert app.records.delete_customer(customer.id).id == customer.id
        assert app.records.delete_customer(customer.id) is None

    def test_product_entry_rules(self, app):
        """Test blank names, overlong names and negative prices are refused."""
        for bad in (
            Product(name="   ", price=1),
            Product(name="x" * 201, price=1),
            Product(name="Pen", price=-1),
        ):
            with pytest.raises(RecordValidationError):
                app.records.save_product(bad)
        assert app.products.count() == 0

    def test_customer_needs_name_and_phone(self, app):
        """Test a customer without a phone is refused."""
        with pytest.raises(RecordValidationError):
            app.records.save_customer(Customer(name="Karim", phone=" "))
        with pytest.raises(RecordValidationError):
            app.records.save_customer(Customer(name="", phone="01811222333"))

    def test_save_keeps_legacy_records(self, app, store):
        """Test saving next to an out-of-range legacy record keeps every record."""
        store.set("warrick_products", json.dumps([
            {"id": "a", "name": "Pen", "price": 10, "stock": 5},
            {"id": "b", "name": "Refund", "price": -5, "stock": 0},
        ]))
        app.records.save_product(Product(name="Ink", price=3, stock=1))

        assert [p.name for p in app.products.all()] == ["Ink", "Pen", "Refund"]
        assert app.products.require("a").stock == 5

    def test_saves_are_audited(self, app):
        """Test directory changes reach the audit trail."""
        saved = app.records.save_customer(Customer(name="Karim", phone="01811222333"))
        events = app.audit_logger.storage.get_events_by_entity("customer", saved.id)
        assert [e.event_type for e in events] == [AuditEventType.CUSTOMER_SAVED]


class TestDashboard:
    """Headline figures and the filtered list."""

    def test_empty_dashboard(self, app):
        """Test defaults with no invoices."""
        summary = app.dashboard.summary()
        assert summary.total_revenue == 0
        assert summary.invoice_count == 0
        assert summary.active_currency == "BDT"
        assert summary.currency_symbol == "৳"

    def test_summary(self, app, customer, invoice_factory):
        """Test revenue over all invoices, currency of the newest one."""
        app.ledger.create(invoice_factory(InvoiceItem(name="A", quantity=3, price=10), tax_rate=5))
        app.ledger.create(invoice_factory(
            InvoiceItem(name="B", quantity=1, price=100),
            currency="USD",
            date=date(2020, 1, 1),
        ))

        summary = app.dashboard.summary(
            window="30d",
            now=datetime(2024, 5, 10, tzinfo=timezone.utc),
        )
        assert summary.total_revenue == 131.5
        assert summary.invoice_count == 2
        assert summary.customer_count == 1
        assert summary.active_currency == "USD"
        assert summary.currency_symbol == "$"
        assert [i.invoice_number for i in summary.invoices] == ["#0001"]


class TestWiring:
    """create_app_components over the configured store."""

    def test_json_backend(self, tmp_path):
        """Test the json backend writes enveloped documents to disk."""
        settings = Settings(storage_override=StorageSettings(backend="json", data_dir=str(tmp_path)))
        app = create_app_components(settings)
        app.records.save_product(Product(name="Pen", price=10, stock=5))

        assert isinstance(app.store, JsonDirectoryStore)
        document = json.loads((tmp_path / "warrick_products.json").read_text(encoding="utf-8"))
        assert document["schemaVersion"] == 1
        assert document["data"][0]["name"] == "Pen"

    def test_corrupt_document_falls_back_and_is_audited(self, app, store):
        """Test an unreadable collection reads as empty and is recorded."""
        store.set("warrick_products", "{broken")
        assert app.products.all() == []

        events = app.audit_logger.storage.get_recent_events()
        assert events[0].event_type == AuditEventType.STORAGE_READ_FALLBACK
        assert events[0].entity_id == "products"

    def test_undecodable_file_falls_back(self, tmp_path):
        """Test a document that is not UTF-8 reads as empty instead of raising."""
        settings = Settings(storage_override=StorageSettings(backend="json", data_dir=str(tmp_path)))
        app = create_app_components(settings)
        (tmp_path / "warrick_products.json").write_bytes(b"\xff\xfe[\x80]")
        assert app.products.all() == []

    def test_audit_can_be_disabled(self):
        """Test no audit document is written when disabled."""
        from invoicebook.config import AppSettings

        store = InMemoryStore()
        settings = Settings(app_override=AppSettings(audit_enabled=False))
        app = create_app_components(settings, store=store)
        app.records.save_product(Product(name="Pen"))
        assert app.audit_logger.storage is None
        assert "warrick_audit_log" not in store.keys()


class TestLookups:
    """Search and number lookups on the repositories."""

    def test_catalog_and_directory_search(self, app, pen, widget, customer):
        """Test repository search helpers."""
        assert [p.name for p in app.products.search("wid")] == ["Widget"]
        assert [c.name for c in app.customers.search("01711 000")] == ["Rahim Uddin"]

    def test_find_by_number(self, app, invoice_factory):
        """Test invoices are found by their number."""
        invoice = app.ledger.create(invoice_factory(InvoiceItem(name="A", price=1)))
        assert [i.id for i in app.invoices.find_by_number("#0001")] == [invoice.id]
        assert app.invoices.find_by_number("#9999") == []


class TestSettings:
    """Configuration defaults and startup checks."""

    def test_defaults(self):
        """Test the default ledger settings."""
        from invoicebook.config import LedgerSettings

        settings = LedgerSettings(default_currency=" usd ")
        assert settings.default_currency == "USD"
        assert settings.stock_edit_policy == "preserve"
        assert settings.invoice_number_width == 4

    def test_rejects_unknown_edit_policy(self):
        """Test the edit policy is restricted."""
        from invoicebook.config import LedgerSettings

        with pytest.raises(ValueError):
            LedgerSettings(stock_edit_policy="sometimes")

    def test_rejects_unknown_currency(self):
        """Test the default currency must be a supported one."""
        from invoicebook.config import LedgerSettings

        with pytest.raises(ValueError):
            LedgerSettings(default_currency="JPY")

    def test_validate_all_settings(self):
        """Test the startup check reports every section."""
        from invoicebook.config import get_settings, validate_all_settings

        get_settings.cache_clear()
        results = validate_all_settings()
        assert {"storage", "ledger", "wallet", "app"} <= set(results)

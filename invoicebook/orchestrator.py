"""
Main Orchestrator for Invoicebook

This module ties together all the components:
1. Storage (key-value store → versioned documents → repositories)
2. Audit (structured log + persisted audit trail)
3. Services (ledger, records, accounts, wallet, dashboard)

DESIGN DECISION: Every service shares ONE document store, so all of them
see the same persisted state. The audit trail gets its own document
store over the same backing store, without a fallback handler, so an
unreadable audit log never triggers another audit write.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from invoicebook.accounts import AccountService, WalletBook
from invoicebook.audit import AuditLogger
from invoicebook.config import Settings, get_settings
from invoicebook.ledger.records import RecordsService
from invoicebook.ledger.service import Ledger
from invoicebook.queries import DashboardQuery
from invoicebook.repositories import (
    BusinessProfileStore,
    CustomerDirectory,
    InvoiceRepository,
    ProductCatalog,
    SessionStore,
    TransactionRepository,
    UserRepository,
    WalletProfileStore,
)
from invoicebook.services.storage import (
    DocumentAuditStorage,
    DocumentStore,
    InMemoryStore,
    JsonDirectoryStore,
    KeyValueStore,
)
from invoicebook.validation import InvoiceValidator

logger = structlog.get_logger(__name__)


@dataclass
class AppComponents:
    """Everything a front end needs, wired over one store."""
    settings: Settings
    store: KeyValueStore
    documents: DocumentStore
    audit_logger: AuditLogger
    products: ProductCatalog
    customers: CustomerDirectory
    invoices: InvoiceRepository
    business: BusinessProfileStore
    ledger: Ledger
    records: RecordsService
    accounts: AccountService
    wallet: WalletBook
    dashboard: DashboardQuery


def create_store(settings: Settings) -> KeyValueStore:
    """Build the backing store selected by the storage settings."""
    if settings.storage.backend == "json":
        return JsonDirectoryStore(
            settings.storage.data_dir,
            write_attempts=settings.storage.write_attempts,
        )
    return InMemoryStore()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Application settings. Defaults to get_settings().
        store: Backing key-value store. Defaults to the one selected
            by the storage settings.

    Returns:
        AppComponents sharing a single store
    """
    settings = settings or get_settings()
    store = store if store is not None else create_store(settings)
    prefix = settings.storage.key_prefix

    audit_storage = None
    if settings.app.audit_enabled:
        audit_storage = DocumentAuditStorage(
            DocumentStore(store, key_prefix=prefix),
            max_events=settings.app.audit_max_events,
        )
    audit_logger = AuditLogger(audit_storage)

    documents = DocumentStore(store, key_prefix=prefix, on_fallback=audit_logger.log_storage_fallback)

    products = ProductCatalog(documents)
    customers = CustomerDirectory(documents)
    invoices = InvoiceRepository(documents)
    business = BusinessProfileStore(documents)

    ledger = Ledger(
        invoices=invoices,
        catalog=products,
        directory=customers,
        business=business,
        settings=settings.ledger,
        validator=InvoiceValidator(),
        audit_logger=audit_logger,
    )
    records = RecordsService(products, customers, business, audit_logger=audit_logger)
    accounts = AccountService(UserRepository(documents), SessionStore(documents), audit_logger=audit_logger)
    wallet = WalletBook(
        TransactionRepository(documents),
        WalletProfileStore(documents, currency_symbol=settings.wallet.currency_symbol),
        settings=settings.wallet,
        audit_logger=audit_logger,
    )

    logger.info(
        "app_components_created",
        environment=settings.app.app_environment,
        backend=type(store).__name__,
        key_prefix=prefix,
        audit_enabled=audit_storage is not None,
        stock_edit_policy=settings.ledger.stock_edit_policy,
    )

    return AppComponents(
        settings=settings,
        store=store,
        documents=documents,
        audit_logger=audit_logger,
        products=products,
        customers=customers,
        invoices=invoices,
        business=business,
        ledger=ledger,
        records=records,
        accounts=accounts,
        wallet=wallet,
        dashboard=DashboardQuery(invoices, customers),
    )

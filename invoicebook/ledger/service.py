"""
Invoice/Inventory Ledger

This module ties invoices to the catalog:
1. Create: validate → number → persist invoice → take stock
2. Edit: validate → replace invoice wholesale → (policy) reconcile stock
3. Delete: restore stock → remove invoice

DESIGN DECISION: Editing does NOT move stock under the default
"preserve" policy. Stock taken when an invoice was created stays taken
even if the edited invoice lists different items. The "reconcile"
policy restocks the old items and takes the new ones instead.

Every catalog change is computed in memory first and persisted with a
single write, so a partially adjusted catalog is never stored.
"""

from datetime import date, datetime, timedelta
from typing import Optional

import structlog

from invoicebook.audit import AuditLogger
from invoicebook.config import LedgerSettings
from invoicebook.ledger.filtering import TimeWindow, filter_invoices
from invoicebook.ledger.numbering import next_invoice_number
from invoicebook.ledger.stock import (
    StockMovement,
    invoice_created_movements,
    invoice_deleted_movements,
    link_items,
    reconcile_invoice_edit,
)
from invoicebook.models.invoice import (
    BusinessInfo,
    Currency,
    CustomerSnapshot,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Product,
    ValidationResult,
    new_id,
    normalize_phone,
)
from invoicebook.repositories import (
    BusinessProfileStore,
    CustomerDirectory,
    InvoiceRepository,
    ProductCatalog,
)
from invoicebook.services.storage import StorageError
from invoicebook.validation import InvoiceValidator

logger = structlog.get_logger(__name__)

# Phone autofill only kicks in once this many digits are typed
MIN_PHONE_LOOKUP_LENGTH = 4


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvoiceValidationError(LedgerError):
    """The invoice failed entry validation and was not saved."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(i.message for i in result.issues if i.severity == "error")
        super().__init__(f"Invoice {result.invoice_id} rejected: {messages}")


class Ledger:
    """
    Owns the invoice collection and issues stock movements to the catalog.
    """

    def __init__(
        self,
        invoices: InvoiceRepository,
        catalog: ProductCatalog,
        directory: CustomerDirectory,
        business: BusinessProfileStore,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[InvoiceValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._invoices = invoices
        self._catalog = catalog
        self._directory = directory
        self._business = business
        self._settings = settings or LedgerSettings()
        self._validator = validator or InvoiceValidator()
        self._audit_logger = audit_logger

    @property
    def stock_edit_policy(self) -> str:
        return self._settings.stock_edit_policy

    # -------------------------------------------------------------------------
    # Entry helpers
    # -------------------------------------------------------------------------

    def next_number(self) -> str:
        """Next invoice number given everything stored right now."""
        return next_invoice_number(self._invoices.all(), self._settings.invoice_number_width)

    def new_draft(self, today: Optional[date] = None) -> Invoice:
        """
        A blank invoice ready for editing.

        The number shown on a draft is provisional: create() assigns
        the real one.
        """
        today = today or date.today()
        return Invoice(
            id=new_id(),
            invoice_number=self.next_number(),
            date=today,
            due_date=today + timedelta(days=self._settings.default_due_days),
            business=self._business.get().model_copy(deep=True),
            customer=CustomerSnapshot(),
            items=[InvoiceItem(id="1", name="", quantity=1, price=0)],
            currency=Currency(self._settings.default_currency),
            tax_rate=0,
            discount=0,
            terms=self._settings.default_terms,
            status=InvoiceStatus.DRAFT,
        )

    def autofill_customer(self, phone: str) -> Optional[CustomerSnapshot]:
        """
        Billed-to details for a directory customer with this phone.

        Returns None until enough digits are typed or when nobody matches.
        """
        if len(normalize_phone(phone)) < MIN_PHONE_LOOKUP_LENGTH:
            return None
        customer = self._directory.find_by_phone(phone)
        if customer is None:
            return None
        return CustomerSnapshot(
            name=customer.name,
            email=customer.phone,
            address=customer.address,
        )

    def price_item(self, item: InvoiceItem) -> InvoiceItem:
        """
        Fill a line item's price from the catalog product with the same name.

        The matched product id is cached on the item. No match keeps the
        typed price and clears any id cached for an earlier name.
        """
        product = self._catalog.find_by_name(item.name)
        if product is None:
            if item.product_id is None:
                return item
            return item.model_copy(update={"product_id": None})
        return item.model_copy(update={"price": product.price, "product_id": product.id})

    def validate(self, invoice: Invoice) -> ValidationResult:
        catalog = self._catalog.all()
        linked = invoice.model_copy(update={"items": link_items(invoice.items, catalog)})
        return self._validator.validate(linked, catalog)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def get(self, invoice_id: str) -> Optional[Invoice]:
        return self._invoices.get(invoice_id)

    def list_invoices(
        self,
        window: TimeWindow | str = TimeWindow.ALL,
        query: str = "",
        now: Optional[datetime] = None,
    ) -> list[Invoice]:
        """Stored invoices, newest first, filtered by window and query."""
        return filter_invoices(self._invoices.all(), window, query, now)

    def create(self, draft: Invoice) -> Invoice:
        """
        Save a new invoice and take its items out of stock.

        The invoice number is recomputed here, overriding whatever the
        draft carried, because another session may have written since
        the draft was opened.

        Raises:
            InvoiceValidationError: If the draft has error-level issues
            DuplicateError: If an invoice with the draft's id exists
        """
        catalog = self._catalog.all()
        draft = draft.model_copy(update={"items": link_items(draft.items, catalog)})
        self._check(draft, catalog, check_stock=True)

        invoice = draft.model_copy(
            deep=True,
            update={
                "invoice_number": self.next_number(),
                "business": self._snapshot_business(draft.business),
            },
        )
        self._invoices.add(invoice)

        adjusted, movements = invoice_created_movements(invoice.items, catalog)
        self._persist_stock(adjusted, movements, reason=f"invoice {invoice.invoice_number} created")

        logger.info(
            "invoice_created",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            stock_movements=len(movements),
        )
        if self._audit_logger:
            self._audit_logger.log_invoice_created(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                total=invoice.totals.total,
                item_count=len(invoice.items),
            )
        return invoice

    def update(self, invoice: Invoice) -> Invoice:
        """
        Replace a stored invoice wholesale.

        Stock is only touched under the "reconcile" policy.

        Raises:
            InvoiceValidationError: If the invoice has error-level issues
            NotFoundError: If no invoice has this id
        """
        existing = self._invoices.require(invoice.id)
        catalog = self._catalog.all()
        reconcile = self.stock_edit_policy == "reconcile"
        replacement = invoice.model_copy(
            deep=True,
            update={"items": link_items(invoice.items, catalog)},
        )
        self._check(replacement, catalog, check_stock=reconcile)
        self._invoices.update(replacement)

        if reconcile:
            adjusted, movements = reconcile_invoice_edit(existing.items, replacement.items, catalog)
            self._persist_stock(
                adjusted, movements, reason=f"invoice {replacement.invoice_number} edited"
            )

        if self._audit_logger:
            self._audit_logger.log_invoice_updated(
                invoice_id=replacement.id,
                invoice_number=replacement.invoice_number,
                stock_policy=self.stock_edit_policy,
            )
        return replacement

    def set_status(self, invoice_id: str, status: InvoiceStatus) -> Invoice:
        """Change only the status, through the normal full-replace path."""
        existing = self._invoices.require(invoice_id)
        return self.update(existing.model_copy(update={"status": InvoiceStatus(status)}))

    def delete(self, invoice_id: str) -> Optional[Invoice]:
        """
        Put an invoice's items back in stock, then remove it.

        Returns the removed invoice, or None if it did not exist.
        """
        invoice = self._invoices.get(invoice_id)
        if invoice is None:
            return None

        adjusted, movements = invoice_deleted_movements(invoice.items, self._catalog.all())
        self._persist_stock(adjusted, movements, reason=f"invoice {invoice.invoice_number} deleted")
        self._invoices.delete(invoice_id)

        logger.info(
            "invoice_deleted",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            stock_movements=len(movements),
        )
        if self._audit_logger:
            self._audit_logger.log_invoice_deleted(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
            )
        return invoice

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check(self, invoice: Invoice, catalog: list[Product], check_stock: bool) -> None:
        result = self._validator.validate(invoice, catalog, check_stock=check_stock)
        if result.has_errors:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    invoice_id=invoice.id,
                    issues=[issue.model_dump() for issue in result.issues],
                )
            raise InvoiceValidationError(result)
        for warning in result.warnings:
            logger.warning("invoice_warning", invoice_id=invoice.id, warning=warning)

    def _snapshot_business(self, business: BusinessInfo) -> BusinessInfo:
        # A draft without a business block gets the current profile
        if business == BusinessInfo():
            return self._business.get().model_copy(deep=True)
        return business.model_copy(deep=True)

    def _persist_stock(
        self,
        adjusted: list[Product],
        movements: list[StockMovement],
        reason: str,
    ) -> None:
        if not movements:
            return
        try:
            self._catalog.apply_stock(adjusted)
        except StorageError as e:
            # The invoice write already happened; record what was lost
            logger.error("stock_write_failed", reason=reason, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"reason": reason, "movements": [m.model_dump() for m in movements]},
                )
            raise
        if self._audit_logger:
            for movement in movements:
                self._audit_logger.log_stock_adjusted(
                    product_id=movement.product_id,
                    product_name=movement.product_name,
                    delta=movement.delta,
                    stock=movement.stock_after,
                    reason=reason,
                )

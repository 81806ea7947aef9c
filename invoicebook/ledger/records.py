"""
Catalog, directory and business profile maintenance.

Direct edits made outside invoice entry: adding and editing products
and customers, and replacing the business profile. A product's stock
set here is taken as-is; invoices adjust it afterwards.
"""

from typing import Optional

import structlog

from invoicebook.audit import AuditLogger
from invoicebook.models.audit import AuditEventType
from invoicebook.models.invoice import BusinessInfo, Customer, Product
from invoicebook.repositories import BusinessProfileStore, CustomerDirectory, ProductCatalog

logger = structlog.get_logger(__name__)

MAX_NAME_LENGTH = 200


class RecordValidationError(ValueError):
    """A product or customer was rejected at entry and not saved."""
    pass


class RecordsService:
    """Upserts and deletes for products, customers and the business profile."""

    def __init__(
        self,
        catalog: ProductCatalog,
        directory: CustomerDirectory,
        business: BusinessProfileStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._catalog = catalog
        self._directory = directory
        self._business = business
        self._audit_logger = audit_logger

    @property
    def business(self) -> BusinessInfo:
        return self._business.get()

    def save_product(self, product: Product) -> Product:
        """
        Add the product, or replace the stored one with the same id.

        Raises:
            RecordValidationError: Blank or overlong name, or a negative price
        """
        _check_name(product.name, "Product")
        if product.price < 0:
            raise RecordValidationError(f"Product price cannot be negative ({product.price})")
        if self._catalog.get(product.id) is None:
            saved = self._catalog.add(product)
        else:
            saved = self._catalog.update(product)
        logger.info("product_saved", product_id=saved.id, stock=saved.stock)
        if self._audit_logger:
            self._audit_logger.log_saved(AuditEventType.PRODUCT_SAVED, "product", saved.id, saved.name)
        return saved

    def delete_product(self, product_id: str) -> Optional[Product]:
        """
        Remove a product. Invoices that list it keep their line items;
        deleting them later restocks nothing.
        """
        removed = self._catalog.delete(product_id)
        if removed is not None and self._audit_logger:
            self._audit_logger.log_deleted(AuditEventType.PRODUCT_DELETED, "product", product_id)
        return removed

    def save_customer(self, customer: Customer) -> Customer:
        """
        Raises:
            RecordValidationError: Blank or overlong name, or no phone
        """
        _check_name(customer.name, "Customer")
        if not customer.phone:
            raise RecordValidationError("Customer phone is required")
        if self._directory.get(customer.id) is None:
            saved = self._directory.add(customer)
        else:
            saved = self._directory.update(customer)
        logger.info("customer_saved", customer_id=saved.id)
        if self._audit_logger:
            self._audit_logger.log_saved(AuditEventType.CUSTOMER_SAVED, "customer", saved.id, saved.name)
        return saved

    def delete_customer(self, customer_id: str) -> Optional[Customer]:
        removed = self._directory.delete(customer_id)
        if removed is not None and self._audit_logger:
            self._audit_logger.log_deleted(AuditEventType.CUSTOMER_DELETED, "customer", customer_id)
        return removed

    def update_business(self, business: BusinessInfo) -> BusinessInfo:
        """
        Replace the business profile.

        Invoices already saved keep the snapshot they were created with.
        """
        saved = self._business.set(business)
        if self._audit_logger:
            self._audit_logger.log_saved(AuditEventType.BUSINESS_UPDATED, "business", "business", saved.name)
        return saved


def _check_name(name: str, kind: str) -> None:
    if not name:
        raise RecordValidationError(f"{kind} name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise RecordValidationError(f"{kind} name is longer than {MAX_NAME_LENGTH} characters")

"""
Product Catalog and Customer Directory repositories.
"""

from typing import Iterable, Optional

from invoicebook.ledger.filtering import search_customers, search_products
from invoicebook.models.invoice import Customer, Product, normalize_phone
from invoicebook.repositories import keys
from invoicebook.repositories.base import Repository
from invoicebook.services.storage import DocumentStore, NotFoundError


class ProductCatalog(Repository[Product]):
    """
    The product inventory.

    Stock changes only through adjust_stock/apply_stock or a direct edit.
    """

    entity_name = "product"

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.PRODUCTS, Product)

    def find_by_name(self, name: str) -> Optional[Product]:
        """First product whose name equals `name`, ignoring case."""
        if not name or not name.strip():
            return None
        for product in self.all():
            if product.matches_name(name):
                return product
        return None

    def adjust_stock(self, product_id: str, delta: int) -> Product:
        """
        Add `delta` (negative to take) to one product's stock.

        Raises:
            NotFoundError: If the product does not exist
        """
        products = self.all()
        for idx, product in enumerate(products):
            if product.id == product_id:
                products[idx] = product.model_copy(update={"stock": product.stock + delta})
                self._write(products)
                return products[idx]
        raise NotFoundError(f"Product not found: {product_id}")

    def apply_stock(self, products: Iterable[Product]) -> None:
        """Persist a whole adjusted catalog in a single write."""
        self.replace_all(products)

    def search(self, query: str) -> list[Product]:
        return search_products(self.all(), query)


class CustomerDirectory(Repository[Customer]):
    """Customers, looked up by phone during invoice entry."""

    entity_name = "customer"

    def __init__(self, documents: DocumentStore):
        super().__init__(documents, keys.CUSTOMERS, Customer)

    def find_by_phone(self, phone: str) -> Optional[Customer]:
        """Customer whose whitespace-free phone equals the whitespace-free `phone`."""
        wanted = normalize_phone(phone)
        if not wanted:
            return None
        for customer in self.all():
            if customer.normalized_phone == wanted:
                return customer
        return None

    def search(self, query: str) -> list[Customer]:
        return search_customers(self.all(), query)

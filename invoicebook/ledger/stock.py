"""
Stock Reconciliation

Creating an invoice takes its line quantities out of the catalog;
deleting it puts them back. These functions are pure: they return new
Product objects and never touch the catalog they were given, so the
caller can persist the whole adjusted catalog in one write.

Matching a line item to a product:
- When an invoice is written, the case-insensitive name decides
  (link_items). The match, or None, is cached on the item as product_id.
- When a stored invoice gives its stock back, the cached product_id
  wins while that product still exists, so a product renamed after the
  sale is still restocked. Otherwise the name decides.
Items that match nothing are skipped. Stock may go negative.
"""

from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from invoicebook.models.invoice import InvoiceItem, Product


class StockMovement(BaseModel):
    """One product's stock change caused by one line item."""
    product_id: str
    product_name: str
    delta: int
    stock_after: int


def match_name_index(name: str, catalog: Sequence[Product]) -> Optional[int]:
    """Position of the first product named `name`, ignoring case."""
    if not name or not name.strip():
        return None
    for idx, product in enumerate(catalog):
        if product.matches_name(name):
            return idx
    return None


def match_product_index(item: InvoiceItem, catalog: Sequence[Product]) -> Optional[int]:
    """Position of the catalog product a stored line item refers to, if any."""
    if item.product_id:
        for idx, product in enumerate(catalog):
            if product.id == item.product_id:
                return idx
    return match_name_index(item.name, catalog)


def match_product(item: InvoiceItem, catalog: Sequence[Product]) -> Optional[Product]:
    idx = match_product_index(item, catalog)
    return catalog[idx] if idx is not None else None


def link_items(items: Iterable[InvoiceItem], catalog: Sequence[Product]) -> list[InvoiceItem]:
    """
    Re-resolve every line item by name and cache the result.

    An id cached earlier is dropped when the name no longer matches it,
    so a retyped line never takes stock from the product it used to name.
    """
    linked = []
    for item in items:
        idx = match_name_index(item.name, catalog)
        product_id = catalog[idx].id if idx is not None else None
        if item.product_id != product_id:
            item = item.model_copy(update={"product_id": product_id})
        linked.append(item)
    return linked


def _apply(
    items: Iterable[InvoiceItem],
    catalog: Sequence[Product],
    sign: int,
) -> tuple[list[Product], list[StockMovement]]:
    updated = [product.model_copy() for product in catalog]
    movements = []
    for item in items:
        idx = match_product_index(item, updated)
        if idx is None:
            continue
        product = updated[idx]
        delta = sign * item.quantity
        updated[idx] = product.model_copy(update={"stock": product.stock + delta})
        movements.append(StockMovement(
            product_id=product.id,
            product_name=product.name,
            delta=delta,
            stock_after=updated[idx].stock,
        ))
    return updated, movements


def invoice_created_movements(
    items: Iterable[InvoiceItem],
    catalog: Sequence[Product],
) -> tuple[list[Product], list[StockMovement]]:
    """Adjusted catalog plus the movements that produced it, for a new invoice."""
    return _apply(items, catalog, -1)


def invoice_deleted_movements(
    items: Iterable[InvoiceItem],
    catalog: Sequence[Product],
) -> tuple[list[Product], list[StockMovement]]:
    """Adjusted catalog plus the movements that produced it, for a removed invoice."""
    return _apply(items, catalog, +1)


def apply_invoice_created(items: Iterable[InvoiceItem], catalog: Sequence[Product]) -> list[Product]:
    """stock -= quantity for every matched line item."""
    return invoice_created_movements(items, catalog)[0]


def apply_invoice_deleted(items: Iterable[InvoiceItem], catalog: Sequence[Product]) -> list[Product]:
    """stock += quantity for every matched line item."""
    return invoice_deleted_movements(items, catalog)[0]


def reconcile_invoice_edit(
    old_items: Iterable[InvoiceItem],
    new_items: Iterable[InvoiceItem],
    catalog: Sequence[Product],
) -> tuple[list[Product], list[StockMovement]]:
    """
    Restock the previous items, then take the replacement items.

    Only used under the "reconcile" edit policy.
    """
    restored, returned = invoice_deleted_movements(old_items, catalog)
    adjusted, taken = invoice_created_movements(new_items, restored)
    return adjusted, returned + taken

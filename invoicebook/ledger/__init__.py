"""
Ledger core: numbering, totals, stock reconciliation and list filtering.

These are pure functions. The persisted Ledger service lives in
invoicebook.ledger.service.
"""

from invoicebook.ledger.filtering import (
    TimeWindow,
    filter_invoices,
    search_customers,
    search_products,
)
from invoicebook.ledger.numbering import invoice_sequence, next_invoice_number
from invoicebook.ledger.stock import (
    StockMovement,
    apply_invoice_created,
    apply_invoice_deleted,
    link_items,
    match_product,
    reconcile_invoice_edit,
)
from invoicebook.ledger.totals import compute_subtotal, compute_totals, total_revenue

__all__ = [
    "StockMovement",
    "TimeWindow",
    "apply_invoice_created",
    "apply_invoice_deleted",
    "compute_subtotal",
    "compute_totals",
    "filter_invoices",
    "invoice_sequence",
    "link_items",
    "match_product",
    "next_invoice_number",
    "reconcile_invoice_edit",
    "search_customers",
    "search_products",
    "total_revenue",
]

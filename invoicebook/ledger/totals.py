"""
Totals Computation

Pure float arithmetic. Nothing is validated or rounded here; negative or
zero quantities and prices flow straight through. Rounding for display
is the caller's concern.
"""

from typing import Iterable

from invoicebook.models.invoice import Invoice, InvoiceItem, InvoiceTotals


def compute_subtotal(items: Iterable[InvoiceItem]) -> float:
    return sum((item.price * item.quantity for item in items), 0.0)


def compute_totals(items: Iterable[InvoiceItem], tax_rate_percent: float) -> InvoiceTotals:
    """
    subtotal = sum(price * quantity); tax = subtotal * rate / 100;
    total = subtotal + tax.
    """
    subtotal = compute_subtotal(items)
    tax = subtotal * tax_rate_percent / 100
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def total_revenue(invoices: Iterable[Invoice]) -> float:
    """Sum of every invoice total, regardless of status or currency."""
    return sum((compute_totals(inv.items, inv.tax_rate).total for inv in invoices), 0.0)

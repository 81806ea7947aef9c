"""
Filtering & Search for the invoice, customer and product lists.

Time windows are fixed spans (1 day = 24 h, 6 months = 180 days,
1 year = 365 days), not calendar arithmetic. Every function here is
pure for a given `now`.
"""

from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional

from invoicebook.models.invoice import Customer, Invoice, Product, normalize_phone


class TimeWindow(str, Enum):
    """Dashboard recency filter."""
    ALL = "all"
    HOUR = "1h"
    DAY = "24h"
    WEEK = "7d"
    FORTNIGHT = "15d"
    MONTH = "30d"
    HALF_YEAR = "6m"
    YEAR = "1y"

    @property
    def span(self) -> Optional[timedelta]:
        return _SPANS[self]


_SPANS = {
    TimeWindow.ALL: None,
    TimeWindow.HOUR: timedelta(hours=1),
    TimeWindow.DAY: timedelta(hours=24),
    TimeWindow.WEEK: timedelta(days=7),
    TimeWindow.FORTNIGHT: timedelta(days=15),
    TimeWindow.MONTH: timedelta(days=30),
    TimeWindow.HALF_YEAR: timedelta(days=180),
    TimeWindow.YEAR: timedelta(days=365),
}


def invoice_timestamp(invoice: Invoice) -> datetime:
    """An invoice date is taken as midnight UTC of that day."""
    return datetime.combine(invoice.date, time.min, tzinfo=timezone.utc)


def within_window(invoice: Invoice, window: TimeWindow, now: datetime) -> bool:
    span = window.span
    if span is None:
        return True
    return now - invoice_timestamp(invoice) <= span


def matches_query(invoice: Invoice, query: str) -> bool:
    """Case-insensitive substring match on customer name, contact, number or date."""
    q = query.lower()
    return (
        q in invoice.customer.name.lower()
        or q in invoice.customer.email.lower()
        or q in invoice.invoice_number.lower()
        or q in invoice.date.isoformat()
    )


def filter_invoices(
    invoices: Iterable[Invoice],
    window: TimeWindow | str = TimeWindow.ALL,
    query: str = "",
    now: Optional[datetime] = None,
) -> list[Invoice]:
    """
    Apply the time window first, then the free-text query.

    Args:
        invoices: Invoices in display order (order is preserved)
        window: Recency window
        query: Free text; blank means no text filtering
        now: Reference time (defaults to the current UTC time)
    """
    window = TimeWindow(window)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    result = [inv for inv in invoices if within_window(inv, window, now)]

    q = query.strip()
    if q:
        result = [inv for inv in result if matches_query(inv, q)]
    return result


def search_customers(customers: Iterable[Customer], query: str) -> list[Customer]:
    """
    Match on whitespace-free phone or case-insensitive name.

    An empty query returns everyone.
    """
    if not query:
        return list(customers)
    phone_query = normalize_phone(query)
    name_query = query.lower()
    return [
        c for c in customers
        if phone_query in c.normalized_phone or name_query in c.name.lower()
    ]


def search_products(products: Iterable[Product], query: str) -> list[Product]:
    """Case-insensitive match on name or description. Empty query returns all."""
    if not query:
        return list(products)
    q = query.lower()
    return [
        p for p in products
        if q in p.name.lower() or q in p.description.lower()
    ]

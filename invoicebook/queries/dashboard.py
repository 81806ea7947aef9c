"""
Dashboard Summary

DESIGN DECISION: The summary is computed from stored data only, every
time it is asked for. Nothing is cached and nothing is estimated.

Revenue adds up every invoice's total whatever its status or currency;
the "active" currency shown next to it is simply the currency of the
newest invoice.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from invoicebook.ledger.filtering import TimeWindow, filter_invoices
from invoicebook.ledger.totals import total_revenue
from invoicebook.models.invoice import Currency, Invoice, currency_symbol
from invoicebook.repositories import CustomerDirectory, InvoiceRepository


class DashboardSummary(BaseModel):
    """Headline numbers plus the filtered invoice list."""

    total_revenue: float = Field(..., description="Sum of all invoice totals")
    invoice_count: int = Field(..., description="Number of stored invoices")
    customer_count: int = Field(..., description="Number of directory customers")
    active_currency: str = Field(..., description="Currency of the newest invoice")
    currency_symbol: str = Field(..., description="Display symbol for the active currency")
    invoices: list[Invoice] = Field(default_factory=list, description="Invoices after filtering")


def summarize(
    invoices: list[Invoice],
    customer_count: int,
    window: TimeWindow | str = TimeWindow.ALL,
    query: str = "",
    now: Optional[datetime] = None,
) -> DashboardSummary:
    """
    Build the summary. Headline figures cover all invoices; only the
    listed invoices are filtered.
    """
    active = invoices[0].currency.value if invoices else Currency.BDT.value
    return DashboardSummary(
        total_revenue=total_revenue(invoices),
        invoice_count=len(invoices),
        customer_count=customer_count,
        active_currency=active,
        currency_symbol=currency_symbol(active),
        invoices=filter_invoices(invoices, window, query, now),
    )


class DashboardQuery:
    """Reads the dashboard summary from the repositories."""

    def __init__(self, invoices: InvoiceRepository, directory: CustomerDirectory):
        self._invoices = invoices
        self._directory = directory

    def summary(
        self,
        window: TimeWindow | str = TimeWindow.ALL,
        query: str = "",
        now: Optional[datetime] = None,
    ) -> DashboardSummary:
        return summarize(self._invoices.all(), self._directory.count(), window, query, now)

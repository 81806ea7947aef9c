"""Read-side queries."""

from invoicebook.queries.dashboard import DashboardQuery, DashboardSummary, summarize

__all__ = ["DashboardQuery", "DashboardSummary", "summarize"]

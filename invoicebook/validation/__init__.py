"""Invoice validation package."""

from invoicebook.validation.validator import InvoiceValidator

__all__ = ["InvoiceValidator"]

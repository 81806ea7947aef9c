"""Audit logging package."""

from invoicebook.audit.logger import AuditLogger

__all__ = ["AuditLogger"]

"""
Invoicebook - Source Package

An invoice ledger for a small retail business: invoices tied to a
product catalog whose stock moves with every invoice, a customer
directory, staff accounts and a personal wallet.

DESIGN PRINCIPLES:
1. Invoices snapshot who was billed; later edits never rewrite history
2. Arithmetic stays permissive, validation happens at entry
3. No silent corrections
4. Every state change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Invoicebook Team"

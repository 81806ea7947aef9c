"""
Invoice Numbering

Numbers are global: the next number is derived from the highest number
seen across ALL stored invoices, including ones written by other sessions.
Always call this at the moment of creation, never cache its result.
"""

import re
from typing import Iterable, Optional

from invoicebook.models.invoice import Invoice

_DIGITS = re.compile(r"\d+")


def invoice_sequence(invoice_number: Optional[str]) -> int:
    """
    Numeric value of an invoice number: its first run of digits.

    Numbers without any digits (or missing entirely) count as 0.
    """
    if not invoice_number:
        return 0
    match = _DIGITS.search(invoice_number)
    return int(match.group()) if match else 0


def next_invoice_number(invoices: Iterable[Invoice], width: int = 4) -> str:
    """
    Next sequential invoice number, e.g. "#0008" after "#0007".

    Duplicate or non-numeric numbers in the existing data never raise;
    padding only pads up, so "#10234" is followed by "#10235".
    """
    highest = max((invoice_sequence(inv.invoice_number) for inv in invoices), default=0)
    return f"#{str(highest + 1).zfill(width)}"

"""
Core Data Models for Invoicebook

These models define the schemas for the business data: catalog products,
directory customers, the business profile and invoices.
They are designed to:
1. Enforce type safety at runtime
2. Round-trip the persisted camelCase JSON documents unchanged
3. Be serializable for storage and logging

DESIGN DECISION: Invoices embed SNAPSHOTS of the business and customer
records rather than references. Editing a customer later must never
rewrite what was billed on an old invoice.
"""

import datetime as dt
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Random client-side identifier for a new record."""
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerModel(BaseModel):
    """
    Base for every persisted model.

    Attributes are snake_case in Python and camelCase in the stored JSON;
    either spelling is accepted on input. Stored records are accepted as
    written: range checks belong to the entry services, so one odd legacy
    record never makes a whole collection unreadable.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict:
        """Dump to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# ENUMS
# =============================================================================

class Currency(str, Enum):
    """Currencies an invoice can be issued in."""
    BDT = "BDT"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"


CURRENCY_SYMBOLS = {
    Currency.BDT: "৳",
    Currency.USD: "$",
}


def currency_symbol(currency: str) -> str:
    """Display symbol for a currency; unknown codes display as themselves."""
    try:
        return CURRENCY_SYMBOLS.get(Currency(currency), currency)
    except ValueError:
        return currency


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status. Purely informational, no transitions are enforced."""
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"


# =============================================================================
# CATALOG & DIRECTORY
# =============================================================================

class Product(LedgerModel):
    """
    A catalog product.

    `name` doubles as a case-insensitive join key against invoice line items.
    `stock` may go negative: availability is never enforced.
    """
    id: str = Field(default_factory=new_id)
    name: str
    price: float = 0.0
    stock: int = 0
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    def matches_name(self, name: str) -> bool:
        """Case-insensitive exact name comparison."""
        return self.name.casefold() == name.strip().casefold()


class Customer(LedgerModel):
    """A directory customer. The whitespace-free phone is the lookup key."""
    id: str = Field(default_factory=new_id)
    name: str
    phone: str = ""
    address: str = ""
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator('name', 'phone')
    @classmethod
    def strip_identifiers(cls, v: str) -> str:
        """Names and phones are lookup keys; surrounding blanks never count."""
        return v.strip()

    @property
    def normalized_phone(self) -> str:
        return normalize_phone(self.phone)


def normalize_phone(phone: str) -> str:
    """Strip every whitespace character from a phone number."""
    return "".join(phone.split())


class BusinessInfo(LedgerModel):
    """The issuing business profile."""
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    logo: Optional[str] = None


class CustomerSnapshot(LedgerModel):
    """
    Billed-to details frozen onto an invoice.

    `email` holds whatever contact the user typed (email or phone);
    it is kept under this name for compatibility with stored invoices.
    """
    name: str = ""
    email: str = ""
    address: str = ""


# =============================================================================
# INVOICES
# =============================================================================

class InvoiceItem(LedgerModel):
    """
    A line item embedded in an invoice.

    Quantity and price are not range-checked here; that happens at the
    entry boundary (InvoiceValidator) so totals stay pure arithmetic.
    """
    id: str = Field(default_factory=new_id)
    name: str = ""
    quantity: int = 1
    price: float = 0.0
    # Catalog product matched by name when the item was entered
    product_id: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class InvoiceTotals(BaseModel):
    """Derived invoice amounts. Never persisted."""
    subtotal: float
    tax: float
    total: float


class Invoice(LedgerModel):
    """
    A full invoice record.

    CRITICAL: `business` and `customer` are snapshots taken when the
    invoice was written. Totals are always derived from the items.
    """
    id: str = Field(default_factory=new_id)
    invoice_number: str = ""
    date: dt.date = Field(default_factory=dt.date.today)
    due_date: dt.date = Field(default_factory=dt.date.today)
    business: BusinessInfo = Field(default_factory=BusinessInfo)
    customer: CustomerSnapshot = Field(default_factory=CustomerSnapshot)
    items: list[InvoiceItem] = Field(default_factory=list)
    currency: Currency = Currency.BDT
    tax_rate: float = 0.0
    discount: float = 0.0
    notes: str = ""
    terms: str = ""
    status: InvoiceStatus = InvoiceStatus.DRAFT
    warranty_date: Optional[dt.date] = None

    @field_validator('warranty_date', mode='before')
    @classmethod
    def blank_warranty_is_none(cls, v):
        """Stored drafts use an empty string for "no warranty"."""
        if v == "":
            return None
        return v

    @property
    def totals(self) -> InvoiceTotals:
        from invoicebook.ledger.totals import compute_totals

        return compute_totals(self.items, self.tax_rate)

    @property
    def currency_symbol(self) -> str:
        return currency_symbol(self.currency.value)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_product')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of checking an invoice at the entry boundary.

    Only error-level issues block a save. Warnings (negative stock,
    empty rows) are shown but accepted.
    """

    invoice_id: str
    validated_at: datetime = Field(
        default_factory=utcnow
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

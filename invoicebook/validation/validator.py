"""
Invoice Entry Validation

DESIGN DECISION: Checks run at the entry boundary, right before an
invoice is written. The arithmetic (totals) and the stock movements
stay permissive; only this layer judges the input.

Severity levels:
- error: blocks the save (missing customer name, negative amounts or tax)
- warning: shown but accepted (empty rows, stock going negative)
- info: noteworthy only (item not in the catalog, so no stock effect)

IMPORTANT: Validation NEVER silently fixes issues.
"""

from collections import defaultdict
from typing import Sequence

from invoicebook.ledger.stock import match_product_index
from invoicebook.models.invoice import (
    Invoice,
    Product,
    ValidationIssue,
    ValidationResult,
)


class InvoiceValidator:
    """
    Validates an invoice against the current catalog.
    """

    def _validate_customer(self, invoice: Invoice) -> list[ValidationIssue]:
        issues = []
        if not invoice.customer.name.strip():
            issues.append(ValidationIssue(
                field="customer.name",
                issue_type="missing",
                message="Please enter customer name",
                severity="error",
                suggested_fix="Type the customer's name or look them up by phone",
            ))
        return issues

    def _validate_amounts(self, invoice: Invoice) -> list[ValidationIssue]:
        issues = []
        if invoice.tax_rate < 0:
            issues.append(ValidationIssue(
                field="tax_rate",
                issue_type="invalid_value",
                message=f"Tax rate cannot be negative ({invoice.tax_rate})",
                severity="error",
            ))
        return issues

    def _validate_items(self, invoice: Invoice) -> list[ValidationIssue]:
        issues = []

        if not invoice.items:
            issues.append(ValidationIssue(
                field="items",
                issue_type="empty",
                message="Invoice has no line items",
                severity="warning",
            ))

        for position, item in enumerate(invoice.items, start=1):
            if not item.name.strip():
                issues.append(ValidationIssue(
                    field=f"items[{position}].name",
                    issue_type="missing",
                    message=f"Line {position} has no item name",
                    severity="warning",
                ))
            if item.quantity < 0:
                issues.append(ValidationIssue(
                    field=f"items[{position}].quantity",
                    issue_type="invalid_value",
                    message=f"Line {position} quantity cannot be negative ({item.quantity})",
                    severity="error",
                ))
            if item.price < 0:
                issues.append(ValidationIssue(
                    field=f"items[{position}].price",
                    issue_type="invalid_value",
                    message=f"Line {position} price cannot be negative ({item.price})",
                    severity="error",
                ))

        return issues

    def _validate_stock(
        self,
        invoice: Invoice,
        catalog: Sequence[Product],
    ) -> list[ValidationIssue]:
        """
        Report unknown products and stock that would go negative.

        Availability is never enforced, so nothing here is an error.
        """
        issues = []
        requested: dict[int, int] = defaultdict(int)

        for position, item in enumerate(invoice.items, start=1):
            if not item.name.strip():
                continue
            idx = match_product_index(item, catalog)
            if idx is None:
                issues.append(ValidationIssue(
                    field=f"items[{position}].name",
                    issue_type="unknown_product",
                    message=f"'{item.name}' is not in the catalog; stock is not tracked for it",
                    severity="info",
                ))
                continue
            requested[idx] += item.quantity

        for idx, quantity in requested.items():
            product = catalog[idx]
            if quantity > product.stock:
                issues.append(ValidationIssue(
                    field="items",
                    issue_type="insufficient_stock",
                    message=(
                        f"{product.name}: {quantity} requested, {product.stock} in stock; "
                        f"stock will go to {product.stock - quantity}"
                    ),
                    severity="warning",
                ))

        return issues

    def validate(
        self,
        invoice: Invoice,
        catalog: Sequence[Product] = (),
        check_stock: bool = True,
    ) -> ValidationResult:
        """
        Run every check.

        Args:
            invoice: The invoice about to be saved
            catalog: Current products, for stock checks
            check_stock: Skip the stock checks (edits under the
                preserve policy do not move stock)
        """
        issues = []
        issues.extend(self._validate_customer(invoice))
        issues.extend(self._validate_amounts(invoice))
        issues.extend(self._validate_items(invoice))
        if check_stock:
            issues.extend(self._validate_stock(invoice, catalog))

        return ValidationResult(invoice_id=invoice.id, issues=issues)

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a short summary of validation results for display.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("Please fix the following before saving:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   - {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   - {warning}")

        return "\n".join(lines)

"""
Tests for the pure ledger functions: numbering, totals, stock and filtering.
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from invoicebook.ledger import (
    TimeWindow,
    apply_invoice_created,
    apply_invoice_deleted,
    compute_subtotal,
    compute_totals,
    filter_invoices,
    invoice_sequence,
    link_items,
    match_product,
    next_invoice_number,
    reconcile_invoice_edit,
    search_customers,
    search_products,
    total_revenue,
)
from invoicebook.models import Customer, CustomerSnapshot, Invoice, InvoiceItem, Product


def numbered(*numbers):
    return [Invoice(invoice_number=n) for n in numbers]


class TestNumbering:
    """Tests for sequential invoice numbering."""

    def test_first_invoice(self):
        """Test the empty ledger starts at #0001."""
        assert next_invoice_number([]) == "#0001"

    def test_follows_highest(self):
        """Test the next number is highest + 1, whatever the order."""
        assert next_invoice_number(numbered("#0003", "#0007", "#0002")) == "#0008"

    def test_duplicates_do_not_raise(self):
        """Test duplicate numbers in existing data are tolerated."""
        assert next_invoice_number(numbered("#0005", "#0005")) == "#0006"

    def test_non_numeric_counts_as_zero(self):
        """Test numbers without digits contribute 0."""
        assert next_invoice_number(numbered("DRAFT", "")) == "#0001"
        assert invoice_sequence("DRAFT") == 0
        assert invoice_sequence(None) == 0

    def test_first_digit_run_is_used(self):
        """Test only the first run of digits counts."""
        assert invoice_sequence("INV-12-2024") == 12

    def test_padding_only_pads_up(self):
        """Test numbers wider than the pad width keep all digits."""
        assert next_invoice_number(numbered("#10234")) == "#10235"
        assert next_invoice_number(numbered("#9999")) == "#10000"

    def test_custom_width(self):
        """Test the pad width is configurable."""
        assert next_invoice_number(numbered("#7"), width=6) == "#000008"


class TestTotals:
    """Tests for subtotal, tax and total."""

    def test_basic_totals(self):
        """Test 3 x 10 at 5% tax."""
        totals = compute_totals([InvoiceItem(name="Pen", quantity=3, price=10)], 5)
        assert totals.subtotal == 30
        assert totals.tax == 1.5
        assert totals.total == 31.5

    def test_two_hundred_at_ten_percent(self):
        """Test 2 x 100 at 10% tax."""
        totals = compute_totals([InvoiceItem(name="A", quantity=2, price=100)], 10)
        assert (totals.subtotal, totals.tax, totals.total) == (200, 20, 220)

    def test_scaling_prices_scales_totals(self):
        """Test totals are linear in price."""
        items = [InvoiceItem(name="A", quantity=2, price=12.5), InvoiceItem(name="B", quantity=1, price=3)]
        doubled = [item.model_copy(update={"price": item.price * 2}) for item in items]
        base, scaled = compute_totals(items, 7.5), compute_totals(doubled, 7.5)
        assert scaled.subtotal == pytest.approx(base.subtotal * 2)
        assert scaled.tax == pytest.approx(base.tax * 2)
        assert scaled.total == pytest.approx(base.total * 2)

    def test_empty_items(self):
        """Test no items means zero everywhere."""
        totals = compute_totals([], 15)
        assert (totals.subtotal, totals.tax, totals.total) == (0, 0, 0)

    def test_negative_values_flow_through(self):
        """Test negatives are not rejected by the arithmetic."""
        items = [
            InvoiceItem(name="Pen", quantity=2, price=10),
            InvoiceItem(name="Return", quantity=-1, price=10),
        ]
        assert compute_subtotal(items) == 10

    def test_fractional_prices(self):
        """Test float arithmetic without rounding."""
        totals = compute_totals([InvoiceItem(name="Tea", quantity=3, price=0.1)], 0)
        assert totals.total == pytest.approx(0.3)

    def test_total_revenue_sums_every_invoice(self):
        """Test revenue ignores status and currency."""
        invoices = [
            Invoice(items=[InvoiceItem(name="A", quantity=1, price=100)], tax_rate=10),
            Invoice(items=[InvoiceItem(name="B", quantity=2, price=25)], currency="USD"),
        ]
        assert total_revenue(invoices) == pytest.approx(160)


class TestStock:
    """Tests for stock reconciliation."""

    def catalog(self):
        return [
            Product(id="p-pen", name="Pen", price=10, stock=100),
            Product(id="p-widget", name="Widget", price=5, stock=10),
        ]

    def test_created_decrements_matched_items(self):
        """Test stock -= quantity per matched item."""
        updated = apply_invoice_created(
            [InvoiceItem(name="Pen", quantity=3), InvoiceItem(name="Widget", quantity=2)],
            self.catalog(),
        )
        assert [p.stock for p in updated] == [97, 8]

    def test_input_catalog_is_untouched(self):
        """Test the functions return new products."""
        catalog = self.catalog()
        apply_invoice_created([InvoiceItem(name="Pen", quantity=3)], catalog)
        assert catalog[0].stock == 100

    def test_name_match_is_case_insensitive(self):
        """Test "pen" matches "Pen"."""
        updated = apply_invoice_created([InvoiceItem(name="pen", quantity=1)], self.catalog())
        assert updated[0].stock == 99

    def test_unmatched_items_are_skipped(self):
        """Test items not in the catalog change nothing."""
        catalog = self.catalog()
        updated = apply_invoice_created([InvoiceItem(name="Stapler", quantity=5)], catalog)
        assert [p.stock for p in updated] == [p.stock for p in catalog]

    def test_stock_may_go_negative(self):
        """Test availability is not enforced."""
        updated = apply_invoice_created([InvoiceItem(name="Widget", quantity=12)], self.catalog())
        assert updated[1].stock == -2

    def test_repeated_lines_accumulate(self):
        """Test two lines for one product both count."""
        updated = apply_invoice_created(
            [InvoiceItem(name="Widget", quantity=2), InvoiceItem(name="widget", quantity=3)],
            self.catalog(),
        )
        assert updated[1].stock == 5

    def test_create_then_delete_restores_stock(self):
        """Test delete is the inverse of create."""
        items = [InvoiceItem(name="Widget", quantity=3), InvoiceItem(name="Pen", quantity=7)]
        catalog = self.catalog()
        restored = apply_invoice_deleted(items, apply_invoice_created(items, catalog))
        assert [p.stock for p in restored] == [p.stock for p in catalog]

    def test_cached_product_id_restocks_renamed_product(self):
        """Test a stored item gives stock back to its product after a rename."""
        catalog = [Product(id="p-pen", name="Gel Pen", price=10, stock=96)]
        item = InvoiceItem(name="Pen", quantity=4, product_id="p-pen")
        assert match_product(item, catalog).id == "p-pen"
        assert apply_invoice_deleted([item], catalog)[0].stock == 100

    def test_link_items_resolves_by_name(self):
        """Test linking caches the name match and ignores an earlier id."""
        linked = link_items(
            [
                InvoiceItem(name="widget", quantity=1, product_id="p-pen"),
                InvoiceItem(name="Pen", quantity=1),
            ],
            self.catalog(),
        )
        assert [i.product_id for i in linked] == ["p-widget", "p-pen"]

    def test_link_items_clears_id_of_retyped_line(self):
        """Test a line renamed to something unknown loses its cached id."""
        item = InvoiceItem(name="Pencil", quantity=3, product_id="p-pen")
        [linked] = link_items([item], self.catalog())
        assert linked.product_id is None
        assert apply_invoice_created([linked], self.catalog())[0].stock == 100

    def test_stale_product_id_falls_back_to_name(self):
        """Test an id that no longer exists falls back to the name."""
        item = InvoiceItem(name="Pen", quantity=1, product_id="gone")
        assert match_product(item, self.catalog()).id == "p-pen"

    def test_reconcile_edit(self):
        """Test reconcile restocks old items and takes new ones."""
        catalog = apply_invoice_created([InvoiceItem(name="Widget", quantity=3)], self.catalog())
        adjusted, movements = reconcile_invoice_edit(
            [InvoiceItem(name="Widget", quantity=3)],
            [InvoiceItem(name="Widget", quantity=1), InvoiceItem(name="Pen", quantity=4)],
            catalog,
        )
        assert [p.stock for p in adjusted] == [96, 9]
        assert [m.delta for m in movements] == [3, -1, -4]


class TestFiltering:
    """Tests for time windows and search."""

    NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def invoice_on(self, day, name="Rahim", number="#0001", contact="01711000000"):
        return Invoice(
            invoice_number=number,
            date=day,
            customer=CustomerSnapshot(name=name, email=contact),
        )

    def test_all_window_keeps_everything(self):
        """Test the all window applies no date filter."""
        invoices = [self.invoice_on(date(2001, 1, 1))]
        assert filter_invoices(invoices, TimeWindow.ALL, now=self.NOW) == invoices

    def test_seven_day_window(self):
        """Test 7d keeps invoices dated within 7 x 24h of now."""
        recent = self.invoice_on(date(2024, 5, 26))
        old = self.invoice_on(date(2024, 5, 20))
        assert filter_invoices([recent, old], "7d", now=self.NOW) == [recent]

    def test_invoice_date_is_midnight_utc(self):
        """Test a same-day invoice is inside 24h but outside 1h at noon."""
        today = self.invoice_on(date(2024, 6, 1))
        assert filter_invoices([today], TimeWindow.DAY, now=self.NOW) == [today]
        assert filter_invoices([today], TimeWindow.HOUR, now=self.NOW) == []

    def test_future_dated_invoice_is_in_every_window(self):
        """Test negative age passes the window check."""
        future = self.invoice_on(date(2024, 7, 1))
        assert filter_invoices([future], TimeWindow.HOUR, now=self.NOW) == [future]

    def test_naive_now_is_treated_as_utc(self):
        """Test a naive reference time behaves like UTC."""
        invoice = self.invoice_on(date(2024, 5, 26))
        naive = self.NOW.replace(tzinfo=None)
        assert filter_invoices([invoice], "7d", now=naive) == [invoice]

    def test_window_spans(self):
        """Test fixed spans, not calendar months."""
        assert TimeWindow.HALF_YEAR.span == timedelta(days=180)
        assert TimeWindow.YEAR.span == timedelta(days=365)
        assert TimeWindow.ALL.span is None

    def test_query_matches_name_contact_number_or_date(self):
        """Test each searchable field."""
        inv = self.invoice_on(date(2024, 5, 30), name="Rahim Uddin", number="#0042")
        for query in ("rahim", "01711", "#0042", "0042", "2024-05-30"):
            assert filter_invoices([inv], query=query, now=self.NOW) == [inv]
        assert filter_invoices([inv], query="karim", now=self.NOW) == []

    def test_blank_query_is_ignored(self):
        """Test whitespace-only queries do not filter."""
        inv = self.invoice_on(date(2024, 5, 30))
        assert filter_invoices([inv], query="   ", now=self.NOW) == [inv]

    def test_window_then_query_keeps_order(self):
        """Test both filters compose and order is preserved."""
        a = self.invoice_on(date(2024, 5, 31), name="Rahim", number="#0003")
        b = self.invoice_on(date(2024, 5, 30), name="Karim", number="#0002")
        c = self.invoice_on(date(2024, 5, 29), name="Rahima", number="#0001")
        old = self.invoice_on(date(2023, 1, 1), name="Rahim", number="#0000")
        assert filter_invoices([a, b, c, old], "7d", "rahim", now=self.NOW) == [a, c]

    def test_search_customers_by_phone_or_name(self):
        """Test customer search ignores phone whitespace and name case."""
        customers = [
            Customer(name="Rahim Uddin", phone="01711 000 000"),
            Customer(name="Karim", phone="01811222333"),
        ]
        assert [c.name for c in search_customers(customers, "01711000")] == ["Rahim Uddin"]
        assert [c.name for c in search_customers(customers, "KARIM")] == ["Karim"]
        assert len(search_customers(customers, "")) == 2

    def test_search_products(self):
        """Test product search on name and description."""
        products = [
            Product(name="Pen", description="Blue ink"),
            Product(name="Widget", description=""),
        ]
        assert [p.name for p in search_products(products, "ink")] == ["Pen"]
        assert [p.name for p in search_products(products, "WID")] == ["Widget"]
        assert len(search_products(products, "")) == 2

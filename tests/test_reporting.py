"""Tests for the pure reporting aggregator."""

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from barstock.core import reporting

TODAY = date(2026, 3, 10)


def sale(name="Aguila", quantity=1, total="100.00", method="Cash", day=TODAY):
    # Mid-morning UTC stays on the same business date in any nearby timezone
    return SimpleNamespace(
        item_name=name,
        quantity=quantity,
        total=Decimal(total),
        payment_method=method,
        sold_at=datetime.combine(day, datetime.min.time()) + timedelta(hours=9),
    )


def record(name="Aguila", price="100.00", opening=0, added=0, closing=0, margin=None, day=TODAY):
    sold = opening + added - closing
    return SimpleNamespace(
        date=day,
        product=SimpleNamespace(name=name),
        closing_stock=closing,
        sold=sold,
        revenue=Decimal(sold) * Decimal(price),
        profit_margin=None if margin is None else Decimal(margin),
    )


def inventory(quantity, threshold=10):
    return SimpleNamespace(quantity=quantity, low_stock_threshold=threshold)


class TestTotals:
    def test_total_revenue_and_count(self):
        sales = [sale(total="300.00"), sale(total="50.00")]

        assert reporting.total_revenue(sales) == Decimal("350.00")
        assert reporting.sales_count(sales) == 2

    def test_empty_input_is_zero(self):
        assert reporting.total_revenue([]) == Decimal("0")
        assert reporting.sales_count([]) == 0

    def test_low_stock_counts_threshold_inclusive(self):
        """A quantity equal to the threshold counts as low."""
        rows = [inventory(3), inventory(10), inventory(11), inventory(0, threshold=0)]

        assert reporting.low_stock_count(rows) == 3

    def test_sheet_revenue_ignores_negative_rows(self):
        """Rows with negative sold add nothing to the day's revenue."""
        rows = [
            record(opening=30, closing=25),
            record(name="Brahma", price="50.00", opening=5, closing=3),
            record(name="Guinness", opening=2, closing=5),
        ]

        assert reporting.sheet_revenue(rows) == Decimal("600.00")


class TestRevenueByDate:
    def test_window_is_zero_filled_oldest_first(self):
        sales = [sale(total="80.00", day=TODAY - timedelta(days=2)), sale(total="20.00")]

        rows = reporting.revenue_by_date(sales, 7, TODAY)

        assert len(rows) == 7
        assert rows[0].date == TODAY - timedelta(days=6)
        assert rows[-1].date == TODAY
        assert rows[-1].revenue == Decimal("20.00")
        assert rows[-3].revenue == Decimal("80.00")
        assert sum(row.revenue for row in rows) == Decimal("100.00")

    def test_sales_outside_window_are_dropped(self):
        sales = [sale(day=TODAY - timedelta(days=7)), sale(day=TODAY + timedelta(days=1))]

        rows = reporting.revenue_by_date(sales, 7, TODAY)

        assert all(row.revenue == 0 for row in rows)


class TestRankings:
    def test_top_products_by_units_with_name_tiebreak(self):
        sales = [
            sale("Tusker", 4),
            sale("Aguila", 2),
            sale("Aguila", 2),
            sale("Brahma", 1),
        ]

        rows = reporting.top_products(sales)

        assert [(r.name, r.quantity) for r in rows] == [("Aguila", 4), ("Tusker", 4), ("Brahma", 1)]

    def test_top_products_respects_limit(self):
        sales = [sale(f"P{i}", i + 1) for i in range(8)]

        assert len(reporting.top_products(sales)) == reporting.TOP_PRODUCTS_LIMIT

    def test_payment_methods_always_present(self):
        rows = reporting.revenue_by_payment_method([sale(total="40.00", method="Mobile-Money")])

        as_dict = {row.method: row.revenue for row in rows}
        assert as_dict == {"Cash": Decimal("0.00"), "Mobile-Money": Decimal("40.00")}

    def test_velocity_includes_unsold_products(self):
        sales = [sale("Aguila", 11), sale("Brahma", 10)]

        rows = reporting.stock_velocity(["Brahma", "Aguila", "Castle"], sales)

        assert [(r.name, r.sold, r.velocity) for r in rows] == [
            ("Aguila", 11, "fast"),
            ("Brahma", 10, "slow"),
            ("Castle", 0, "slow"),
        ]


class TestStockSheetAggregates:
    def test_closing_stock_summed_per_date(self):
        yesterday = TODAY - timedelta(days=1)
        rows = [
            record(closing=5, day=yesterday),
            record(name="Brahma", closing=7, day=yesterday),
            record(closing=3),
            record(closing=99, day=TODAY - timedelta(days=30)),
        ]

        result = reporting.closing_stock_by_date(rows, 7, TODAY)

        assert [(r.date, r.closing_stock) for r in result] == [(yesterday, 12), (TODAY, 3)]

    def test_average_margin_skips_missing_values(self):
        rows = [
            record(margin="10.00"),
            record(margin="20.00"),
            record(margin=None),
            record(name="Brahma", margin="30.00"),
        ]

        result = reporting.average_profit_margin(rows)

        assert [(r.name, r.average_margin) for r in result] == [
            ("Brahma", Decimal("30.00")),
            ("Aguila", Decimal("15.00")),
        ]

    def test_average_margin_limit(self):
        rows = [record(name=f"P{i}", margin=str(i)) for i in range(10)]

        assert len(reporting.average_profit_margin(rows)) == reporting.TOP_MARGINS_LIMIT


class TestBuildSummary:
    def test_same_input_same_report(self):
        sales = [sale(total="300.00", quantity=3), sale("Brahma", 1, "50.00", "Mobile-Money")]
        records = [record(opening=10, closing=7, margin="25.00")]
        inventories = [inventory(22), inventory(3)]

        first = reporting.build_summary(sales, inventories, records, ["Aguila", "Brahma"], 7, TODAY)
        second = reporting.build_summary(sales, inventories, records, ["Aguila", "Brahma"], 7, TODAY)

        assert first == second
        assert first.total_revenue == Decimal("350.00")
        assert first.sales_count == 2
        assert first.low_stock_count == 1
        assert first.top_products[0].name == "Aguila"

    def test_window_filters_wider_fetch(self):
        old = sale(total="999.00", day=TODAY - timedelta(days=20))
        recent = sale(total="10.00", day=TODAY - timedelta(days=20 - 14))

        week = reporting.build_summary([old, recent], [], [], [], 7, TODAY)
        month = reporting.build_summary([old, recent], [], [], [], 30, TODAY)

        assert week.sales_count == 1
        assert week.total_revenue == Decimal("10.00")
        assert month.sales_count == 2
        assert len(month.revenue_by_date) == 30

    def test_empty_data_gives_zeroed_report(self):
        summary = reporting.build_summary([], [], [], [], 7, TODAY)

        assert summary.total_revenue == 0
        assert summary.top_products == []
        assert len(summary.revenue_by_date) == 7
        assert len(summary.revenue_by_payment_method) == 2


def stocked(name, quantity, price="100.00", threshold=10):
    return SimpleNamespace(
        product_id=uuid.uuid4(),
        product=SimpleNamespace(name=name, selling_price=Decimal(price)),
        quantity=quantity,
        low_stock_threshold=threshold,
    )


class TestDashboard:
    def test_inventory_value_is_quantity_times_price(self):
        rows = [stocked("Aguila", 20), stocked("Brahma", 3, price="50.00"), stocked("Empty", 0)]

        assert reporting.inventory_value(rows) == Decimal("2150.00")

    def test_sales_for_day_keeps_only_that_date(self):
        sales = [sale(), sale(day=TODAY - timedelta(days=1))]

        assert len(reporting.sales_for_day(sales, TODAY)) == 1

    def test_low_stock_items_sorted_by_name(self):
        rows = [stocked("Zed", 2), stocked("Aguila", 10), stocked("Brahma", 40)]

        items = reporting.low_stock_items(rows)

        assert [item.name for item in items] == ["Aguila", "Zed"]
        assert items[1].quantity == 2

    def test_build_dashboard_counts_today_only(self):
        """Yesterday's sale affects neither the order count nor today's revenue."""
        sales = [
            sale(total="300.00"),
            sale(total="50.00", method="Mobile-Money"),
            sale(total="999.00", day=TODAY - timedelta(days=1)),
        ]
        rows = [stocked("Aguila", 2), stocked("Brahma", 40, price="50.00")]

        dashboard = reporting.build_dashboard(sales, rows, TODAY)

        assert dashboard.date == TODAY
        assert dashboard.orders_today == 2
        assert dashboard.revenue_today == Decimal("350.00")
        assert dashboard.inventory_value == Decimal("2200.00")
        assert dashboard.low_stock_count == 1
        assert dashboard.low_stock_items[0].name == "Aguila"

    def test_empty_bar_is_all_zero(self):
        dashboard = reporting.build_dashboard([], [], TODAY)

        assert dashboard.orders_today == 0
        assert dashboard.revenue_today == Decimal("0")
        assert dashboard.inventory_value == Decimal("0")
        assert dashboard.low_stock_items == []

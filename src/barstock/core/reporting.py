"""
Reporting aggregator.

Pure functions over rows the caller has already fetched. Nothing here touches
the database or the clock: the reporting date is passed in, so the same input
always yields the same report.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from barstock.models.enums import PaymentMethod
from barstock.models.report_schemas import (
    Dashboard,
    DateClosingStock,
    DateRevenue,
    LowStockItem,
    PaymentMethodRevenue,
    ProductMargin,
    ProductQuantity,
    ReportSummary,
    StockVelocity,
)
from barstock.utils.datetime import to_local_date

ZERO = Decimal("0.00")

TOP_PRODUCTS_LIMIT = 5
TOP_MARGINS_LIMIT = 7
FAST_MOVER_THRESHOLD = 10


def _window_start(today: date, days: int) -> date:
    return today - timedelta(days=days - 1)


def total_revenue(sales: Iterable) -> Decimal:
    return sum((Decimal(sale.total) for sale in sales), ZERO)


def sales_count(sales: Sequence) -> int:
    return len(sales)


def low_stock_count(inventories: Iterable) -> int:
    """Inventory rows at or below their threshold."""
    return sum(1 for row in inventories if row.quantity <= row.low_stock_threshold)


def low_stock_items(inventories: Iterable) -> list[LowStockItem]:
    """Inventory rows at or below their threshold, by product name."""
    rows = [
        LowStockItem(
            product_id=row.product_id,
            name=row.product.name,
            quantity=row.quantity,
            low_stock_threshold=row.low_stock_threshold,
        )
        for row in inventories
        if row.quantity <= row.low_stock_threshold
    ]
    rows.sort(key=lambda item: item.name)
    return rows


def inventory_value(inventories: Iterable) -> Decimal:
    """On-hand units times selling price, summed over every inventory row."""
    return sum(
        (row.quantity * Decimal(row.product.selling_price) for row in inventories), ZERO
    )


def sales_for_day(sales: Iterable, day: date) -> list:
    return [sale for sale in sales if to_local_date(sale.sold_at) == day]


def sheet_revenue(records: Iterable) -> Decimal:
    """Revenue of stock sheet rows. Rows with negative sold count as zero."""
    return sum((record.revenue for record in records if record.sold >= 0), ZERO)


def revenue_by_date(sales: Iterable, days: int, today: date) -> list[DateRevenue]:
    """Daily revenue over the trailing window ending today, zero-filled, oldest first."""
    start = _window_start(today, days)
    totals: dict[date, Decimal] = {start + timedelta(days=i): ZERO for i in range(days)}

    for sale in sales:
        sale_day = to_local_date(sale.sold_at)
        if start <= sale_day <= today:
            totals[sale_day] += Decimal(sale.total)

    return [DateRevenue(date=day, revenue=revenue) for day, revenue in totals.items()]


def top_products(sales: Iterable, limit: int = TOP_PRODUCTS_LIMIT) -> list[ProductQuantity]:
    """Best sellers by units. Ties break alphabetically."""
    quantities: dict[str, int] = defaultdict(int)
    for sale in sales:
        quantities[sale.item_name] += sale.quantity

    ranked = sorted(quantities.items(), key=lambda item: (-item[1], item[0]))
    return [ProductQuantity(name=name, quantity=qty) for name, qty in ranked[:limit]]


def revenue_by_payment_method(sales: Iterable) -> list[PaymentMethodRevenue]:
    """Revenue per payment method. Every accepted method is present."""
    totals = {method.value: ZERO for method in PaymentMethod}
    for sale in sales:
        method = PaymentMethod(sale.payment_method).value
        totals[method] += Decimal(sale.total)

    return [PaymentMethodRevenue(method=method, revenue=revenue) for method, revenue in totals.items()]


def stock_velocity(
    product_names: Iterable[str],
    sales: Iterable,
    threshold: int = FAST_MOVER_THRESHOLD,
) -> list[StockVelocity]:
    """Classify each catalog product as fast (sold > threshold) or slow, busiest first."""
    sold: dict[str, int] = defaultdict(int)
    for sale in sales:
        sold[sale.item_name] += sale.quantity

    rows = [
        StockVelocity(
            name=name,
            sold=sold.get(name, 0),
            velocity="fast" if sold.get(name, 0) > threshold else "slow",
        )
        for name in product_names
    ]
    rows.sort(key=lambda row: (-row.sold, row.name))
    return rows


def closing_stock_by_date(records: Iterable, days: int, today: date) -> list[DateClosingStock]:
    """Total closing units per sheet date inside the window, oldest first."""
    start = _window_start(today, days)
    totals: dict[date, int] = defaultdict(int)
    for record in records:
        if start <= record.date <= today:
            totals[record.date] += record.closing_stock

    return [DateClosingStock(date=day, closing_stock=totals[day]) for day in sorted(totals)]


def average_profit_margin(records: Iterable, limit: int = TOP_MARGINS_LIMIT) -> list[ProductMargin]:
    """Mean recorded margin per product, highest first. Records without a margin are skipped."""
    sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for record in records:
        if record.profit_margin is None:
            continue
        name = record.product.name
        sums[name] += Decimal(record.profit_margin)
        counts[name] += 1

    averages = [
        ProductMargin(name=name, average_margin=(sums[name] / counts[name]).quantize(ZERO))
        for name in sums
    ]
    averages.sort(key=lambda row: (-row.average_margin, row.name))
    return averages[:limit]


def build_summary(
    sales: Sequence,
    inventories: Sequence,
    records: Sequence,
    product_names: Sequence[str],
    days: int,
    today: date,
) -> ReportSummary:
    """Assemble the dashboard report for the trailing window ending today.

    Sales and records outside the window are ignored, so callers may pass a
    wider fetch than needed.
    """
    start = _window_start(today, days)
    window_sales = [sale for sale in sales if start <= to_local_date(sale.sold_at) <= today]
    window_records = [record for record in records if start <= record.date <= today]

    return ReportSummary(
        days=days,
        total_revenue=total_revenue(window_sales),
        sales_count=sales_count(window_sales),
        low_stock_count=low_stock_count(inventories),
        revenue_by_date=revenue_by_date(window_sales, days, today),
        top_products=top_products(window_sales),
        revenue_by_payment_method=revenue_by_payment_method(window_sales),
        stock_velocity=stock_velocity(product_names, window_sales),
        closing_stock_by_date=closing_stock_by_date(window_records, days, today),
        average_profit_margin=average_profit_margin(window_records),
    )


def build_dashboard(sales: Sequence, inventories: Sequence, today: date) -> Dashboard:
    """Today's order count and revenue plus current stock value and shortages."""
    todays_sales = sales_for_day(sales, today)
    shortages = low_stock_items(inventories)
    return Dashboard(
        date=today,
        orders_today=sales_count(todays_sales),
        revenue_today=total_revenue(todays_sales),
        inventory_value=inventory_value(inventories),
        low_stock_count=len(shortages),
        low_stock_items=shortages,
    )

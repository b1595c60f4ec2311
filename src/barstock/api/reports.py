"""Reports API endpoints (admin only)."""

from datetime import date, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.api.items import to_item, to_item_history
from barstock.core import catalog, reporting, sales
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.core.errors import ValidationError
from barstock.models.daily_stock_record import DailyStockRecord
from barstock.models.report_schemas import ReportSummary, SalesReport, StockReport, StockReportItem
from barstock.models.sale_schemas import SaleRead
from barstock.models.user import User
from barstock.utils.datetime import today_local

router = APIRouter(prefix="/reports", tags=["reports"])

REPORT_WINDOWS = (7, 30)


@router.get("/summary", response_model=ReportSummary)
async def report_summary(
    days: int = 7,
    current_user: User = Depends(require_action(Action.VIEW_REPORTS)),
    db: AsyncSession = Depends(get_db),
):
    """Revenue, best sellers, payment split, velocity, closing stock and margins."""
    if days not in REPORT_WINDOWS:
        raise ValidationError(
            "days must be 7 or 30",
            details={"days": days, "allowed": list(REPORT_WINDOWS)},
        )

    today = today_local()
    start = today - timedelta(days=days - 1)

    window_sales = await sales.list_sales(db, start, today)
    inventories = await catalog.list_inventory(db)
    products = await catalog.list_products(db, active_only=True)

    result = await db.execute(
        select(DailyStockRecord).where(
            DailyStockRecord.date >= start,
            DailyStockRecord.date <= today,
        )
    )
    records = result.scalars().all()

    return reporting.build_summary(
        sales=window_sales,
        inventories=inventories,
        records=records,
        product_names=[product.name for product in products],
        days=days,
        today=today,
    )


@router.get("/sales", response_model=SalesReport)
async def sales_report(
    from_date: date | None = None,
    to_date: date | None = None,
    current_user: User = Depends(require_action(Action.VIEW_REPORTS)),
    db: AsyncSession = Depends(get_db),
):
    rows = await sales.list_sales(db, from_date, to_date)
    return SalesReport(
        total_sales=reporting.sales_count(rows),
        total_revenue=reporting.total_revenue(rows),
        sales_by_payment_method={
            entry.method: entry.revenue for entry in reporting.revenue_by_payment_method(rows)
        },
        sales=[SaleRead.model_validate(row) for row in rows],
    )


@router.get("/stock", response_model=StockReport)
async def stock_report(
    current_user: User = Depends(require_action(Action.VIEW_REPORTS)),
    db: AsyncSession = Depends(get_db),
):
    """Every product with its full inventory history."""
    products = await catalog.list_products(db)
    items = []
    for product in products:
        movements = await catalog.product_history(db, product.id)
        item = to_item(product)
        items.append(
            StockReportItem(
                **item.model_dump(),
                stock_changes=[to_item_history(m, product.name) for m in movements],
            )
        )
    return StockReport(items=items)

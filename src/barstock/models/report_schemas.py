"""Pydantic schemas for reports API."""

from datetime import date as date_type
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from barstock.models.product_schemas import ItemHistoryRead, ItemRead
from barstock.models.sale_schemas import SaleRead


class DateRevenue(BaseModel):
    """Revenue for one day."""

    date: date_type
    revenue: Decimal


class ProductQuantity(BaseModel):
    """Units sold for one product."""

    name: str
    quantity: int


class PaymentMethodRevenue(BaseModel):
    """Revenue collected through one payment method."""

    method: str
    revenue: Decimal


class StockVelocity(BaseModel):
    """Fast/slow classification by units sold."""

    name: str
    sold: int
    velocity: Literal["fast", "slow"]


class DateClosingStock(BaseModel):
    """Closing units counted on one day, all products."""

    date: date_type
    closing_stock: int


class ProductMargin(BaseModel):
    """Average recorded profit margin for one product."""

    name: str
    average_margin: Decimal


class ReportSummary(BaseModel):
    """Dashboard report over a trailing window."""

    days: int
    total_revenue: Decimal
    sales_count: int
    low_stock_count: int
    revenue_by_date: list[DateRevenue]
    top_products: list[ProductQuantity]
    revenue_by_payment_method: list[PaymentMethodRevenue]
    stock_velocity: list[StockVelocity]
    closing_stock_by_date: list[DateClosingStock]
    average_profit_margin: list[ProductMargin]


class SalesReport(BaseModel):
    """Legacy sales report."""

    total_sales: int
    total_revenue: Decimal
    sales_by_payment_method: dict[str, Decimal] = Field(
        ..., description="Revenue per payment method, every method present"
    )
    sales: list[SaleRead]


class StockReportItem(ItemRead):
    """Legacy item with its stock history."""

    stock_changes: list[ItemHistoryRead]


class StockReport(BaseModel):
    """Legacy stock report."""

    items: list[StockReportItem]


class LowStockItem(BaseModel):
    """A product at or below its low-stock threshold."""

    product_id: UUID
    name: str
    quantity: int
    low_stock_threshold: int


class Dashboard(BaseModel):
    """Today's figures and current stock, open to every role."""

    date: date_type
    orders_today: int
    revenue_today: Decimal
    inventory_value: Decimal
    low_stock_count: int
    low_stock_items: list[LowStockItem]

"""Pydantic schemas for the daily stock sheet API."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from barstock.models.enums import DayStatus, StockStatus

CountField = Literal["opening_stock", "added_stock", "closing_stock"]

NEGATIVE_SOLD_WARNING = "negative_sold"


class CellUpdate(BaseModel):
    """Edit of one count on a draft record."""

    field: CountField
    value: int = Field(..., ge=0)


class MarginUpdate(BaseModel):
    """Profit margin percentage recorded for a draft record."""

    profit_margin: Decimal | None = Field(None, ge=-100, le=1000, decimal_places=2)


class DailyStockRecordRead(BaseModel):
    """A stock sheet row with its derived values."""

    id: UUID
    date: date_type
    product_id: UUID
    product_name: str
    selling_price: Decimal
    opening_stock: int
    added_stock: int
    total_stock: int
    closing_stock: int
    sold: int
    revenue: Decimal
    profit_margin: Decimal | None
    status: StockStatus
    warnings: list[str] = []
    published_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "DailyStockRecordRead":
        """Build from a DailyStockRecord with its product loaded."""
        warnings = [NEGATIVE_SOLD_WARNING] if record.has_negative_sold else []
        return cls(
            id=record.id,
            date=record.date,
            product_id=record.product_id,
            product_name=record.product.name,
            selling_price=record.product.selling_price,
            opening_stock=record.opening_stock,
            added_stock=record.added_stock,
            total_stock=record.total_stock,
            closing_stock=record.closing_stock,
            sold=record.sold,
            revenue=record.revenue,
            profit_margin=record.profit_margin,
            status=record.status,
            warnings=warnings,
            published_at=record.published_at,
        )


class DaySheet(BaseModel):
    """All records for one business date."""

    date: date_type
    status: DayStatus
    records: list[DailyStockRecordRead]
    total_revenue: Decimal = Field(..., description="Sum of non-negative row revenue")


class DaySummary(BaseModel):
    """Per-date line of the stock sheet index."""

    date: date_type
    status: DayStatus
    record_count: int
    total_revenue: Decimal

"""DailyStockRecord model: one stock sheet row per (date, product)."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from barstock.models.product import Product

import uuid
from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from barstock.core.db import Base
from barstock.models.enums import StockStatus
from barstock.utils.datetime import now_utc_naive

EDITABLE_COUNT_FIELDS = ("opening_stock", "added_stock", "closing_stock")


class DailyStockRecord(Base):
    """Opening, added and closing counts for one product on one business date.

    Totals, units sold and revenue are derived on read so edits never leave
    stale aggregates behind.
    """

    __tablename__ = "daily_stock_records"
    __table_args__ = (
        UniqueConstraint("date", "product_id", name="uq_daily_stock_date_product"),
        CheckConstraint("opening_stock >= 0", name="ck_daily_stock_opening_non_negative"),
        CheckConstraint("added_stock >= 0", name="ck_daily_stock_added_non_negative"),
        CheckConstraint("closing_stock >= 0", name="ck_daily_stock_closing_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    date: Mapped[date_type] = mapped_column(
        nullable=False,
        index=True,
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )

    product: Mapped["Product"] = relationship(
        "Product",
        lazy="selectin",
    )

    opening_stock: Mapped[int] = mapped_column(nullable=False, default=0)
    added_stock: Mapped[int] = mapped_column(nullable=False, default=0)
    closing_stock: Mapped[int] = mapped_column(nullable=False, default=0)

    # Percentage recorded by staff, averaged in reports
    profit_margin: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StockStatus.DRAFT.value,
        index=True,
    )

    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    published_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    published_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    @property
    def is_published(self) -> bool:
        return self.status == StockStatus.PUBLISHED.value

    @property
    def total_stock(self) -> int:
        """Units available during the day."""
        return self.opening_stock + self.added_stock

    @property
    def sold(self) -> int:
        """Units sold. Negative only when counts were entered wrongly."""
        return self.total_stock - self.closing_stock

    @property
    def revenue(self) -> Decimal:
        """Signed revenue for the row, sold x current selling price."""
        return Decimal(self.sold) * self.product.selling_price

    @property
    def has_negative_sold(self) -> bool:
        return self.sold < 0

    def __repr__(self) -> str:
        return (
            f"<DailyStockRecord(date={self.date}, product_id={self.product_id}, "
            f"status={self.status})>"
        )

"""Sale model: append-only ledger of completed transactions."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from barstock.core.db import Base
from barstock.models.enums import PaymentMethod
from barstock.utils.datetime import now_utc_naive


class Sale(Base):
    """A completed sale.

    Name and unit price are snapshots taken at sale time; later catalog edits
    never change historical totals.
    """

    __tablename__ = "sales"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )

    item_name: Mapped[str] = mapped_column(String(120), nullable=False)

    quantity: Mapped[int] = mapped_column(nullable=False)

    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    payment_method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentMethod.CASH.value,
    )

    sold_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )

    sold_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Sale(item_name={self.item_name}, quantity={self.quantity}, total={self.total})>"

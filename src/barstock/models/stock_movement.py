"""Audit trail of live inventory changes."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from barstock.core.db import Base
from barstock.utils.datetime import now_utc_naive


class StockMovement(Base):
    """Immutable record of one change to a product's on-hand quantity."""

    __tablename__ = "stock_movements"

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

    # WHAT
    quantity_before: Mapped[int] = mapped_column(nullable=False)
    quantity_after: Mapped[int] = mapped_column(nullable=False)
    change_amount: Mapped[int] = mapped_column(nullable=False)

    # WHY: "Initial stock", "Manual adjustment", "Sale #<id>", "Daily stock publish <date>"
    reason: Mapped[str] = mapped_column(String(120), nullable=False)

    # WHO
    changed_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    # WHEN
    changed_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<StockMovement(product_id={self.product_id}, "
            f"change={self.change_amount}, reason={self.reason})>"
        )

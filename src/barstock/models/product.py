"""Product catalog and live inventory models."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from barstock.core.db import Base
from barstock.utils.datetime import now_utc_naive


class Product(Base):
    """
    A sellable item on the bar's catalog.

    Referenced by id from inventory, daily stock records and sales. Products
    are deactivated rather than deleted so historical rows keep resolving.
    """

    __tablename__ = "products"
    __table_args__ = (CheckConstraint("selling_price >= 0", name="ck_products_price_non_negative"),)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        unique=True,
        index=True,
    )

    category: Mapped[str | None] = mapped_column(
        String(60),
        nullable=True,
    )

    selling_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    is_active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    inventory: Mapped["Inventory | None"] = relationship(
        "Inventory",
        back_populates="product",
        uselist=False,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return self.name


class Inventory(Base):
    """Current on-hand quantity for one product."""

    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        CheckConstraint("low_stock_threshold >= 0", name="ck_inventory_threshold_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id"),
        nullable=False,
        unique=True,
        index=True,
    )

    product: Mapped["Product"] = relationship(
        "Product",
        back_populates="inventory",
        lazy="selectin",
    )

    quantity: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
    )

    low_stock_threshold: Mapped[int] = mapped_column(
        nullable=False,
        default=10,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    def __repr__(self) -> str:
        return f"<Inventory(product_id={self.product_id}, quantity={self.quantity})>"

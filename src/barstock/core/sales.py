"""Sales transaction: decrement inventory and append to the sales ledger atomically."""

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.access import Action, ensure_authorized
from barstock.core.audit import log_stock_movement, sale_reason
from barstock.core.catalog import lock_inventory
from barstock.core.errors import (
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from barstock.core.logging import get_logger
from barstock.models.enums import PaymentMethod
from barstock.models.product import Product
from barstock.models.sale import Sale
from barstock.models.user import User
from barstock.utils.datetime import local_day_bounds_utc, now_utc

logger = get_logger(__name__)


async def record_sale(
    db: AsyncSession,
    product_id: uuid.UUID,
    quantity: int,
    payment_method: PaymentMethod | str,
    user: User,
) -> Sale:
    """
    Sell units of a product.

    The inventory row is locked, checked and decremented, and the sale row and
    its stock movement are inserted in the same transaction. Any failure rolls
    all of it back, so inventory never drops without a matching sale.

    Raises:
        NotFoundError: Unknown product, or product without an inventory row
        InvalidStateError: Product is inactive
        InsufficientStockError: Quantity exceeds units on hand
    """
    ensure_authorized(user, Action.RECORD_SALE)

    if quantity <= 0:
        raise ValidationError("Quantity must be positive", details={"quantity": quantity})
    method = PaymentMethod(payment_method)
    user_id = user.id

    try:
        result = await db.execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError("Product", str(product_id))
        if not product.is_active:
            raise InvalidStateError(
                f"{product.name} is not available for sale",
                details={"product_id": str(product_id)},
                code="PRODUCT_INACTIVE",
            )

        inventory = await lock_inventory(db, product_id)
        if inventory is None:
            raise NotFoundError("Product", str(product_id))

        if quantity > inventory.quantity:
            raise InsufficientStockError(product.name, quantity, inventory.quantity)

        unit_price = product.selling_price
        sale = Sale(
            id=uuid.uuid4(),
            product_id=product.id,
            item_name=product.name,
            quantity=quantity,
            unit_price=unit_price,
            total=unit_price * quantity,
            payment_method=method.value,
            sold_by=user_id,
            sold_at=now_utc(),
        )

        before = inventory.quantity
        inventory.quantity = before - quantity
        db.add(sale)
        await log_stock_movement(db, inventory, before, sale_reason(sale.id), user_id)

        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning(
            "sale.rejected",
            product_id=str(product_id),
            quantity=quantity,
            user_id=str(user_id),
        )
        raise

    logger.info(
        "sale.recorded",
        sale_id=str(sale.id),
        product_id=str(sale.product_id),
        quantity=quantity,
        total=str(sale.total),
        payment_method=sale.payment_method,
        user_id=str(user_id),
    )
    return sale


async def list_sales(
    db: AsyncSession, from_date: date | None = None, to_date: date | None = None
) -> list[Sale]:
    """Sales between two local business dates (inclusive), newest first."""
    stmt = select(Sale).order_by(Sale.sold_at.desc())
    if from_date is not None:
        stmt = stmt.where(Sale.sold_at >= local_day_bounds_utc(from_date)[0])
    if to_date is not None:
        stmt = stmt.where(Sale.sold_at < local_day_bounds_utc(to_date)[1])
    result = await db.execute(stmt)
    return list(result.scalars().all())

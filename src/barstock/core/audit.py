"""Audit logging utilities for tracking live inventory changes."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from barstock.models.product import Inventory
from barstock.models.stock_movement import StockMovement
from barstock.utils.datetime import now_utc

INITIAL_STOCK = "Initial stock"
MANUAL_ADJUSTMENT = "Manual adjustment"


def sale_reason(sale_id: uuid.UUID) -> str:
    return f"Sale #{sale_id}"


def publish_reason(day) -> str:
    return f"Daily stock publish {day.isoformat()}"


async def log_stock_movement(
    db: AsyncSession,
    inventory: Inventory,
    quantity_before: int,
    reason: str,
    changed_by: uuid.UUID | None,
) -> StockMovement:
    """Log an inventory change to the movement history.

    Args:
        db: Database session
        inventory: The inventory row, already holding its new quantity
        quantity_before: Quantity prior to the change
        reason: One of the reason labels above
        changed_by: Account making the change

    Returns:
        Created StockMovement record (added, not flushed)
    """
    movement = StockMovement(
        product_id=inventory.product_id,
        quantity_before=quantity_before,
        quantity_after=inventory.quantity,
        change_amount=inventory.quantity - quantity_before,
        reason=reason,
        changed_by=changed_by,
        changed_at=now_utc(),
    )

    db.add(movement)
    return movement

"""Live inventory API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.core import catalog
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.models.product_schemas import (
    InventoryItem,
    InventoryRead,
    InventoryUpdate,
    StockMovementRead,
)
from barstock.models.user import User

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=list[InventoryItem])
async def list_inventory(
    low_stock_only: bool = False,
    current_user: User = Depends(require_action(Action.VIEW_INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    """On-hand quantities for every product, with the low-stock flag."""
    rows = await catalog.list_inventory(db)
    items = [
        InventoryItem(
            product_id=row.product_id,
            name=row.product.name,
            category=row.product.category,
            selling_price=row.product.selling_price,
            quantity=row.quantity,
            low_stock_threshold=row.low_stock_threshold,
            low_stock=row.is_low_stock,
        )
        for row in rows
    ]
    if low_stock_only:
        items = [item for item in items if item.low_stock]
    return items


@router.put("/{product_id}", response_model=InventoryRead)
async def adjust_inventory(
    product_id: UUID,
    payload: InventoryUpdate,
    current_user: User = Depends(require_action(Action.ADJUST_INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    """Manual stock correction. Admin only."""
    return await catalog.adjust_inventory(db, product_id, payload, current_user)


@router.get("/{product_id}/history", response_model=list[StockMovementRead])
async def inventory_history(
    product_id: UUID,
    current_user: User = Depends(require_action(Action.VIEW_INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.product_history(db, product_id)

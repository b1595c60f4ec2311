"""Legacy item endpoints: products and inventory flattened into one record."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.core import catalog
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.models.product import Product
from barstock.models.product_schemas import ItemCreate, ItemHistoryRead, ItemRead, ProductCreate
from barstock.models.stock_movement import StockMovement
from barstock.models.user import User

router = APIRouter(prefix="/items", tags=["items"])


def to_item(product: Product) -> ItemRead:
    inventory = product.inventory
    return ItemRead(
        id=product.id,
        name=product.name,
        quantity=inventory.quantity if inventory else 0,
        price=product.selling_price,
        low_stock_threshold=inventory.low_stock_threshold if inventory else 0,
        created_at=product.created_at,
        updated_at=max(product.updated_at, inventory.updated_at) if inventory else product.updated_at,
    )


def to_item_history(movement: StockMovement, product_name: str) -> ItemHistoryRead:
    return ItemHistoryRead(
        id=movement.id,
        item_id=movement.product_id,
        item_name=product_name,
        quantity_before=movement.quantity_before,
        quantity_after=movement.quantity_after,
        change_amount=movement.change_amount,
        change_reason=movement.reason,
        created_at=movement.changed_at,
    )


@router.get("", response_model=list[ItemRead])
async def list_items(
    current_user: User = Depends(require_action(Action.VIEW_INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    products = await catalog.list_products(db, active_only=True)
    return [to_item(product) for product in products]


@router.post("", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: ItemCreate,
    current_user: User = Depends(require_action(Action.MANAGE_CATALOG)),
    db: AsyncSession = Depends(get_db),
):
    product = await catalog.create_product(
        db,
        ProductCreate(
            name=payload.name,
            selling_price=payload.price,
            initial_quantity=payload.quantity,
            low_stock_threshold=payload.low_stock_threshold,
        ),
        current_user,
    )
    return to_item(product)


@router.get("/{item_id}", response_model=ItemRead)
async def get_item(
    item_id: UUID,
    current_user: User = Depends(require_action(Action.VIEW_INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    return to_item(await catalog.get_product(db, item_id))


@router.get("/{item_id}/history", response_model=list[ItemHistoryRead])
async def get_item_history(
    item_id: UUID,
    current_user: User = Depends(require_action(Action.VIEW_INVENTORY)),
    db: AsyncSession = Depends(get_db),
):
    product = await catalog.get_product(db, item_id)
    movements = await catalog.product_history(db, item_id)
    return [to_item_history(movement, product.name) for movement in movements]

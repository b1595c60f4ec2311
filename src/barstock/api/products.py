"""Product catalog API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.core import catalog
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.models.product_schemas import ProductCreate, ProductRead, ProductUpdate
from barstock.models.user import User

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
async def list_products(
    active_only: bool = False,
    current_user: User = Depends(require_action(Action.VIEW_CATALOG)),
    db: AsyncSession = Depends(get_db),
):
    """List the catalog. All roles can read."""
    return await catalog.list_products(db, active_only=active_only)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    current_user: User = Depends(require_action(Action.MANAGE_CATALOG)),
    db: AsyncSession = Depends(get_db),
):
    """Add a product and its inventory row."""
    return await catalog.create_product(db, payload, current_user)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: UUID,
    current_user: User = Depends(require_action(Action.VIEW_CATALOG)),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    current_user: User = Depends(require_action(Action.MANAGE_CATALOG)),
    db: AsyncSession = Depends(get_db),
):
    """Rename, recategorize, reprice or (de)activate a product."""
    return await catalog.update_product(db, product_id, payload, current_user)

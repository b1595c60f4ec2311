"""Sales API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.core import sales
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.models.sale_schemas import SaleCreate, SaleRead
from barstock.models.user import User

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("", response_model=list[SaleRead])
async def list_sales(
    from_date: date | None = None,
    to_date: date | None = None,
    current_user: User = Depends(require_action(Action.VIEW_SALES)),
    db: AsyncSession = Depends(get_db),
):
    """Sales ledger, newest first."""
    return await sales.list_sales(db, from_date, to_date)


@router.post("", response_model=SaleRead, status_code=status.HTTP_201_CREATED)
async def record_sale(
    payload: SaleCreate,
    current_user: User = Depends(require_action(Action.RECORD_SALE)),
    db: AsyncSession = Depends(get_db),
):
    """Sell units of a product, decrementing inventory in the same transaction."""
    return await sales.record_sale(
        db, payload.product_id, payload.quantity, payload.payment_method, current_user
    )

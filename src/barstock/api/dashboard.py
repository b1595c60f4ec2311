"""Dashboard API endpoint (every role)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.core import catalog, reporting, sales
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.models.report_schemas import Dashboard
from barstock.models.user import User
from barstock.utils.datetime import today_local

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=Dashboard)
async def get_dashboard(
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD)),
    db: AsyncSession = Depends(get_db),
):
    """Orders and revenue for today, stock value and the low-stock list."""
    today = today_local()
    todays_sales = await sales.list_sales(db, today, today)
    inventories = await catalog.list_inventory(db)
    return reporting.build_dashboard(todays_sales, inventories, today)

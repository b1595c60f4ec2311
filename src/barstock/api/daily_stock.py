"""Daily stock sheet API endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_action
from barstock.core import stock_ledger
from barstock.core.access import Action
from barstock.core.db import get_db
from barstock.models.daily_stock_schemas import (
    CellUpdate,
    DailyStockRecordRead,
    DaySheet,
    DaySummary,
    MarginUpdate,
)
from barstock.models.user import User

router = APIRouter(prefix="/daily-stock", tags=["daily-stock"])


@router.get("", response_model=list[DaySummary])
async def list_days(
    from_date: date | None = None,
    to_date: date | None = None,
    current_user: User = Depends(require_action(Action.VIEW_DAILY_STOCK)),
    db: AsyncSession = Depends(get_db),
):
    """Per-date status and revenue. Defaults to the last 30 days."""
    return await stock_ledger.list_days(db, from_date, to_date)


@router.get("/{day}", response_model=DaySheet)
async def get_day(
    day: date,
    current_user: User = Depends(require_action(Action.VIEW_DAILY_STOCK)),
    db: AsyncSession = Depends(get_db),
):
    return await stock_ledger.get_day_sheet(db, day)


@router.post("/{day}/initialize", response_model=DaySheet, status_code=status.HTTP_201_CREATED)
async def initialize_day(
    day: date,
    current_user: User = Depends(require_action(Action.INITIALIZE_DAY)),
    db: AsyncSession = Depends(get_db),
):
    """Open a draft sheet for the date, one row per active product."""
    await stock_ledger.initialize_day(db, day, current_user)
    return await stock_ledger.get_day_sheet(db, day)


@router.patch("/records/{record_id}", response_model=DailyStockRecordRead)
async def update_cell(
    record_id: UUID,
    payload: CellUpdate,
    current_user: User = Depends(require_action(Action.EDIT_DAILY_STOCK)),
    db: AsyncSession = Depends(get_db),
):
    """Edit opening, added or closing count on a draft record."""
    record = await stock_ledger.update_cell(db, record_id, payload.field, payload.value, current_user)
    return DailyStockRecordRead.from_record(record)


@router.put("/records/{record_id}/profit-margin", response_model=DailyStockRecordRead)
async def set_profit_margin(
    record_id: UUID,
    payload: MarginUpdate,
    current_user: User = Depends(require_action(Action.EDIT_DAILY_STOCK)),
    db: AsyncSession = Depends(get_db),
):
    record = await stock_ledger.set_profit_margin(db, record_id, payload.profit_margin, current_user)
    return DailyStockRecordRead.from_record(record)


@router.post("/{day}/publish", response_model=DaySheet)
async def publish_day(
    day: date,
    current_user: User = Depends(require_action(Action.PUBLISH_DAY)),
    db: AsyncSession = Depends(get_db),
):
    """Apply closing counts to live inventory and lock the date. Admin only."""
    return await stock_ledger.publish_day(db, day, current_user)

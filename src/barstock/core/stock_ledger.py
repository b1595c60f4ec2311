"""
Daily stock ledger: the per-date stock sheet and its publish step.

A date moves empty -> draft -> published and never back. Publishing copies
each record's closing count onto live inventory in a single transaction, then
locks the date against further edits.
"""

import uuid
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.access import Action, ensure_authorized
from barstock.core.audit import log_stock_movement, publish_reason
from barstock.core.catalog import lock_inventory
from barstock.core.errors import (
    AlreadyInitializedError,
    InvalidStateError,
    NoActiveProductsError,
    NotFoundError,
    PublishFailedError,
    RecordLockedError,
    ValidationError,
)
from barstock.core.logging import get_logger
from barstock.core.reporting import sheet_revenue
from barstock.core.validators import validate_no_future_date
from barstock.models.daily_stock_record import EDITABLE_COUNT_FIELDS, DailyStockRecord
from barstock.models.daily_stock_schemas import DailyStockRecordRead, DaySheet, DaySummary
from barstock.models.enums import DayStatus, StockStatus
from barstock.models.product import Product
from barstock.models.user import User
from barstock.utils.datetime import now_utc, today_local

logger = get_logger(__name__)

DEFAULT_LIST_DAYS = 30


def derive_day_status(statuses) -> DayStatus:
    """Day status from the stored statuses of its records."""
    statuses = set(statuses)
    if not statuses:
        return DayStatus.EMPTY
    if StockStatus.PUBLISHED.value in statuses:
        return DayStatus.PUBLISHED
    return DayStatus.DRAFT


async def day_status(db: AsyncSession, day: date) -> DayStatus:
    stmt = select(DailyStockRecord.status).where(DailyStockRecord.date == day).distinct()
    result = await db.execute(stmt)
    return derive_day_status(result.scalars().all())


async def _records_for_day(
    db: AsyncSession, day: date, for_update: bool = False
) -> list[DailyStockRecord]:
    """Records of a date in creation order, row-locked when for_update is set."""
    stmt = (
        select(DailyStockRecord)
        .join(DailyStockRecord.product)
        .where(DailyStockRecord.date == day)
        .order_by(DailyStockRecord.created_at, Product.name)
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update(of=DailyStockRecord)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _get_record(db: AsyncSession, record_id: uuid.UUID) -> DailyStockRecord:
    result = await db.execute(select(DailyStockRecord).where(DailyStockRecord.id == record_id))
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFoundError("DailyStockRecord", str(record_id))
    return record


def _reject_locked(record_id: str, day: str, user_id: str) -> None:
    logger.warning(
        "daily_stock.edit_rejected",
        record_id=record_id,
        date=day,
        user_id=user_id,
    )
    raise RecordLockedError(day, record_id)


def _ensure_editable(record: DailyStockRecord, user: User) -> None:
    if record.is_published:
        _reject_locked(str(record.id), record.date.isoformat(), str(user.id))


async def _write_draft(db: AsyncSession, record: DailyStockRecord, user: User, **values) -> None:
    """
    Apply values to the record only while its stored status is still draft.

    A publish that committed after the record was read leaves no matching row,
    so the edit is rejected as locked.
    """
    # Rollback expires every instance in the session
    record_id, day, user_id = str(record.id), record.date.isoformat(), str(user.id)
    result = await db.execute(
        update(DailyStockRecord)
        .where(
            DailyStockRecord.id == record.id,
            DailyStockRecord.status == StockStatus.DRAFT.value,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        _reject_locked(record_id, day, user_id)

    await db.commit()
    await db.refresh(record)


async def initialize_day(db: AsyncSession, day: date, user: User) -> list[DailyStockRecord]:
    """
    Create a draft record for every active product.

    Opening stock is copied from live inventory (0 when a product has no
    inventory row). Added and closing start at 0.

    Raises:
        ValidationError: The date is in the future
        AlreadyInitializedError: Records already exist for the date
        NoActiveProductsError: The catalog has no active product
    """
    ensure_authorized(user, Action.INITIALIZE_DAY)

    try:
        validate_no_future_date(day, field_name="Stock date")
    except ValueError as exc:
        raise ValidationError(str(exc), details={"date": day.isoformat()}) from exc

    if await day_status(db, day) != DayStatus.EMPTY:
        raise AlreadyInitializedError(day.isoformat())

    result = await db.execute(
        select(Product).where(Product.is_active.is_(True)).order_by(Product.name)
    )
    products = result.scalars().all()
    if not products:
        raise NoActiveProductsError()

    records = []
    created_at = now_utc()
    for product in products:
        opening = product.inventory.quantity if product.inventory is not None else 0
        record = DailyStockRecord(
            date=day,
            product_id=product.id,
            product=product,
            opening_stock=opening,
            added_stock=0,
            closing_stock=0,
            status=StockStatus.DRAFT.value,
            created_by=user.id,
            created_at=created_at,
            updated_at=created_at,
        )
        db.add(record)
        records.append(record)

    try:
        await db.commit()
    except IntegrityError as exc:
        # Another request initialized the same date first
        await db.rollback()
        logger.warning("daily_stock.initialize_conflict", date=day.isoformat())
        raise AlreadyInitializedError(day.isoformat()) from exc

    logger.info(
        "daily_stock.initialized",
        date=day.isoformat(),
        record_count=len(records),
        user_id=str(user.id),
    )
    return records


async def update_cell(
    db: AsyncSession, record_id: uuid.UUID, field: str, value: int, user: User
) -> DailyStockRecord:
    """Set one count on a draft record. Published records reject every edit."""
    ensure_authorized(user, Action.EDIT_DAILY_STOCK)

    if field not in EDITABLE_COUNT_FIELDS:
        raise ValidationError(
            f"{field} is not an editable field",
            details={"field": field, "allowed": list(EDITABLE_COUNT_FIELDS)},
        )
    if value < 0:
        raise ValidationError("Stock counts cannot be negative", details={"field": field})

    record = await _get_record(db, record_id)
    _ensure_editable(record, user)

    old_value = getattr(record, field)
    await _write_draft(db, record, user, **{field: value})

    logger.info(
        "daily_stock.cell_updated",
        record_id=str(record.id),
        field=field,
        old_value=old_value,
        new_value=value,
        user_id=str(user.id),
    )
    return record


async def set_profit_margin(
    db: AsyncSession, record_id: uuid.UUID, margin: Decimal | None, user: User
) -> DailyStockRecord:
    """Record (or clear) the profit margin on a draft record."""
    ensure_authorized(user, Action.EDIT_DAILY_STOCK)

    record = await _get_record(db, record_id)
    _ensure_editable(record, user)

    await _write_draft(db, record, user, profit_margin=margin)

    logger.info(
        "daily_stock.margin_updated",
        record_id=str(record.id),
        profit_margin=str(margin) if margin is not None else None,
        user_id=str(user.id),
    )
    return record


async def publish_day(db: AsyncSession, day: date, user: User) -> DaySheet:
    """
    Overwrite live inventory with each record's closing count and lock the date.

    All-or-nothing: a missing inventory row or a failed write rolls back every
    inventory change and leaves the records in draft.

    Raises:
        InvalidStateError: No records exist for the date
        RecordLockedError: The date is already published
        PublishFailedError: A product could not be written; names the product
    """
    ensure_authorized(user, Action.PUBLISH_DAY)

    status = await day_status(db, day)
    if status == DayStatus.EMPTY:
        raise InvalidStateError(
            f"No daily stock exists for {day.isoformat()}",
            details={"date": day.isoformat()},
            code="NOT_INITIALIZED",
        )
    if status == DayStatus.PUBLISHED:
        raise RecordLockedError(day.isoformat())

    # Locked rows block concurrent cell edits until this transaction ends
    records = await _records_for_day(db, day, for_update=True)
    if any(record.is_published for record in records):
        await db.rollback()
        raise RecordLockedError(day.isoformat())
    plan = [(record.product_id, record.product.name, record.closing_stock) for record in records]

    current_id: str | None = None
    current_name: str | None = None
    try:
        for product_id, product_name, closing_stock in plan:
            current_id, current_name = str(product_id), product_name

            inventory = await lock_inventory(db, product_id)
            if inventory is None:
                raise PublishFailedError(day.isoformat(), current_id, current_name, "no inventory row")

            before = inventory.quantity
            inventory.quantity = closing_stock
            await log_stock_movement(db, inventory, before, publish_reason(day), user.id)

        current_id, current_name = None, None
        await db.execute(
            update(DailyStockRecord)
            .where(
                DailyStockRecord.date == day,
                DailyStockRecord.status == StockStatus.DRAFT.value,
            )
            .values(
                status=StockStatus.PUBLISHED.value,
                published_by=user.id,
                published_at=now_utc(),
            )
        )
        await db.commit()
    except PublishFailedError:
        await db.rollback()
        logger.error(
            "daily_stock.publish_failed",
            date=day.isoformat(),
            product_id=current_id,
            product_name=current_name,
        )
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(
            "daily_stock.publish_failed",
            date=day.isoformat(),
            product_id=current_id,
            product_name=current_name,
            error=type(exc).__name__,
        )
        raise PublishFailedError(day.isoformat(), current_id, current_name, type(exc).__name__) from exc

    logger.info(
        "daily_stock.published",
        date=day.isoformat(),
        record_count=len(plan),
        user_id=str(user.id),
    )
    return await get_day_sheet(db, day)


async def get_day_sheet(db: AsyncSession, day: date) -> DaySheet:
    """Status, rows with derived values, and the day's revenue."""
    records = await _records_for_day(db, day)
    return DaySheet(
        date=day,
        status=derive_day_status(record.status for record in records),
        records=[DailyStockRecordRead.from_record(record) for record in records],
        total_revenue=sheet_revenue(records),
    )


async def list_days(
    db: AsyncSession, from_date: date | None = None, to_date: date | None = None
) -> list[DaySummary]:
    """Per-date summaries between two dates (inclusive), newest first."""
    to_date = to_date or today_local()
    from_date = from_date or to_date - timedelta(days=DEFAULT_LIST_DAYS - 1)
    if from_date > to_date:
        raise ValidationError(
            "from_date must not be after to_date",
            details={"from_date": from_date.isoformat(), "to_date": to_date.isoformat()},
        )

    stmt = (
        select(DailyStockRecord)
        .where(DailyStockRecord.date >= from_date, DailyStockRecord.date <= to_date)
        .order_by(DailyStockRecord.date.desc())
    )
    result = await db.execute(stmt)

    by_date: dict[date, list[DailyStockRecord]] = defaultdict(list)
    for record in result.scalars().all():
        by_date[record.date].append(record)

    return [
        DaySummary(
            date=day,
            status=derive_day_status(record.status for record in records),
            record_count=len(records),
            total_revenue=sheet_revenue(records),
        )
        for day, records in sorted(by_date.items(), reverse=True)
    ]


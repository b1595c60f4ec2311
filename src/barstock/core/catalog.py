"""Product catalog and live inventory operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.access import Action, ensure_authorized
from barstock.core.audit import INITIAL_STOCK, MANUAL_ADJUSTMENT, log_stock_movement
from barstock.core.errors import ConflictError, NotFoundError, ValidationError
from barstock.core.logging import get_logger
from barstock.models.product import Inventory, Product
from barstock.models.product_schemas import InventoryUpdate, ProductCreate, ProductUpdate
from barstock.models.stock_movement import StockMovement
from barstock.models.user import User

logger = get_logger(__name__)


def _duplicate_name(name: str) -> ConflictError:
    return ConflictError(
        f"A product named {name} already exists",
        details={"name": name},
        code="DUPLICATE_PRODUCT",
    )


async def _name_taken(db: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> bool:
    stmt = select(Product.id).where(Product.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def get_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError("Product", str(product_id))
    return product


async def list_products(db: AsyncSession, active_only: bool = False) -> list[Product]:
    stmt = select(Product).order_by(Product.name)
    if active_only:
        stmt = stmt.where(Product.is_active.is_(True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_product(db: AsyncSession, data: ProductCreate, user: User) -> Product:
    """Add a product with its inventory row and an initial stock movement."""
    ensure_authorized(user, Action.MANAGE_CATALOG)

    if await _name_taken(db, data.name):
        raise _duplicate_name(data.name)

    product = Product(
        name=data.name,
        category=data.category,
        selling_price=data.selling_price,
        is_active=True,
    )
    product.inventory = Inventory(
        quantity=data.initial_quantity,
        low_stock_threshold=data.low_stock_threshold,
    )
    db.add(product)

    try:
        await db.flush()
        await log_stock_movement(db, product.inventory, 0, INITIAL_STOCK, user.id)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise _duplicate_name(data.name) from exc

    logger.info(
        "product.created",
        product_id=str(product.id),
        product_name=product.name,
        initial_quantity=data.initial_quantity,
        created_by=str(user.id),
    )
    return product


async def update_product(
    db: AsyncSession, product_id: uuid.UUID, data: ProductUpdate, user: User
) -> Product:
    """Partial update of name, category, price or active flag."""
    ensure_authorized(user, Action.MANAGE_CATALOG)
    product = await get_product(db, product_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    if changes.get("selling_price") is None:
        changes.pop("selling_price", None)
    if "is_active" in changes and changes["is_active"] is None:
        changes.pop("is_active")

    if "name" in changes and await _name_taken(db, changes["name"], exclude_id=product.id):
        raise _duplicate_name(changes["name"])

    for field, value in changes.items():
        setattr(product, field, value)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise _duplicate_name(changes.get("name", "")) from exc

    logger.info(
        "product.updated",
        product_id=str(product.id),
        changed_fields=sorted(changes),
        updated_by=str(user.id),
    )
    return product


async def list_inventory(db: AsyncSession) -> list[Inventory]:
    stmt = select(Inventory).join(Inventory.product).order_by(Product.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def lock_inventory(db: AsyncSession, product_id: uuid.UUID) -> Inventory | None:
    """Re-read an inventory row under a row lock, overwriting any stale in-session copy."""
    stmt = (
        select(Inventory)
        .where(Inventory.product_id == product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def adjust_inventory(
    db: AsyncSession, product_id: uuid.UUID, data: InventoryUpdate, user: User
) -> Inventory:
    """Set on-hand quantity and/or low-stock threshold by hand."""
    ensure_authorized(user, Action.ADJUST_INVENTORY)

    if data.quantity is None and data.low_stock_threshold is None:
        raise ValidationError("Nothing to update", details={"fields": ["quantity", "low_stock_threshold"]})

    try:
        inventory = await lock_inventory(db, product_id)
        if inventory is None:
            raise NotFoundError("Inventory", str(product_id))

        before = inventory.quantity
        if data.low_stock_threshold is not None:
            inventory.low_stock_threshold = data.low_stock_threshold

        if data.quantity is not None and data.quantity != before:
            inventory.quantity = data.quantity
            reason = MANUAL_ADJUSTMENT
            if data.reason:
                reason = f"{MANUAL_ADJUSTMENT}: {data.reason}"[:120]
            await log_stock_movement(db, inventory, before, reason, user.id)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "inventory.adjusted",
        product_id=str(product_id),
        quantity_before=before,
        quantity_after=inventory.quantity,
        adjusted_by=str(user.id),
    )
    return inventory


async def product_history(db: AsyncSession, product_id: uuid.UUID) -> list[StockMovement]:
    """Movement history for one product, newest first."""
    await get_product(db, product_id)
    stmt = (
        select(StockMovement)
        .where(StockMovement.product_id == product_id)
        .order_by(StockMovement.changed_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())

"""Role directory lookups and the static action permission table."""

import enum
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.errors import (
    AuthorizationDeniedError,
    ProfileMissingError,
    RoleLookupError,
    RoleMissingError,
)
from barstock.core.logging import get_logger
from barstock.core.validators import normalize_email
from barstock.models.access import AllowedEmail
from barstock.models.enums import UserRole
from barstock.models.user import User

logger = get_logger(__name__)


class Action(str, enum.Enum):
    """Protected operations, each gated by a minimum role."""

    VIEW_DASHBOARD = "view_dashboard"
    VIEW_INVENTORY = "view_inventory"
    VIEW_DAILY_STOCK = "view_daily_stock"
    VIEW_SALES = "view_sales"
    VIEW_CATALOG = "view_catalog"
    RECORD_SALE = "record_sale"
    INITIALIZE_DAY = "initialize_day"
    EDIT_DAILY_STOCK = "edit_daily_stock"
    MANAGE_CATALOG = "manage_catalog"
    PUBLISH_DAY = "publish_day"
    VIEW_REPORTS = "view_reports"
    MANAGE_USERS = "manage_users"
    ADJUST_INVENTORY = "adjust_inventory"


_ANY_ROLE = frozenset({UserRole.ADMIN, UserRole.STAFF, UserRole.VIEWER})
_OPERATORS = frozenset({UserRole.ADMIN, UserRole.STAFF})
_ADMIN_ONLY = frozenset({UserRole.ADMIN})

ACTION_ROLES: dict[Action, frozenset[UserRole]] = {
    Action.VIEW_DASHBOARD: _ANY_ROLE,
    Action.VIEW_INVENTORY: _ANY_ROLE,
    Action.VIEW_DAILY_STOCK: _ANY_ROLE,
    Action.VIEW_SALES: _ANY_ROLE,
    Action.VIEW_CATALOG: _ANY_ROLE,
    Action.RECORD_SALE: _OPERATORS,
    Action.INITIALIZE_DAY: _OPERATORS,
    Action.EDIT_DAILY_STOCK: _OPERATORS,
    Action.MANAGE_CATALOG: _OPERATORS,
    Action.PUBLISH_DAY: _ADMIN_ONLY,
    Action.VIEW_REPORTS: _ADMIN_ONLY,
    Action.MANAGE_USERS: _ADMIN_ONLY,
    Action.ADJUST_INVENTORY: _ADMIN_ONLY,
}


def _as_role(role: UserRole | str | None) -> UserRole | None:
    if role is None:
        return None
    try:
        return UserRole(role)
    except ValueError:
        return None


def authorize(role: UserRole | str | None, action: Action) -> bool:
    """Return True if the role may perform the action. Unknown roles never may."""
    resolved = _as_role(role)
    if resolved is None:
        return False
    return resolved in ACTION_ROLES[action]


def permitted_actions(role: UserRole | str | None) -> list[str]:
    """All actions a role may perform, in table order."""
    return [action.value for action in ACTION_ROLES if authorize(role, action)]


def ensure_authorized(user: User, action: Action) -> None:
    """Raise AuthorizationDeniedError unless the account's role permits the action."""
    if authorize(user.role, action):
        return

    logger.warning(
        "auth.permission_denied",
        user_id=str(user.id),
        action=action.value,
        user_role=user.role,
    )
    raise AuthorizationDeniedError(
        "You don't have permission to perform this action",
        details={"action": action.value, "role": user.role},
    )


async def resolve_account(db: AsyncSession, account_id: uuid.UUID) -> User:
    """
    Load the directory entry for an authenticated identity.

    Raises:
        RoleLookupError: The directory query failed
        ProfileMissingError: No entry, or the account was terminated
        RoleMissingError: The entry has no usable role
    """
    try:
        result = await db.execute(select(User).where(User.id == account_id))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.error(
            "auth.role_lookup_failed",
            account_id=str(account_id),
            error=type(exc).__name__,
        )
        raise RoleLookupError(str(account_id)) from exc

    if user is None or not user.is_active:
        logger.warning("auth.profile_missing", account_id=str(account_id))
        raise ProfileMissingError(str(account_id))

    if _as_role(user.role) is None:
        logger.warning("auth.role_missing", account_id=str(account_id), role=user.role)
        raise RoleMissingError(str(account_id))

    return user


async def resolve_role(db: AsyncSession, account_id: uuid.UUID) -> UserRole:
    """Current role for an account. There is no default role."""
    user = await resolve_account(db, account_id)
    return UserRole(user.role)


async def is_email_allowed(db: AsyncSession, email: str) -> bool:
    """Pre-authentication allow-list check."""
    stmt = select(AllowedEmail.id).where(AllowedEmail.email == normalize_email(email))
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None

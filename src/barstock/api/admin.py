"""Account administration: directory, allow-list and login history. Admin only."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.api.auth_helpers import require_admin
from barstock.core.db import get_db
from barstock.core.errors import ConflictError, InvalidStateError, NotFoundError
from barstock.core.logging import get_logger
from barstock.core.security import hash_password
from barstock.core.validators import normalize_email
from barstock.models.access import AllowedEmail, LoginEvent
from barstock.models.access_schemas import AllowedEmailCreate, AllowedEmailRead, LoginEventRead
from barstock.models.enums import UserRole
from barstock.models.user import User
from barstock.models.user_schemas import UserCreate, UserResponse, UserUpdate

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_logger(__name__)

LOGIN_HISTORY_LIMIT = 100


# ===== HELPERS =====
async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User", str(user_id))
    return user


async def _allow_email(db: AsyncSession, email: str, added_by: UUID) -> bool:
    """Add an email to the allow-list. Returns False if it was already there."""
    result = await db.execute(select(AllowedEmail.id).where(AllowedEmail.email == email))
    if result.scalar_one_or_none() is not None:
        return False
    db.add(AllowedEmail(email=email, added_by=added_by))
    return True


def _reject_self_change(admin_user: User, target: User, action: str) -> None:
    if admin_user.id == target.id:
        raise InvalidStateError(
            f"Admins cannot {action} their own account",
            details={"user_id": str(target.id)},
            code="SELF_MODIFICATION",
        )


# ===== USERS =====
@router.get("/users", response_model=list[UserResponse])
async def list_users(
    include_inactive: bool = True,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(User).order_by(User.created_at)
    if not include_inactive:
        stmt = stmt.where(User.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalars().all()


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Provision an account and allow-list its email."""
    result = await db.execute(select(User.id).where(User.email == payload.email))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(
            f"An account for {payload.email} already exists",
            details={"email": payload.email},
            code="DUPLICATE_EMAIL",
        )

    user = User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        display_name=payload.display_name,
        role=payload.role.value,
        is_active=True,
    )
    db.add(user)
    await _allow_email(db, payload.email, admin_user.id)
    await db.commit()

    logger.info(
        "admin.user_created",
        user_id=str(user.id),
        email=user.email,
        role=user.role,
        created_by=str(admin_user.id),
    )
    return user


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Change display name, role or active flag.

    The new role applies on the account's next request. is_active=true
    restores a terminated account and allow-lists its email again;
    is_active=false terminates it.
    """
    user = await _get_user(db, user_id)

    if payload.role is not None and payload.role != UserRole.ADMIN:
        _reject_self_change(admin_user, user, "demote")
    if payload.is_active is False:
        _reject_self_change(admin_user, user, "terminate")

    old_role = user.role
    was_active = user.is_active
    if payload.display_name is not None:
        user.display_name = payload.display_name
    if payload.role is not None:
        user.role = payload.role.value
    if payload.is_active is True:
        user.is_active = True
        await _allow_email(db, user.email, admin_user.id)
    elif payload.is_active is False:
        user.is_active = False
        await db.execute(delete(AllowedEmail).where(AllowedEmail.email == user.email))

    await db.commit()

    if was_active != user.is_active:
        logger.info(
            "admin.user_reactivated" if user.is_active else "admin.user_terminated",
            user_id=str(user.id),
            changed_by=str(admin_user.id),
        )

    if old_role != user.role:
        logger.info(
            "admin.role_changed",
            user_id=str(user.id),
            old_role=old_role,
            new_role=user.role,
            changed_by=str(admin_user.id),
        )
    return user


@router.delete("/users/{user_id}", response_model=UserResponse)
async def terminate_user(
    user_id: UUID,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate the account and remove its email from the allow-list."""
    user = await _get_user(db, user_id)
    _reject_self_change(admin_user, user, "terminate")

    user.is_active = False
    await db.execute(delete(AllowedEmail).where(AllowedEmail.email == user.email))
    await db.commit()

    logger.info("admin.user_terminated", user_id=str(user.id), terminated_by=str(admin_user.id))
    return user


# ===== ALLOW-LIST =====
@router.get("/allowed-emails", response_model=list[AllowedEmailRead])
async def list_allowed_emails(
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(AllowedEmail).order_by(AllowedEmail.email))
    return result.scalars().all()


@router.post(
    "/allowed-emails", response_model=AllowedEmailRead, status_code=status.HTTP_201_CREATED
)
async def add_allowed_email(
    payload: AllowedEmailCreate,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if not await _allow_email(db, payload.email, admin_user.id):
        raise ConflictError(
            f"{payload.email} is already allowed",
            details={"email": payload.email},
            code="DUPLICATE_EMAIL",
        )
    await db.commit()

    result = await db.execute(select(AllowedEmail).where(AllowedEmail.email == payload.email))
    logger.info("admin.email_allowed", email=payload.email, added_by=str(admin_user.id))
    return result.scalar_one()


@router.delete("/allowed-emails/{email}")
async def remove_allowed_email(
    email: str,
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    email = normalize_email(email)
    result = await db.execute(delete(AllowedEmail).where(AllowedEmail.email == email))
    if result.rowcount == 0:
        raise NotFoundError("AllowedEmail", email)
    await db.commit()

    logger.info("admin.email_removed", email=email, removed_by=str(admin_user.id))
    return {"success": True}


# ===== LOGIN HISTORY =====
@router.get("/login-history", response_model=list[LoginEventRead])
async def login_history(
    admin_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Most recent logins first."""
    result = await db.execute(
        select(LoginEvent).order_by(LoginEvent.login_at.desc()).limit(LOGIN_HISTORY_LIMIT)
    )
    return result.scalars().all()

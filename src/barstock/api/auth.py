"""Authentication endpoints and dependencies."""

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from barstock.core.access import is_email_allowed, permitted_actions, resolve_account
from barstock.core.db import get_db
from barstock.core.errors import AccessDeniedError, AuthenticationRequiredError, BadCredentialsError
from barstock.core.logging import get_logger
from barstock.core.security import verify_and_refresh
from barstock.core.validators import normalize_email
from barstock.models.access import LoginEvent
from barstock.models.access_schemas import AccessCheckRequest, AccessCheckResponse
from barstock.models.enums import UserRole
from barstock.models.user import User
from barstock.models.user_schemas import CurrentUserResponse, UserResponse
from barstock.utils.datetime import now_utc_naive

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


# Inactivity timeout by role (seconds)
ROLE_TIMEOUTS = {
    UserRole.STAFF: 30 * 60,
    UserRole.VIEWER: 30 * 60,
    UserRole.ADMIN: 2 * 60 * 60,
}


def _enforce_inactivity_timeout(request: Request, user: User) -> None:
    """Expire the session after role-specific idle time, else refresh last activity."""
    timeout = ROLE_TIMEOUTS.get(UserRole(user.role))
    now = now_utc_naive()

    last_activity_raw = request.session.get("last_activity")
    try:
        last_activity = datetime.fromisoformat(last_activity_raw) if last_activity_raw else None
    except (ValueError, TypeError):
        last_activity = None

    if timeout and last_activity and (now - last_activity) > timedelta(seconds=timeout):
        request.session.clear()
        logger.info(
            "auth.session_expired",
            user_id=str(user.id),
            role=user.role,
            timeout_seconds=timeout,
            idle_seconds=round((now - last_activity).total_seconds(), 2),
        )
        raise AuthenticationRequiredError("Session expired")

    request.session["last_activity"] = now.isoformat()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the signed-in account and its current role on every request."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise AuthenticationRequiredError()

    try:
        account_id = UUID(user_id)
    except (ValueError, TypeError):
        request.session.clear()
        raise AuthenticationRequiredError("Invalid session")

    user = await resolve_account(db, account_id)
    _enforce_inactivity_timeout(request, user)
    return user


@router.post("/access/check", response_model=AccessCheckResponse)
async def check_access(
    payload: AccessCheckRequest,
    db: AsyncSession = Depends(get_db),
):
    """Pre-login allow-list check. Does not reveal whether an account exists."""
    if not await is_email_allowed(db, payload.email):
        logger.info("auth.access_denied", email=payload.email)
        raise AccessDeniedError()
    return AccessCheckResponse(allowed=True)


@router.get("/access-gate")
async def access_gate(reason: str | None = None):
    """Neutral landing point for sessions that are missing, expired or not permitted."""
    messages = {
        "login": "Please sign in to continue.",
        "denied": "Your account does not have access to that page.",
    }
    return {
        "reason": reason or "login",
        "message": messages.get(reason or "login", messages["login"]),
        "login_url": "/login",
    }


@router.post("/login", response_model=UserResponse)
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Check allow-list, then password, then role; start a session on success."""
    email = normalize_email(form_data.username)

    if not await is_email_allowed(db, email):
        logger.warning("auth.login_not_allowed", email=email)
        raise AccessDeniedError()

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("auth.login_failed", email=email)
        raise BadCredentialsError()

    valid, refreshed_hash = verify_and_refresh(form_data.password, user.hashed_password)
    if not valid:
        logger.warning("auth.login_failed", email=email)
        raise BadCredentialsError()

    user = await resolve_account(db, user.id)

    if refreshed_hash:
        user.hashed_password = refreshed_hash

    request.session.clear()
    request.session["user_id"] = str(user.id)
    request.session["last_activity"] = now_utc_naive().isoformat()

    user_agent = request.headers.get("user-agent")
    db.add(
        LoginEvent(
            user_id=user.id,
            email=user.email,
            ip_address=request.client.host if request.client else None,
            user_agent=user_agent[:500] if user_agent else None,
        )
    )
    await db.commit()

    logger.info("auth.login_success", email=user.email, user_id=str(user.id), role=user.role)
    return user


@router.post("/logout")
async def logout(request: Request):
    """Clear the session."""
    user_id = request.session.get("user_id")
    if user_id:
        logger.info("auth.logout", user_id=user_id)

    request.session.clear()
    return {"success": True}


@router.get("/logout")
async def logout_get(request: Request):
    """Logout GET endpoint for browser compatibility."""
    return await logout(request)


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """The signed-in account, its role and what that role may do."""
    response = CurrentUserResponse.model_validate(current_user)
    response.permissions = permitted_actions(current_user.role)
    return response

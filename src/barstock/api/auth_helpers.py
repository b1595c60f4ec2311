"""Role-based authorization dependencies."""

from fastapi import Depends

from barstock.api.auth import get_current_user
from barstock.core.access import Action, ensure_authorized
from barstock.models.user import User


def require_action(action: Action):
    """Dependency factory: the current account's role must permit the action."""

    async def _require_action(current_user: User = Depends(get_current_user)) -> User:
        ensure_authorized(current_user, action)
        return current_user

    return _require_action


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for account administration routes."""
    ensure_authorized(current_user, Action.MANAGE_USERS)
    return current_user

"""Tests for the role directory and the action permission table."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.access import (
    ACTION_ROLES,
    Action,
    authorize,
    ensure_authorized,
    is_email_allowed,
    permitted_actions,
    resolve_account,
    resolve_role,
)
from barstock.core.errors import (
    AuthorizationDeniedError,
    ProfileMissingError,
    RoleLookupError,
    RoleMissingError,
)
from barstock.models.enums import UserRole
from tests.factories import AllowedEmailFactory, UserFactory

ANY_ROLE = {"view_dashboard", "view_inventory", "view_daily_stock", "view_sales", "view_catalog"}
OPERATOR = {"record_sale", "initialize_day", "edit_daily_stock", "manage_catalog"}
ADMIN_ONLY = {"publish_day", "view_reports", "manage_users", "adjust_inventory"}


class FailingSession:
    """Stand-in session whose queries always fail."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT users", {}, Exception("connection refused"))


class TestAuthorize:
    """Static action -> role table."""

    def test_table_covers_every_action(self):
        """Every action has an entry in the permission table."""
        assert set(ACTION_ROLES) == set(Action)

    @pytest.mark.parametrize("action", sorted(ANY_ROLE))
    def test_read_actions_allow_every_role(self, action):
        for role in UserRole:
            assert authorize(role, Action(action))

    @pytest.mark.parametrize("action", sorted(OPERATOR))
    def test_operator_actions_deny_viewer(self, action):
        assert authorize(UserRole.ADMIN, Action(action))
        assert authorize(UserRole.STAFF, Action(action))
        assert not authorize(UserRole.VIEWER, Action(action))

    @pytest.mark.parametrize("action", sorted(ADMIN_ONLY))
    def test_admin_actions_deny_staff_and_viewer(self, action):
        assert authorize(UserRole.ADMIN, Action(action))
        assert not authorize(UserRole.STAFF, Action(action))
        assert not authorize(UserRole.VIEWER, Action(action))

    def test_accepts_stored_role_strings(self):
        assert authorize("admin", Action.PUBLISH_DAY)
        assert not authorize("staff", Action.PUBLISH_DAY)

    def test_unknown_or_missing_role_is_denied(self):
        """Anything that is not a known role is denied, never allowed."""
        assert not authorize(None, Action.VIEW_DASHBOARD)
        assert not authorize("superuser", Action.VIEW_DASHBOARD)

    def test_permitted_actions_for_viewer(self):
        assert set(permitted_actions(UserRole.VIEWER)) == ANY_ROLE

    def test_permitted_actions_for_admin_is_everything(self):
        assert set(permitted_actions(UserRole.ADMIN)) == ANY_ROLE | OPERATOR | ADMIN_ONLY


class TestEnsureAuthorized:
    @pytest.mark.asyncio
    async def test_raises_forbidden_with_context(self, viewer_user):
        """Denials carry the action and role for the error response."""
        with pytest.raises(AuthorizationDeniedError) as exc_info:
            ensure_authorized(viewer_user, Action.RECORD_SALE)

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == "FORBIDDEN"
        assert exc_info.value.details == {"action": "record_sale", "role": "viewer"}

    @pytest.mark.asyncio
    async def test_passes_silently_when_permitted(self, admin_user):
        assert ensure_authorized(admin_user, Action.PUBLISH_DAY) is None


class TestResolveRole:
    """Per-request role resolution never falls back to a default role."""

    @pytest.mark.asyncio
    async def test_returns_directory_role(self, db_session: AsyncSession):
        user = await UserFactory.create(db_session, email="a@example.com", role="viewer")
        assert await resolve_role(db_session, user.id) == UserRole.VIEWER

    @pytest.mark.asyncio
    async def test_unknown_account_is_profile_missing(self, db_session: AsyncSession):
        with pytest.raises(ProfileMissingError) as exc_info:
            await resolve_role(db_session, uuid.uuid4())
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_terminated_account_is_profile_missing(self, db_session: AsyncSession):
        user = await UserFactory.create(db_session, email="gone@example.com", is_active=False)
        with pytest.raises(ProfileMissingError):
            await resolve_role(db_session, user.id)

    @pytest.mark.asyncio
    async def test_null_role_is_role_missing(self, db_session: AsyncSession):
        user = await UserFactory.create(db_session, email="norole@example.com", role=None)
        with pytest.raises(RoleMissingError) as exc_info:
            await resolve_role(db_session, user.id)
        assert exc_info.value.code == "ROLE_MISSING"

    @pytest.mark.asyncio
    async def test_unrecognized_role_is_role_missing(self, db_session: AsyncSession):
        """A stored role outside admin/staff/viewer counts as no role."""
        user = await UserFactory.create(db_session, email="odd@example.com", role="owner")
        with pytest.raises(RoleMissingError):
            await resolve_account(db_session, user.id)

    @pytest.mark.asyncio
    async def test_lookup_failure_is_not_escalated(self):
        """A failing directory query surfaces as an error, not as a role."""
        with pytest.raises(RoleLookupError) as exc_info:
            await resolve_role(FailingSession(), uuid.uuid4())
        assert exc_info.value.status_code == 503
        assert exc_info.value.code == "ROLE_LOOKUP_FAILED"

    @pytest.mark.asyncio
    async def test_role_change_seen_on_next_lookup(self, db_session: AsyncSession):
        """Lookups read the directory each time, with no cached role."""
        user = await UserFactory.create(db_session, email="promo@example.com", role="staff")
        assert await resolve_role(db_session, user.id) == UserRole.STAFF

        user.role = "admin"
        await db_session.commit()

        assert await resolve_role(db_session, user.id) == UserRole.ADMIN


class TestAllowList:
    @pytest.mark.asyncio
    async def test_listed_email_is_allowed_case_insensitively(self, db_session: AsyncSession):
        await AllowedEmailFactory.create(db_session, "barman@example.com")
        assert await is_email_allowed(db_session, "  BarMan@Example.com ")

    @pytest.mark.asyncio
    async def test_unlisted_email_is_denied(self, db_session: AsyncSession):
        assert not await is_email_allowed(db_session, "stranger@example.com")

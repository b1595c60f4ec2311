"""Interactive command for provisioning an account (use it for the first admin)."""

import asyncio
import sys
from getpass import getpass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from barstock.core.db import AsyncSessionLocal
from barstock.core.logging import get_logger
from barstock.core.security import hash_password
from barstock.core.validators import validate_email
from barstock.models.access import AllowedEmail
from barstock.models.enums import UserRole
from barstock.models.user import User

logger = get_logger(__name__)


def prompt_for_email() -> str:
    while True:
        try:
            return validate_email(input("Email address: "))
        except ValueError as exc:
            print(f"❌ {exc}")


def prompt_for_password() -> str:
    while True:
        password = getpass("Password: ")

        if len(password) < 8:
            print("❌ Password must be at least 8 characters")
            continue

        if getpass("Password (confirm): ") != password:
            print("❌ Passwords don't match")
            continue

        return password


def prompt_for_role(default: UserRole) -> UserRole:
    choices = "/".join(role.value for role in UserRole)
    while True:
        raw = input(f"Role [{choices}] ({default.value}): ").strip().lower()
        if not raw:
            return default
        try:
            return UserRole(raw)
        except ValueError:
            print(f"❌ Role must be one of {choices}")


async def provision_account(
    db: AsyncSession,
    email: str,
    password: str,
    role: UserRole,
    display_name: str | None = None,
) -> User | None:
    """Create the account and allow-list its email. Returns None if the email is taken."""
    result = await db.execute(select(User.id).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        return None

    user = User(
        email=email,
        hashed_password=hash_password(password),
        display_name=display_name or None,
        role=role.value,
        is_active=True,
    )
    db.add(user)

    allowed = await db.execute(select(AllowedEmail.id).where(AllowedEmail.email == email))
    if allowed.scalar_one_or_none() is None:
        db.add(AllowedEmail(email=email))

    await db.commit()
    logger.info("createuser.account_created", user_id=str(user.id), email=email, role=role.value)
    return user


async def create_user() -> None:
    print("\n" + "=" * 50)
    print("barstock - Create user")
    print("=" * 50 + "\n")

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(func.count()).select_from(User))
        first_account = result.scalar_one() == 0
        if first_account:
            print("No accounts yet: this one will be the bootstrap admin.\n")

        email = prompt_for_email()
        password = prompt_for_password()
        display_name = input("Display name (optional): ").strip()
        role = UserRole.ADMIN if first_account else prompt_for_role(UserRole.STAFF)

        user = await provision_account(db, email, password, role, display_name)
        if user is None:
            print(f"❌ User with email '{email}' already exists\n")
            return

        print("\n✅ User created successfully!")
        print(f"   Email: {email}")
        print(f"   Role: {role.value}")
        print(f"   ID: {user.id}\n")


if __name__ == "__main__":
    try:
        asyncio.run(create_user())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except Exception as e:
        logger.error("createuser_error", error=str(e))
        print(f"\n❌ Error: {e}\n")
        sys.exit(1)

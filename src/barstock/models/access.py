"""Access allow-list and login history models."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from barstock.core.db import Base
from barstock.utils.datetime import now_utc_naive


class AllowedEmail(Base):
    """An email address permitted to attempt login."""

    __tablename__ = "allowed_emails"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    added_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
    )

    def __repr__(self) -> str:
        return f"<AllowedEmail(email={self.email})>"


class LoginEvent(Base):
    """Immutable record of a successful login."""

    __tablename__ = "login_events"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    login_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        index=True,
    )

    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<LoginEvent(email={self.email}, login_at={self.login_at})>"

"""Pydantic schemas for account API."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barstock.core.validators import sanitize_html, validate_email
from barstock.models.enums import UserRole


class UserCreate(BaseModel):
    """Schema for provisioning a new account."""

    email: str = Field(..., min_length=5, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    display_name: str | None = Field(None, max_length=120)
    role: UserRole = Field(UserRole.STAFF, description="admin, staff or viewer")

    @field_validator("email")
    @classmethod
    def validate_and_lowercase_email(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str | None) -> str | None:
        return sanitize_html(v)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Ensure password has at least one letter and one number."""
        if not re.search(r"[a-zA-Z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        return v


class UserUpdate(BaseModel):
    """Admin edit of display name, role or active flag."""

    display_name: str | None = Field(None, max_length=120)
    role: UserRole | None = None
    is_active: bool | None = Field(None, description="true restores a terminated account")

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class UserResponse(BaseModel):
    """Schema for reading an account from the directory."""

    id: UUID
    email: str
    display_name: str | None
    role: UserRole | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CurrentUserResponse(UserResponse):
    """The signed-in account with the actions its role permits."""

    permissions: list[str] = []

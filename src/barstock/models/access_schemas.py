"""Pydantic schemas for the access allow-list and login history."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barstock.core.validators import normalize_email, validate_email


class AccessCheckRequest(BaseModel):
    """Pre-login allow-list probe."""

    email: str = Field(..., min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class AccessCheckResponse(BaseModel):
    allowed: bool


class AllowedEmailCreate(BaseModel):
    email: str = Field(..., min_length=5, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_and_lowercase_email(cls, v: str) -> str:
        return validate_email(v)


class AllowedEmailRead(BaseModel):
    id: UUID
    email: str
    added_by: UUID | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginEventRead(BaseModel):
    id: UUID
    user_id: UUID
    email: str
    login_at: datetime
    ip_address: str | None
    user_agent: str | None

    model_config = ConfigDict(from_attributes=True)

"""Pydantic schemas for user and authentication data."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from gatehouse.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from gatehouse.core.permissions.schemas import (
    AuthorizationSummaryResponse,
    AuthorizedModel,
)


# ============================================================
# Password Rules
# ============================================================

# Character classes a password must draw from, by display name
PASSWORD_CHARACTER_CLASSES: dict[str, re.Pattern[str]] = {
    "uppercase letter": re.compile(r"[A-Z]"),
    "lowercase letter": re.compile(r"[a-z]"),
    "digit": re.compile(r"[0-9]"),
    "special character": re.compile(r"[^A-Za-z0-9\s]"),
}


def missing_character_classes(password: str) -> list[str]:
    """Names of the required character classes ``password`` lacks."""
    return [
        name
        for name, pattern in PASSWORD_CHARACTER_CLASSES.items()
        if not pattern.search(password)
    ]


def validate_password_complexity(password: str) -> str:
    """Return ``password`` unchanged if it uses every required class.

    Raises:
        ValueError: Naming each missing class
    """
    missing = missing_character_classes(password)
    if not missing:
        return password
    if len(missing) == 1:
        listed = missing[0]
    else:
        listed = f"{', '.join(missing[:-1])} and {missing[-1]}"
    raise ValueError(f"Password must contain at least one {listed}")


# ============================================================
# User Schemas
# ============================================================


class UserBase(BaseModel):
    """Base schema for user data."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class UserCreate(UserBase):
    """Schema for creating a new user with password."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserUpdate(BaseModel):
    """Schema for updating user data."""

    email: EmailStr | None = None
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)


class UserResponse(AuthorizedModel):
    """Schema for user response data."""

    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Authentication Schemas
# ============================================================


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for authentication token response.

    Carries the user's authorization summary so clients can decide which
    sections to show without an extra round trip.
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")
    authorization: AuthorizationSummaryResponse


class RegisterRequest(UserCreate):
    """Schema for user registration."""


class RegisterResponse(BaseModel):
    """Schema for registration response."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    expires_in: int

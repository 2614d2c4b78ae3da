# quickslot/modules/accounts/schemas.py
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, SecretStr, StringConstraints, field_validator

USERNAME_PATTERN = r"^[a-z0-9-]+$"

UsernameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=30, pattern=USERNAME_PATTERN),
]


class RegisterRequest(BaseModel):
    email: EmailStr = Field(...)
    password: SecretStr = Field(..., description="At least 6 characters")
    username: UsernameStr = Field(
        ..., description="3-30 chars: lowercase letters, numbers and hyphens"
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: SecretStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class TokenPair(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: str | None = None
    profile_completed: bool = False


LoginResponse = TokenPair


class RefreshRequest(BaseModel):
    refresh_token: str


class UsernameAvailability(BaseModel):
    username: str
    available: bool

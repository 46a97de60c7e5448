"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from notekeeper.core.security import PASSWORD_MAX_BYTES, PASSWORD_MIN_LEN, password_too_long


class SignupRequest(BaseModel):
    """Credentials for a new account."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_BYTES,
        description="Password (6 characters to 72 bytes)",
    )

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if password_too_long(v):
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Credentials for login. Any non-empty password is checked, so short ones count as failures."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_BYTES, description="Password")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class UserPublic(BaseModel):
    """Public identity of a user (no password or lockout state)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str


class AuthResponse(BaseModel):
    """Token and identity returned by signup and login."""

    message: str
    token: str = Field(..., description="JWT bearer token, valid for 7 days")
    user: UserPublic


class LockedResponse(BaseModel):
    """Body of a 423 response for a temporarily locked account."""

    message: str
    lockUntil: datetime


class CurrentUser(BaseModel):
    """Authenticated user (id, email) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str

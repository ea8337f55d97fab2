"""
Auth Schemas.

Request/response bodies for registration, login, recovery and whoami.
Password length rules beyond basic shape are enforced by IdentityService.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for creating an account."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Case-sensitive username",
        examples=["ada"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Account password",
    )


class LoginRequest(BaseModel):
    """Schema for password login."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class RecoverRequest(BaseModel):
    """Schema for resetting a password with the recovery key."""

    username: str = Field(..., min_length=1, max_length=64)
    recovery_key: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Recovery key issued at registration",
    )
    new_password: str = Field(..., min_length=1, max_length=128)


class UserSummary(BaseModel):
    """Public view of an account."""

    id: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Returned by login, recover and whoami."""

    user: UserSummary
    encryption_key: str = Field(description="Key for client-side note encryption")


class RegisterResponse(AuthResponse):
    """Returned once, at registration."""

    recovery_key: str = Field(description="Store this safely; it is never shown again")


class LogoutResponse(BaseModel):
    logged_out: bool = True

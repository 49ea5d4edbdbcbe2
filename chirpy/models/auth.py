"""Auth request and response models with validation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TokenKind(str, Enum):
    """Discriminator carried in the ``iss`` claim of every token."""

    ACCESS = "access"
    REFRESH = "refresh"

    @property
    def issuer(self) -> str:
        return f"chirpy-{self.value}"

    @classmethod
    def from_issuer(cls, issuer: str) -> "TokenKind":
        """Map an ``iss`` claim back to its kind.

        Raises:
            ValueError: If the issuer is not one this server produces
        """
        for kind in cls:
            if kind.issuer == issuer:
                return kind
        raise ValueError(f"Unknown token issuer: {issuer}")


class UserRequest(BaseModel):
    """Credentials for registration and profile updates.

    Attributes:
        email: User's email address (unique across users)
        password: Plain-text password (1-72 chars, bcrypt input limit)
    """

    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("email")
    @classmethod
    def email_has_at_sign(cls, v: str) -> str:
        """Ensure email at least looks like an address."""
        if "@" not in v:
            raise ValueError("Email must contain '@'")
        return v

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        """Ensure password is not empty or whitespace only."""
        if not v.strip():
            raise ValueError("Password cannot be empty or whitespace only")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password cannot exceed 72 bytes")
        return v


class LoginRequest(UserRequest):
    """Login credentials.

    Attributes:
        expires_in_seconds: Optional access token lifetime. Values above the
            server default are clamped to it.
    """

    expires_in_seconds: Optional[int] = Field(default=None, ge=1)


class UserResponse(BaseModel):
    """Public user representation (no password hash)."""

    id: int
    email: str


class LoginResponse(UserResponse):
    """Successful login: user plus token pair.

    Attributes:
        token: Short-lived access token
        refresh_token: Long-lived, revocable refresh token
    """

    token: str
    refresh_token: str


class RefreshResponse(BaseModel):
    """New access token issued from a refresh token."""

    token: str

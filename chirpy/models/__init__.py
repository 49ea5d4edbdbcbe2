"""Models package exports."""

from chirpy.models.auth import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    TokenKind,
    UserRequest,
    UserResponse,
)
from chirpy.models.chirp import Chirp, ChirpRequest
from chirpy.models.user import RevokedToken, User

__all__ = [
    "Chirp",
    "ChirpRequest",
    "LoginRequest",
    "LoginResponse",
    "RefreshResponse",
    "RevokedToken",
    "TokenKind",
    "User",
    "UserRequest",
    "UserResponse",
]

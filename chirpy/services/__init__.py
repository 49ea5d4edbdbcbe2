"""Services package exports."""

from chirpy.services.auth_service import AuthService
from chirpy.services.chirp_service import ChirpService
from chirpy.services.logging_service import configure_logging, get_logger
from chirpy.services.user_service import UserService

__all__ = [
    "AuthService",
    "ChirpService",
    "UserService",
    "configure_logging",
    "get_logger",
]

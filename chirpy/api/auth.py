"""Authentication API endpoints: login, token refresh, and revocation."""

from datetime import timedelta

import structlog
from fastapi import APIRouter, Depends, Response, status

from chirpy.api.dependencies import get_bearer_token
from chirpy.exceptions import InvalidCredentials
from chirpy.models.auth import LoginRequest, LoginResponse, RefreshResponse, TokenKind
from chirpy.services.auth_service import AuthService
from chirpy.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/login")
def login(request: LoginRequest) -> LoginResponse:
    """Login with email and password.

    Args:
        request: Login credentials, optionally with a shorter access
            token lifetime

    Returns:
        LoginResponse with user info and a fresh token pair

    Raises:
        InvalidCredentials: If the email is unknown or the password is wrong
    """
    user_service = UserService()
    matched, user = user_service.verify_password(request.email, request.password)

    if not matched or user is None:
        logger.info("login_failed")
        raise InvalidCredentials()

    auth_service = AuthService()
    expires_in = None
    if request.expires_in_seconds is not None:
        # Clamp before building the timedelta; huge values overflow it
        seconds = min(
            request.expires_in_seconds,
            auth_service.settings.access_token_ttl_seconds,
        )
        expires_in = timedelta(seconds=seconds)

    access_token = auth_service.issue_token(user.id, TokenKind.ACCESS, expires_in)
    refresh_token = auth_service.issue_token(user.id, TokenKind.REFRESH)

    logger.info("user_logged_in", user_id=user.id)
    return LoginResponse(
        id=user.id,
        email=user.email,
        token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/refresh")
def refresh(token: str = Depends(get_bearer_token)) -> RefreshResponse:
    """Exchange a refresh token for a new access token.

    Raises:
        Unauthorized: If the refresh token is invalid, expired, revoked, an
            access token, or belongs to a user that no longer exists
    """
    auth_service = AuthService()
    user_id, _ = auth_service.verify_token(token, TokenKind.REFRESH)

    if UserService().get_by_id(user_id) is None:
        logger.warning("refresh_user_not_found", user_id=user_id)
        raise InvalidCredentials("User not found")

    access_token = auth_service.issue_token(user_id, TokenKind.ACCESS)
    logger.info("access_token_refreshed", user_id=user_id)
    return RefreshResponse(token=access_token)


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke(token: str = Depends(get_bearer_token)) -> Response:
    """Revoke a refresh token so it can no longer be exchanged.

    Raises:
        Unauthorized: If the token is not a currently valid refresh token
    """
    auth_service = AuthService()
    user_id, _ = auth_service.verify_token(token, TokenKind.REFRESH)
    auth_service.revoke_token(token)

    logger.info("refresh_token_revoked", user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""FastAPI dependencies for bearer token authentication."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chirpy.exceptions import Unauthorized
from chirpy.models.auth import TokenKind
from chirpy.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Extract the raw token from an ``Authorization: Bearer`` header.

    Raises:
        Unauthorized: If the header is missing or not a bearer credential
    """
    if credentials is None:
        raise Unauthorized("Missing bearer token")
    return credentials.credentials


def get_current_user_id(token: str = Depends(get_bearer_token)) -> int:
    """Verify an access token and return the user id it was issued to.

    Raises:
        InvalidSignature, TokenExpired, WrongTokenKind: If the token is not
            a valid, unexpired access token
    """
    user_id, _ = AuthService().verify_token(token, TokenKind.ACCESS)
    return user_id

"""User API endpoints: registration and profile update."""

import structlog
from fastapi import APIRouter, Depends, status

from chirpy.api.dependencies import get_current_user_id
from chirpy.exceptions import NotFound
from chirpy.models.auth import UserRequest, UserResponse
from chirpy.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(request: UserRequest) -> UserResponse:
    """Register a new user.

    Raises:
        DuplicateEmail: If the email is already registered (409)
    """
    user = UserService().create_user(request.email, request.password)
    return UserResponse(id=user.id, email=user.email)


@router.put("")
def update_user(
    request: UserRequest,
    user_id: int = Depends(get_current_user_id),
) -> UserResponse:
    """Update the authenticated user's email and password.

    Raises:
        NotFound: If the token's user no longer exists (404)
        DuplicateEmail: If another user owns the new email (409)
    """
    user = UserService().update_user(user_id, request.email, request.password)
    if user is None:
        raise NotFound("User not found")

    return UserResponse(id=user.id, email=user.email)

"""User management service."""

from typing import Optional, Tuple

import structlog

from chirpy.database import Rollback, StoreManager, get_store_manager
from chirpy.exceptions import DuplicateEmail
from chirpy.models.user import User
from chirpy.services.auth_service import AuthService

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user registration, profile updates, and credential checks."""

    def __init__(
        self,
        stores: Optional[StoreManager] = None,
        auth_service: Optional[AuthService] = None,
    ):
        self.stores = stores or get_store_manager()
        self.auth_service = auth_service or AuthService(self.stores)

    def create_user(self, email: str, password: str) -> User:
        """Create a new user with a hashed password.

        The uniqueness scan, id assignment, and save happen under one write
        lock, so concurrent registrations never share an id.

        Args:
            email: Unique email (case-sensitive exact match)
            password: Plain-text password (will be hashed)

        Returns:
            Created User model

        Raises:
            DuplicateEmail: If the email is already registered
            StorageUnavailable: If the users file cannot be read or written
        """
        password_hash = self.auth_service.hash_password(password)

        with self.stores.users.transaction() as users:
            if any(u.email == email for u in users):
                logger.info("user_create_conflict", email=email)
                raise DuplicateEmail(email)

            user = User(id=len(users) + 1, email=email, password_hash=password_hash)
            users.append(user)

        logger.info("user_created", user_id=user.id, email=email)
        return user

    def update_user(self, user_id: int, email: str, password: str) -> Optional[User]:
        """Replace a user's email and password.

        Args:
            user_id: Id of the user to update
            email: New email
            password: New plain-text password (will be hashed)

        Returns:
            Updated User model, or None if user not found

        Raises:
            DuplicateEmail: If another user already has ``email``
        """
        password_hash = self.auth_service.hash_password(password)
        updated = None

        with self.stores.users.transaction() as users:
            if any(u.email == email and u.id != user_id for u in users):
                logger.info("user_update_conflict", user_id=user_id)
                raise DuplicateEmail(email)

            for i, user in enumerate(users):
                if user.id == user_id:
                    updated = User(id=user_id, email=email, password_hash=password_hash)
                    users[i] = updated
                    break
            else:
                logger.warning("user_update_not_found", user_id=user_id)
                raise Rollback()

        if updated is None:
            return None

        logger.info("user_updated", user_id=user_id)
        return updated

    def get_by_id(self, user_id: int) -> Optional[User]:
        for user in self.stores.users.load():
            if user.id == user_id:
                return user
        return None

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self.stores.users.load():
            if user.email == email:
                return user
        return None

    def verify_password(self, email: str, password: str) -> Tuple[bool, Optional[User]]:
        """Check a login attempt.

        An unknown email still costs one bcrypt comparison, so the response
        time does not reveal whether the account exists.

        Args:
            email: Email to look up
            password: Plain-text password

        Returns:
            Tuple of (matched, user); user is None unless matched
        """
        user = self.get_by_email(email)

        if user is None:
            self.auth_service.check_dummy_password(password)
            return False, None

        if not self.auth_service.check_password(password, user.password_hash):
            return False, None

        return True, user

"""Authentication service for JWT tokens, revocation, and password hashing."""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Optional, Tuple
from uuid import uuid4

import bcrypt
import jwt
import structlog

from chirpy.config import get_settings
from chirpy.database import Rollback, StoreManager, get_store_manager
from chirpy.exceptions import (
    InvalidSignature,
    TokenExpired,
    TokenRevoked,
    WrongTokenKind,
)
from chirpy.models.auth import TokenKind
from chirpy.models.user import RevokedToken

logger = structlog.get_logger(__name__)

# Constants
JWT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["iss", "sub", "iat", "exp"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@lru_cache
def _dummy_hash(rounds: int) -> bytes:
    """Hash compared against when a login names an unknown user."""
    return bcrypt.hashpw(b"chirpy-dummy-password", bcrypt.gensalt(rounds=rounds))


class AuthService:
    """Service for password hashing and the access/refresh token lifecycle.

    Tokens are HS256 JWTs signed with ``settings.jwt_secret``. The ``iss``
    claim tells access and refresh tokens apart. Refresh tokens can be
    revoked; revoked values are kept in the revoked-token store and checked
    on every refresh token verification.

    Args:
        stores: Store manager (defaults to the process-wide one, resolved
            lazily so hashing works without storage)
        clock: Returns the current aware UTC time; injectable for tests
    """

    def __init__(
        self,
        stores: Optional[StoreManager] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.settings = get_settings()
        self._stores = stores
        self.clock = clock

    @property
    def stores(self) -> StoreManager:
        return self._stores or get_store_manager()

    # -- passwords ---------------------------------------------------------

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=self.settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def check_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash in constant time.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise (including when
            the stored hash is malformed)
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError:
            logger.warning("password_hash_malformed")
            return False

    def check_dummy_password(self, password: str) -> bool:
        """Spend the same bcrypt work as a real check, always failing."""
        bcrypt.checkpw(
            password.encode("utf-8"), _dummy_hash(self.settings.bcrypt_rounds)
        )
        return False

    # -- tokens ------------------------------------------------------------

    def token_ttl(self, kind: TokenKind) -> timedelta:
        if kind is TokenKind.ACCESS:
            return timedelta(seconds=self.settings.access_token_ttl_seconds)
        return timedelta(days=self.settings.refresh_token_ttl_days)

    def issue_token(
        self,
        user_id: int,
        kind: TokenKind,
        expires_in: Optional[timedelta] = None,
    ) -> str:
        """Create a signed token for a user.

        Args:
            user_id: User id (placed in the 'sub' claim as a string)
            kind: Access or refresh
            expires_in: Optional shorter lifetime; never extends the
                configured TTL

        Returns:
            Encoded JWT string
        """
        now = self.clock()
        ttl = self.token_ttl(kind)
        if expires_in is not None:
            ttl = min(ttl, expires_in)

        payload = {
            "iss": kind.issuer,
            "sub": str(user_id),
            "iat": now,
            "exp": now + ttl,
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, self.settings.jwt_secret, algorithm=JWT_ALGORITHM)
        logger.debug(
            "token_issued",
            user_id=user_id,
            kind=kind.value,
            expires_at=(now + ttl).isoformat(),
        )
        return token

    def verify_token(
        self, token: str, expected_kind: Optional[TokenKind] = None
    ) -> Tuple[int, TokenKind]:
        """Verify a token and return who it belongs to.

        Checks run in order: signature and claims, expiry against the
        injected clock, kind, and for refresh tokens the revocation store.

        Args:
            token: Encoded JWT string
            expected_kind: Kind the caller requires, or None to accept both

        Returns:
            Tuple of (user_id, kind)

        Raises:
            InvalidSignature: Malformed, unsigned, or tampered token
            TokenExpired: The 'exp' claim is in the past
            WrongTokenKind: The token is not of ``expected_kind``
            TokenRevoked: The refresh token has been revoked
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[JWT_ALGORITHM],
                # Time checks use self.clock below
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
            kind = TokenKind.from_issuer(payload["iss"])
            user_id = int(payload["sub"])
            expires_at = int(payload["exp"])
        except jwt.InvalidTokenError as e:
            logger.warning("token_invalid", error=str(e))
            raise InvalidSignature() from e
        except (TypeError, ValueError) as e:
            logger.warning("token_claims_invalid", error=str(e))
            raise InvalidSignature() from e

        if expires_at <= self.clock().timestamp():
            logger.info("token_expired", user_id=user_id, kind=kind.value)
            raise TokenExpired()

        if expected_kind is not None and kind is not expected_kind:
            logger.warning(
                "token_wrong_kind",
                user_id=user_id,
                kind=kind.value,
                expected=expected_kind.value,
            )
            raise WrongTokenKind(
                f"Expected {expected_kind.value} token, got {kind.value} token"
            )

        if kind is TokenKind.REFRESH and self.is_revoked(token):
            logger.warning("token_revoked_reuse", user_id=user_id)
            raise TokenRevoked()

        return user_id, kind

    def is_revoked(self, token: str) -> bool:
        """Return True if the raw token value is in the revocation store."""
        return any(r.token_id == token for r in self.stores.revoked_tokens.load())

    def revoke_token(self, token: str) -> RevokedToken:
        """Record a token as revoked.

        Revoking an already revoked token returns the existing record.

        Args:
            token: Raw token string

        Returns:
            The revocation record
        """
        existing = None
        with self.stores.revoked_tokens.transaction() as revoked:
            for record in revoked:
                if record.token_id == token:
                    existing = record
                    raise Rollback()
            record = RevokedToken(token_id=token, revoked_at=self.clock())
            revoked.append(record)

        if existing is not None:
            return existing

        logger.info("token_revoked", revoked_at=record.revoked_at.isoformat())
        return record

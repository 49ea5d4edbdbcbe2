"""User and revoked token models as persisted in the flat-file stores."""

from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    """A registered user.

    The password hash is stored alongside the record but never returned to
    clients; see ``UserResponse`` for the public shape.
    """

    id: int
    email: str
    password_hash: str


class RevokedToken(BaseModel):
    """A refresh token that is no longer accepted."""

    token_id: str
    revoked_at: datetime

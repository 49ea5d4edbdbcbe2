"""Domain error taxonomy shared by the services and the HTTP boundary.

Every error carries the HTTP status the boundary answers with and a short,
user-safe message. Internal details (file paths, stack traces) are logged
where the error is raised and never placed in the message.
"""

from typing import Optional


class ChirpyError(Exception):
    """Base class for all domain errors.

    Attributes:
        status_code: HTTP status the boundary maps this error to
        error: Short error category shown to clients
        message: User-facing explanation
    """

    status_code: int = 500
    error: str = "Internal error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# Conflict


class Conflict(ChirpyError):
    status_code = 409
    error = "Conflict"
    default_message = "Resource already exists"


class DuplicateEmail(Conflict):
    """Raised when an email is already registered to another user."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User {email} already exists")


# Validation


class ValidationFailed(ChirpyError):
    status_code = 400
    error = "Validation error"
    default_message = "Request validation failed"


class ChirpTooLong(ValidationFailed):
    """Raised when a chirp body exceeds the maximum length."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Chirp is too long ({length} > {max_length} characters)")


# Not found


class NotFound(ChirpyError):
    status_code = 404
    error = "Not found"
    default_message = "Resource not found"


# Unauthorized


class Unauthorized(ChirpyError):
    status_code = 401
    error = "Unauthorized"
    default_message = "Not authenticated"


class InvalidCredentials(Unauthorized):
    default_message = "Incorrect email or password"


class InvalidSignature(Unauthorized):
    default_message = "Invalid token"


class TokenExpired(Unauthorized):
    default_message = "Token has expired"


class WrongTokenKind(Unauthorized):
    default_message = "Wrong token type for this endpoint"


class TokenRevoked(Unauthorized):
    default_message = "Token has been revoked"


# Storage


class StorageUnavailable(ChirpyError):
    """Raised when a backing file cannot be read, parsed, or written."""

    status_code = 503
    error = "Storage unavailable"
    default_message = "Storage is temporarily unavailable"

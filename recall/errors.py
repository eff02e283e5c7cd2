"""Error taxonomy shared by services and routes.

Every failure a command can report derives from ``RecallError``; the API
layer renders all of them as ``{"success": false, "message": ...}``.
"""
from __future__ import annotations


class RecallError(Exception):
    code = "ERROR"
    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# ---- validation ----

class ValidationError(RecallError, ValueError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "invalid input"


class EmptyField(ValidationError):
    code = "EMPTY_FIELD"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} cannot be empty")


class InvalidEnum(ValidationError):
    code = "INVALID_ENUM"

    def __init__(self, field: str, allowed: tuple[str, ...]):
        self.field = field
        self.allowed = allowed
        super().__init__(f"Invalid {field}. Must be one of: {', '.join(allowed)}")


class InvalidTimeRange(ValidationError):
    code = "INVALID_TIME_RANGE"
    default_message = "End time must be after start time"


class FileTooLarge(ValidationError):
    code = "FILE_TOO_LARGE"
    default_message = "File size exceeds maximum of 5MB"


class InvalidFileData(ValidationError):
    code = "INVALID_FILE_DATA"
    default_message = "File data is not valid base64"


class InvalidEmail(ValidationError):
    code = "INVALID_EMAIL"
    default_message = "Invalid email format"


class DuplicateEmail(ValidationError):
    code = "DUPLICATE_EMAIL"
    status_code = 409
    default_message = "User with this email already exists"


# ---- authentication ----

class AuthError(RecallError):
    code = "AUTH_ERROR"
    status_code = 401
    default_message = "authentication failed"


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class InvalidOrExpiredToken(AuthError):
    code = "INVALID_OR_EXPIRED_TOKEN"
    default_message = "Invalid or expired token"


class IncorrectPassword(AuthError):
    code = "INCORRECT_PASSWORD"
    default_message = "Current password is incorrect"


# ---- ownership / storage ----

class NotFoundOrForbidden(RecallError):
    """Raised both for missing rows and rows owned by another account."""

    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"


class IdentifierExhausted(RecallError):
    code = "IDENTIFIER_EXHAUSTED"
    status_code = 500
    default_message = "Could not allocate a unique identifier"


class StoreUnavailable(RecallError):
    code = "STORE_UNAVAILABLE"
    status_code = 503
    default_message = "Database unavailable"

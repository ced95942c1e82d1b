"""Custom domain exceptions for the application.

Every domain error carries an ``ErrorKind`` and a message key. The HTTP status
for each kind lives in ``STATUS_BY_KIND``; the message key is resolved to text
only at the HTTP boundary.
"""

from enum import Enum


class ErrorKind(str, Enum):
    AUTHENTICATION_FAILURE = "AUTHENTICATION_FAILURE"
    FORBIDDEN_INACTIVE = "FORBIDDEN_INACTIVE"
    FORBIDDEN_RESET_TOKEN = "FORBIDDEN_RESET_TOKEN"
    FORBIDDEN_OWNERSHIP = "FORBIDDEN_OWNERSHIP"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ACTIVATION_FAILURE = "ACTIVATION_FAILURE"
    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    EMAIL_DELIVERY_FAILURE = "EMAIL_DELIVERY_FAILURE"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.AUTHENTICATION_FAILURE: 401,
    ErrorKind.FORBIDDEN_INACTIVE: 403,
    ErrorKind.FORBIDDEN_RESET_TOKEN: 403,
    ErrorKind.FORBIDDEN_OWNERSHIP: 403,
    ErrorKind.INVALID_TOKEN: 403,
    ErrorKind.TOKEN_EXPIRED: 403,
    ErrorKind.EMAIL_NOT_FOUND: 404,
    ErrorKind.USER_NOT_FOUND: 404,
    ErrorKind.ACTIVATION_FAILURE: 400,
    ErrorKind.VALIDATION_FAILURE: 400,
    ErrorKind.EMAIL_DELIVERY_FAILURE: 502,
}


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    kind: ErrorKind
    message_key: str

    def __init__(self, message_key: str | None = None):
        if message_key is not None:
            self.message_key = message_key
        super().__init__(self.message_key)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class AuthenticationFailure(DomainError):
    """Raised when credentials are missing or do not match."""

    kind = ErrorKind.AUTHENTICATION_FAILURE
    message_key = "authentication_failure"


class ForbiddenInactive(DomainError):
    """Raised when correct credentials belong to an account that is not active yet."""

    kind = ErrorKind.FORBIDDEN_INACTIVE
    message_key = "inactive_authentication_failure"


class ForbiddenResetToken(DomainError):
    """Raised when no user holds the presented password reset token."""

    kind = ErrorKind.FORBIDDEN_RESET_TOKEN
    message_key = "unauthorized_password_reset"


class ForbiddenOwnership(DomainError):
    """Raised when the caller is not the owner of the account they act on."""

    kind = ErrorKind.FORBIDDEN_OWNERSHIP
    message_key = "unauthorized_user_update"


class InvalidTokenError(DomainError):
    """Raised when a bearer token is unknown."""

    kind = ErrorKind.INVALID_TOKEN
    message_key = "authentication_failure"


class TokenExpiredError(DomainError):
    """Raised when a bearer token has not been used within the expiry window."""

    kind = ErrorKind.TOKEN_EXPIRED
    message_key = "authentication_failure"


class EmailNotFoundError(DomainError):
    """Raised when no user has the requested email."""

    kind = ErrorKind.EMAIL_NOT_FOUND
    message_key = "email_not_inuse"


class UserNotFoundError(DomainError):
    """Raised when no active user has the requested ID."""

    kind = ErrorKind.USER_NOT_FOUND
    message_key = "user_not_found"


class ActivationFailure(DomainError):
    """Raised when no pending account holds the activation token."""

    kind = ErrorKind.ACTIVATION_FAILURE
    message_key = "account_activation_failure"


class EmailDeliveryError(DomainError):
    """Raised when the mail transport is unconfigured or rejects a message."""

    kind = ErrorKind.EMAIL_DELIVERY_FAILURE
    message_key = "email_failure"


class ValidationFailure(DomainError):
    """Raised when one or more input fields break a rule (e.g. short password, e-mail in use)."""

    kind = ErrorKind.VALIDATION_FAILURE
    message_key = "validation_failure"

    def __init__(self, errors: dict[str, str], message_key: str | None = None):
        self.errors = errors
        super().__init__(message_key)

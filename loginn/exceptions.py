"""Loginn exceptions.

All exceptions inherit from LoginnError for easy catching. Every error carries
a machine readable ``code`` and a ``kind`` naming its class in the error
taxonomy exposed by the request surface.
"""

from __future__ import annotations


class LoginnError(Exception):
    """Base exception for Loginn errors."""

    kind = "Error"

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


# ==================== Request Errors ====================


class InvalidRequestError(LoginnError):
    """Raised when a request field is missing or malformed."""

    kind = "InvalidRequest"

    def __init__(self, message: str, code: str = "INVALID_REQUEST"):
        super().__init__(message=message, code=code)


class InvalidEmailError(InvalidRequestError):
    """Raised when an email address fails the format check."""

    kind = "InvalidEmail"

    def __init__(self, email: str, reason: str = "Invalid email address"):
        super().__init__(message=f"{reason}: '{email}'", code="INVALID_EMAIL")
        self.email = email


# ==================== Account Errors ====================


class NotFoundError(LoginnError):
    """Raised when no registration matches the request."""

    kind = "NotFound"

    def __init__(self, message: str = "No matching registration found"):
        super().__init__(message=message, code="NOT_FOUND")


class AmbiguousAccountError(LoginnError):
    """Raised when an identifier matches several registrations."""

    kind = "AmbiguousAccount"

    def __init__(self, identifier: str, services: list[str] | None = None):
        super().__init__(
            message=f"'{identifier}' is registered for several services; a service is required",
            code="AMBIGUOUS_ACCOUNT",
        )
        self.identifier = identifier
        self.services = services or []


class ConflictError(LoginnError):
    """Raised when a registration violates username uniqueness."""

    kind = "Conflict"

    def __init__(self, username: str, service: str | None = None):
        if service:
            message = f"User '{username}' is already registered for '{service}'"
        else:
            message = f"Username '{username}' is already taken"
        super().__init__(message=message, code="CONFLICT")
        self.username = username
        self.service = service


# ==================== Authentication Errors ====================


class InvalidCredentialsError(LoginnError):
    """Raised when a password does not match."""

    kind = "InvalidCredentials"

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message=message, code="INVALID_CREDENTIALS")


class AccountNotVerifiedError(LoginnError):
    """Raised when a registration has not completed email verification."""

    kind = "AccountNotVerified"

    def __init__(self, username: str, service: str):
        super().__init__(
            message=f"User '{username}' has not verified their email for '{service}'",
            code="ACCOUNT_NOT_VERIFIED",
        )
        self.username = username
        self.service = service


class UnauthorizedError(LoginnError):
    """Raised when a session token does not match the bound identity or has expired."""

    kind = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, code="UNAUTHORIZED")


# ==================== Token Errors ====================


class TokenNotFoundError(LoginnError):
    """Raised when no registration carries the supplied single-use token."""

    kind = "TokenNotFound"

    def __init__(self, message: str = "No matching token found"):
        super().__init__(message=message, code="TOKEN_NOT_FOUND")


class InvalidTokenError(LoginnError):
    """Raised when a single-use token is present but can no longer be used."""

    kind = "InvalidToken"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, code="INVALID_TOKEN")


class MalformedTokenError(LoginnError):
    """Raised when a session token cannot be parsed or lacks required claims."""

    kind = "MalformedToken"

    def __init__(self, message: str = "Failed to parse token"):
        super().__init__(message=message, code="MALFORMED_TOKEN")


# ==================== Identity Errors ====================


class IdentityNotFoundError(LoginnError):
    """Raised when the federation provider has no identity for a login key."""

    kind = "IdentityNotFound"

    def __init__(self, login_key: str):
        super().__init__(
            message=f"No identity bound to '{login_key}'",
            code="IDENTITY_NOT_FOUND",
        )
        self.login_key = login_key


# ==================== Upstream Errors ====================


class UpstreamUnavailableError(LoginnError):
    """Raised when the store, federation provider or mailer fails.

    These errors are retryable by the caller.
    """

    kind = "UpstreamUnavailable"
    retryable = True

    def __init__(self, message: str, operation: str):
        super().__init__(message=message, code="UPSTREAM_UNAVAILABLE")
        self.operation = operation


class ConditionFailedError(LoginnError):
    """Raised by a credential store when a conditional update's expectation fails."""

    kind = "ConditionFailed"

    def __init__(self, service: str, username: str):
        super().__init__(
            message=f"Conditional update failed for '{username}' on '{service}'",
            code="CONDITION_FAILED",
        )
        self.service = service
        self.username = username

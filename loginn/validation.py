"""Request field validation.

Everything here runs before any collaborator is called.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from email_validator import EmailNotValidError, validate_email

from loginn.exceptions import InvalidEmailError, InvalidRequestError
from loginn.passwords import MAX_PASSWORD_BYTES

# Service names with this prefix are reserved for the store's own items
RESERVED_SERVICE_PREFIX = "#"


def require(fields: Mapping[str, Any], *names: str) -> None:
    """Raise InvalidRequestError for the first missing or empty field."""
    for name in names:
        value = fields.get(name)
        if value is None or (isinstance(value, str) and not value):
            raise InvalidRequestError(f"Missing {name} parameter in request")
        if not isinstance(value, str):
            raise InvalidRequestError(f"Parameter {name} must be a string")


def require_identifier(username: Optional[str], email: Optional[str]) -> None:
    if not username and not email:
        raise InvalidRequestError("Missing username/email parameter in request")


def check_password(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidRequestError(
            f"Password must not exceed {MAX_PASSWORD_BYTES} bytes",
            code="INVALID_PASSWORD",
        )


def normalize_email(email: str) -> str:
    """Validate an address's format and return its normalized form.

    No DNS deliverability lookup is performed.

    Raises:
        InvalidEmailError: If the address is malformed
    """
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidEmailError(email, str(e)) from e
    return result.normalized


def lookup_email(email: str) -> str:
    """Return the stored form of ``email`` for lookups.

    Malformed addresses are only stripped; they cannot match a stored row.
    """
    try:
        return validate_email(email.strip(), check_deliverability=False).normalized
    except EmailNotValidError:
        return email.strip()


def check_service(service: str) -> None:
    """Reject service names reserved for the store's bookkeeping items."""
    if service.startswith(RESERVED_SERVICE_PREFIX):
        raise InvalidRequestError(
            f"Service name must not start with {RESERVED_SERVICE_PREFIX!r}",
            code="INVALID_SERVICE",
        )

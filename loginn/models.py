"""Credential lifecycle models - store-agnostic data structures."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


class RegistrationState(str, Enum):
    """Lifecycle state of a registration."""

    PENDING_VERIFICATION = "pending_verification"
    ACTIVE = "active"


class TokenKind(str, Enum):
    """Kinds of single-use token a registration can carry."""

    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"

    @property
    def field(self) -> str:
        """Registration attribute holding a token of this kind."""
        return f"{self.value}_token"

    @property
    def expiry_field(self) -> str:
        """Registration attribute holding the token's expiry (unix seconds)."""
        return f"{self.value}_token_expires_at"


@dataclass
class Registration:
    """One (service, username) credential record."""

    service: str
    username: str
    email: str
    password_hash: str
    state: RegistrationState = RegistrationState.PENDING_VERIFICATION
    verification_token: Optional[str] = None
    verification_token_expires_at: Optional[int] = None
    password_reset_token: Optional[str] = None
    password_reset_token_expires_at: Optional[int] = None
    identity_id: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.service, self.username)

    @property
    def is_active(self) -> bool:
        return self.state == RegistrationState.ACTIVE

    def token_for(self, kind: TokenKind) -> Optional[str]:
        return getattr(self, kind.field)

    def token_expiry_for(self, kind: TokenKind) -> Optional[int]:
        return getattr(self, kind.expiry_field)


@dataclass
class SingleUseToken:
    """A random opaque token valid for exactly one successful consumption."""

    value: str
    kind: TokenKind
    expires_at: Optional[int] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now


@dataclass
class IdentityBinding:
    """Federation identity bound to an account, with a fresh bearer token."""

    identity_id: str
    session_token: str


@dataclass
class SessionClaims:
    """Claims extracted from a bearer session token."""

    sub: str  # Federation identity id
    exp: int  # Unix seconds
    iat: Optional[int] = None
    raw_claims: dict[str, Any] | None = None


# ==================== Workflow Results ====================


@dataclass
class RegistrationResult:
    username: str
    email: str
    service: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class VerificationResult:
    """Where to redirect the user after verifying their email."""

    location: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SessionResult:
    """Result of a successful authentication or refresh."""

    username: str
    service: str
    session_token: str
    identity_id: str = field(repr=False, default="")

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "service": self.service,
            "session_token": self.session_token,
        }


@dataclass
class ValidationResult:
    username: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AccountResult:
    """Result of password reset and deletion workflows."""

    username: str
    service: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

"""Loginn - credential and token lifecycle service.

Loginn registers users per service, verifies their email addresses, checks
passwords and hands out federation session tokens backed by one identity per
account.

Features:
- Registration with email verification links
- Password authentication by username or email
- Session token validation and refresh
- Two-phase password reset
- Account deletion with identity revocation
"""

from loginn.config import Settings
from loginn.core.credential_store import CredentialStore
from loginn.core.factory import LoginnFactory, create_factory
from loginn.core.identity_federation import IdentityFederation
from loginn.core.notification_sender import NotificationSender
from loginn.core.session_verifier import SessionTokenVerifier
from loginn.factories import AwsFactory, MockFactory
from loginn.identity_providers import CognitoIdentityFederation, MockIdentityFederation
from loginn.notifiers import MockNotificationSender, SesNotificationSender
from loginn.service import CredentialService
from loginn.stores import DynamoDBCredentialStore, MockCredentialStore
from loginn.token_verifiers import CognitoSessionVerifier, MockSessionVerifier
from loginn.exceptions import (
    AccountNotVerifiedError,
    AmbiguousAccountError,
    ConditionFailedError,
    ConflictError,
    IdentityNotFoundError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidRequestError,
    InvalidTokenError,
    LoginnError,
    MalformedTokenError,
    NotFoundError,
    TokenNotFoundError,
    UnauthorizedError,
    UpstreamUnavailableError,
)
from loginn.models import (
    AccountResult,
    IdentityBinding,
    Registration,
    RegistrationResult,
    RegistrationState,
    SessionClaims,
    SessionResult,
    SingleUseToken,
    TokenKind,
    ValidationResult,
    VerificationResult,
)

__version__ = "0.1.0"

__all__ = [
    # Service
    "CredentialService",
    "Settings",
    # Core interfaces
    "CredentialStore",
    "IdentityFederation",
    "NotificationSender",
    "SessionTokenVerifier",
    # Factory (recommended entry point)
    "create_factory",
    "LoginnFactory",
    "AwsFactory",
    "MockFactory",
    # Models
    "AccountResult",
    "IdentityBinding",
    "Registration",
    "RegistrationResult",
    "RegistrationState",
    "SessionClaims",
    "SessionResult",
    "SingleUseToken",
    "TokenKind",
    "ValidationResult",
    "VerificationResult",
    # Exceptions - Base
    "LoginnError",
    # Exceptions - Request
    "InvalidRequestError",
    "InvalidEmailError",
    # Exceptions - Account
    "NotFoundError",
    "AmbiguousAccountError",
    "ConflictError",
    "InvalidCredentialsError",
    "AccountNotVerifiedError",
    "UnauthorizedError",
    # Exceptions - Token
    "TokenNotFoundError",
    "InvalidTokenError",
    "MalformedTokenError",
    "IdentityNotFoundError",
    # Exceptions - Upstream
    "UpstreamUnavailableError",
    "ConditionFailedError",
    # Stores
    "DynamoDBCredentialStore",
    "MockCredentialStore",
    # Identity federation
    "CognitoIdentityFederation",
    "MockIdentityFederation",
    # Notifiers
    "SesNotificationSender",
    "MockNotificationSender",
    # Session verifiers
    "CognitoSessionVerifier",
    "MockSessionVerifier",
]

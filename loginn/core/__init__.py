"""Core abstractions for the Loginn credential service."""

from loginn.core.credential_store import CredentialStore
from loginn.core.factory import LoginnFactory, create_factory
from loginn.core.identity_federation import IdentityFederation
from loginn.core.notification_sender import NotificationSender
from loginn.core.session_verifier import SessionTokenVerifier

__all__ = [
    "CredentialStore",
    "IdentityFederation",
    "NotificationSender",
    "SessionTokenVerifier",
    "LoginnFactory",
    "create_factory",
]

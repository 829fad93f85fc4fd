"""Credential service facade over the lifecycle workflows."""

from __future__ import annotations

import time
from typing import Callable, Optional

from loginn.core.credential_store import CredentialStore
from loginn.core.identity_federation import IdentityFederation
from loginn.core.notification_sender import NotificationSender
from loginn.core.session_verifier import SessionTokenVerifier
from loginn.identity import IdentityBindingManager
from loginn.models import (
    AccountResult,
    RegistrationResult,
    SessionResult,
    ValidationResult,
    VerificationResult,
)
from loginn.passwords import PasswordHasher
from loginn.tokens import TokenEngine
from loginn.workflows import (
    AuthenticationWorkflow,
    DeletionWorkflow,
    PasswordResetWorkflow,
    RegistrationWorkflow,
    SessionWorkflow,
    VerificationWorkflow,
)


class CredentialService:
    """Registration, authentication and session lifecycle for many services.

    The service owns no global state: every collaborator is passed in and
    lives as long as the service does. Build one through a factory:

        >>> from loginn import create_factory
        >>> service = create_factory("mock").create_service()
        >>> await service.register("alice", "s3cret!", "alice@x.com", "svcA")

    Args:
        store: Credential store for registrations
        federation: Federation provider issuing session tokens
        notifier: Outbound email sender
        session_verifier: Decoder for federation session tokens
        hasher: Password hasher
        verify_url: Base URL of the email verification link
        reset_url: Base URL of the password reset link
        verification_ttl: Verification token lifetime in seconds
        password_reset_ttl: Reset token lifetime in seconds
        clock: Source of unix time
    """

    def __init__(
        self,
        store: CredentialStore,
        federation: IdentityFederation,
        notifier: NotificationSender,
        session_verifier: SessionTokenVerifier,
        hasher: PasswordHasher,
        verify_url: str,
        reset_url: str,
        verification_ttl: Optional[int] = 86400,
        password_reset_ttl: Optional[int] = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.notifier = notifier
        tokens = TokenEngine(
            store,
            session_verifier,
            verification_ttl=verification_ttl,
            password_reset_ttl=password_reset_ttl,
            clock=clock,
        )
        identities = IdentityBindingManager(store, federation)

        self._registration = RegistrationWorkflow(store, tokens, notifier, hasher, verify_url)
        self._verification = VerificationWorkflow(store, tokens, identities)
        self._authentication = AuthenticationWorkflow(store, hasher, identities)
        self._sessions = SessionWorkflow(store, tokens, identities, clock=clock)
        self._password_reset = PasswordResetWorkflow(store, tokens, notifier, hasher, reset_url)
        self._deletion = DeletionWorkflow(store, hasher, identities)

    async def register(self, username: str, password: str, email: str, service: str) -> RegistrationResult:
        return await self._registration.register(username, password, email, service)

    async def verify(self, username: str, token: str) -> VerificationResult:
        return await self._verification.verify(username, token)

    async def authenticate(
        self,
        password: str,
        service: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> SessionResult:
        return await self._authentication.authenticate(
            password, service=service, username=username, email=email
        )

    async def validate(self, username: str, service: str, token: str) -> ValidationResult:
        return await self._sessions.validate(username, service, token)

    async def refresh(self, username: str, service: str, token: str) -> SessionResult:
        return await self._sessions.refresh(username, service, token)

    async def request_password_reset(self, username: str, service: str) -> AccountResult:
        return await self._password_reset.request_reset(username, service)

    async def change_password(self, username: str, password: str, token: str) -> AccountResult:
        return await self._password_reset.change_password(username, password, token)

    async def delete(
        self,
        password: str,
        service: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> AccountResult:
        return await self._deletion.delete(
            password, service=service, username=username, email=email
        )

"""Registration workflow: create a pending registration and email its verification link."""

from __future__ import annotations

import structlog

from loginn.core.credential_store import CredentialStore
from loginn.core.notification_sender import NotificationSender
from loginn.models import Registration, RegistrationResult, RegistrationState, TokenKind
from loginn.passwords import PasswordHasher
from loginn.templates import get_verification_email
from loginn.tokens import TokenEngine
from loginn.validation import check_password, check_service, normalize_email, require

log = structlog.get_logger()


class RegistrationWorkflow:
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenEngine,
        notifier: NotificationSender,
        hasher: PasswordHasher,
        verify_url: str,
    ):
        self._store = store
        self._tokens = tokens
        self._notifier = notifier
        self._hasher = hasher
        self._verify_url = verify_url

    async def register(
        self,
        username: str,
        password: str,
        email: str,
        service: str,
    ) -> RegistrationResult:
        """Register ``username`` for ``service``.

        The registration is persisted before the verification email is sent.
        If sending fails the row stays in ``pending_verification`` and the
        error is reported to the caller.

        Raises:
            InvalidRequestError: On a missing field, a reserved service name
                or an over-long password
            InvalidEmailError: On a malformed email address
            ConflictError: If the username is registered for this service, or
                owned by a different email address
            UpstreamUnavailableError: If the store or mailer fails
        """
        require(
            {"username": username, "password": password, "email": email, "service": service},
            "username",
            "password",
            "email",
            "service",
        )
        check_service(service)
        check_password(password)
        email = normalize_email(email)

        registration = Registration(
            service=service,
            username=username,
            email=email,
            password_hash=self._hasher.hash(password),
            state=RegistrationState.PENDING_VERIFICATION,
        )
        token = self._tokens.stamp(registration, TokenKind.VERIFICATION)
        await self._store.put_if_absent(registration)
        log.info("registration_created", username=username, service=service)

        subject, body = get_verification_email(username, service, token.value, self._verify_url)
        await self._notifier.send(email, subject, body)
        log.info("verification_email_sent", username=username, service=service)

        return RegistrationResult(username=username, email=email, service=service)

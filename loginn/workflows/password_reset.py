"""Password reset workflow.

Phase one binds a reset token to one registration and emails it. Phase two
consumes the token and stores the new password hash in the same conditional
write; the service is taken from whichever registration held the token.
"""

from __future__ import annotations

import structlog

from loginn.core.credential_store import CredentialStore
from loginn.core.notification_sender import NotificationSender
from loginn.exceptions import NotFoundError
from loginn.models import AccountResult, TokenKind
from loginn.passwords import PasswordHasher
from loginn.templates import get_password_reset_email
from loginn.tokens import TokenEngine
from loginn.validation import check_password, require

log = structlog.get_logger()


class PasswordResetWorkflow:
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenEngine,
        notifier: NotificationSender,
        hasher: PasswordHasher,
        reset_url: str,
    ):
        self._store = store
        self._tokens = tokens
        self._notifier = notifier
        self._hasher = hasher
        self._reset_url = reset_url

    async def request_reset(self, username: str, service: str) -> AccountResult:
        """Email a password reset link for the (service, username) registration.

        Raises:
            NotFoundError: If the registration does not exist
            AccountNotVerifiedError: If its email is not verified yet
            UpstreamUnavailableError: If the store or mailer fails
        """
        require({"username": username, "service": service}, "username", "service")

        registration = await self._store.get_by_key(service, username)
        if registration is None:
            raise NotFoundError(f"No user registered for {service}")

        token = self._tokens.issue(TokenKind.PASSWORD_RESET)
        registration = await self._tokens.bind(registration, TokenKind.PASSWORD_RESET, token)

        subject, body = get_password_reset_email(username, service, token.value, self._reset_url)
        await self._notifier.send(registration.email, subject, body)
        log.info("password_reset_requested", username=username, service=service)

        return AccountResult(username=username, service=service)

    async def change_password(self, username: str, password: str, token: str) -> AccountResult:
        """Replace the password of the registration holding ``token``.

        Raises:
            TokenNotFoundError: If no registration of ``username`` holds the token
            InvalidTokenError: If the token has expired
        """
        require(
            {"username": username, "password": password, "token": token},
            "username",
            "password",
            "token",
        )
        check_password(password)

        registration = await self._tokens.consume(
            TokenKind.PASSWORD_RESET,
            token,
            username=username,
            set_fields={"password_hash": self._hasher.hash(password)},
        )
        log.info("password_changed", username=username, service=registration.service)
        return AccountResult(username=username, service=registration.service)

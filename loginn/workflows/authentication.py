"""Authentication workflow: check a password and issue a session token."""

from __future__ import annotations

from typing import Optional

import structlog

from loginn.accounts import resolve_registration
from loginn.core.credential_store import CredentialStore
from loginn.exceptions import AccountNotVerifiedError, InvalidCredentialsError
from loginn.identity import IdentityBindingManager
from loginn.models import SessionResult
from loginn.passwords import PasswordHasher
from loginn.validation import require, require_identifier

log = structlog.get_logger()


class AuthenticationWorkflow:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        identities: IdentityBindingManager,
    ):
        self._store = store
        self._hasher = hasher
        self._identities = identities

    async def authenticate(
        self,
        password: str,
        service: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> SessionResult:
        """Authenticate by username (or email) and password.

        Raises:
            NotFoundError: If no registration matches
            AmbiguousAccountError: If several match and no service is given
            InvalidCredentialsError: On a wrong password
            AccountNotVerifiedError: If the registration is not verified yet
        """
        require_identifier(username, email)
        require({"password": password}, "password")

        registration = await resolve_registration(
            self._store, username=username, email=email, service=service
        )
        if not self._hasher.verify(password, registration.password_hash):
            log.info("authentication_failed", service=registration.service)
            raise InvalidCredentialsError()
        if not registration.is_active:
            raise AccountNotVerifiedError(registration.username, registration.service)

        binding = await self._identities.ensure_identity(registration.username)
        log.info(
            "user_authenticated",
            username=registration.username,
            service=registration.service,
        )
        return SessionResult(
            username=registration.username,
            service=registration.service,
            session_token=binding.session_token,
            identity_id=binding.identity_id,
        )

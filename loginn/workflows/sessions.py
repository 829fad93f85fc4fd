"""Session workflow: validate and refresh federation session tokens."""

from __future__ import annotations

import time
from typing import Callable

import structlog

from loginn.accounts import resolve_registration
from loginn.core.credential_store import CredentialStore
from loginn.exceptions import IdentityNotFoundError, NotFoundError, UnauthorizedError
from loginn.identity import IdentityBindingManager
from loginn.models import Registration, SessionResult, ValidationResult
from loginn.tokens import TokenEngine
from loginn.validation import require

log = structlog.get_logger()


class SessionWorkflow:
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenEngine,
        identities: IdentityBindingManager,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._tokens = tokens
        self._identities = identities
        self._clock = clock

    async def _check(self, username: str, service: str, session_token: str) -> Registration:
        require(
            {"username": username, "service": service, "token": session_token},
            "username",
            "service",
            "token",
        )
        try:
            registration = await resolve_registration(self._store, username=username, service=service)
        except NotFoundError as e:
            raise UnauthorizedError(f"User not registered for {service}") from e

        claims = self._tokens.decode_session(session_token)

        try:
            identity_id = await self._identities.lookup_identity(username)
        except IdentityNotFoundError as e:
            log.info("session_identity_missing", username=username, service=service)
            raise UnauthorizedError("User identity/token mismatch") from e

        if identity_id != claims.sub:
            log.warning("session_identity_mismatch", username=username, service=service)
            raise UnauthorizedError("User identity/token mismatch")
        if claims.exp <= self._clock():
            raise UnauthorizedError("Token has expired")
        return registration

    async def validate(self, username: str, service: str, session_token: str) -> ValidationResult:
        """Check that ``session_token`` belongs to the account and has not expired.

        Raises:
            MalformedTokenError: If the token lacks subject or expiry
            UnauthorizedError: On identity mismatch, expiry, or a missing registration
        """
        await self._check(username, service, session_token)
        return ValidationResult(username=username)

    async def refresh(self, username: str, service: str, session_token: str) -> SessionResult:
        """Validate ``session_token`` and mint a fresh one."""
        registration = await self._check(username, service, session_token)
        binding = await self._identities.ensure_identity(username)
        log.info("session_refreshed", username=username, service=registration.service)
        return SessionResult(
            username=username,
            service=registration.service,
            session_token=binding.session_token,
            identity_id=binding.identity_id,
        )

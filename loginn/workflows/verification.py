"""Verification workflow: consume a verification token and activate the registration."""

from __future__ import annotations

import structlog

from loginn.core.credential_store import CredentialStore
from loginn.exceptions import ConditionFailedError, NotFoundError
from loginn.identity import IdentityBindingManager
from loginn.models import RegistrationState, TokenKind, VerificationResult
from loginn.tokens import TokenEngine
from loginn.validation import require

log = structlog.get_logger()


class VerificationWorkflow:
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenEngine,
        identities: IdentityBindingManager,
    ):
        self._store = store
        self._tokens = tokens
        self._identities = identities

    async def verify(self, username: str, token: str) -> VerificationResult:
        """Activate the registration holding ``token`` and bind the account identity.

        Returns:
            VerificationResult naming the service to redirect to

        Raises:
            TokenNotFoundError: If no registration of ``username`` holds the token
            InvalidTokenError: If the token has expired
            UpstreamUnavailableError: If the store or federation provider fails
        """
        require({"username": username, "token": token}, "username", "token")

        registration = await self._tokens.consume(
            TokenKind.VERIFICATION,
            token,
            username=username,
            set_fields={"state": RegistrationState.ACTIVE},
        )
        binding = await self._identities.ensure_identity(username)

        if registration.identity_id != binding.identity_id:
            try:
                await self._store.conditional_update(
                    registration.service,
                    username,
                    expected={},
                    set_fields={"identity_id": binding.identity_id},
                )
            except ConditionFailedError as e:
                raise NotFoundError(f"No user registered for {registration.service}") from e

        log.info("registration_verified", username=username, service=registration.service)
        return VerificationResult(location=registration.service)

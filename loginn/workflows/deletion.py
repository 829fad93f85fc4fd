"""Deletion workflow: remove one registration and revoke the identity once unused."""

from __future__ import annotations

from typing import Optional

import structlog

from loginn.accounts import resolve_registration
from loginn.core.credential_store import CredentialStore
from loginn.exceptions import InvalidCredentialsError, NotFoundError
from loginn.identity import IdentityBindingManager
from loginn.models import AccountResult
from loginn.passwords import PasswordHasher
from loginn.validation import require, require_identifier

log = structlog.get_logger()


class DeletionWorkflow:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        identities: IdentityBindingManager,
    ):
        self._store = store
        self._hasher = hasher
        self._identities = identities

    async def delete(
        self,
        password: str,
        service: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> AccountResult:
        """Delete a registration after checking its password.

        The result does not say whether the account's identity was revoked.

        Raises:
            NotFoundError: If no registration matches
            AmbiguousAccountError: If several match and no service is given
            InvalidCredentialsError: On a wrong password
        """
        require_identifier(username, email)
        require({"password": password}, "password")

        registration = await resolve_registration(
            self._store, username=username, email=email, service=service
        )
        if not self._hasher.verify(password, registration.password_hash):
            log.info("deletion_rejected", service=registration.service)
            raise InvalidCredentialsError()

        if not await self._store.delete(registration.service, registration.username):
            raise NotFoundError(f"No user registered for {registration.service}")
        revoked = await self._identities.revoke_if_orphaned(registration.username)

        log.info(
            "user_deleted",
            username=registration.username,
            service=registration.service,
            identity_revoked=revoked,
        )
        return AccountResult(username=registration.username, service=registration.service)

"""Identity binding between accounts and the federation provider.

One federation identity is bound to each account, keyed by the username, and
created lazily the first time a registration for that username is verified
or authenticated.
"""

from __future__ import annotations

import structlog

from loginn.core.credential_store import CredentialStore
from loginn.core.identity_federation import IdentityFederation
from loginn.exceptions import IdentityNotFoundError
from loginn.models import IdentityBinding

log = structlog.get_logger()


class IdentityBindingManager:
    """Coordinates federation identities with the credential store."""

    def __init__(self, store: CredentialStore, federation: IdentityFederation):
        self._store = store
        self._federation = federation

    async def ensure_identity(self, login_key: str) -> IdentityBinding:
        """Get or create the identity for ``login_key`` and mint a session token."""
        return await self._federation.get_or_create_identity(login_key)

    async def lookup_identity(self, login_key: str) -> str:
        """Resolve the bound identity id.

        Raises:
            IdentityNotFoundError: If no identity is bound
        """
        return await self._federation.lookup_identity(login_key)

    async def revoke_if_orphaned(self, username: str) -> bool:
        """Revoke the account's identity once no registration references it.

        The count and the revoke are separate calls: a registration created
        for the same username in between is left without a backing identity
        until it is verified again, and its username is left unclaimed, so a
        different email can then register it. This cleanup is best-effort.

        Returns:
            True if an identity was revoked
        """
        remaining = await self._store.query_by_username(username)
        if remaining:
            log.debug("identity_still_referenced", username=username, registrations=len(remaining))
            return False

        try:
            identity_id = await self._federation.lookup_identity(username)
        except IdentityNotFoundError:
            identity_id = None

        if identity_id is not None:
            await self._federation.revoke_identity(identity_id)
        await self._store.release_username(username)

        log.info("identity_revoked", username=username, identity_id=identity_id)
        return identity_id is not None

"""Mock identity federation for local development without Cognito.

Implements loginn's IdentityFederation interface. Session tokens are HS256
JWTs signed with a shared secret, so MockSessionVerifier can check them.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable, Dict

import jwt

from loginn.core.identity_federation import IdentityFederation
from loginn.exceptions import IdentityNotFoundError
from loginn.models import IdentityBinding

MOCK_ISSUER = "https://mock-identity.loginn.local"
MOCK_IDENTITY_POOL_ID = "mock-region:00000000-0000-0000-0000-000000000000"


class MockIdentityFederation(IdentityFederation):
    """
    In-memory federation provider.

    Identities are keyed by login key and minted on first use, mirroring
    Cognito's developer-authenticated identities.
    """

    def __init__(
        self,
        secret: str,
        token_duration: int = 900,
        identity_pool_id: str = MOCK_IDENTITY_POOL_ID,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.token_duration = token_duration
        self.identity_pool_id = identity_pool_id
        self._secret = secret
        self._clock = clock
        # {login_key: identity_id}
        self._identities: Dict[str, str] = {}

    def _mint(self, identity_id: str) -> str:
        now = int(self._clock())
        claims = {
            "iss": MOCK_ISSUER,
            "aud": self.identity_pool_id,
            "sub": identity_id,
            "iat": now,
            "exp": now + self.token_duration,
        }
        return jwt.encode(claims, self._secret, algorithm="HS256")

    async def get_or_create_identity(self, login_key: str) -> IdentityBinding:
        identity_id = self._identities.get(login_key)
        if identity_id is None:
            region = self.identity_pool_id.split(":", 1)[0]
            identity_id = f"{region}:{uuid.uuid4()}"
            self._identities[login_key] = identity_id
        return IdentityBinding(identity_id=identity_id, session_token=self._mint(identity_id))

    async def lookup_identity(self, login_key: str) -> str:
        identity_id = self._identities.get(login_key)
        if identity_id is None:
            raise IdentityNotFoundError(login_key)
        return identity_id

    async def revoke_identity(self, identity_id: str) -> None:
        for login_key, bound_id in list(self._identities.items()):
            if bound_id == identity_id:
                del self._identities[login_key]

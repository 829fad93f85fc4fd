"""Abstract identity federation interface.

The federation provider owns opaque identities keyed by a developer login key
and mints bearer session tokens for them. Implementations can use Cognito
Identity or any other provider with developer-authenticated identities.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from loginn.models import IdentityBinding


class IdentityFederation(ABC):
    """Abstract federation identity provider.

    Implementations:
        - CognitoIdentityFederation: AWS Cognito Identity pools
        - MockIdentityFederation: In-memory for testing
    """

    @abstractmethod
    async def get_or_create_identity(self, login_key: str) -> IdentityBinding:
        """Get the identity bound to a login key, creating it if absent.

        Idempotent for the same login key.

        Returns:
            IdentityBinding with the identity id and a fresh session token

        Raises:
            UpstreamUnavailableError: On provider errors
        """

    @abstractmethod
    async def lookup_identity(self, login_key: str) -> str:
        """Resolve the identity id bound to a login key without creating one.

        Raises:
            IdentityNotFoundError: If the provider has no such identity
            UpstreamUnavailableError: On provider errors
        """

    @abstractmethod
    async def revoke_identity(self, identity_id: str) -> None:
        """Delete an identity from the provider.

        Raises:
            UpstreamUnavailableError: On provider errors
        """

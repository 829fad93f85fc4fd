"""Abstract session token verifier interface.

Session tokens are minted by the federation provider. Verifiers extract the
subject and expiry; checking them against the bound identity and the clock is
left to the session workflow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from loginn.models import SessionClaims


class SessionTokenVerifier(ABC):
    """Abstract interface for decoding bearer session tokens.

    Implementations:
        - CognitoSessionVerifier: Cognito Identity OpenID tokens
        - MockSessionVerifier: Tokens minted by MockIdentityFederation
    """

    @abstractmethod
    def decode(self, token: str) -> SessionClaims:
        """Decode a session token without judging its expiry.

        Args:
            token: The bearer token (without 'Bearer ' prefix)

        Returns:
            SessionClaims with subject and expiry

        Raises:
            MalformedTokenError: If the token cannot be parsed or lacks
                ``sub``/``exp``
            UnauthorizedError: If the signature, issuer or audience is wrong
        """

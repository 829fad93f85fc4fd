"""Mock session verifier for tokens minted by MockIdentityFederation."""

import jwt

from loginn.core.session_verifier import SessionTokenVerifier
from loginn.exceptions import MalformedTokenError, UnauthorizedError
from loginn.identity_providers.mock import MOCK_IDENTITY_POOL_ID, MOCK_ISSUER
from loginn.models import SessionClaims
from loginn.token_verifiers.cognito import claims_from_payload


class MockSessionVerifier(SessionTokenVerifier):
    """Verifies HS256 mock session tokens against the shared secret."""

    def __init__(self, secret: str, identity_pool_id: str = MOCK_IDENTITY_POOL_ID):
        self._secret = secret
        self.identity_pool_id = identity_pool_id

    def decode(self, token: str) -> SessionClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=["HS256"],
                audience=self.identity_pool_id,
                issuer=MOCK_ISSUER,
                options={"verify_exp": False},
            )
        except jwt.InvalidSignatureError as e:
            raise UnauthorizedError("Token signature verification failed") from e
        except jwt.DecodeError as e:
            raise MalformedTokenError(f"Failed to parse token: {e}") from e
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError(f"Invalid token: {e}") from e
        return claims_from_payload(payload)

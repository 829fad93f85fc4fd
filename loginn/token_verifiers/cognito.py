"""Cognito Identity session token verifier.

This module decodes OpenID tokens minted by GetOpenIdTokenForDeveloperIdentity:
- JWKS caching with configurable TTL
- Automatic key refresh on cache miss (handles key rotation)
- Optional unverified decoding for environments without JWKS access
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any, Dict

import jwt
import requests
import structlog
from jwt.algorithms import RSAAlgorithm

from loginn.core.session_verifier import SessionTokenVerifier
from loginn.exceptions import (
    MalformedTokenError,
    UnauthorizedError,
    UpstreamUnavailableError,
)
from loginn.models import SessionClaims

log = structlog.get_logger()

COGNITO_IDENTITY_ISSUER = "https://cognito-identity.amazonaws.com"
COGNITO_IDENTITY_JWKS_URL = f"{COGNITO_IDENTITY_ISSUER}/.well-known/jwks_uri"


def claims_from_payload(payload: Dict[str, Any]) -> SessionClaims:
    """Build SessionClaims, requiring ``sub`` and ``exp``."""
    sub = payload.get("sub")
    exp = payload.get("exp")
    if not sub or exp is None:
        raise MalformedTokenError("Token is missing sub or exp claim")
    try:
        exp = int(exp)
    except (TypeError, ValueError) as e:
        raise MalformedTokenError("Token exp claim is not a timestamp") from e
    return SessionClaims(sub=sub, exp=exp, iat=payload.get("iat"), raw_claims=payload)


class CognitoSessionVerifier(SessionTokenVerifier):
    """Cognito Identity OpenID token verifier.

    Args:
        identity_pool_id: Expected audience of the token
        verify_signature: Check the RS signature, issuer and audience.
            Expiry is never checked here; the session workflow compares it
            against its own clock.
        jwks_url: Where Cognito Identity publishes its signing keys
        jwks_ttl_seconds: How long to cache JWKS keys. Defaults to 6 hours.
        timeout: HTTP timeout for JWKS fetches, in seconds
    """

    def __init__(
        self,
        identity_pool_id: str,
        verify_signature: bool = True,
        jwks_url: str = COGNITO_IDENTITY_JWKS_URL,
        jwks_ttl_seconds: int = 21600,  # 6 hours
        timeout: float = 5.0,
    ):
        self.identity_pool_id = identity_pool_id
        self.verify_signature = verify_signature
        self.jwks_url = jwks_url
        self.jwks_ttl_seconds = jwks_ttl_seconds
        self.timeout = timeout

        # JWKS cache: {kid: key_data}
        self._jwks_cache: Dict[str, Dict[str, Any]] = {}
        self._jwks_expiry = 0.0
        self._lock = threading.Lock()

    def _fetch_jwks(self) -> Dict[str, Dict[str, Any]]:
        """Fetch JWKS and cache the keys."""
        with self._lock:
            now = time.time()
            if self._jwks_cache and self._jwks_expiry > now:
                return self._jwks_cache

            try:
                resp = requests.get(self.jwks_url, timeout=self.timeout)
                resp.raise_for_status()
                jwks = resp.json()
            except (requests.RequestException, ValueError) as e:
                log.error("jwks_fetch_failed", jwks_url=self.jwks_url, error=str(e))
                raise UpstreamUnavailableError(f"Failed to fetch JWKS: {e}", "fetch_jwks") from e

            keys = {k["kid"]: k for k in jwks.get("keys", [])}
            self._jwks_cache = keys
            self._jwks_expiry = now + self.jwks_ttl_seconds

            log.debug("jwks_cached", jwks_url=self.jwks_url, key_count=len(keys))
            return keys

    def _get_signing_key(self, kid: str) -> Any:
        """Get the signing key for a kid, refreshing the cache once if needed."""
        keys = self._fetch_jwks()
        jwk = keys.get(kid)

        if not jwk:
            log.debug("key_not_found_refreshing", kid=kid)
            with self._lock:
                self._jwks_expiry = 0
            keys = self._fetch_jwks()
            jwk = keys.get(kid)

        if not jwk:
            log.warning("signing_key_not_found", kid=kid, available_kids=list(keys.keys()))
            raise UnauthorizedError(f"Signing key not found for kid: {kid}")

        return RSAAlgorithm.from_jwk(json.dumps(jwk))

    def decode(self, token: str) -> SessionClaims:
        """Decode a Cognito Identity token and return its claims."""
        try:
            if not self.verify_signature:
                payload = jwt.decode(token, options={"verify_signature": False})
                return claims_from_payload(payload)

            header = jwt.get_unverified_header(token)
            kid = header.get("kid")
            if not kid:
                raise MalformedTokenError("Token missing kid header")

            key = self._get_signing_key(kid)
            payload = jwt.decode(
                token,
                key=key,
                algorithms=["RS256", "RS512"],
                audience=self.identity_pool_id,
                issuer=COGNITO_IDENTITY_ISSUER,
                options={"verify_exp": False},
            )
            return claims_from_payload(payload)

        except jwt.InvalidSignatureError as e:
            log.warning("session_signature_invalid")
            raise UnauthorizedError("Token signature verification failed") from e
        except jwt.DecodeError as e:
            raise MalformedTokenError(f"Failed to parse token: {e}") from e
        except jwt.InvalidTokenError as e:
            log.warning("session_token_rejected", error=str(e))
            raise UnauthorizedError(f"Invalid token: {e}") from e

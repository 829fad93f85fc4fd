"""Single-use token engine.

Verification and password-reset tokens are 256-bit random hex strings stored
on a registration. Consuming a token clears it in the same conditional write
that applies the state change it authorizes, so a token cannot be used twice
even by concurrent requests.
"""

from __future__ import annotations

import secrets
import time
from typing import Any, Callable, Mapping, Optional

import structlog

from loginn.accounts import find_registrations
from loginn.core.credential_store import CredentialStore
from loginn.core.session_verifier import SessionTokenVerifier
from loginn.exceptions import (
    AccountNotVerifiedError,
    AmbiguousAccountError,
    ConditionFailedError,
    InvalidRequestError,
    InvalidTokenError,
    NotFoundError,
    TokenNotFoundError,
)
from loginn.models import (
    Registration,
    RegistrationState,
    SessionClaims,
    SingleUseToken,
    TokenKind,
)

log = structlog.get_logger()

TOKEN_BYTES = 32


def _tokens_equal(stored: str, supplied: str) -> bool:
    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


class TokenEngine:
    """Mints, binds and consumes single-use tokens; decodes session tokens.

    Args:
        store: Credential store holding the registrations
        session_verifier: Decoder for federation session tokens
        verification_ttl: Verification token lifetime in seconds, None never expires
        password_reset_ttl: Reset token lifetime in seconds, None never expires
        clock: Source of unix time
    """

    def __init__(
        self,
        store: CredentialStore,
        session_verifier: SessionTokenVerifier,
        verification_ttl: Optional[int] = 86400,
        password_reset_ttl: Optional[int] = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._session_verifier = session_verifier
        self._ttls = {
            TokenKind.VERIFICATION: verification_ttl,
            TokenKind.PASSWORD_RESET: password_reset_ttl,
        }
        self._clock = clock

    def issue(self, kind: TokenKind) -> SingleUseToken:
        ttl = self._ttls[kind]
        expires_at = int(self._clock()) + ttl if ttl is not None else None
        return SingleUseToken(value=secrets.token_hex(TOKEN_BYTES), kind=kind, expires_at=expires_at)

    def stamp(self, registration: Registration, kind: TokenKind) -> SingleUseToken:
        """Attach a fresh token to a registration that has not been persisted yet."""
        token = self.issue(kind)
        setattr(registration, kind.field, token.value)
        setattr(registration, kind.expiry_field, token.expires_at)
        return token

    async def bind(
        self,
        registration: Registration,
        kind: TokenKind,
        token: SingleUseToken,
    ) -> Registration:
        """Persist a token on a stored registration, replacing any token of the same kind.

        Password reset tokens are only bound to active registrations, which
        never hold a verification token.

        Raises:
            NotFoundError: If the registration no longer exists
            AccountNotVerifiedError: If a reset is requested before verification
            InvalidRequestError: If a verification token targets an active registration
        """
        if kind == TokenKind.PASSWORD_RESET:
            expected: dict[str, Any] = {
                "state": RegistrationState.ACTIVE,
                TokenKind.VERIFICATION.field: None,
            }
        else:
            expected = {"state": RegistrationState.PENDING_VERIFICATION}

        try:
            updated = await self._store.conditional_update(
                registration.service,
                registration.username,
                expected=expected,
                set_fields={kind.field: token.value, kind.expiry_field: token.expires_at},
            )
        except ConditionFailedError as e:
            current = await self._store.get_by_key(registration.service, registration.username)
            if current is None:
                raise NotFoundError(f"No user registered for {registration.service}") from e
            if kind == TokenKind.PASSWORD_RESET:
                raise AccountNotVerifiedError(registration.username, registration.service) from e
            raise InvalidRequestError("Registration is already verified") from e

        log.info(
            "token_bound",
            kind=kind.value,
            username=registration.username,
            service=registration.service,
        )
        return updated

    async def consume(
        self,
        kind: TokenKind,
        token: str,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        set_fields: Optional[Mapping[str, Any]] = None,
    ) -> Registration:
        """Find the registration holding ``token``, clear it and apply ``set_fields``.

        The token is cleared by a conditional update that only succeeds if
        the stored token still equals the supplied one.

        Returns:
            The updated registration

        Raises:
            TokenNotFoundError: If no registration holds the token, or it was
                consumed concurrently
            AmbiguousAccountError: If several registrations hold the token
            InvalidTokenError: If the token has expired
        """
        registrations = await find_registrations(self._store, username=username, email=email)
        matches = [
            r for r in registrations
            if r.token_for(kind) and _tokens_equal(r.token_for(kind), token)
        ]
        if not matches:
            log.info("token_not_found", kind=kind.value, username=username)
            raise TokenNotFoundError()
        if len(matches) > 1:
            raise AmbiguousAccountError(username or email or "", sorted(r.service for r in matches))

        registration = matches[0]
        stored = SingleUseToken(
            value=registration.token_for(kind),
            kind=kind,
            expires_at=registration.token_expiry_for(kind),
        )
        if stored.is_expired(self._clock()):
            log.info(
                "token_expired",
                kind=kind.value,
                username=registration.username,
                service=registration.service,
            )
            raise InvalidTokenError("Token has expired")

        try:
            updated = await self._store.conditional_update(
                registration.service,
                registration.username,
                expected={kind.field: registration.token_for(kind)},
                set_fields=set_fields,
                remove_fields=(kind.field, kind.expiry_field),
            )
        except ConditionFailedError as e:
            log.info(
                "token_consumed_concurrently",
                kind=kind.value,
                username=registration.username,
                service=registration.service,
            )
            raise TokenNotFoundError() from e

        log.info(
            "token_consumed",
            kind=kind.value,
            username=updated.username,
            service=updated.service,
        )
        return updated

    def decode_session(self, token: str) -> SessionClaims:
        """Decode a federation session token (expiry is judged by the caller)."""
        return self._session_verifier.decode(token)

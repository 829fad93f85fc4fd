"""Account resolution across per-service registrations.

A username (or email) may match one registration per service. Requests that
act on a single registration must resolve to exactly one:

- no registration matches: NotFoundError
- a service is given: the registration for that service, or NotFoundError
- no service is given and several match: AmbiguousAccountError
"""

from __future__ import annotations

from typing import Optional, Sequence

from loginn.core.credential_store import CredentialStore
from loginn.exceptions import AmbiguousAccountError, InvalidRequestError, NotFoundError
from loginn.models import Registration
from loginn.validation import lookup_email


async def find_registrations(
    store: CredentialStore,
    username: Optional[str] = None,
    email: Optional[str] = None,
) -> list[Registration]:
    """Look registrations up by username, or by email when no username is given."""
    if username:
        return await store.query_by_username(username)
    if email:
        return await store.query_by_email(lookup_email(email))
    raise InvalidRequestError("Missing username/email parameter in request")


def select_registration(
    registrations: Sequence[Registration],
    identifier: str,
    service: Optional[str] = None,
) -> Registration:
    """Apply the resolution rule to an already fetched set of registrations."""
    if not registrations:
        raise NotFoundError("User not registered")

    if service:
        for registration in registrations:
            if registration.service == service:
                return registration
        raise NotFoundError(f"No user registered for {service}")

    if len(registrations) > 1:
        raise AmbiguousAccountError(identifier, sorted(r.service for r in registrations))
    return registrations[0]


async def resolve_registration(
    store: CredentialStore,
    username: Optional[str] = None,
    email: Optional[str] = None,
    service: Optional[str] = None,
) -> Registration:
    """Resolve a username or email (and optional service) to one registration."""
    registrations = await find_registrations(store, username=username, email=email)
    return select_registration(registrations, username or email or "", service)

"""In-memory credential store for local development and tests.

Each operation runs without awaiting, so it is atomic with respect to other
coroutines on the same event loop.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

import structlog

from loginn.core.credential_store import CredentialStore
from loginn.exceptions import ConditionFailedError, ConflictError
from loginn.models import Registration

log = structlog.get_logger()


class MockCredentialStore(CredentialStore):
    """Dictionary-backed CredentialStore."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        # {(service, username): Registration}
        self._records: Dict[Tuple[str, str], Registration] = {}
        # {username: owner email}
        self._claims: Dict[str, str] = {}

    async def get_by_key(self, service: str, username: str) -> Optional[Registration]:
        record = self._records.get((service, username))
        return replace(record) if record else None

    async def put_if_absent(self, registration: Registration) -> None:
        owner = self._claims.get(registration.username)
        if owner is not None and owner != registration.email:
            raise ConflictError(registration.username)
        if registration.key in self._records:
            raise ConflictError(registration.username, registration.service)

        now = int(self._clock())
        self._claims[registration.username] = registration.email
        self._records[registration.key] = replace(
            registration,
            created_at=registration.created_at or now,
            updated_at=now,
        )
        log.debug("mock_registration_put", username=registration.username, service=registration.service)

    async def conditional_update(
        self,
        service: str,
        username: str,
        expected: Mapping[str, Any],
        set_fields: Optional[Mapping[str, Any]] = None,
        remove_fields: Iterable[str] = (),
    ) -> Registration:
        record = self._records.get((service, username))
        if record is None:
            raise ConditionFailedError(service, username)
        for name, value in expected.items():
            if getattr(record, name) != value:
                raise ConditionFailedError(service, username)

        changes: dict[str, Any] = {name: None for name in remove_fields}
        changes.update(set_fields or {})
        changes["updated_at"] = int(self._clock())
        updated = replace(record, **changes)
        self._records[(service, username)] = updated
        return replace(updated)

    async def query_by_username(self, username: str) -> list[Registration]:
        return [
            replace(record)
            for (_, name), record in sorted(self._records.items())
            if name == username
        ]

    async def query_by_email(self, email: str) -> list[Registration]:
        return [
            replace(record)
            for _, record in sorted(self._records.items())
            if record.email == email
        ]

    async def delete(self, service: str, username: str) -> bool:
        return self._records.pop((service, username), None) is not None

    async def release_username(self, username: str) -> None:
        self._claims.pop(username, None)

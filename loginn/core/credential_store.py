"""Abstract credential store interface.

This module defines typed access to per-(service, username) registration
records. Implementations must make ``put_if_absent`` and
``conditional_update`` atomic against concurrent callers; the token and
registration lifecycle depends on it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional

from loginn.models import Registration


class CredentialStore(ABC):
    """Abstract durable store of registrations.

    Implementations:
        - DynamoDBCredentialStore: AWS DynamoDB
        - MockCredentialStore: In-memory for testing
    """

    @abstractmethod
    async def get_by_key(self, service: str, username: str) -> Optional[Registration]:
        """Get a registration by its composite key.

        Returns:
            Registration if found, None otherwise

        Raises:
            UpstreamUnavailableError: On store errors
        """

    @abstractmethod
    async def put_if_absent(self, registration: Registration) -> None:
        """Insert a new registration in a single conditional write.

        The write fails if the (service, username) key already exists, or if
        the username is already owned by a different email address on any
        service.

        Raises:
            ConflictError: On a uniqueness violation
            UpstreamUnavailableError: On store errors
        """

    @abstractmethod
    async def conditional_update(
        self,
        service: str,
        username: str,
        expected: Mapping[str, Any],
        set_fields: Optional[Mapping[str, Any]] = None,
        remove_fields: Iterable[str] = (),
    ) -> Registration:
        """Atomically update a registration if its current fields match.

        Args:
            service: Registration service
            username: Registration username
            expected: Field values the stored record must hold. A value of
                None requires the field to be absent. The record itself must
                always exist.
            set_fields: Fields to set
            remove_fields: Fields to clear

        Returns:
            The updated Registration

        Raises:
            ConditionFailedError: If the record is missing or an expectation fails
            UpstreamUnavailableError: On store errors
        """

    @abstractmethod
    async def query_by_username(self, username: str) -> list[Registration]:
        """List every registration for a username across services."""

    @abstractmethod
    async def query_by_email(self, email: str) -> list[Registration]:
        """List every registration using an email address."""

    @abstractmethod
    async def delete(self, service: str, username: str) -> bool:
        """Delete a registration.

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def release_username(self, username: str) -> None:
        """Drop the username's ownership claim.

        The claim is removed unconditionally. Callers check that no
        registration for the username remains before releasing it.
        """

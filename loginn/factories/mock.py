"""Factory for in-memory components."""

import secrets
import time
from typing import Callable, Optional

from loginn.core.factory import LoginnFactory
from loginn.identity_providers.mock import MockIdentityFederation
from loginn.notifiers.mock import MockNotificationSender
from loginn.stores.mock import MockCredentialStore
from loginn.token_verifiers.mock import MockSessionVerifier


class MockFactory(LoginnFactory):
    """Factory for in-memory components, for tests and local development.

    The federation provider and the session verifier share one signing
    secret, and every component reads the same clock.

    Examples:
        >>> factory = MockFactory()
        >>> service = factory.create_service()
        >>> await service.register("alice", "pw", "alice@x.com", "svcA")
        >>> factory.notifier.last_to("alice@x.com").token
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        secret: Optional[str] = None,
        bcrypt_rounds: int = 4,
        verify_url: str = "https://loginn.local/verify",
        reset_url: str = "https://loginn.local/change_password.html",
        verification_ttl: Optional[int] = 86400,
        password_reset_ttl: Optional[int] = 3600,
        session_token_duration: int = 900,
    ):
        self.clock = clock
        self.secret = secret or secrets.token_hex(32)
        self.bcrypt_rounds = bcrypt_rounds
        self.verify_url = verify_url
        self.reset_url = reset_url
        self.verification_ttl = verification_ttl
        self.password_reset_ttl = password_reset_ttl

        self.store = MockCredentialStore(clock=clock)
        self.federation = MockIdentityFederation(
            self.secret, token_duration=session_token_duration, clock=clock
        )
        self.notifier = MockNotificationSender()

    def create_credential_store(self) -> MockCredentialStore:
        return self.store

    def create_identity_federation(self) -> MockIdentityFederation:
        return self.federation

    def create_notification_sender(self) -> MockNotificationSender:
        return self.notifier

    def create_session_verifier(self) -> MockSessionVerifier:
        return MockSessionVerifier(self.secret, identity_pool_id=self.federation.identity_pool_id)

    def create_service(self):
        from loginn.passwords import PasswordHasher
        from loginn.service import CredentialService

        return CredentialService(
            store=self.store,
            federation=self.federation,
            notifier=self.notifier,
            session_verifier=self.create_session_verifier(),
            hasher=PasswordHasher(rounds=self.bcrypt_rounds),
            verify_url=self.verify_url,
            reset_url=self.reset_url,
            verification_ttl=self.verification_ttl,
            password_reset_ttl=self.password_reset_ttl,
            clock=self.clock,
        )

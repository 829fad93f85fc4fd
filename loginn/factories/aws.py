"""Factory for AWS-backed components."""

from typing import Optional

from loginn.config import Settings
from loginn.core.credential_store import CredentialStore
from loginn.core.factory import LoginnFactory
from loginn.core.identity_federation import IdentityFederation
from loginn.core.notification_sender import NotificationSender
from loginn.core.session_verifier import SessionTokenVerifier


class AwsFactory(LoginnFactory):
    """Factory for DynamoDB, Cognito Identity and SES components.

    Components are created lazily and cached, so a long-lived process (such
    as a warm Lambda container) reuses one boto3 client per AWS service.

    Args:
        settings: Configuration; read from the environment when omitted

    Examples:
        >>> factory = AwsFactory(Settings(identity_pool_id="eu-west-1:...", mail_source="no-reply@loginn.io"))
        >>> service = factory.create_service()

    Note:
        AWS credentials must be configured via environment variables, AWS
        config files, or IAM roles.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self._store: Optional[CredentialStore] = None
        self._federation: Optional[IdentityFederation] = None
        self._notifier: Optional[NotificationSender] = None

    def create_credential_store(self) -> CredentialStore:
        if self._store is None:
            from loginn.stores.dynamodb import DynamoDBCredentialStore

            s = self.settings
            self._store = DynamoDBCredentialStore(
                table_name=s.table_name,
                region=s.region,
                endpoint_url=s.endpoint_url,
                email_index_name=s.email_index_name,
                read_retries=s.read_retries,
                client=self._client("dynamodb"),
            )
        return self._store

    def create_identity_federation(self) -> IdentityFederation:
        if self._federation is None:
            from loginn.identity_providers.cognito import CognitoIdentityFederation

            s = self.settings
            if not s.identity_pool_id:
                raise ValueError("Missing identity pool id (LOGINN_IDENTITY_POOL_ID)")
            self._federation = CognitoIdentityFederation(
                identity_pool_id=s.identity_pool_id,
                region=s.region,
                developer_provider_name=s.developer_provider_name,
                token_duration=s.session_token_duration,
                endpoint_url=s.endpoint_url,
                read_retries=s.read_retries,
                client=self._client("cognito-identity"),
            )
        return self._federation

    def create_notification_sender(self) -> NotificationSender:
        if self._notifier is None:
            from loginn.notifiers.ses import SesNotificationSender

            s = self.settings
            if not s.mail_source:
                raise ValueError("Missing mail source address (LOGINN_MAIL_SOURCE)")
            self._notifier = SesNotificationSender(
                source=s.mail_source,
                region=s.region,
                client=self._client("ses"),
            )
        return self._notifier

    def create_session_verifier(self) -> SessionTokenVerifier:
        from loginn.token_verifiers.cognito import CognitoSessionVerifier

        s = self.settings
        return CognitoSessionVerifier(
            identity_pool_id=s.identity_pool_id,
            verify_signature=s.verify_session_signature,
            timeout=s.read_timeout,
        )

    def create_service(self):
        from loginn.passwords import PasswordHasher
        from loginn.service import CredentialService

        s = self.settings
        return CredentialService(
            store=self.create_credential_store(),
            federation=self.create_identity_federation(),
            notifier=self.create_notification_sender(),
            session_verifier=self.create_session_verifier(),
            hasher=PasswordHasher(rounds=s.bcrypt_rounds),
            verify_url=s.verify_url,
            reset_url=s.reset_url,
            verification_ttl=s.verification_token_ttl,
            password_reset_ttl=s.password_reset_token_ttl,
        )

    def _client(self, service_name: str):
        from loginn.aws import create_client

        s = self.settings
        return create_client(
            service_name,
            s.region,
            endpoint_url=s.endpoint_url,
            connect_timeout=s.connect_timeout,
            read_timeout=s.read_timeout,
        )

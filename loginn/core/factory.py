"""Abstract factory for creating credential service components."""

from abc import ABC, abstractmethod

from loginn.core.credential_store import CredentialStore
from loginn.core.identity_federation import IdentityFederation
from loginn.core.notification_sender import NotificationSender
from loginn.core.session_verifier import SessionTokenVerifier


class LoginnFactory(ABC):
    """Abstract factory for the collaborators of a CredentialService.

    Implementations create backend-specific components that work together:
    the session verifier must accept the tokens minted by the federation
    provider of the same factory.

    Usage:
        Do not instantiate this class directly. Use create_factory() instead:

        >>> from loginn import create_factory
        >>> factory = create_factory("aws", settings=Settings.from_env())
        >>> service = factory.create_service()

    See Also:
        - create_factory(): Main entry point for creating factories
        - AwsFactory: DynamoDB, Cognito Identity and SES implementation
        - MockFactory: In-memory implementation for testing
    """

    @abstractmethod
    def create_credential_store(self) -> CredentialStore:
        """Create (or return the cached) credential store."""
        pass

    @abstractmethod
    def create_identity_federation(self) -> IdentityFederation:
        """Create (or return the cached) federation provider."""
        pass

    @abstractmethod
    def create_notification_sender(self) -> NotificationSender:
        """Create (or return the cached) email sender."""
        pass

    @abstractmethod
    def create_session_verifier(self) -> SessionTokenVerifier:
        """Create a verifier for tokens minted by this factory's federation provider."""
        pass

    @abstractmethod
    def create_service(self):
        """Wire a CredentialService from this factory's components.

        Returns:
            CredentialService: Ready to serve requests
        """
        pass


def create_factory(provider_type: str, **kwargs) -> LoginnFactory:
    """Create a factory for the specified backend.

    Args:
        provider_type: The backend to use. Valid values: "aws", "mock"

        **kwargs: Backend-specific configuration arguments.

            For provider_type="aws":
                settings (Settings, optional): Configuration; read from the
                    environment when omitted.

            For provider_type="mock":
                clock (callable, optional): Source of unix time shared by all
                    mock components.
                secret (str, optional): Session token signing secret.

    Returns:
        LoginnFactory: A configured factory instance

    Raises:
        ValueError: If provider_type is unknown

    Examples:
        >>> factory = create_factory("mock")
        >>> service = factory.create_service()
    """
    if provider_type == "aws":
        from loginn.factories.aws import AwsFactory

        return AwsFactory(**kwargs)
    elif provider_type == "mock":
        from loginn.factories.mock import MockFactory

        return MockFactory(**kwargs)
    else:
        raise ValueError(
            f"Unknown provider type: '{provider_type}'. "
            f"Valid types: 'aws', 'mock'. "
            f"Example: create_factory('mock')"
        )

"""Identity federation implementations for binding accounts to external identities."""

from loginn.identity_providers.cognito import CognitoIdentityFederation
from loginn.identity_providers.mock import MockIdentityFederation

__all__ = [
    "CognitoIdentityFederation",
    "MockIdentityFederation",
]

"""Session token verifier implementations."""

from loginn.token_verifiers.cognito import CognitoSessionVerifier
from loginn.token_verifiers.mock import MockSessionVerifier

__all__ = ["CognitoSessionVerifier", "MockSessionVerifier"]

"""Credential store implementations."""

from loginn.stores.dynamodb import DynamoDBCredentialStore
from loginn.stores.mock import MockCredentialStore

__all__ = [
    "DynamoDBCredentialStore",
    "MockCredentialStore",
]

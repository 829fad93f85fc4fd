"""Factory implementations for creating Loginn components."""

from loginn.factories.aws import AwsFactory
from loginn.factories.mock import MockFactory

__all__ = [
    "AwsFactory",
    "MockFactory",
]

"""Shared pytest fixtures for loginn tests."""

import os

import boto3
import pytest
from moto import mock_aws

from loginn import MockFactory

TABLE_NAME = "users"
EMAIL_INDEX = "email-index"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for testing."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def region():
    """AWS region for tests."""
    return "eu-west-1"


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock DynamoDB and SES."""
    with mock_aws():
        yield


@pytest.fixture
def users_table(mock_aws_services, region):
    """Registrations table with an email GSI."""
    client = boto3.client("dynamodb", region_name=region)
    client.create_table(
        TableName=TABLE_NAME,
        KeySchema=[
            {"AttributeName": "username", "KeyType": "HASH"},
            {"AttributeName": "service", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "username", "AttributeType": "S"},
            {"AttributeName": "service", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": EMAIL_INDEX,
                "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    return client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_factory(clock):
    """In-memory components sharing one fake clock."""
    return MockFactory(clock=clock)


@pytest.fixture
def service(mock_factory):
    return mock_factory.create_service()


@pytest.fixture
def outbox(mock_factory):
    return mock_factory.notifier


@pytest.fixture
def verified_user(service, outbox):
    """Register and verify a user, returning the verification result."""

    async def _verified_user(username="alice", password="s3cret!", email="alice@x.com", svc="svcA"):
        registered = await service.register(username, password, email, svc)
        token = outbox.last_to(registered.email).token
        return await service.verify(username, token)

    return _verified_user


@pytest.fixture
def dynamodb_store(users_table, region, clock):
    from loginn.stores.dynamodb import DynamoDBCredentialStore

    return DynamoDBCredentialStore(
        table_name=TABLE_NAME,
        region=region,
        email_index_name=EMAIL_INDEX,
        read_retries=0,
        clock=clock,
    )

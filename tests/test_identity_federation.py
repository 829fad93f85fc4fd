"""Tests for identity federation providers."""

from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from loginn.exceptions import IdentityNotFoundError, UpstreamUnavailableError
from loginn.identity_providers import CognitoIdentityFederation, MockIdentityFederation
from loginn.token_verifiers import MockSessionVerifier

POOL_ID = "eu-west-1:11111111-2222-3333-4444-555555555555"
IDENTITY_ID = "eu-west-1:aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"


def _client_error(code, operation="LookupDeveloperIdentity"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def cognito_client():
    return Mock()


@pytest.fixture
def federation(cognito_client):
    return CognitoIdentityFederation(
        identity_pool_id=POOL_ID,
        region="eu-west-1",
        token_duration=600,
        client=cognito_client,
        read_retries=0,
    )


# ==================== CognitoIdentityFederation ====================


@pytest.mark.asyncio
async def test_get_or_create_identity(federation, cognito_client):
    cognito_client.get_open_id_token_for_developer_identity.return_value = {
        "IdentityId": IDENTITY_ID,
        "Token": "openid-token",
    }

    binding = await federation.get_or_create_identity("alice")

    assert binding.identity_id == IDENTITY_ID
    assert binding.session_token == "openid-token"
    cognito_client.get_open_id_token_for_developer_identity.assert_called_once_with(
        IdentityPoolId=POOL_ID,
        Logins={"login.loginns": "alice"},
        TokenDuration=600,
    )


@pytest.mark.asyncio
async def test_get_or_create_identity_upstream_failure(federation, cognito_client):
    cognito_client.get_open_id_token_for_developer_identity.side_effect = _client_error(
        "InternalErrorException", "GetOpenIdTokenForDeveloperIdentity"
    )

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await federation.get_or_create_identity("alice")

    assert exc_info.value.operation == "get_or_create_identity"
    assert isinstance(exc_info.value.__cause__, ClientError)


@pytest.mark.asyncio
async def test_lookup_identity(federation, cognito_client):
    cognito_client.lookup_developer_identity.return_value = {"IdentityId": IDENTITY_ID}

    assert await federation.lookup_identity("alice") == IDENTITY_ID
    cognito_client.lookup_developer_identity.assert_called_once_with(
        IdentityPoolId=POOL_ID,
        DeveloperUserIdentifier="alice",
        MaxResults=1,
    )


@pytest.mark.asyncio
async def test_lookup_unknown_identity(federation, cognito_client):
    cognito_client.lookup_developer_identity.side_effect = _client_error("ResourceNotFoundException")

    with pytest.raises(IdentityNotFoundError) as exc_info:
        await federation.lookup_identity("alice")

    assert exc_info.value.login_key == "alice"


@pytest.mark.asyncio
async def test_lookup_retries_transient_failures(cognito_client):
    """Test identity lookups are retried, being idempotent reads."""
    federation = CognitoIdentityFederation(
        identity_pool_id=POOL_ID,
        region="eu-west-1",
        client=cognito_client,
        read_retries=2,
    )
    cognito_client.lookup_developer_identity.side_effect = [
        EndpointConnectionError(endpoint_url="https://cognito-identity.eu-west-1.amazonaws.com"),
        {"IdentityId": IDENTITY_ID},
    ]

    assert await federation.lookup_identity("alice") == IDENTITY_ID
    assert cognito_client.lookup_developer_identity.call_count == 2


@pytest.mark.asyncio
async def test_revoke_identity(federation, cognito_client):
    cognito_client.delete_identities.return_value = {"UnprocessedIdentityIds": []}

    await federation.revoke_identity(IDENTITY_ID)

    cognito_client.delete_identities.assert_called_once_with(IdentityIdsToDelete=[IDENTITY_ID])


@pytest.mark.asyncio
async def test_revoke_identity_unprocessed(federation, cognito_client):
    cognito_client.delete_identities.return_value = {
        "UnprocessedIdentityIds": [{"IdentityId": IDENTITY_ID, "ErrorCode": "InternalServerError"}]
    }

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await federation.revoke_identity(IDENTITY_ID)

    assert "InternalServerError" in str(exc_info.value)


# ==================== MockIdentityFederation ====================


@pytest.mark.asyncio
async def test_mock_identity_is_stable_per_login_key(clock):
    federation = MockIdentityFederation("s" * 64, clock=clock)

    first = await federation.get_or_create_identity("alice")
    second = await federation.get_or_create_identity("alice")
    other = await federation.get_or_create_identity("bob")

    assert first.identity_id == second.identity_id
    assert other.identity_id != first.identity_id
    assert await federation.lookup_identity("alice") == first.identity_id


@pytest.mark.asyncio
async def test_mock_token_decodes_with_shared_secret(clock):
    federation = MockIdentityFederation("s" * 64, token_duration=900, clock=clock)
    verifier = MockSessionVerifier("s" * 64)

    binding = await federation.get_or_create_identity("alice")
    claims = verifier.decode(binding.session_token)

    assert claims.sub == binding.identity_id
    assert claims.exp == int(clock()) + 900


@pytest.mark.asyncio
async def test_mock_revoke_identity(clock):
    federation = MockIdentityFederation("s" * 64, clock=clock)
    binding = await federation.get_or_create_identity("alice")

    await federation.revoke_identity(binding.identity_id)

    with pytest.raises(IdentityNotFoundError):
        await federation.lookup_identity("alice")

"""AWS Cognito Identity implementation of IdentityFederation.

Uses developer-authenticated identities: each account's login key is
registered under the pool's developer provider name, and Cognito mints
OpenID tokens whose ``sub`` is the identity id.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from loginn.aws import create_client
from loginn.config import DEFAULT_DEVELOPER_PROVIDER
from loginn.core.identity_federation import IdentityFederation
from loginn.exceptions import IdentityNotFoundError, UpstreamUnavailableError
from loginn.models import IdentityBinding
from loginn.retry import with_retries

log = structlog.get_logger()


class CognitoIdentityFederation(IdentityFederation):
    """AWS Cognito Identity pool federation.

    Args:
        identity_pool_id: Cognito identity pool id (e.g. eu-west-1:uuid)
        region: AWS region of the identity pool
        developer_provider_name: Developer provider configured on the pool
        token_duration: Lifetime of minted OpenID tokens, in seconds
        endpoint_url: Custom endpoint URL for LocalStack or other AWS-compatible services
        client: Preconfigured boto3 cognito-identity client
        read_retries: Extra attempts for identity lookups

    Note:
        Use AwsFactory.create_identity_federation() instead of instantiating directly.
    """

    def __init__(
        self,
        identity_pool_id: str,
        region: str,
        developer_provider_name: str = DEFAULT_DEVELOPER_PROVIDER,
        token_duration: int = 900,
        endpoint_url: Optional[str] = None,
        client: Any = None,
        read_retries: int = 2,
    ):
        self.identity_pool_id = identity_pool_id
        self.region = region
        self.developer_provider_name = developer_provider_name
        self.token_duration = token_duration
        self._read_retries = read_retries
        self._client = client or create_client("cognito-identity", region, endpoint_url)

    async def get_or_create_identity(self, login_key: str) -> IdentityBinding:
        """Get or create the developer identity and mint an OpenID token."""
        try:
            resp = self._client.get_open_id_token_for_developer_identity(
                IdentityPoolId=self.identity_pool_id,
                Logins={self.developer_provider_name: login_key},
                TokenDuration=self.token_duration,
            )
        except (ClientError, BotoCoreError) as e:
            log.error("cognito_get_token_error", error=str(e), login_key=login_key)
            raise UpstreamUnavailableError(
                f"Failed to get open ID token: {e}", "get_or_create_identity"
            ) from e

        log.info("cognito_token_issued", identity_id=resp["IdentityId"])
        return IdentityBinding(identity_id=resp["IdentityId"], session_token=resp["Token"])

    async def lookup_identity(self, login_key: str) -> str:
        """Resolve the identity id for a login key without creating one."""

        async def read() -> str:
            try:
                resp = self._client.lookup_developer_identity(
                    IdentityPoolId=self.identity_pool_id,
                    DeveloperUserIdentifier=login_key,
                    MaxResults=1,
                )
            except ClientError as e:
                if e.response["Error"]["Code"] == "ResourceNotFoundException":
                    raise IdentityNotFoundError(login_key) from e
                log.error("cognito_lookup_error", error=str(e), login_key=login_key)
                raise UpstreamUnavailableError(
                    f"Failed to look up identity: {e}", "lookup_identity"
                ) from e
            except BotoCoreError as e:
                log.error("cognito_lookup_error", error=str(e), login_key=login_key)
                raise UpstreamUnavailableError(
                    f"Failed to look up identity: {e}", "lookup_identity"
                ) from e

            identity_id = resp.get("IdentityId")
            if not identity_id:
                raise IdentityNotFoundError(login_key)
            return identity_id

        return await with_retries(read, retries=self._read_retries)

    async def revoke_identity(self, identity_id: str) -> None:
        """Delete an identity from the pool."""
        try:
            resp = self._client.delete_identities(IdentityIdsToDelete=[identity_id])
        except (ClientError, BotoCoreError) as e:
            log.error("cognito_delete_identity_error", error=str(e), identity_id=identity_id)
            raise UpstreamUnavailableError(
                f"Failed to delete user identity: {e}", "revoke_identity"
            ) from e

        unprocessed = resp.get("UnprocessedIdentityIds", [])
        if unprocessed:
            error_code = unprocessed[0].get("ErrorCode", "Unknown")
            log.error("cognito_delete_identity_unprocessed", identity_id=identity_id, error_code=error_code)
            raise UpstreamUnavailableError(
                f"Identity '{identity_id}' was not deleted: {error_code}", "revoke_identity"
            )
        log.info("cognito_identity_deleted", identity_id=identity_id)

"""DynamoDB-backed credential store."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from loginn.aws import create_client
from loginn.core.credential_store import CredentialStore
from loginn.exceptions import (
    ConditionFailedError,
    ConflictError,
    UpstreamUnavailableError,
)
from loginn.models import Registration, RegistrationState
from loginn.retry import with_retries
from loginn.validation import RESERVED_SERVICE_PREFIX

log = structlog.get_logger()

# Sort key of the per-username item recording which email owns the username
ACCOUNT_CLAIM_SERVICE = RESERVED_SERVICE_PREFIX + "account"

_STRING_FIELDS = (
    "email",
    "password_hash",
    "verification_token",
    "password_reset_token",
    "identity_id",
)
_NUMBER_FIELDS = (
    "verification_token_expires_at",
    "password_reset_token_expires_at",
    "created_at",
    "updated_at",
)


def _attribute_value(value: Any) -> Dict[str, str]:
    if isinstance(value, RegistrationState):
        return {"S": value.value}
    if isinstance(value, bool):
        raise TypeError("Boolean attributes are not used by registrations")
    if isinstance(value, (int, float)):
        return {"N": str(int(value))}
    return {"S": str(value)}


def _to_item(registration: Registration) -> Dict[str, Dict[str, str]]:
    item = {
        "username": {"S": registration.username},
        "service": {"S": registration.service},
        "state": {"S": registration.state.value},
    }
    for name in _STRING_FIELDS + _NUMBER_FIELDS:
        value = getattr(registration, name)
        if value is not None:
            item[name] = _attribute_value(value)
    return item


def _from_item(item: Dict[str, Dict[str, str]]) -> Registration:
    values: Dict[str, Any] = {}
    for name in _STRING_FIELDS:
        if name in item:
            values[name] = item[name]["S"]
    for name in _NUMBER_FIELDS:
        if name in item:
            values[name] = int(item[name]["N"])
    return Registration(
        username=item["username"]["S"],
        service=item["service"]["S"],
        state=RegistrationState(item["state"]["S"]),
        **values,
    )


def _is_claim(item: Dict[str, Dict[str, str]]) -> bool:
    return item["service"]["S"] == ACCOUNT_CLAIM_SERVICE


class DynamoDBCredentialStore(CredentialStore):
    """
    Stores registrations in a DynamoDB table.

    Expects table schema:
    - Partition key: username (S)
    - Sort key: service (S)
    - Optional GSI on email (S) for email lookups; without it, email lookups
      fall back to a filtered scan

    Alongside the registrations, each username has an account-claim item
    (sort key ``#account``) holding the owner email. It is written in the same
    transaction as a new registration so that username ownership and
    (service, username) uniqueness are enforced by one conditional write.

    Example:
        store = DynamoDBCredentialStore(
            table_name="users",
            region="eu-west-1",
        )
        registrations = await store.query_by_username("alice")
    """

    def __init__(
        self,
        table_name: str,
        region: str,
        endpoint_url: Optional[str] = None,  # For LocalStack testing
        email_index_name: Optional[str] = None,
        client: Any = None,
        read_retries: int = 2,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize DynamoDB credential store.

        Args:
            table_name: Name of the DynamoDB table holding registrations
            region: AWS region where the table is located
            endpoint_url: Optional endpoint URL for LocalStack/testing
            email_index_name: Optional GSI keyed on email
            client: Preconfigured boto3 DynamoDB client
            read_retries: Extra attempts for idempotent reads
            clock: Source of unix time for created_at/updated_at
        """
        self._table_name = table_name
        self._email_index_name = email_index_name
        self._read_retries = read_retries
        self._clock = clock
        self._dynamodb = client or create_client("dynamodb", region, endpoint_url)
        log.info("Initialized DynamoDB credential store", table_name=table_name, region=region)

    def _upstream_error(self, operation: str, error: Exception, **context: Any) -> UpstreamUnavailableError:
        log.error("dynamodb_operation_failed", operation=operation, error=str(error), **context)
        return UpstreamUnavailableError(f"Credential store {operation} failed: {error}", operation)

    async def get_by_key(self, service: str, username: str) -> Optional[Registration]:
        async def read() -> Optional[Registration]:
            try:
                response = self._dynamodb.get_item(
                    TableName=self._table_name,
                    Key={"username": {"S": username}, "service": {"S": service}},
                    ConsistentRead=True,
                )
            except (ClientError, BotoCoreError) as e:
                raise self._upstream_error("get_by_key", e, username=username, service=service) from e
            item = response.get("Item")
            if not item or _is_claim(item):
                return None
            return _from_item(item)

        return await with_retries(read, retries=self._read_retries)

    async def put_if_absent(self, registration: Registration) -> None:
        now = int(self._clock())
        registration.created_at = registration.created_at or now
        registration.updated_at = now

        claim_item = {
            "username": {"S": registration.username},
            "service": {"S": ACCOUNT_CLAIM_SERVICE},
            "email": {"S": registration.email},
            "updated_at": {"N": str(now)},
        }
        try:
            self._dynamodb.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self._table_name,
                            "Item": claim_item,
                            "ConditionExpression": "attribute_not_exists(#pk) OR #email = :email",
                            "ExpressionAttributeNames": {"#pk": "username", "#email": "email"},
                            "ExpressionAttributeValues": {":email": {"S": registration.email}},
                        }
                    },
                    {
                        "Put": {
                            "TableName": self._table_name,
                            "Item": _to_item(registration),
                            "ConditionExpression": "attribute_not_exists(#pk)",
                            "ExpressionAttributeNames": {"#pk": "username"},
                        }
                    },
                ]
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code == "TransactionCanceledException":
                reasons = [r.get("Code") for r in e.response.get("CancellationReasons", [])]
                log.info(
                    "registration_put_rejected",
                    username=registration.username,
                    service=registration.service,
                    reasons=reasons,
                )
                if len(reasons) == 2 and reasons[0] == "None" and reasons[1] == "ConditionalCheckFailed":
                    raise ConflictError(registration.username, registration.service) from e
                # Owner mismatch, or a concurrent transaction won the claim
                raise ConflictError(registration.username) from e
            raise self._upstream_error(
                "put_if_absent", e, username=registration.username, service=registration.service
            ) from e
        except BotoCoreError as e:
            raise self._upstream_error(
                "put_if_absent", e, username=registration.username, service=registration.service
            ) from e

    async def conditional_update(
        self,
        service: str,
        username: str,
        expected: Mapping[str, Any],
        set_fields: Optional[Mapping[str, Any]] = None,
        remove_fields: Iterable[str] = (),
    ) -> Registration:
        names: Dict[str, str] = {"#pk": "username"}
        values: Dict[str, Dict[str, str]] = {}

        conditions = ["attribute_exists(#pk)"]
        for i, (name, value) in enumerate(expected.items()):
            names[f"#e{i}"] = name
            if value is None:
                conditions.append(f"attribute_not_exists(#e{i})")
            else:
                values[f":e{i}"] = _attribute_value(value)
                conditions.append(f"#e{i} = :e{i}")

        to_set = dict(set_fields or {})
        to_remove = list(remove_fields)
        # A None value clears the attribute
        to_remove.extend(name for name, value in to_set.items() if value is None)
        to_set = {name: value for name, value in to_set.items() if value is not None}
        to_set["updated_at"] = int(self._clock())

        set_clauses = []
        for i, (name, value) in enumerate(to_set.items()):
            names[f"#s{i}"] = name
            values[f":s{i}"] = _attribute_value(value)
            set_clauses.append(f"#s{i} = :s{i}")
        remove_clauses = []
        for i, name in enumerate(to_remove):
            names[f"#r{i}"] = name
            remove_clauses.append(f"#r{i}")

        update_expression = "SET " + ", ".join(set_clauses)
        if remove_clauses:
            update_expression += " REMOVE " + ", ".join(remove_clauses)

        params: Dict[str, Any] = {
            "TableName": self._table_name,
            "Key": {"username": {"S": username}, "service": {"S": service}},
            "UpdateExpression": update_expression,
            "ConditionExpression": " AND ".join(conditions),
            "ExpressionAttributeNames": names,
            "ReturnValues": "ALL_NEW",
        }
        if values:
            params["ExpressionAttributeValues"] = values

        try:
            response = self._dynamodb.update_item(**params)
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise ConditionFailedError(service, username) from e
            raise self._upstream_error("conditional_update", e, username=username, service=service) from e
        except BotoCoreError as e:
            raise self._upstream_error("conditional_update", e, username=username, service=service) from e

        return _from_item(response["Attributes"])

    async def query_by_username(self, username: str) -> list[Registration]:
        async def read() -> list[Registration]:
            try:
                paginator = self._dynamodb.get_paginator("query")
                page_iterator = paginator.paginate(
                    TableName=self._table_name,
                    KeyConditionExpression="#pk = :username",
                    ExpressionAttributeNames={"#pk": "username"},
                    ExpressionAttributeValues={":username": {"S": username}},
                    ConsistentRead=True,
                )
                items = [item for page in page_iterator for item in page.get("Items", [])]
            except (ClientError, BotoCoreError) as e:
                raise self._upstream_error("query_by_username", e, username=username) from e
            return [_from_item(item) for item in items if not _is_claim(item)]

        return await with_retries(read, retries=self._read_retries)

    async def query_by_email(self, email: str) -> list[Registration]:
        async def read() -> list[Registration]:
            try:
                if self._email_index_name:
                    paginator = self._dynamodb.get_paginator("query")
                    page_iterator = paginator.paginate(
                        TableName=self._table_name,
                        IndexName=self._email_index_name,
                        KeyConditionExpression="#email = :email",
                        ExpressionAttributeNames={"#email": "email"},
                        ExpressionAttributeValues={":email": {"S": email}},
                    )
                else:
                    paginator = self._dynamodb.get_paginator("scan")
                    page_iterator = paginator.paginate(
                        TableName=self._table_name,
                        FilterExpression="#email = :email",
                        ExpressionAttributeNames={"#email": "email"},
                        ExpressionAttributeValues={":email": {"S": email}},
                        ConsistentRead=True,
                    )
                items = [item for page in page_iterator for item in page.get("Items", [])]
            except (ClientError, BotoCoreError) as e:
                raise self._upstream_error("query_by_email", e) from e
            return [_from_item(item) for item in items if not _is_claim(item)]

        return await with_retries(read, retries=self._read_retries)

    async def delete(self, service: str, username: str) -> bool:
        try:
            response = self._dynamodb.delete_item(
                TableName=self._table_name,
                Key={"username": {"S": username}, "service": {"S": service}},
                ReturnValues="ALL_OLD",
            )
        except (ClientError, BotoCoreError) as e:
            raise self._upstream_error("delete", e, username=username, service=service) from e
        deleted = bool(response.get("Attributes"))
        log.info("registration_deleted", username=username, service=service, deleted=deleted)
        return deleted

    async def release_username(self, username: str) -> None:
        try:
            self._dynamodb.delete_item(
                TableName=self._table_name,
                Key={"username": {"S": username}, "service": {"S": ACCOUNT_CLAIM_SERVICE}},
            )
        except (ClientError, BotoCoreError) as e:
            raise self._upstream_error("release_username", e, username=username) from e
        log.info("username_released", username=username)

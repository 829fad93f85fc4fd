"""boto3 client construction shared by the AWS adapters."""

from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.config import Config


def create_client(
    service_name: str,
    region: str,
    endpoint_url: Optional[str] = None,
    connect_timeout: float = 3.0,
    read_timeout: float = 5.0,
) -> Any:
    """Create a boto3 client with bounded timeouts and no automatic retries.

    Idempotent reads are retried by the adapters themselves (see
    loginn.retry); conditional writes must not be replayed.
    """
    client_kwargs: dict[str, Any] = {
        "region_name": region,
        "config": Config(
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        ),
    }
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url
    return boto3.client(service_name, **client_kwargs)

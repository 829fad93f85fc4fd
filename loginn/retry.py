"""Retry helper for idempotent upstream reads.

Writes are never retried here: a conditional write whose response was lost
would report a false conflict on replay.
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

import structlog

from loginn.exceptions import UpstreamUnavailableError

log = structlog.get_logger()

T = TypeVar("T")


async def with_retries(
    func: Callable[[], Awaitable[T]],
    retries: int = 2,
    base_delay: float = 0.05,
    max_delay: float = 1.0,
) -> T:
    """Run an idempotent read, retrying on UpstreamUnavailableError.

    Args:
        func: Async callable with no arguments
        retries: Extra attempts after the first
        base_delay: First backoff delay in seconds, doubled per attempt
        max_delay: Upper bound for a single delay

    Raises:
        UpstreamUnavailableError: When every attempt failed
    """
    for attempt in range(retries + 1):
        try:
            return await func()
        except UpstreamUnavailableError as e:
            if attempt == retries:
                raise
            delay = min(base_delay * (2**attempt), max_delay)
            delay += random.uniform(0, delay * 0.1)
            log.warning(
                "upstream_read_retry",
                operation=e.operation,
                attempt=attempt + 1,
                delay=round(delay, 3),
            )
            await asyncio.sleep(delay)
    raise RuntimeError("retry loop exited without result")

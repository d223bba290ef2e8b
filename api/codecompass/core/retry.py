"""Retry with exponential backoff for calls to external services."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from codecompass.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    retries: Optional[int] = None,
    delay: Optional[float] = None,
) -> T:
    """
    Await ``fn()`` until it succeeds or the attempts run out.

    Sleeps ``delay * 2**i`` seconds after the i-th failed attempt. The
    exception of the last attempt is re-raised unchanged.

    Args:
        fn: Zero-argument coroutine factory
        retries: Total number of attempts (default: settings.MAX_RETRIES)
        delay: Base delay in seconds (default: settings.RETRY_DELAY)
    """
    attempts = max(1, retries if retries is not None else settings.MAX_RETRIES)
    base_delay = delay if delay is not None else settings.RETRY_DELAY

    for i in range(attempts):
        try:
            return await fn()
        except Exception as e:
            logger.warning(f"Retry {i + 1}/{attempts} after error: {e}")
            if i == attempts - 1:
                raise
            await asyncio.sleep(base_delay * (2 ** i))

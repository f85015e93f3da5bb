# src/vision/retry.py - v2
"""Retry policy for vision calls: fixed attempt budget, linear backoff.

Every failure is retried the same way (network, non-2xx, empty text).
Attempt n (1-based) that fails waits n * step before the next attempt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from anyread.core.errors import VisionRecognitionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_STEP_S = 0.5


def backoff_delay(attempt: int, step_s: float = DEFAULT_BACKOFF_STEP_S) -> float:
    """Delay after a failed attempt (1-based)."""
    return attempt * step_s


async def with_retry(
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    provider: str = "unknown",
    max_retries: int = DEFAULT_MAX_RETRIES,
    step_s: float = DEFAULT_BACKOFF_STEP_S,
    **kwargs: Any,
) -> T:
    """Execute an async function, retrying any exception.

    Raises:
        VisionRecognitionError: After max_retries failed attempts, wrapping
            the last observed error.
    """
    attempts = max(1, max_retries)
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            last_error = e
            if attempt < attempts:
                delay = backoff_delay(attempt, step_s)
                logger.warning(
                    "Vision provider '%s' failed (attempt %d/%d): %s; retrying in %.1fs",
                    provider, attempt, attempts, e, delay,
                )
                await asyncio.sleep(delay)

    raise VisionRecognitionError(provider, attempts, last_error) from last_error

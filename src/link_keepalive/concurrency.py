"""Retry and backoff utilities for sequential async operations."""

import asyncio
import random
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class BackoffProfile:
    """Deterministic exponential backoff, no jitter."""

    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 10.0

    def delay(self, attempt: int) -> float:
        """Get delay in seconds after the given (1-based) failed attempt."""
        return min(self.base_delay * (self.multiplier ** (attempt - 1)), self.max_delay)


STANDARD_BACKOFF = BackoffProfile(base_delay=1.0, multiplier=2.0, max_delay=10.0)
RATE_LIMIT_BACKOFF = BackoffProfile(base_delay=10.0, multiplier=3.0, max_delay=60.0)

RATE_LIMIT_MESSAGE = re.compile(r'\bHTTP 429\b|\b429 Too Many\b', re.IGNORECASE)


def is_rate_limited(error: BaseException) -> bool:
    """Check whether an error represents an HTTP 429 response."""
    status_code = getattr(error, 'status_code', None)
    if status_code is None:
        response = getattr(error, 'response', None)
        status_code = getattr(response, 'status_code', None)

    if status_code is not None:
        return status_code == 429

    # Errors without a status code may still quote one; bare URLs must not match
    return RATE_LIMIT_MESSAGE.search(str(error)) is not None


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    *,
    description: str = 'operation',
    sleep: SleepFunc = asyncio.sleep,
    standard: BackoffProfile = STANDARD_BACKOFF,
    rate_limited: BackoffProfile = RATE_LIMIT_BACKOFF,
) -> T:
    """
    Await an operation until it succeeds or the attempts run out.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        max_attempts: Total number of attempts, at least 1
        description: Label used in log records
        sleep: Coroutine function used to suspend between attempts
        standard: Backoff for ordinary failures
        rate_limited: Backoff for HTTP 429 failures

    Returns:
        Result of the first successful attempt

    Raises:
        The error of the final attempt once all attempts failed
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            logger.warning(f"Attempt {attempt}/{max_attempts} for {description} failed: {e}")

            if attempt < max_attempts:
                profile = rate_limited if is_rate_limited(e) else standard
                delay = profile.delay(attempt)
                logger.debug(f"Retrying {description} in {delay:.1f}s")
                await sleep(delay)

    raise last_error


def humanized_delay(min_delay: float, max_delay: float) -> float:
    """Random pause in seconds between two targets."""
    return random.uniform(min_delay, max_delay)

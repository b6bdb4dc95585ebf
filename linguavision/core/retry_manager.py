"""
Retry with exponential backoff for remote provider calls.

Only quota errors (rate limit / resource exhausted) are retried. Any other
error propagates on the first failure, unchanged.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from linguavision.config import MAX_RETRIES, RETRY_DELAY_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar('T')

_QUOTA_MARKERS = ('429', 'quota', 'resource_exhausted')


@dataclass
class RetryPolicy:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Retries allowed after the first attempt
        initial_delay: Delay before the first retry, in seconds
        backoff_factor: Multiplier applied to the delay after each retry
    """
    max_retries: int = MAX_RETRIES
    initial_delay: float = RETRY_DELAY_SECONDS
    backoff_factor: float = 2.0


def is_quota_error(error: BaseException) -> bool:
    """
    Check if an error is a rate-limit / quota signal.

    Looks at a numeric ``status_code``/``code`` attribute first, then at the
    message text.
    """
    for attr in ('status_code', 'code'):
        if getattr(error, attr, None) == 429:
            return True
    message = str(error).lower()
    return any(marker in message for marker in _QUOTA_MARKERS)


class RetryManager:
    """Runs async operations with exponential backoff on quota errors."""

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Args:
            policy: Retry policy (defaults from configuration)
            sleep: Coroutine used to wait between attempts
        """
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_id: Optional[str] = None
    ) -> T:
        """Execute an operation with retry logic.

        Args:
            operation: Zero-argument coroutine function to execute
            operation_id: Label used in log messages

        Returns:
            Result of the operation

        Raises:
            Exception: The operation's error, immediately for non-quota
                errors, after the last retry for quota errors
        """
        op_id = operation_id or getattr(operation, '__name__', 'operation')
        retries_left = self.policy.max_retries
        delay = self.policy.initial_delay

        while True:
            try:
                return await operation()
            except Exception as error:
                if not is_quota_error(error) or retries_left <= 0:
                    raise

                logger.warning(
                    f"{op_id} rate limited, retrying in {delay:g}s "
                    f"({retries_left} retries left): {error}"
                )
                await self._sleep(delay)
                retries_left -= 1
                delay *= self.policy.backoff_factor


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = MAX_RETRIES,
    initial_delay: float = RETRY_DELAY_SECONDS,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
) -> T:
    """Convenience wrapper around ``RetryManager``.

    Example:
        text = await retry_with_backoff(lambda: provider.generate(prompt))
    """
    manager = RetryManager(RetryPolicy(max_retries=max_retries, initial_delay=initial_delay), sleep=sleep)
    return await manager.execute_with_retry(operation)

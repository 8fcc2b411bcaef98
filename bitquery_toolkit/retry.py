"""
Fixed-delay retry policy for GraphQL requests.

A request is retried when it fails with a network error or with an HTTP
status listed in the policy. The delay between attempts is constant.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from pydantic import BaseModel, Field

from .exceptions import RETRYABLE_STATUS_CODES, BitqueryError, ErrorHandler

logger = logging.getLogger(__name__)


class RetryPolicy(BaseModel):
    """Configuration for request retries."""

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_delay: int = Field(
        default=1000, ge=0, description="Delay between attempts in milliseconds"
    )
    retry_on_status_codes: List[int] = Field(
        default_factory=lambda: list(RETRYABLE_STATUS_CODES),
        description="HTTP status codes to retry on",
    )

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, the first one included."""
        return self.max_retries + 1

    @property
    def delay_seconds(self) -> float:
        return self.retry_delay / 1000.0


class RetryHandler:
    """Runs an async operation under a :class:`RetryPolicy`."""

    def __init__(self, policy: Optional[RetryPolicy] = None):
        """
        Initialize retry handler.

        Args:
            policy: Retry policy configuration
        """
        self.policy = policy or RetryPolicy()

    def _should_retry(self, error: BitqueryError, attempt: int) -> bool:
        """Determine if an error should be retried."""
        if attempt >= self.policy.max_attempts:
            return False
        return ErrorHandler.is_retryable_error(error, self.policy.retry_on_status_codes)

    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        operation_name: str = "request",
        **kwargs: Any,
    ) -> Any:
        """
        Execute a coroutine function with retry logic.

        Args:
            func: Coroutine function to execute
            *args: Function arguments
            operation_name: Name of the operation for logging
            **kwargs: Function keyword arguments

        Returns:
            Function result

        Raises:
            BitqueryError: The last error, once it is not retryable or the
                attempts are exhausted
        """
        attempt = 0

        while True:
            attempt += 1
            try:
                result = await func(*args, **kwargs)
            except BitqueryError as e:
                if not self._should_retry(e, attempt):
                    if attempt > 1:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            operation_name,
                            attempt,
                            e.message,
                        )
                    raise

                logger.warning(
                    "%s failed on attempt %d/%d, retrying in %.2fs: %s",
                    operation_name,
                    attempt,
                    self.policy.max_attempts,
                    self.policy.delay_seconds,
                    e.message,
                )
                await asyncio.sleep(self.policy.delay_seconds)
                continue

            if attempt > 1:
                logger.info("%s succeeded on attempt %d", operation_name, attempt)
            return result

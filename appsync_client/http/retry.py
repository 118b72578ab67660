"""
Retry control for transient connection failures.

Only connection resets are retried. Each retry waits a jittered delay and then
runs a complete new attempt (envelope, authentication and transport), so every
attempt is freshly signed and gets its own timeout window.
"""

from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from pydantic import BaseModel, Field, model_validator

from ..cancellation import CancellationToken
from ..constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_MAX_DELAY_MS,
    DEFAULT_RETRY_MIN_DELAY_MS,
)
from ..exceptions import ErrorHandler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Retry budget and jittered backoff bounds."""

    max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES,
        ge=0,
        description="Maximum number of attempts (at least one is made)",
    )
    min_delay_ms: int = Field(
        default=DEFAULT_RETRY_MIN_DELAY_MS, ge=0, description="Lower backoff bound in ms"
    )
    max_delay_ms: int = Field(
        default=DEFAULT_RETRY_MAX_DELAY_MS, ge=0, description="Upper backoff bound in ms"
    )

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> "RetryPolicy":
        if self.min_delay_ms > self.max_delay_ms:
            raise ValueError("min_delay_ms must not exceed max_delay_ms")
        return self

    @property
    def max_attempts(self) -> int:
        return max(self.max_retries, 1)

    def next_delay(self) -> float:
        """Sample the next backoff delay, in seconds."""
        return random.uniform(self.min_delay_ms, self.max_delay_ms) / 1000


class RetryState(str, Enum):
    """States of the retry controller."""

    ATTEMPTING = "attempting"
    DONE = "done"


class RetryController:
    """
    Bounded retry loop over a full request attempt.

    Example:
        ```python
        controller = RetryController(RetryPolicy(max_retries=3))
        response = await controller.run(attempt)
        ```
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.policy = policy or RetryPolicy()
        self.cancel_token = cancel_token
        self.state = RetryState.ATTEMPTING
        self.attempts = 0

    async def run(self, attempt: Callable[[int], Awaitable[T]]) -> T:
        """
        Run ``attempt`` until it succeeds, fails permanently or the budget runs out.

        Args:
            attempt: Coroutine function called with the 1-based attempt number

        Returns:
            The result of the first successful attempt

        Raises:
            The last error when the attempt fails permanently
        """
        self.state = RetryState.ATTEMPTING
        self.attempts = 0

        while True:
            self.attempts += 1
            try:
                result = await attempt(self.attempts)
            except Exception as e:
                if not ErrorHandler.is_retryable_error(e) or self.attempts >= self.policy.max_attempts:
                    self.state = RetryState.DONE
                    raise

                delay = self.policy.next_delay()
                logger.warning(
                    "Attempt %d/%d failed with %s, retrying in %.0f ms",
                    self.attempts,
                    self.policy.max_attempts,
                    e,
                    delay * 1000,
                )
                await self._backoff(delay)
                continue

            self.state = RetryState.DONE
            return result

    async def _backoff(self, delay: float) -> None:
        if self.cancel_token is None:
            await asyncio.sleep(delay)
            return

        try:
            await asyncio.wait_for(self.cancel_token.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return

        self.state = RetryState.DONE
        self.cancel_token.raise_if_cancelled()

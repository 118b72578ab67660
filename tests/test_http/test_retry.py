"""
Tests for the retry controller.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from appsync_client.cancellation import CancellationToken
from appsync_client.exceptions import (
    ConnectionResetError,
    RequestCancelledError,
    TimeoutError,
    TransportError,
)
from appsync_client.http import RetryController, RetryPolicy, RetryState


def _instant(max_retries: int) -> RetryPolicy:
    return RetryPolicy(max_retries=max_retries, min_delay_ms=0, max_delay_ms=0)


class FlakyAttempt:
    """Attempt double failing a fixed number of times before succeeding."""

    def __init__(self, failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = []

    async def __call__(self, number):
        self.calls.append(number)
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class TestRetryPolicy:
    """Test retry budget and delay sampling."""

    def test_defaults(self):
        policy = RetryPolicy()

        assert policy.max_retries == 5
        assert policy.min_delay_ms == 100
        assert policy.max_delay_ms == 1500

    @pytest.mark.parametrize("max_retries,attempts", [(0, 1), (1, 1), (3, 3), (5, 5)])
    def test_max_attempts(self, max_retries, attempts):
        """The budget counts total attempts, with at least one."""
        assert RetryPolicy(max_retries=max_retries).max_attempts == attempts

    def test_delay_within_bounds(self):
        policy = RetryPolicy(min_delay_ms=100, max_delay_ms=1500)

        for _ in range(50):
            assert 0.1 <= policy.next_delay() <= 1.5

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValidationError):
            RetryPolicy(min_delay_ms=500, max_delay_ms=100)

    def test_negative_budget_rejected(self):
        with pytest.raises(ValidationError):
            RetryPolicy(max_retries=-1)


class TestRetryController:
    """Test the bounded retry loop."""

    @pytest.mark.asyncio
    async def test_success_first_try(self):
        controller = RetryController(_instant(3))
        attempt = FlakyAttempt([])

        assert await controller.run(attempt) == "ok"
        assert attempt.calls == [1]
        assert controller.attempts == 1
        assert controller.state == RetryState.DONE

    @pytest.mark.asyncio
    async def test_resets_retried(self):
        """Two resets then success with a budget of 3."""
        controller = RetryController(_instant(3))
        attempt = FlakyAttempt([ConnectionResetError("reset"), ConnectionResetError("reset")])

        assert await controller.run(attempt) == "ok"
        assert attempt.calls == [1, 2, 3]
        assert controller.attempts == 3

    @pytest.mark.asyncio
    async def test_budget_exhausted_raises_last_error(self):
        last = ConnectionResetError("third")
        controller = RetryController(_instant(3))
        attempt = FlakyAttempt(
            [ConnectionResetError("first"), ConnectionResetError("second"), last]
        )

        with pytest.raises(ConnectionResetError) as exc_info:
            await controller.run(attempt)

        assert exc_info.value is last
        assert controller.state == RetryState.DONE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_retries", [0, 1])
    async def test_minimum_single_attempt(self, max_retries):
        controller = RetryController(_instant(max_retries))
        attempt = FlakyAttempt([ConnectionResetError("reset")])

        with pytest.raises(ConnectionResetError):
            await controller.run(attempt)

        assert attempt.calls == [1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            TransportError("broken pipe"),
            TimeoutError("Operation timed out after 10 milliseconds"),
            ValueError("bad"),
        ],
    )
    async def test_non_reset_errors_not_retried(self, error):
        controller = RetryController(_instant(5))
        attempt = FlakyAttempt([error])

        with pytest.raises(type(error)):
            await controller.run(attempt)

        assert attempt.calls == [1]

    @pytest.mark.asyncio
    async def test_backoff_uses_sampled_delay(self):
        """Each retry sleeps the sampled delay."""
        policy = RetryPolicy(max_retries=3, min_delay_ms=100, max_delay_ms=1500)
        controller = RetryController(policy)
        attempt = FlakyAttempt([ConnectionResetError("a"), ConnectionResetError("b")])

        with patch.object(RetryPolicy, "next_delay", return_value=0.25), patch.object(
            RetryController, "_backoff", new_callable=AsyncMock
        ) as backoff:
            await controller.run(attempt)

        assert [call.args[0] for call in backoff.await_args_list] == [0.25, 0.25]

    @pytest.mark.asyncio
    async def test_retry_logged(self, caplog):
        controller = RetryController(_instant(2))
        attempt = FlakyAttempt([ConnectionResetError("Connection reset by peer")])

        with caplog.at_level("WARNING", logger="appsync_client.http.retry"):
            await controller.run(attempt)

        assert "Attempt 1/2 failed with Connection reset by peer" in caplog.text

    @pytest.mark.asyncio
    async def test_cancel_during_backoff(self):
        token = CancellationToken()
        policy = RetryPolicy(max_retries=3, min_delay_ms=10_000, max_delay_ms=10_000)
        controller = RetryController(policy, cancel_token=token)
        attempt = FlakyAttempt([ConnectionResetError("reset")])

        asyncio.get_running_loop().call_later(0.02, token.cancel)

        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(controller.run(attempt), timeout=2)

        assert attempt.calls == [1]
        assert controller.state == RetryState.DONE

    @pytest.mark.asyncio
    async def test_token_without_cancel_waits_full_delay(self):
        token = CancellationToken()
        policy = RetryPolicy(max_retries=2, min_delay_ms=10, max_delay_ms=10)
        controller = RetryController(policy, cancel_token=token)
        attempt = FlakyAttempt([ConnectionResetError("reset")])

        assert await controller.run(attempt) == "ok"
        assert attempt.calls == [1, 2]

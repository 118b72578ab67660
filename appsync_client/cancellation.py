"""
Cooperative cancellation for in-flight requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from .exceptions import AppSyncClientError, RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """
    Token that lets a caller abort a request at any suspension point.

    Example:
        ```python
        token = CancellationToken()
        task = asyncio.create_task(client.execute(request, config.model_copy(
            update={"cancel_token": token}
        )))
        token.cancel()
        ```
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Signal cancellation. Idempotent."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self, url: Optional[str] = None) -> None:
        if self.cancelled:
            raise RequestCancelledError(self._message(), url=url)

    def _message(self) -> str:
        if self.reason:
            return f"Request cancelled: {self.reason}"
        return "Request cancelled"


async def run_cancellable(
    operation: Awaitable[T],
    token: Optional[CancellationToken] = None,
    timeout: Optional[float] = None,
    on_timeout: Optional[Callable[[], AppSyncClientError]] = None,
    url: Optional[str] = None,
) -> T:
    """
    Await an operation racing a deadline and a cancellation token.

    The operation is always finished (or cancelled and awaited) before this
    returns, so resources it holds are released deterministically. Exactly one
    outcome is produced: the operation's result or error, the timeout error,
    or RequestCancelledError.

    Args:
        operation: Awaitable to run
        token: Optional cancellation token
        timeout: Optional deadline in seconds
        on_timeout: Factory for the error raised when the deadline expires
        url: URL reported in cancellation errors

    Returns:
        The operation's result
    """
    if token is not None and token.cancelled:
        if asyncio.iscoroutine(operation):
            operation.close()
        token.raise_if_cancelled(url)

    task = asyncio.ensure_future(operation)
    waiters = {task}
    cancel_waiter: Optional[asyncio.Future[None]] = None
    if token is not None:
        cancel_waiter = asyncio.ensure_future(token.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for waiter in waiters:
            if not waiter.done():
                waiter.cancel()
        # Wait for the cancelled operation to unwind and release its socket.
        await asyncio.wait(waiters)

    if task in done:
        return task.result()

    if not task.cancelled():
        # Late failure while unwinding; the deadline or token already decided.
        task.exception()

    if token is not None and cancel_waiter in done:
        logger.debug("Operation aborted by cancellation token")
        raise RequestCancelledError(token._message(), url=url)

    if on_timeout is not None:
        raise on_timeout()
    raise asyncio.TimeoutError()

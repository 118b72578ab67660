"""
Single-attempt HTTP transport.

Each ``send`` issues exactly one POST and reads the response to completion.
HTTPS requests go through the shared keep-alive pool; plain HTTP requests
(local and test endpoints) use a throwaway session without pooling.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

import aiohttp

from ..cancellation import CancellationToken, run_cancellable
from ..exceptions import ErrorHandler, TimeoutError
from .connection_pool import KeepAliveConnectionPool, get_global_connection_pool
from .tracing import (
    TraceContext,
    TracedRequest,
    TransportTracer,
    default_tracer,
    request_trace_config,
)

if TYPE_CHECKING:
    from ..graphql.builder import RequestEnvelope
    from ..graphql.models import GraphQLRequest

logger = logging.getLogger(__name__)

# Deadlines are enforced per attempt by the transport, not by aiohttp.
_NO_CLIENT_TIMEOUT = aiohttp.ClientTimeout(total=None)


@dataclass(frozen=True)
class TransportResponse:
    """Outcome of one successful HTTP attempt, before content negotiation."""

    status_code: int
    body_text: str
    content_type: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


def _disable_nagle(response: aiohttp.ClientResponse) -> None:
    """Turn off Nagle's algorithm on the response socket, when there is one."""
    connection = response.connection
    transport = connection.transport if connection is not None else None
    if transport is None:
        return

    sock = transport.get_extra_info("socket")
    if sock is None or sock.family not in (socket.AF_INET, socket.AF_INET6):
        return
    try:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    except OSError as e:
        logger.debug("Could not set TCP_NODELAY: %s", e)


class TransportClient:
    """
    Issue single HTTP attempts with per-attempt deadline and cancellation.

    Example:
        ```python
        transport = TransportClient()
        response = await transport.send(envelope, request, timeout_ms=5000)
        ```
    """

    def __init__(
        self,
        pool: Optional[KeepAliveConnectionPool] = None,
        tracer: Optional[TransportTracer] = None,
    ):
        """
        Initialize the transport.

        Args:
            pool: Keep-alive pool for HTTPS; the global pool is used if omitted
            tracer: Tracer receiving the spans of traced requests
        """
        self._pool = pool
        self.tracer = tracer or default_tracer

    async def _get_pool(self) -> KeepAliveConnectionPool:
        if self._pool is None or self._pool.closed:
            self._pool = await get_global_connection_pool()
        return self._pool

    def _create_plain_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(force_close=True),
            raise_for_status=False,
            trace_configs=[request_trace_config()],
        )

    async def send(
        self,
        envelope: RequestEnvelope,
        request: GraphQLRequest,
        timeout_ms: int,
        cancel_token: Optional[CancellationToken] = None,
        trace_context: Optional[TraceContext] = None,
    ) -> TransportResponse:
        """
        Send one request attempt.

        Args:
            envelope: Authenticated request envelope
            request: The GraphQL request, attached to timeout errors
            timeout_ms: Deadline for this attempt in milliseconds
            cancel_token: Optional token aborting the attempt
            trace_context: Optional trace identity for transport spans

        Returns:
            TransportResponse with status code, body text and content type

        Raises:
            TimeoutError: If the attempt exceeds ``timeout_ms``
            RequestCancelledError: If the token fires first
            ConnectionResetError: If the peer resets the connection
            TransportError: For any other transport failure
        """
        logger.debug("POST %s (timeout %d ms)", envelope.url, timeout_ms)

        def on_timeout() -> TimeoutError:
            return TimeoutError(
                f"Operation timed out after {timeout_ms} milliseconds",
                request=request,
                url=envelope.url,
                timeout_ms=timeout_ms,
            )

        return await run_cancellable(
            self._send_once(envelope, trace_context),
            token=cancel_token,
            timeout=timeout_ms / 1000,
            on_timeout=on_timeout,
            url=envelope.url,
        )

    async def _send_once(
        self, envelope: RequestEnvelope, trace_context: Optional[TraceContext]
    ) -> TransportResponse:
        try:
            if envelope.scheme == "https":
                pool = await self._get_pool()
                async with pool.get_session() as session:
                    return await self._post(session, envelope, trace_context)

            async with self._create_plain_session() as session:
                return await self._post(session, envelope, trace_context)
        except (aiohttp.ClientError, OSError) as e:
            error = ErrorHandler.classify_transport_error(e, envelope.url)
            logger.debug("Attempt to %s failed: %s", envelope.url, error)
            raise error from e

    async def _post(
        self,
        session: aiohttp.ClientSession,
        envelope: RequestEnvelope,
        trace_context: Optional[TraceContext],
    ) -> TransportResponse:
        async with session.request(
            envelope.method,
            envelope.url,
            data=envelope.body.encode("utf-8"),
            headers=envelope.headers,
            timeout=_NO_CLIENT_TIMEOUT,
            trace_request_ctx=(
                TracedRequest(self.tracer, trace_context) if trace_context is not None else None
            ),
        ) as response:
            _disable_nagle(response)
            body_text = await response.text(encoding="utf-8", errors="replace")
            return TransportResponse(
                status_code=response.status,
                body_text=body_text,
                content_type=response.headers.get("Content-Type"),
                headers=dict(response.headers),
            )

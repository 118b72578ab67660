"""
Keep-alive connection pool for HTTPS endpoints.

A single pooled aiohttp session is created lazily and shared by every call in
the process, so repeated calls to the same AppSync endpoint reuse TLS
connections instead of paying a handshake per request.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

import aiohttp
from pydantic import BaseModel, ConfigDict, Field

from ..constants import APPSYNC_MAX_QUERY_RUNTIME_MS
from .tracing import request_trace_config

logger = logging.getLogger(__name__)


class ConnectionPoolConfig(BaseModel):
    """Configuration for the keep-alive connection pool."""

    total_connections: int = Field(
        default=100, ge=1, le=1000, description="Total connection pool size"
    )
    connections_per_host: int = Field(
        default=30, ge=1, le=100, description="Maximum connections per host"
    )
    keepalive_timeout: float = Field(
        default=APPSYNC_MAX_QUERY_RUNTIME_MS / 1000,
        gt=0,
        description="Idle keep-alive timeout in seconds",
    )
    ttl_dns_cache: int = Field(default=300, ge=0, description="DNS cache TTL in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    trace_configs: List[Any] = Field(
        default_factory=list, description="aiohttp TraceConfig instances"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class KeepAliveConnectionPool:
    """
    Lazily created, shared aiohttp session backed by a keep-alive connector.

    An aiohttp session belongs to the event loop it was created on. The pool
    remembers that loop and replaces the session when it is used from another
    one, so a process running one ``asyncio.run`` per invocation keeps working.
    """

    def __init__(self, config: Optional[ConnectionPoolConfig] = None):
        """
        Initialize the connection pool.

        Args:
            config: Connection pool configuration
        """
        self.config = config or ConnectionPoolConfig()
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self._closed = False
        self.sessions_created = 0

    def _loop_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _create_session(self) -> aiohttp.ClientSession:
        connector = aiohttp.TCPConnector(
            limit=self.config.total_connections,
            limit_per_host=self.config.connections_per_host,
            ttl_dns_cache=self.config.ttl_dns_cache,
            keepalive_timeout=self.config.keepalive_timeout,
            ssl=self.config.verify_ssl,
            force_close=False,
        )
        return aiohttp.ClientSession(
            connector=connector,
            raise_for_status=False,
            trace_configs=[request_trace_config(), *self.config.trace_configs],
        )

    def _drop_foreign_session(self, loop: asyncio.AbstractEventLoop) -> bool:
        """Forget a session owned by another event loop; it cannot be used or closed here."""
        if self._session is None or self._session_loop is loop:
            return False
        logger.debug("Discarding keep-alive session bound to a previous event loop")
        self._session = None
        self._session_loop = None
        return True

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[aiohttp.ClientSession, None]:
        """
        Get the pooled session for the running event loop.

        Yields:
            Configured aiohttp ClientSession
        """
        if self._closed:
            raise RuntimeError("Connection pool is closed")

        loop = asyncio.get_running_loop()
        async with self._loop_lock():
            self._drop_foreign_session(loop)
            if self._session is None or self._session.closed:
                self._session = self._create_session()
                self._session_loop = loop
                self.sessions_created += 1
                logger.debug("Created keep-alive HTTPS session")
            session = self._session

        yield session

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the pooled session and its connector."""
        if self._closed:
            return

        self._closed = True

        async with self._loop_lock():
            if not self._drop_foreign_session(asyncio.get_running_loop()) and self._session:
                await self._session.close()
            self._session = None
            self._session_loop = None

        logger.debug("Connection pool closed after %d session(s)", self.sessions_created)

    async def __aenter__(self) -> "KeepAliveConnectionPool":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


# Global connection pool instance for reuse
_global_pool: Optional[KeepAliveConnectionPool] = None
_global_pool_lock: Optional[asyncio.Lock] = None
_global_pool_lock_loop: Optional[asyncio.AbstractEventLoop] = None


def _get_global_pool_lock() -> asyncio.Lock:
    # asyncio locks must not be shared between event loops
    global _global_pool_lock, _global_pool_lock_loop

    loop = asyncio.get_running_loop()
    if _global_pool_lock is None or _global_pool_lock_loop is not loop:
        _global_pool_lock = asyncio.Lock()
        _global_pool_lock_loop = loop
    return _global_pool_lock


async def get_global_connection_pool(
    config: Optional[ConnectionPoolConfig] = None,
) -> KeepAliveConnectionPool:
    """
    Get or create the global connection pool instance.

    The pool outlives event loops; its session is recreated on the first use
    from a new loop.

    Args:
        config: Optional configuration for a new pool

    Returns:
        Global connection pool instance
    """
    global _global_pool

    async with _get_global_pool_lock():
        if _global_pool is None or _global_pool.closed:
            _global_pool = KeepAliveConnectionPool(config)

    return _global_pool


async def close_global_connection_pool() -> None:
    """Close the global connection pool."""
    global _global_pool

    async with _get_global_pool_lock():
        if _global_pool:
            await _global_pool.close()
            _global_pool = None

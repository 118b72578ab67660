"""
HTTP transport, keep-alive pooling, tracing and retry control.
"""

from .connection_pool import (
    APPSYNC_MAX_QUERY_RUNTIME_MS,
    ConnectionPoolConfig,
    KeepAliveConnectionPool,
    close_global_connection_pool,
    get_global_connection_pool,
)
from .retry import RetryController, RetryPolicy, RetryState
from .tracing import (
    TraceContext,
    TracedRequest,
    TransportSpan,
    TransportTracer,
    default_tracer,
    request_trace_config,
)
from .transport import TransportClient, TransportResponse

__all__ = [
    "APPSYNC_MAX_QUERY_RUNTIME_MS",
    "ConnectionPoolConfig",
    "KeepAliveConnectionPool",
    "RetryController",
    "RetryPolicy",
    "RetryState",
    "TraceContext",
    "TracedRequest",
    "TransportClient",
    "TransportResponse",
    "TransportSpan",
    "TransportTracer",
    "close_global_connection_pool",
    "default_tracer",
    "get_global_connection_pool",
    "request_trace_config",
]

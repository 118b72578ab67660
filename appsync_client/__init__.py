"""
Async GraphQL client for AWS AppSync with AIOHTTP.

This package executes single GraphQL operations against AppSync (or any
GraphQL-over-HTTP endpoint) and focuses on the concerns of production
callers rather than on GraphQL features.

Features:
- API key or IAM (SigV4) authentication, with region inference from the endpoint
- Per-attempt timeouts and cooperative cancellation
- Bounded, jittered retries of connection resets
- HTTPS keep-alive pooling shared across calls
- Whitespace/comment normalization of inline query literals
- Environment-driven settings with Pydantic validation
"""

from .auth import (
    APIKeyAuth,
    APIKeyConfig,
    AuthMethod,
    DefaultCredentialProvider,
    IAMAuth,
    IAMAuthConfig,
    StaticCredentialProvider,
)
from .cancellation import CancellationToken
from .config import ClientSettings, ConfigLoader, RequestConfig, config_manager
from .exceptions import (
    AppSyncClientError,
    ConfigurationError,
    ConnectionResetError,
    GraphQLExecutionError,
    RequestCancelledError,
    ResponseFormatError,
    TimeoutError,
    TransportError,
)
from .graphql import (
    GRAPHQL_API_ENDPOINT_ENV_NAME,
    AppSyncClient,
    ExecutionResult,
    GraphQLError,
    GraphQLRequest,
    GraphQLResponse,
    call,
    execute,
    gql,
    normalize_query,
)
from .http import TraceContext, close_global_connection_pool
from .logging import setup_logging

__version__ = "0.1.0"

__all__ = [
    # Client
    "AppSyncClient",
    "call",
    "execute",
    "GRAPHQL_API_ENDPOINT_ENV_NAME",
    # Queries
    "gql",
    "normalize_query",
    # Models
    "ExecutionResult",
    "GraphQLError",
    "GraphQLRequest",
    "GraphQLResponse",
    # Authentication
    "APIKeyAuth",
    "APIKeyConfig",
    "AuthMethod",
    "DefaultCredentialProvider",
    "IAMAuth",
    "IAMAuthConfig",
    "StaticCredentialProvider",
    # Configuration
    "ClientSettings",
    "ConfigLoader",
    "RequestConfig",
    "config_manager",
    # Cancellation and tracing
    "CancellationToken",
    "TraceContext",
    # Lifecycle
    "close_global_connection_pool",
    "setup_logging",
    # Exceptions
    "AppSyncClientError",
    "ConfigurationError",
    "ConnectionResetError",
    "GraphQLExecutionError",
    "RequestCancelledError",
    "ResponseFormatError",
    "TimeoutError",
    "TransportError",
]

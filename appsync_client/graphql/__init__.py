"""
GraphQL support for appsync_client.

This module provides query normalization, request envelopes, response
decoding and the AppSync client facade.
"""

from .builder import JSON_CONTENT_TYPE, RequestBuilder, RequestEnvelope, build_envelope
from .client import GRAPHQL_API_ENDPOINT_ENV_NAME, AppSyncClient, call, execute
from .models import (
    ErrorLocation,
    ExecutionResult,
    GraphQLError,
    GraphQLRequest,
    GraphQLResponse,
)
from .normalizer import gql, normalize_query
from .parser import is_json_content_type, parse_response

__all__ = [
    # Client
    "AppSyncClient",
    "GRAPHQL_API_ENDPOINT_ENV_NAME",
    "call",
    "execute",
    # Models
    "ErrorLocation",
    "ExecutionResult",
    "GraphQLError",
    "GraphQLRequest",
    "GraphQLResponse",
    # Builder
    "JSON_CONTENT_TYPE",
    "RequestBuilder",
    "RequestEnvelope",
    "build_envelope",
    # Normalizer
    "gql",
    "normalize_query",
    # Parser
    "is_json_content_type",
    "parse_response",
]

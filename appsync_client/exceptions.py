"""
Exception hierarchy for the AppSync GraphQL client.

This module provides the client's error taxonomy and the utilities that map
low-level aiohttp and socket failures onto it.
"""

from __future__ import annotations

import errno
from typing import TYPE_CHECKING, Any, Optional, Sequence

import aiohttp

if TYPE_CHECKING:
    from .graphql.models import GraphQLError, GraphQLRequest


class AppSyncClientError(Exception):
    """
    Base exception for all client operations.

    Attributes:
        message: Human-readable error message
        url: Endpoint URL involved in the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class ConfigurationError(AppSyncClientError):
    """
    Raised when the client cannot be configured for a request.

    Covers a missing endpoint, an unresolved AWS region, missing credentials
    and invalid authentication settings. Always raised before any network I/O.
    """

    pass


class TransportError(AppSyncClientError):
    """
    Raised for socket or protocol failures during a request attempt.

    Transport errors other than connection resets are never retried.

    Attributes:
        original_error: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, url, **kwargs)
        self.original_error = original_error


class TimeoutError(TransportError):
    """
    Raised when a request attempt does not complete within its deadline.

    Attributes:
        request: The GraphQL request that timed out, for diagnostics
        timeout_ms: The per-attempt deadline that was exceeded
    """

    def __init__(
        self,
        message: str,
        request: Optional[GraphQLRequest] = None,
        url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        super().__init__(message, url)
        self.request = request
        self.timeout_ms = timeout_ms


class ConnectionResetError(TransportError):
    """Raised when the peer resets or drops the connection mid-exchange."""

    pass


class RequestCancelledError(TransportError):
    """Raised when a request is aborted through its cancellation token."""

    pass


class ResponseFormatError(AppSyncClientError):
    """
    Raised when the endpoint answers with something other than a GraphQL document.

    Attributes:
        body: Raw response text
        status_code: HTTP status code of the response
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        body: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, url)
        self.body = body
        self.status_code = status_code


class GraphQLExecutionError(AppSyncClientError):
    """
    Raised when a GraphQL response carries a non-empty ``errors`` list.

    Attributes:
        errors: The GraphQL errors reported by the server
        data: Partial data returned alongside the errors
        status_code: HTTP status code of the response
    """

    def __init__(
        self,
        message: str,
        errors: Sequence[GraphQLError] = (),
        data: Any = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, url)
        self.errors = tuple(errors)
        self.data = data
        self.status_code = status_code


def _is_reset(error: BaseException) -> bool:
    if isinstance(error, OSError) and error.errno == errno.ECONNRESET:
        return True
    return isinstance(error, aiohttp.ServerDisconnectedError)


class ErrorHandler:
    """
    Utility class for classifying transport failures.

    Converts aiohttp and socket exceptions into the client's taxonomy and
    decides which of them may be retried.
    """

    @staticmethod
    def classify_transport_error(
        error: BaseException, url: Optional[str] = None
    ) -> TransportError:
        """
        Convert a low-level exception into a TransportError subclass.

        Args:
            error: The original aiohttp or socket exception
            url: The URL that caused the error

        Returns:
            ConnectionResetError for resets, TransportError otherwise
        """
        if isinstance(error, TransportError):
            return error

        if _is_reset(error):
            return ConnectionResetError(
                f"Connection reset by peer: {error}", url=url, original_error=error
            )

        if isinstance(error, aiohttp.ClientPayloadError):
            cause = error.__cause__ or error.__context__
            if cause is not None and _is_reset(cause):
                return ConnectionResetError(
                    f"Connection reset while reading response: {error}",
                    url=url,
                    original_error=error,
                )
            return TransportError(f"Payload error: {error}", url=url, original_error=error)

        if isinstance(error, aiohttp.ClientSSLError):
            return TransportError(f"SSL error: {error}", url=url, original_error=error)

        if isinstance(error, aiohttp.ClientConnectorError):
            return TransportError(f"Connector error: {error}", url=url, original_error=error)

        if isinstance(error, aiohttp.ClientError):
            return TransportError(f"Client error: {error}", url=url, original_error=error)

        return TransportError(
            f"Unexpected transport error: {error}", url=url, original_error=error
        )

    @staticmethod
    def is_retryable_error(error: BaseException) -> bool:
        """
        Determine if an error may be retried.

        Only connection resets are transient enough to retry.
        """
        return isinstance(error, ConnectionResetError)

"""
AppSync GraphQL client.

This module ties together envelope construction, authentication, transport,
retries and response decoding into ``execute`` (low level, returns the status
code and decoded body) and ``call`` (raises on any failure and returns only
the ``data`` payload).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from ..auth import create_auth_method
from ..cancellation import run_cancellable
from ..config.manager import config_manager
from ..config.models import ClientSettings, RequestConfig
from ..constants import GRAPHQL_API_ENDPOINT_ENV_NAME
from ..exceptions import (
    AppSyncClientError,
    ConfigurationError,
    GraphQLExecutionError,
    ResponseFormatError,
)
from ..http.retry import RetryController, RetryPolicy
from ..http.transport import TransportClient, TransportResponse
from .builder import RequestBuilder
from .models import ExecutionResult, GraphQLRequest, GraphQLResponse
from .parser import parse_response

logger = logging.getLogger(__name__)


class AppSyncClient:
    """
    GraphQL client for AWS AppSync endpoints.

    Authenticates with an API key or with SigV4-signed requests, enforces a
    per-attempt timeout and retries connection resets with jittered backoff.

    Examples:
        Low-level execution with an API key:
        ```python
        client = AppSyncClient()
        config = RequestConfig(
            url="https://abc.appsync-api.eu-west-1.amazonaws.com/graphql",
            auth=APIKeyConfig(api_key="da2-..."),
            timeout_ms=5000,
        )
        result = await client.execute(GraphQLRequest(query=gql('''
            query GetEvent($id: ID!) {
                getEvent(id: $id) { id name }
            }
        '''), variables={"id": "1"}), config)
        ```

        Raising wrapper using ambient settings and IAM signing:
        ```python
        data = await AppSyncClient(ConfigLoader().load_config()).call(request)
        ```
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[TransportClient] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Process settings used by ``call``; loaded from the
                environment on first use if omitted
            transport: Transport used for every attempt
        """
        self._settings = settings
        self.transport = transport or TransportClient()

    @property
    def settings(self) -> ClientSettings:
        if self._settings is None:
            self._settings = config_manager.get_config()
        return self._settings

    async def execute(self, request: GraphQLRequest, config: RequestConfig) -> ExecutionResult:
        """
        Execute a GraphQL request.

        GraphQL-level errors are returned in the body, not raised.

        Args:
            request: The GraphQL operation
            config: Endpoint, authentication, timeout and retry configuration

        Returns:
            ExecutionResult with the status code and a GraphQLResponse for JSON
            bodies or the raw text otherwise

        Raises:
            ConfigurationError: Before any I/O if the request cannot be authenticated
            TimeoutError: If an attempt exceeds ``config.timeout_ms``
            ConnectionResetError: If resets outlast the retry budget
            TransportError: For other transport failures
        """
        auth = create_auth_method(config.auth)
        auth.prepare(config.url)

        builder = RequestBuilder(auth)
        controller = RetryController(
            RetryPolicy(
                max_retries=config.max_retries,
                min_delay_ms=config.retry_min_delay_ms,
                max_delay_ms=config.retry_max_delay_ms,
            ),
            cancel_token=config.cancel_token,
        )

        async def attempt(number: int) -> TransportResponse:
            # Credential resolution may block on the network; keep it abortable.
            envelope = await run_cancellable(
                builder.build(request, config.url),
                token=config.cancel_token,
                url=config.url,
            )
            logger.debug("Attempt %d to %s", number, config.url)
            return await self.transport.send(
                envelope,
                request,
                timeout_ms=config.timeout_ms,
                cancel_token=config.cancel_token,
                trace_context=config.trace_context,
            )

        response = await controller.run(attempt)
        return ExecutionResult(
            status_code=response.status_code,
            body=parse_response(response.body_text, response.content_type),
        )

    def _resolve_endpoint(self, endpoint: Optional[str]) -> str:
        url = endpoint or self.settings.endpoint
        if not url:
            raise ConfigurationError(
                "appsync url should be provided either as parameter or via "
                f"{GRAPHQL_API_ENDPOINT_ENV_NAME}, but wasn't found"
            )
        return url

    async def call(self, request: GraphQLRequest, endpoint: Optional[str] = None) -> Any:
        """
        Execute a GraphQL request and return its ``data`` payload.

        Args:
            request: The GraphQL operation
            endpoint: Endpoint URL; defaults to the configured endpoint

        Returns:
            The ``data`` member of the GraphQL response

        Raises:
            ConfigurationError: If no endpoint is available or the request
                cannot be authenticated
            TimeoutError: If an attempt exceeds the configured timeout
            ConnectionResetError: If resets outlast the retry budget
            TransportError: For other transport failures
            ResponseFormatError: If the endpoint did not answer with a GraphQL
                JSON object
            GraphQLExecutionError: If the response carries GraphQL errors

        Every failure is logged at ERROR level before it is raised.
        """
        try:
            url = self._resolve_endpoint(endpoint)
            try:
                config = self.settings.to_request_config(url)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid request configuration: {e}", url=url) from e

            result = await self.execute(request, config)
        except (AppSyncClientError, json.JSONDecodeError) as e:
            logger.error(
                "GraphQL request to %s failed: %s: %s",
                endpoint or self.settings.endpoint,
                type(e).__name__,
                e,
            )
            raise

        body = result.body

        if not isinstance(body, GraphQLResponse):
            logger.error("Request to GraphQL failed: %s", body)
            raise ResponseFormatError(
                f"Request to GraphQL failed: {body}",
                url=url,
                body=body,
                status_code=result.status_code,
            )

        if body.has_errors:
            errors_json = json.dumps([error.to_dict() for error in body.errors])
            logger.error("GraphQL request errors: %s", errors_json)
            raise GraphQLExecutionError(
                f"GraphQL request errors: {errors_json}",
                errors=body.errors,
                data=body.data,
                url=url,
                status_code=result.status_code,
            )

        return body.data


async def execute(request: GraphQLRequest, config: RequestConfig) -> ExecutionResult:
    """Execute a GraphQL request with a default client."""
    return await AppSyncClient().execute(request, config)


async def call(request: GraphQLRequest, endpoint: Optional[str] = None) -> Any:
    """Execute a GraphQL request with ambient settings and return ``data``."""
    return await AppSyncClient().call(request, endpoint)

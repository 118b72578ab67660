"""
Shared test fixtures and configuration for the appsync_client test suite.
"""

from typing import AsyncGenerator, Callable, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from appsync_client.auth import APIKeyConfig, IAMAuthConfig, StaticCredentialProvider
from appsync_client.config import ClientSettings, RequestConfig, config_manager
from appsync_client.graphql import GraphQLRequest
from appsync_client.http import close_global_connection_pool

APPSYNC_URL = "https://abc123.appsync-api.eu-west-1.amazonaws.com/graphql"
TEST_API_KEY = "da2-abcdefghijklmnopqrstuvwxyz"


@pytest.fixture(autouse=True)
async def close_pool() -> AsyncGenerator[None, None]:
    """Close the process-wide keep-alive pool after every test."""
    yield
    await close_global_connection_pool()


@pytest.fixture(autouse=True)
def reset_config_manager():
    """Forget settings cached by the global config manager."""
    yield
    config_manager._config = None


@pytest.fixture
def sample_request() -> GraphQLRequest:
    """A small query with variables."""
    return GraphQLRequest(
        query="query GetEvent($id: ID!) {\ngetEvent(id: $id) {\nid\nname\n}\n}",
        variables={"id": "1"},
        operation_name="GetEvent",
    )


@pytest.fixture
def api_key_config() -> RequestConfig:
    """API key request configuration with instant retries."""
    return RequestConfig(
        url=APPSYNC_URL,
        auth=APIKeyConfig(api_key=TEST_API_KEY),
        timeout_ms=5000,
        max_retries=3,
        retry_min_delay_ms=0,
        retry_max_delay_ms=0,
    )


@pytest.fixture
def static_credentials() -> StaticCredentialProvider:
    """Fixed AWS credentials, including a session token."""
    return StaticCredentialProvider(
        "AKIDEXAMPLE", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY", "session-token-value"
    )


@pytest.fixture
def iam_config(static_credentials: StaticCredentialProvider) -> RequestConfig:
    """IAM request configuration signing with static credentials."""
    return RequestConfig(
        url=APPSYNC_URL,
        auth=IAMAuthConfig(credential_provider=static_credentials),
        timeout_ms=5000,
        max_retries=3,
        retry_min_delay_ms=0,
        retry_max_delay_ms=0,
    )


@pytest.fixture
def settings() -> ClientSettings:
    """Client settings pointing at the test endpoint."""
    return ClientSettings(
        endpoint=APPSYNC_URL,
        api_key=TEST_API_KEY,
        max_retries=3,
        retry_min_delay_ms=0,
        retry_max_delay_ms=0,
    )


@pytest.fixture
def graphql_server() -> Callable[..., TestServer]:
    """
    Build a local HTTP GraphQL server from a POST handler.

    Returns a factory; use the result as an async context manager.
    """

    def factory(handler: Callable[[web.Request], web.StreamResponse]) -> TestServer:
        app = web.Application()
        app.router.add_post("/graphql", handler)
        return TestServer(app)

    return factory


class RecordingHash:
    """Hash double recording every chunk fed into it."""

    instances: List["RecordingHash"] = []

    def __init__(self) -> None:
        import hashlib

        self._hash = hashlib.sha256()
        self.chunks: List[bytes] = []
        RecordingHash.instances.append(self)

    def update(self, data: bytes) -> None:
        self.chunks.append(data)
        self._hash.update(data)

    def digest(self) -> bytes:
        return self._hash.digest()


@pytest.fixture
def recording_hash():
    """Hash factory double; instances are collected on the class."""
    RecordingHash.instances = []
    yield RecordingHash
    RecordingHash.instances = []

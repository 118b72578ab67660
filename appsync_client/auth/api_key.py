"""
API key authentication implementation.

AppSync API keys travel in a single request header and need no credentials
or signing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from ..exceptions import ConfigurationError
from .base import AuthConfig, AuthMethod, AuthResult, AuthType

if TYPE_CHECKING:
    from ..graphql.builder import RequestEnvelope

API_KEY_HEADER = "x-api-key"


class APIKeyConfig(AuthConfig):
    """Configuration for API key authentication."""

    auth_type: AuthType = Field(default=AuthType.API_KEY, frozen=True)
    api_key: str = Field(description="The API key value")
    header_name: str = Field(
        default=API_KEY_HEADER, description="Header carrying the API key"
    )


class APIKeyAuth(AuthMethod):
    """
    API key authentication method.

    Example:
        ```python
        auth = APIKeyAuth(APIKeyConfig(api_key="da2-..."))
        envelope = await auth.apply(envelope)
        ```
    """

    def __init__(self, config: APIKeyConfig):
        super().__init__(config)
        self.config: APIKeyConfig = config

    def prepare(self, url: str) -> None:
        if not self.config.api_key or not self.config.api_key.strip():
            raise ConfigurationError("API key is required but not provided", url=url)

    async def authenticate(self, envelope: RequestEnvelope) -> AuthResult:
        headers = dict(envelope.headers)
        headers[self.config.header_name] = self.config.api_key
        return AuthResult(headers=headers)

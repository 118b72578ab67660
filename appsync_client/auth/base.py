"""
Base authentication classes and interfaces.

This module defines the base classes and interfaces shared by the API key and
IAM (SigV4) authentication strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from ..graphql.builder import RequestEnvelope


class AuthType(str, Enum):
    """Supported authentication types."""

    API_KEY = "api_key"
    IAM = "iam"


@dataclass
class AuthResult:
    """
    Result of an authentication operation.

    Attributes:
        headers: The complete header set to send with the request
        signed: Whether the headers carry a request signature
    """

    headers: Dict[str, str] = field(default_factory=dict)
    signed: bool = False


class AuthConfig(BaseModel):
    """Base configuration for authentication methods."""

    auth_type: AuthType

    model_config = ConfigDict(frozen=True)


class AuthMethod(ABC):
    """
    Abstract base class for authentication strategies.

    A strategy is validated once per call with ``prepare`` (before any I/O)
    and then asked to finalize the headers of every attempt's envelope.
    """

    def __init__(self, config: AuthConfig):
        """
        Initialize the authentication method.

        Args:
            config: Authentication configuration
        """
        self.config = config

    def prepare(self, url: str) -> None:
        """
        Validate the configuration against the target URL.

        Raises:
            ConfigurationError: If the request cannot be authenticated
        """

    @abstractmethod
    async def authenticate(self, envelope: RequestEnvelope) -> AuthResult:
        """
        Produce the final header set for an outgoing envelope.

        Args:
            envelope: The request envelope to authenticate

        Returns:
            AuthResult containing the headers to send
        """

    async def apply(self, envelope: RequestEnvelope) -> RequestEnvelope:
        """Return a copy of the envelope carrying the authenticated headers."""
        result = await self.authenticate(envelope)
        return envelope.with_headers(result.headers)

    @property
    def auth_type(self) -> AuthType:
        return self.config.auth_type

    @property
    def region(self) -> Optional[str]:
        return None

"""
IAM (SigV4) authentication implementation.

Requests are signed with credentials from an asynchronous provider. The
signing region is taken from the configuration, inferred from the AppSync
endpoint host, or taken from the ambient default, in that order.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import urlparse

from pydantic import ConfigDict, Field

from ..exceptions import ConfigurationError
from .base import AuthConfig, AuthMethod, AuthResult, AuthType
from .credentials import DefaultCredentialProvider
from .hashing import Sha256Hash
from .signing import BotocoreSigner, SigningRequest

if TYPE_CHECKING:
    from ..graphql.builder import RequestEnvelope

logger = logging.getLogger(__name__)

APPSYNC_SERVICE = "appsync"

# https://<id>.appsync-api.<region>.amazonaws.com/graphql
_REGION_FROM_HOST = re.compile(r"\.([^.]+)\.amazonaws\.com$", re.IGNORECASE)


def region_from_url(url: str) -> Optional[str]:
    """Infer the AWS region from an ``*.<region>.amazonaws.com`` endpoint."""
    host = urlparse(url).hostname or ""
    match = _REGION_FROM_HOST.search(host)
    return match.group(1) if match else None


class IAMAuthConfig(AuthConfig):
    """Configuration for IAM (SigV4) authentication."""

    auth_type: AuthType = Field(default=AuthType.IAM, frozen=True)
    region: Optional[str] = Field(default=None, description="Explicit signing region")
    default_region: Optional[str] = Field(
        default=None, description="Ambient region used when none can be inferred"
    )
    service: str = Field(default=APPSYNC_SERVICE, description="Signing service name")
    credential_provider: Optional[Any] = Field(
        default=None, description="Async credential provider (defaults to boto3's chain)"
    )
    hash_factory: Any = Field(default=Sha256Hash, description="SHA-256 hash factory")
    signer: Optional[Any] = Field(default=None, description="Request signer (defaults to botocore)")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class IAMAuth(AuthMethod):
    """
    SigV4 authentication method.

    Example:
        ```python
        auth = IAMAuth(IAMAuthConfig(region="eu-west-1"))
        auth.prepare(url)
        envelope = await auth.apply(envelope)
        ```
    """

    def __init__(self, config: IAMAuthConfig):
        super().__init__(config)
        self.config: IAMAuthConfig = config
        self.credential_provider = config.credential_provider or DefaultCredentialProvider()
        self.signer = config.signer or BotocoreSigner()
        self._region: Optional[str] = None

    @property
    def region(self) -> Optional[str]:
        return self._region

    def resolve_region(self, url: str) -> str:
        """
        Resolve the signing region for the given endpoint.

        Raises:
            ConfigurationError: If no region is configured or inferable
        """
        region = self.config.region or region_from_url(url) or self.config.default_region
        if not region:
            raise ConfigurationError(
                "region is required, but wasn't provided and could not be inferred "
                "from the endpoint host",
                url=url,
            )
        return region

    def prepare(self, url: str) -> None:
        self._region = self.resolve_region(url)

    async def authenticate(self, envelope: RequestEnvelope) -> AuthResult:
        region = self._region or self.resolve_region(envelope.url)
        credentials = await self.credential_provider.get_credentials()

        signing_request = SigningRequest(
            method=envelope.method,
            url=envelope.url,
            headers={
                "Content-Type": envelope.headers["Content-Type"],
                "Host": envelope.headers["Host"],
            },
            body=envelope.body.encode("utf-8"),
        )
        headers = self.signer.sign(
            signing_request,
            credentials,
            region,
            self.config.service,
            self.config.hash_factory,
        )
        logger.debug("Signed request to %s for region %s", envelope.url, region)
        return AuthResult(headers=dict(headers), signed=True)

"""
Authentication strategies for AppSync requests.

Two mutually exclusive modes are supported: a static API key header, or SigV4
signing with AWS credentials (IAM).
"""

from typing import Union

from ..exceptions import ConfigurationError
from .api_key import API_KEY_HEADER, APIKeyAuth, APIKeyConfig
from .base import AuthConfig, AuthMethod, AuthResult, AuthType
from .credentials import CredentialProvider, DefaultCredentialProvider, StaticCredentialProvider
from .hashing import HashFactory, HashFunction, Sha256Hash
from .iam import APPSYNC_SERVICE, IAMAuth, IAMAuthConfig, region_from_url
from .signing import BotocoreSigner, RequestSigner, SigningRequest

AuthMode = Union[APIKeyConfig, IAMAuthConfig]


def create_auth_method(config: AuthConfig) -> AuthMethod:
    """
    Create the authentication strategy for a configuration.

    Raises:
        ConfigurationError: If the configuration type is not supported
    """
    if isinstance(config, APIKeyConfig):
        return APIKeyAuth(config)
    if isinstance(config, IAMAuthConfig):
        return IAMAuth(config)
    raise ConfigurationError(f"Unsupported authentication configuration: {type(config).__name__}")


__all__ = [
    "API_KEY_HEADER",
    "APPSYNC_SERVICE",
    "APIKeyAuth",
    "APIKeyConfig",
    "AuthConfig",
    "AuthMethod",
    "AuthMode",
    "AuthResult",
    "AuthType",
    "BotocoreSigner",
    "CredentialProvider",
    "DefaultCredentialProvider",
    "HashFactory",
    "HashFunction",
    "IAMAuth",
    "IAMAuthConfig",
    "RequestSigner",
    "Sha256Hash",
    "SigningRequest",
    "StaticCredentialProvider",
    "create_auth_method",
    "region_from_url",
]

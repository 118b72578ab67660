"""
AWS credential providers for IAM request signing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

import boto3
from botocore.credentials import ReadOnlyCredentials
from botocore.exceptions import BotoCoreError

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    """Asynchronous source of AWS access keys."""

    async def get_credentials(self) -> ReadOnlyCredentials: ...


class DefaultCredentialProvider:
    """
    Resolve credentials through the standard boto3 credential chain.

    Environment variables, shared config files, container and instance
    metadata are consulted in boto3's usual order. Refreshable credentials are
    cached and refreshed by botocore, which serializes refreshes internally so
    a single provider can be shared between concurrent calls.
    """

    def __init__(self, session: Optional[boto3.Session] = None) -> None:
        self._session = session

    def _get_session(self) -> boto3.Session:
        if self._session is None:
            self._session = boto3.Session()
        return self._session

    def _resolve(self) -> ReadOnlyCredentials:
        try:
            credentials = self._get_session().get_credentials()
        except BotoCoreError as e:
            raise ConfigurationError(f"Failed to load AWS credentials: {e}") from e

        if credentials is None:
            raise ConfigurationError(
                "No AWS credentials found. Configure them through environment "
                "variables, a shared credentials file or an instance role"
            )
        return credentials.get_frozen_credentials()

    async def get_credentials(self) -> ReadOnlyCredentials:
        """Resolve credentials without blocking the event loop."""
        credentials = await asyncio.to_thread(self._resolve)
        logger.debug("Resolved AWS credentials for access key %s...", credentials.access_key[:4])
        return credentials


class StaticCredentialProvider:
    """Credential provider returning fixed access keys."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        token: Optional[str] = None,
    ) -> None:
        self._credentials = ReadOnlyCredentials(access_key, secret_key, token)

    async def get_credentials(self) -> ReadOnlyCredentials:
        return self._credentials

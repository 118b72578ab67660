"""
SigV4 request signing.

The signer is a capability: it receives a canonical request, credentials and
a hash factory, and returns the signed header set. ``BotocoreSigner`` is the
production implementation on top of botocore's ``SigV4Auth``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import ReadOnlyCredentials

from .hashing import HashFactory, Sha256Hash


@dataclass(frozen=True)
class SigningRequest:
    """Canonical request handed to a signer."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""


class RequestSigner(Protocol):
    """Capability producing signed headers for a canonical request."""

    def sign(
        self,
        request: SigningRequest,
        credentials: ReadOnlyCredentials,
        region: str,
        service: str,
        hash_factory: HashFactory,
    ) -> Dict[str, str]: ...


class _PluggableHashSigV4Auth(SigV4Auth):
    """SigV4Auth whose payload checksum comes from a pluggable hash."""

    def __init__(
        self,
        credentials: ReadOnlyCredentials,
        service_name: str,
        region_name: str,
        hash_factory: HashFactory,
    ) -> None:
        super().__init__(credentials, service_name, region_name)
        self._hash_factory = hash_factory

    def payload(self, request: AWSRequest) -> str:
        body = request.body or b""
        if isinstance(body, str):
            body = body.encode("utf-8")
        hasher = self._hash_factory()
        hasher.update(body)
        return hasher.digest().hex()


class BotocoreSigner:
    """Sign requests with botocore's SigV4 implementation."""

    def sign(
        self,
        request: SigningRequest,
        credentials: ReadOnlyCredentials,
        region: str,
        service: str,
        hash_factory: HashFactory = Sha256Hash,
    ) -> Dict[str, str]:
        aws_request = AWSRequest(
            method=request.method,
            url=request.url,
            data=request.body,
            headers=dict(request.headers),
        )
        _PluggableHashSigV4Auth(credentials, service, region, hash_factory).add_auth(aws_request)
        return dict(aws_request.headers.items())

"""
Outgoing request envelope construction.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, Mapping
from urllib.parse import urlparse

from ..exceptions import ConfigurationError
from .models import GraphQLRequest

if TYPE_CHECKING:
    from ..auth.base import AuthMethod

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class RequestEnvelope:
    """Method, target, headers and body of one outgoing HTTP request."""

    url: str
    path: str
    host: str
    body: str
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "POST"

    @property
    def scheme(self) -> str:
        return urlparse(self.url).scheme.lower()

    def with_headers(self, headers: Mapping[str, str]) -> "RequestEnvelope":
        """Return a copy carrying a new header set."""
        return replace(self, headers=dict(headers))


def build_envelope(request: GraphQLRequest, url: str) -> RequestEnvelope:
    """
    Build the unauthenticated POST envelope for a GraphQL request.

    Args:
        request: The GraphQL operation
        url: Target endpoint URL

    Returns:
        RequestEnvelope with JSON body and Content-Type/Host headers

    Raises:
        ConfigurationError: If the URL is not an absolute http(s) URL
    """
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise ConfigurationError(f"Invalid GraphQL endpoint URL: {url!r}", url=url)

    host = parsed.hostname
    if parsed.port is not None:
        host = f"{host}:{parsed.port}"

    path = parsed.path or "/"
    if parsed.query:
        path = f"{path}?{parsed.query}"

    return RequestEnvelope(
        url=url,
        path=path,
        host=host,
        body=json.dumps(request.to_dict()),
        headers={"Content-Type": JSON_CONTENT_TYPE, "Host": host},
    )


class RequestBuilder:
    """Build envelopes and finalize their headers through an auth strategy."""

    def __init__(self, auth: AuthMethod):
        self.auth = auth

    async def build(self, request: GraphQLRequest, url: str) -> RequestEnvelope:
        envelope = build_envelope(request, url)
        return await self.auth.apply(envelope)

"""
Pluggable SHA-256 hash capability used for request signing.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Callable, Optional, Protocol


class HashFunction(Protocol):
    """Stateful hash: constructed (init), fed with ``update``, read with ``digest``."""

    def update(self, data: bytes) -> None: ...

    def digest(self) -> bytes: ...


HashFactory = Callable[[], HashFunction]


class Sha256Hash:
    """SHA-256 hash, or HMAC-SHA256 when constructed with a secret."""

    def __init__(self, secret: Optional[bytes] = None) -> None:
        if secret is None:
            self._hash = hashlib.sha256()
        else:
            self._hash = hmac.new(secret, digestmod=hashlib.sha256)

    def update(self, data: bytes) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._hash.update(data)

    def digest(self) -> bytes:
        return self._hash.digest()

    def hexdigest(self) -> str:
        return self._hash.hexdigest()

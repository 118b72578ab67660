"""
Custom logging filters for the AppSync client.

This module provides masking of API keys, signatures and AWS session tokens
in log output.
"""

import logging
import re
from typing import List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        # (pattern, replacement) pairs
        self.rules: List[Tuple[Pattern[str], str]] = [
            # AppSync API keys and generic key/token/secret assignments
            (
                re.compile(
                    r'(x-api-key|api[_-]?key|token|secret)(["\']?\s*[:=]\s*["\']?)([A-Za-z0-9+/=_\-]{8,})',
                    re.IGNORECASE,
                ),
                r"\1\2***MASKED***",
            ),
            # SigV4 signatures inside Authorization headers
            (re.compile(r"(Signature=)([0-9a-f]{16,})", re.IGNORECASE), r"\1***MASKED***"),
            # AWS session tokens
            (
                re.compile(
                    r'(x-amz-security-token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9+/=%]{16,})',
                    re.IGNORECASE,
                ),
                r"\1***MASKED***",
            ),
            # Bearer tokens
            (re.compile(r"(bearer\s+)([A-Za-z0-9+/=._\-]{16,})", re.IGNORECASE), r"\1***MASKED***"),
            # AppSync API key literals (da2-...)
            (re.compile(r"\bda2-[a-z0-9]{20,}\b", re.IGNORECASE), "da2-***MASKED***"),
        ]

    def mask(self, message: str) -> str:
        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        message = self.mask(record.getMessage())

        # Update the record
        record.msg = message
        record.args = ()

        return True

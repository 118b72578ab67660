"""
Whitespace and comment normalization for GraphQL query literals.

Queries written inline in Python source are usually indented to match the
surrounding code. The helpers here strip that indentation and comment lines
so the text sent over the wire stays small, while keeping ``#import``
pragmas used by fragment loaders.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

_LEADING_WHITESPACE = re.compile(r"^\s+", re.MULTILINE)
_TRAILING_WHITESPACE = re.compile(r"\s*$", re.MULTILINE)
_COMMENT_LINE = re.compile(r"^\s*#\s*(?!import).*$", re.MULTILINE)
_BLANK_RUN = re.compile(r"\n[\s\t]*\n")


def normalize_query(segments: Sequence[str], values: Sequence[Any] = ()) -> str:
    """
    Join literal segments with substitution values and normalize the result.

    Args:
        segments: Literal text pieces in source order
        values: Values interleaved between the segments; there must be
            exactly one fewer value than segments

    Returns:
        The normalized query text

    Raises:
        ValueError: If the number of values does not fit the segments
    """
    if not segments:
        if values:
            raise ValueError("Substitution values given without literal segments")
        return ""

    if len(values) != len(segments) - 1:
        raise ValueError(
            f"Expected {len(segments) - 1} substitution values, got {len(values)}"
        )

    parts = [segments[0]]
    for value, segment in zip(values, segments[1:]):
        parts.append(str(value))
        parts.append(segment)

    text = "".join(parts)
    text = _LEADING_WHITESPACE.sub("", text)
    text = _TRAILING_WHITESPACE.sub("", text)
    text = _COMMENT_LINE.sub("", text)
    text = _BLANK_RUN.sub("\n", text)
    return text.strip()


def gql(text: str) -> str:
    """Normalize a single GraphQL query literal."""
    return normalize_query([text])

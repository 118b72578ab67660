"""
Response decoding by content type.
"""

from __future__ import annotations

import json
from typing import Optional, Union

from ..exceptions import ResponseFormatError
from .models import GraphQLResponse


def is_json_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and "application/json" in content_type.lower()


def parse_response(body_text: str, content_type: Optional[str]) -> Union[str, GraphQLResponse]:
    """
    Decode a response body.

    JSON bodies become a GraphQLResponse; any other content type is returned
    as the raw text. JSON decoding errors are not caught.

    Raises:
        json.JSONDecodeError: If a JSON-typed body is not valid JSON
        ResponseFormatError: If a JSON-typed body is not an object
    """
    if not is_json_content_type(content_type):
        return body_text

    payload = json.loads(body_text)
    if not isinstance(payload, dict):
        raise ResponseFormatError(
            f"Expected a JSON object from GraphQL endpoint, got {type(payload).__name__}",
            body=body_text,
        )
    return GraphQLResponse.from_dict(payload)

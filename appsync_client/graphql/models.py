"""
GraphQL models and data structures.

This module defines the request, response and error types exchanged with a
GraphQL endpoint, plus the result of an execution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..exceptions import ResponseFormatError


@dataclass(frozen=True)
class GraphQLRequest:
    """A single GraphQL operation. Immutable once built."""

    query: str
    variables: Optional[Mapping[str, Any]] = None
    operation_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire form, omitting absent members."""
        result: Dict[str, Any] = {"query": self.query}

        if self.variables is not None:
            result["variables"] = dict(self.variables)

        if self.operation_name is not None:
            result["operationName"] = self.operation_name

        return result


@dataclass(frozen=True)
class ErrorLocation:
    """Source location attached to a GraphQL error."""

    line: int
    column: int
    source_name: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ErrorLocation":
        return cls(
            line=raw.get("line", 0),
            column=raw.get("column", 0),
            source_name=raw.get("sourceName"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "column": self.column, "sourceName": self.source_name}


@dataclass(frozen=True)
class GraphQLError:
    """
    A GraphQL error entry as reported by AppSync.

    Example:
        ``errorType`` is ``Unauthorized`` and ``message`` is
        ``Not Authorized to access createEvent on type Mutation``.
    """

    message: str
    path: Tuple[Union[str, int], ...] = ()
    error_type: Optional[str] = None
    error_info: Any = None
    data: Any = None
    locations: Tuple[ErrorLocation, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GraphQLError":
        """Build an error from its wire representation."""
        return cls(
            message=raw.get("message", "Unknown error"),
            path=tuple(raw.get("path") or ()),
            error_type=raw.get("errorType"),
            error_info=raw.get("errorInfo"),
            data=raw.get("data"),
            locations=tuple(
                ErrorLocation.from_dict(location)
                for location in raw.get("locations") or ()
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the wire representation."""
        return {
            "path": list(self.path),
            "data": self.data,
            "errorType": self.error_type,
            "errorInfo": self.error_info,
            "message": self.message,
            "locations": [location.to_dict() for location in self.locations],
        }


@dataclass(frozen=True)
class GraphQLResponse:
    """Decoded JSON response of a GraphQL endpoint."""

    data: Any = None
    errors: Tuple[GraphQLError, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GraphQLResponse":
        """
        Build a response from a decoded JSON object.

        Raises:
            ResponseFormatError: If ``errors`` is present but not a list of objects
        """
        errors = raw.get("errors") or []
        if not isinstance(errors, list) or not all(isinstance(error, dict) for error in errors):
            raise ResponseFormatError(
                f"GraphQL errors must be a list of objects, got {errors!r}"
            )
        return cls(
            data=raw.get("data"),
            errors=tuple(GraphQLError.from_dict(error) for error in errors),
        )

    @property
    def has_errors(self) -> bool:
        """Check if the response carries GraphQL errors."""
        return len(self.errors) > 0

    @property
    def error_messages(self) -> List[str]:
        return [error.message for error in self.errors]


@dataclass(frozen=True)
class ExecutionResult:
    """Result of ``execute``: the status code and a text or GraphQL body."""

    status_code: int
    body: Union[str, GraphQLResponse]

    @property
    def is_graphql(self) -> bool:
        return isinstance(self.body, GraphQLResponse)

"""
Tests for GraphQL request, response and error models.
"""

import pytest

from appsync_client.exceptions import ResponseFormatError
from appsync_client.graphql import (
    ErrorLocation,
    ExecutionResult,
    GraphQLError,
    GraphQLRequest,
    GraphQLResponse,
)


class TestGraphQLRequest:
    """Test GraphQL request serialization."""

    def test_minimal_request(self):
        """Absent members are omitted from the wire form."""
        request = GraphQLRequest(query="query { a }")

        assert request.to_dict() == {"query": "query { a }"}

    def test_full_request(self):
        """Variables and operation name use their wire names."""
        request = GraphQLRequest(
            query="query Q($id: ID!) { a(id: $id) }",
            variables={"id": "1"},
            operation_name="Q",
        )

        assert request.to_dict() == {
            "query": "query Q($id: ID!) { a(id: $id) }",
            "variables": {"id": "1"},
            "operationName": "Q",
        }

    def test_empty_variables_kept(self):
        """Empty variables differ from absent variables."""
        request = GraphQLRequest(query="query { a }", variables={})

        assert request.to_dict()["variables"] == {}


class TestGraphQLError:
    """Test GraphQL error parsing."""

    def test_from_appsync_error(self):
        """AppSync error entries map onto the error fields."""
        error = GraphQLError.from_dict(
            {
                "path": ["createEvent", 0],
                "data": None,
                "errorType": "Unauthorized",
                "errorInfo": None,
                "locations": [{"line": 2, "column": 3, "sourceName": None}],
                "message": "Not Authorized to access createEvent on type Mutation",
            }
        )

        assert error.path == ("createEvent", 0)
        assert error.error_type == "Unauthorized"
        assert error.message == "Not Authorized to access createEvent on type Mutation"
        assert error.locations == (ErrorLocation(line=2, column=3),)

    def test_to_dict_round_trip_keys(self):
        """Serialized errors use AppSync wire keys."""
        error = GraphQLError(message="boom", error_type="Lambda:Unhandled")

        assert error.to_dict() == {
            "path": [],
            "data": None,
            "errorType": "Lambda:Unhandled",
            "errorInfo": None,
            "message": "boom",
            "locations": [],
        }

    def test_missing_fields(self):
        """Sparse error entries get defaults."""
        error = GraphQLError.from_dict({})

        assert error.message == "Unknown error"
        assert error.path == ()
        assert error.locations == ()


class TestGraphQLResponse:
    """Test GraphQL response parsing."""

    def test_data_only(self):
        response = GraphQLResponse.from_dict({"data": {"a": 1}})

        assert response.data == {"a": 1}
        assert response.has_errors is False

    def test_errors_with_null_data(self):
        """Errors are parsed even when data is null."""
        response = GraphQLResponse.from_dict(
            {"data": None, "errors": [{"message": "first"}, {"message": "second"}]}
        )

        assert response.data is None
        assert response.has_errors is True
        assert response.error_messages == ["first", "second"]

    def test_execution_result_kind(self):
        """Execution results report whether the body was GraphQL."""
        assert ExecutionResult(200, GraphQLResponse()).is_graphql is True
        assert ExecutionResult(502, "Bad Gateway").is_graphql is False

    @pytest.mark.parametrize(
        "raw",
        [{"errors": "boom"}, {"errors": [1]}, {"errors": {"message": "x"}}, {"errors": [None]}],
    )
    def test_malformed_errors_rejected(self, raw):
        """An errors member that is not a list of objects is a format error."""
        with pytest.raises(ResponseFormatError, match="list of objects"):
            GraphQLResponse.from_dict(raw)

    def test_empty_errors(self):
        assert GraphQLResponse.from_dict({"data": {}, "errors": []}).has_errors is False

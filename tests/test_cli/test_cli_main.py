"""
Tests for the command-line interface.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from appsync_client.cli import cli
from appsync_client.exceptions import ConfigurationError, GraphQLExecutionError

APPSYNC_URL = "https://abc123.appsync-api.eu-west-1.amazonaws.com/graphql"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def mock_client():
    """Replace the client class used by the CLI."""
    with patch("appsync_client.cli.main.AppSyncClient") as client_class, patch(
        "appsync_client.cli.main.setup_logging"
    ):
        instance = MagicMock()
        instance.call = AsyncMock(return_value={"getEvent": {"id": "1"}})
        client_class.return_value = instance
        yield client_class


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("GRAPHQL_API_ENDPOINT", "APPSYNC_API_KEY", "AWS_REGION", "AWS_DEFAULT_REGION"):
        monkeypatch.delenv(name, raising=False)


class TestCallCommand:
    """Test the ``call`` command."""

    def test_query_from_stdin(self, runner, mock_client):
        result = runner.invoke(
            cli,
            ["call", "--endpoint", APPSYNC_URL, "--api-key", "da2-key"],
            input="query {\n    getEvent(id: 1) { id }\n}\n",
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"getEvent": {"id": "1"}}

        settings = mock_client.call_args.args[0]
        assert settings.api_key == "da2-key"
        request, endpoint = mock_client.return_value.call.await_args.args
        assert request.query == "query {\ngetEvent(id: 1) { id }\n}"
        assert endpoint == APPSYNC_URL

    def test_query_from_file(self, runner, mock_client, tmp_path):
        query_file = tmp_path / "get_event.graphql"
        query_file.write_text("query GetEvent($id: ID!) { getEvent(id: $id) { id } }")

        result = runner.invoke(
            cli,
            [
                "call",
                str(query_file),
                "--variables",
                '{"id": "1"}',
                "--operation-name",
                "GetEvent",
                "--region",
                "eu-west-1",
                "--timeout-ms",
                "1000",
                "--max-retries",
                "2",
            ],
        )

        assert result.exit_code == 0, result.output
        settings = mock_client.call_args.args[0]
        assert settings.region == "eu-west-1"
        assert settings.timeout_ms == 1000
        assert settings.max_retries == 2
        request, endpoint = mock_client.return_value.call.await_args.args
        assert request.variables == {"id": "1"}
        assert request.operation_name == "GetEvent"
        assert endpoint is None

    def test_environment_settings(self, runner, mock_client, monkeypatch):
        monkeypatch.setenv("GRAPHQL_API_ENDPOINT", APPSYNC_URL)
        monkeypatch.setenv("APPSYNC_API_KEY", "da2-env")

        result = runner.invoke(cli, ["call"], input="{ a }")

        assert result.exit_code == 0, result.output
        settings = mock_client.call_args.args[0]
        assert settings.endpoint == APPSYNC_URL
        assert settings.api_key == "da2-env"

    @pytest.mark.parametrize("variables", ["{not json", "[1, 2]"])
    def test_invalid_variables(self, runner, mock_client, variables):
        result = runner.invoke(cli, ["call", "--variables", variables], input="{ a }")

        assert result.exit_code == 2
        mock_client.return_value.call.assert_not_called()

    def test_client_error_exits_with_message(self, runner, mock_client):
        mock_client.return_value.call.side_effect = GraphQLExecutionError(
            'GraphQL request errors: [{"message": "Unauthorized"}]'
        )

        result = runner.invoke(cli, ["call", "--endpoint", APPSYNC_URL], input="{ a }")

        assert result.exit_code == 1
        assert "GraphQL request errors" in result.output

    def test_missing_endpoint(self, runner, mock_client):
        mock_client.return_value.call.side_effect = ConfigurationError(
            "appsync url should be provided either as parameter or via "
            "GRAPHQL_API_ENDPOINT, but wasn't found"
        )

        result = runner.invoke(cli, ["call"], input="{ a }")

        assert result.exit_code == 1
        assert "GRAPHQL_API_ENDPOINT" in result.output

    def test_invalid_configuration(self, runner, mock_client):
        result = runner.invoke(cli, ["call", "--timeout-ms", "0"], input="{ a }")

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

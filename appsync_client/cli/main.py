#!/usr/bin/env python3
"""
Command-line interface for the appsync_client library.

Runs a single GraphQL operation read from a file or stdin and prints the
``data`` payload as JSON.
"""

import asyncio
import json
import sys
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from ..config import ClientSettings, ConfigLoader
from ..exceptions import AppSyncClientError
from ..graphql import AppSyncClient, GraphQLRequest, gql
from ..http import close_global_connection_pool
from ..logging import setup_logging


def _parse_variables(value: Optional[str]) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    try:
        variables = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--variables")
    if not isinstance(variables, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--variables")
    return variables


async def _run_call(
    settings: ClientSettings, request: GraphQLRequest, endpoint: Optional[str]
) -> Any:
    try:
        return await AppSyncClient(settings).call(request, endpoint)
    finally:
        await close_global_connection_pool()


@click.group()
@click.version_option(package_name="appsync-client")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """AppSync Client CLI - Execute GraphQL operations against AWS AppSync."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('query_file', type=click.File('r'), default='-')
@click.option('--endpoint', '-e', help='GraphQL endpoint URL (defaults to GRAPHQL_API_ENDPOINT)')
@click.option('--variables', help='Query variables as a JSON object')
@click.option('--operation-name', help='Operation to run from a multi-operation document')
@click.option('--api-key', help='AppSync API key; IAM signing is used when omitted')
@click.option('--region', help='AWS region used for IAM signing')
@click.option('--timeout-ms', type=int, help='Per-attempt timeout in milliseconds')
@click.option('--max-retries', type=int, help='Maximum number of attempts')
@click.pass_context
def call(
    ctx: click.Context,
    query_file: Any,
    endpoint: Optional[str],
    variables: Optional[str],
    operation_name: Optional[str],
    api_key: Optional[str],
    region: Optional[str],
    timeout_ms: Optional[int],
    max_retries: Optional[int],
) -> None:
    """Run the GraphQL operation in QUERY_FILE (or stdin) and print its data."""
    overrides: Dict[str, Any] = {
        key: value
        for key, value in (
            ('api_key', api_key),
            ('region', region),
            ('timeout_ms', timeout_ms),
            ('max_retries', max_retries),
        )
        if value is not None
    }
    if ctx.obj.get('verbose'):
        overrides['logging'] = {'level': 'DEBUG'}

    try:
        settings = ConfigLoader().load_config(**overrides)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(settings.logging)

    request = GraphQLRequest(
        query=gql(query_file.read()),
        variables=_parse_variables(variables),
        operation_name=operation_name,
    )

    try:
        data = asyncio.run(_run_call(settings, request, endpoint))
    except AppSyncClientError as e:
        click.echo(e.message, err=True)
        sys.exit(1)

    click.echo(json.dumps(data, indent=2))


def main() -> None:
    """Entry point for the ``appsync-client`` console script."""
    cli(obj={})


if __name__ == '__main__':
    main()

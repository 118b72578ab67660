"""
Shared constants for the AppSync client.
"""

# Environment variable holding the default GraphQL endpoint used by ``call``.
GRAPHQL_API_ENDPOINT_ENV_NAME = "GRAPHQL_API_ENDPOINT"

# Maximum GraphQL execution time on AppSync.
# https://docs.aws.amazon.com/general/latest/gr/appsync.html
APPSYNC_MAX_QUERY_RUNTIME_MS = 30 * 1000

DEFAULT_MAX_RETRIES = 5
DEFAULT_RETRY_MIN_DELAY_MS = 100
DEFAULT_RETRY_MAX_DELAY_MS = 1500

"""
bitquery_toolkit - client toolkit for the Bitquery blockchain GraphQL API.

Build queries with :class:`QueryBuilder` or the template functions, send them
with :class:`BitqueryClient`, and read the normalized
:class:`ResponseEnvelope` that comes back.
"""

from .client import NETWORK_ERROR, BitqueryClient
from .config import ClientConfig, ConfigLoader, LoggingConfig, LogLevel, Settings, load_settings
from .exceptions import (
    AuthenticationError,
    BitqueryError,
    ConfigurationError,
    ConnectionError,
    HTTPError,
    NetworkError,
    QueryFileError,
    RetryableHTTPError,
    TimeoutError,
)
from .graphql import (
    PARSER_ERROR,
    GraphQLOperationType,
    QueryBuilder,
    QueryDocument,
    ResponseEnvelope,
    ResponseParser,
    TemplateOptions,
    get_contract_events,
    get_dex_liquidity_pools,
    get_dex_swaps,
    get_gas_price_analytics,
    get_lending_markets,
    get_nft_collection,
    get_nft_transfers,
    get_nfts_by_owner,
    get_token_balances,
    get_token_price_history,
    get_transaction_history,
    load_query_from_file,
)
from .networks import (
    NETWORKS,
    NetworkInfo,
    get_network_currency,
    get_network_name,
    get_network_type,
    get_network_value,
    validate_network,
)
from .retry import RetryHandler, RetryPolicy

__version__ = "0.1.0"

__all__ = [
    # Client
    "BitqueryClient",
    "NETWORK_ERROR",
    # Configuration
    "ClientConfig",
    "ConfigLoader",
    "LoggingConfig",
    "LogLevel",
    "Settings",
    "load_settings",
    "RetryPolicy",
    "RetryHandler",
    # Exceptions
    "BitqueryError",
    "AuthenticationError",
    "ConfigurationError",
    "QueryFileError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "HTTPError",
    "RetryableHTTPError",
    # GraphQL
    "GraphQLOperationType",
    "QueryBuilder",
    "QueryDocument",
    "ResponseEnvelope",
    "ResponseParser",
    "PARSER_ERROR",
    "TemplateOptions",
    "get_token_balances",
    "get_transaction_history",
    "get_token_price_history",
    "get_contract_events",
    "get_nft_collection",
    "get_nfts_by_owner",
    "get_nft_transfers",
    "get_dex_liquidity_pools",
    "get_dex_swaps",
    "get_gas_price_analytics",
    "get_lending_markets",
    "load_query_from_file",
    # Networks
    "NETWORKS",
    "NetworkInfo",
    "get_network_type",
    "get_network_value",
    "validate_network",
    "get_network_currency",
    "get_network_name",
]

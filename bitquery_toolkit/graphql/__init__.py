"""
GraphQL support for bitquery_toolkit.

This package assembles Bitquery GraphQL documents (fluent builder and
pre-built templates) and normalizes the responses that come back.
"""

from .builder import QueryBuilder
from .models import GraphQLOperationType, QueryDocument, ResponseEnvelope
from .parser import PARSER_ERROR, ResponseParser
from .schema import ObjectSchema, ScalarKind, ScalarSchema, SchemaMismatch, compile_schema
from .templates import (
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

__all__ = [
    # Models
    "GraphQLOperationType",
    "QueryDocument",
    "ResponseEnvelope",
    # Builder
    "QueryBuilder",
    # Templates
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
    # Parsing and validation
    "PARSER_ERROR",
    "ResponseParser",
    "ScalarKind",
    "ScalarSchema",
    "ObjectSchema",
    "SchemaMismatch",
    "compile_schema",
]

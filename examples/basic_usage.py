#!/usr/bin/env python3
"""
Basic usage examples for bitquery_toolkit.

This script demonstrates query templates, the QueryBuilder and the
ResponseParser against the live Bitquery API. Credentials are read from
BITQUERY_CLIENT_ID and BITQUERY_CLIENT_SECRET (or a config file passed as the
first argument).
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone

from bitquery_toolkit import (
    AuthenticationError,
    BitqueryClient,
    QueryBuilder,
    ResponseParser,
    get_token_balances,
    get_transaction_history,
    load_settings,
)
from bitquery_toolkit.logging import setup_logging

VITALIK = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


async def example_token_balances(client: BitqueryClient) -> None:
    """Example: Token balances from a template."""
    print("=== Token Balances ===\n")

    result = await client.execute(get_token_balances(VITALIK, limit=5))

    if result.success:
        fields = ResponseParser.extract_fields(result, ["ethereum.address.0.balances"])
        for balance in fields.get("ethereum.address.0.balances", []):
            print(f"{balance['currency']['symbol']}: {balance['value']}")
    else:
        print(f"Errors: {result.error_messages}")
    print()


async def example_custom_query(client: BitqueryClient) -> None:
    """Example: A custom query built with fragments."""
    print("=== Custom Token Query ===\n")

    document = (
        QueryBuilder()
        .operation("query", "GetTokenInfo", "$tokenAddress: String!")
        .fragment("TokenData", "Token", ["name", "symbol", "decimals", "totalSupply"])
        .select(
            "ethereum",
            [
                """token(address: $tokenAddress) {
      ...TokenData
      address
      tokenType
    }"""
            ],
        )
        .set_variables({"tokenAddress": WETH})
        .build()
    )

    result = await client.execute(document)
    print(f"Token data: {result.get_data('ethereum.token')}")

    valid = ResponseParser.validate_schema(
        result, {"ethereum": {"token": {"symbol": "string", "decimals": "number"}}}
    )
    print(f"Matches expected shape: {valid}\n")


async def example_transaction_history(client: BitqueryClient) -> None:
    """Example: Transactions from the last 30 days."""
    print("=== Transaction History ===\n")

    since = (datetime.now(timezone.utc) - timedelta(days=30)).isoformat()
    result = await client.execute(get_transaction_history(VITALIK, limit=5, from_=since))

    for tx in result.get_data("ethereum.transactions") or []:
        print(f"{tx['block']['timestamp']} {tx['hash']} value={tx['value']}")
    print()


async def main() -> None:
    """Run all examples."""
    settings = load_settings(sys.argv[1] if len(sys.argv) > 1 else None)
    setup_logging(settings.logging)

    try:
        async with BitqueryClient.from_settings(settings) as client:
            await example_token_balances(client)
            await example_custom_query(client)
            await example_transaction_history(client)
    except AuthenticationError as e:
        print(f"Authentication failed: {e.message}")


if __name__ == "__main__":
    asyncio.run(main())

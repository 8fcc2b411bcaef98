#!/usr/bin/env python3
"""
Specialized query examples: NFTs, DeFi and gas analytics.

Queries run concurrently on one client; the client requests a single OAuth
token and shares it between them.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from bitquery_toolkit import (
    BitqueryClient,
    TemplateOptions,
    get_dex_liquidity_pools,
    get_dex_swaps,
    get_gas_price_analytics,
    get_lending_markets,
    get_nft_collection,
    get_nfts_by_owner,
    get_network_name,
    load_settings,
)
from bitquery_toolkit.logging import setup_logging

CRYPTOPUNKS = "0xb47e3cd837dDF8e4c57F05d70Ab865de6e193BBB"
VITALIK = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


def report(title: str, result, path: str) -> None:
    print(f"=== {title} ===")
    if result.success:
        items = result.get_data(path)
        count = len(items) if isinstance(items, list) else 1
        print(f"{count} item(s) at {path}")
    else:
        print(f"Errors: {result.error_messages} codes={result.error_codes}")
    print()


async def main() -> None:
    """Run the specialized queries."""
    settings = load_settings()
    setup_logging(settings.logging)

    week = TemplateOptions(
        **{"from": (datetime.now(timezone.utc) - timedelta(days=7)).date().isoformat()}
    )

    async with BitqueryClient.from_settings(settings) as client:
        print(f"Network: {get_network_name('eth')}\n")

        collection, owned, pools, swaps, gas, markets = await asyncio.gather(
            client.execute(get_nft_collection(CRYPTOPUNKS, limit=5)),
            client.execute(get_nfts_by_owner(VITALIK, limit=10)),
            client.execute(get_dex_liquidity_pools(protocol="Uniswap", limit=5)),
            client.execute(get_dex_swaps(week, protocol="Uniswap", limit=10)),
            client.execute(get_gas_price_analytics(week, interval="1h")),
            client.execute(get_lending_markets(protocol="Aave", limit=5)),
        )

    report("NFT collection", collection, "ethereum.nftCollection.tokens")
    report("NFTs owned", owned, "ethereum.nftOwnership")
    report("Liquidity pools", pools, "ethereum.liquidityPools")
    report("DEX swaps", swaps, "ethereum.dexTrades")
    report("Gas prices", gas, "ethereum.gasPrice")
    report("Lending markets", markets, "ethereum.lendingMarkets")


if __name__ == "__main__":
    asyncio.run(main())

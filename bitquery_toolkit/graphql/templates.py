"""
Pre-built query templates for common blockchain data needs.

Each template is a pure function that assembles a :class:`QueryDocument` with
:class:`~bitquery_toolkit.graphql.builder.QueryBuilder`. Options may be passed
as a mapping (camelCase keys such as ``tokenAddress`` are accepted), as a
:class:`TemplateOptions` instance, or as keyword arguments, which take
precedence over ``options``.

Examples:
    ```python
    document = get_token_balances("0xabc", limit=5, network="bsc")
    document = get_dex_swaps({"protocol": "Uniswap", "from": "2024-01-01"})
    ```
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import QueryFileError
from .builder import QueryBuilder
from .models import QueryDocument

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "ethereum"
DEFAULT_INTERVAL = "1d"
DEFAULT_QUOTE_SYMBOL = "USD"


class TemplateOptions(BaseModel):
    """
    Options recognized by the query templates.

    Every field is optional; each template applies its own defaults for the
    subset it uses and ignores the rest.
    """

    network: Optional[str] = Field(default=None, description="Top-level network field")
    limit: Optional[int] = Field(default=None, description="Maximum number of results")
    from_: Optional[str] = Field(default=None, alias="from", description="Start date (ISO 8601)")
    to: Optional[str] = Field(default=None, description="End date (ISO 8601)")
    interval: Optional[str] = Field(default=None, description="Time interval")
    protocol: Optional[str] = Field(default=None, description="Protocol name filter")
    token_address: Optional[str] = Field(default=None, alias="tokenAddress")
    collection_address: Optional[str] = Field(default=None, alias="collectionAddress")
    token_id: Optional[Union[str, int]] = Field(default=None, alias="tokenId")
    token_type: Optional[str] = Field(default=None, alias="tokenType")
    event_signature: Optional[str] = Field(default=None, alias="eventSignature")
    quote_symbol: Optional[str] = Field(default=None, alias="quoteSymbol")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


OptionsLike = Union[TemplateOptions, Mapping[str, Any], None]


def _resolve_options(options: OptionsLike, overrides: Mapping[str, Any]) -> TemplateOptions:
    if isinstance(options, TemplateOptions):
        merged = options.model_dump(exclude_none=True)
    else:
        merged = dict(options or {})
    merged.update(overrides)
    return TemplateOptions.model_validate(merged)


def _default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _date_filter(since: Optional[str], till: Optional[str]) -> str:
    bounds = []
    if since:
        bounds.append("since: $from")
    if till:
        bounds.append("till: $to")
    if not bounds:
        return ""
    return "date: {" + ", ".join(bounds) + "}"


def _selection(field_name: str, arguments: Sequence[str], body: str) -> str:
    """Render ``field(args...) { body }`` as a multi-line selection."""
    clauses = [clause for clause in arguments if clause]
    head = field_name
    if clauses:
        head += "(\n" + "".join(f"      {clause}\n" for clause in clauses) + "    )"
    return f"{head} {{\n{body}    }}"


def _build(
    operation_name: str,
    variable_definitions: List[str],
    network: str,
    selection: str,
    variables: Mapping[str, Any],
) -> QueryDocument:
    return (
        QueryBuilder()
        .operation("query", operation_name, ", ".join(variable_definitions))
        .select(network, [selection])
        .set_variables(variables)
        .build()
    )


_METADATA_FIELDS = """\
        metadata {
          name
          description
          image
          attributes {
            trait_type
            value
          }
        }
"""

_TRANSACTION_FIELDS = """\
      hash
      block {
        timestamp
        height
      }
      from {
        address
      }
      to {
        address
      }
      value
      gasValue
      gasPrice
      success
"""

_CONTRACT_EVENT_FIELDS = """\
      transaction {
        hash
      }
      block {
        timestamp
        height
      }
      eventIndex
      eventSignature
      eventName
      arguments {
        name
        type
        value
        valueType
      }
"""

_NFT_OWNERSHIP_FIELDS = (
    """\
      owner {
        address
      }
      amount
      token {
        tokenId
        tokenURI
        collection {
          address
          name
          symbol
          tokenStandard
        }
"""
    + _METADATA_FIELDS
    + """\
      }
      lastTransferTimestamp
      lastTransferBlock
"""
)

_NFT_TRANSFER_FIELDS = """\
      transaction {
        hash
      }
      block {
        timestamp
        height
      }
      token {
        tokenId
        collection {
          address
          name
          symbol
        }
      }
      from {
        address
      }
      to {
        address
      }
      amount
      tokenType
"""

_LIQUIDITY_POOL_FIELDS = """\
      address
      protocol
      name
      totalValueLocked
      totalValueLockedUSD
      inputTokens {
        address
        symbol
        name
        decimals
        balance
        balanceUSD
      }
      outputToken {
        address
        symbol
        name
        decimals
      }
      feePercent
      volumeUSD24h
      apr
      createdTimestamp
      createdBlockNumber
"""

_DEX_SWAP_FIELDS = """\
      transaction {
        hash
      }
      block {
        timestamp
        height
      }
      protocol
      exchange {
        name
        fullName
      }
      tokenIn {
        address
        symbol
        name
        decimals
      }
      tokenOut {
        address
        symbol
        name
        decimals
      }
      amountIn
      amountOut
      amountInUSD
      amountOutUSD
      trader {
        address
      }
      pool {
        address
        name
      }
"""

_LENDING_MARKET_FIELDS = """\
      protocol
      marketAddress
      token {
        address
        symbol
        name
        decimals
      }
      totalValueLocked
      totalValueLockedUSD
      supplyRate
      borrowRate
      totalSupply
      totalBorrow
      utilizationRate
      liquidationThreshold
      collateralFactor
      reserveFactor
      lastUpdateTimestamp
"""


def _time_interval(interval: str) -> str:
    return f"      timeInterval {{\n        {interval}\n      }}\n"


def get_token_balances(
    address: str, options: OptionsLike = None, **overrides: Any
) -> QueryDocument:
    """
    Create a query for the token balances held by an address.

    Args:
        address: Wallet address
        options: Template options (limit, default 100; network)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetTokenBalances
    """
    opts = _resolve_options(options, overrides)
    limit = _default(opts.limit, 100)

    selection = """address(address: $address) {
      balances(options: { limit: $limit }) {
        currency {
          symbol
          name
          address
          decimals
          tokenType
        }
        value
        valueUSD
      }
    }"""

    return _build(
        "GetTokenBalances",
        ["$address: String!", "$limit: Int!"],
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        {"address": address, "limit": limit},
    )


def get_transaction_history(
    address: str, options: OptionsLike = None, **overrides: Any
) -> QueryDocument:
    """
    Create a query for the transactions of an address, newest first.

    Args:
        address: Wallet address
        options: Template options (limit, default 50; network; from; to)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetTransactionHistory
    """
    opts = _resolve_options(options, overrides)

    variables = {"address": address, "limit": _default(opts.limit, 50)}
    definitions = ["$address: String!", "$limit: Int!"]

    if opts.from_:
        variables["from"] = opts.from_
        definitions.append("$from: ISO8601DateTime")
    if opts.to:
        variables["to"] = opts.to
        definitions.append("$to: ISO8601DateTime")

    selection = _selection(
        "transactions",
        [
            'options: { limit: $limit, desc: "block.timestamp" }',
            "address: { is: $address }",
            _date_filter(opts.from_, opts.to),
        ],
        _TRANSACTION_FIELDS,
    )

    return _build(
        "GetTransactionHistory",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_token_price_history(
    token_address: str, options: OptionsLike = None, **overrides: Any
) -> QueryDocument:
    """
    Create a query for DEX price candles of a token.

    The requested interval is also inlined as the ``timeInterval`` subfield.
    The body always asks for up to 1000 buckets, ascending by minute.

    Args:
        token_address: Token contract address
        options: Template options (network; quote_symbol, default "USD";
            from; to; interval, default "1d")
        **overrides: Option overrides

    Returns:
        QueryDocument named GetTokenPriceHistory
    """
    opts = _resolve_options(options, overrides)
    quote_symbol = _default(opts.quote_symbol, DEFAULT_QUOTE_SYMBOL)
    interval = _default(opts.interval, DEFAULT_INTERVAL)

    variables = {
        "tokenAddress": token_address,
        "quoteSymbol": quote_symbol,
        "interval": interval,
    }
    definitions = ["$tokenAddress: String!", "$quoteSymbol: String!", "$interval: String!"]

    if opts.from_:
        variables["from"] = opts.from_
        definitions.append("$from: ISO8601DateTime")
    if opts.to:
        variables["to"] = opts.to
        definitions.append("$to: ISO8601DateTime")

    body = (
        _time_interval(interval)
        + """\
      baseCurrency {
        symbol
        address
      }
      quoteCurrency {
        symbol
      }
      quotePrice
      baseAmount
      quoteAmount
      tradeAmount(in: $quoteSymbol)
      maximum_price: quotePrice(calculate: maximum)
      minimum_price: quotePrice(calculate: minimum)
      open_price: minimum(of: block, get: quote_price)
      close_price: maximum(of: block, get: quote_price)
"""
    )

    selection = _selection(
        "dexTrades",
        [
            'options: { limit: 1000, asc: "timeInterval.minute" }',
            "baseCurrency: { is: $tokenAddress }",
            "quoteCurrency: { symbol: { is: $quoteSymbol } }",
            _date_filter(opts.from_, opts.to),
        ],
        body,
    )

    return _build(
        "GetTokenPriceHistory",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_contract_events(
    contract_address: str, options: OptionsLike = None, **overrides: Any
) -> QueryDocument:
    """
    Create a query for events emitted by a smart contract.

    Args:
        contract_address: Smart contract address
        options: Template options (network; limit, default 50; event_signature)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetContractEvents
    """
    opts = _resolve_options(options, overrides)

    variables = {"contractAddress": contract_address, "limit": _default(opts.limit, 50)}
    definitions = ["$contractAddress: String!", "$limit: Int!"]
    event_filter = ""

    if opts.event_signature:
        variables["eventSignature"] = opts.event_signature
        definitions.append("$eventSignature: String")
        event_filter = "smartContractEvent: { signature: { is: $eventSignature } }"

    selection = _selection(
        "smartContractEvents",
        [
            'options: { limit: $limit, desc: "block.timestamp" }',
            "smartContractAddress: { is: $contractAddress }",
            event_filter,
        ],
        _CONTRACT_EVENT_FIELDS,
    )

    return _build(
        "GetContractEvents",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_nft_collection(
    collection_address: str, options: OptionsLike = None, **overrides: Any
) -> QueryDocument:
    """
    Create a query for NFT collection metadata and a page of its tokens.

    Args:
        collection_address: NFT collection contract address
        options: Template options (network; limit, default 20; token_type)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetNFTCollection
    """
    opts = _resolve_options(options, overrides)

    variables = {"collectionAddress": collection_address, "limit": _default(opts.limit, 20)}
    definitions = ["$collectionAddress: String!", "$limit: Int!"]
    token_arguments = "options: { limit: $limit }"

    if opts.token_type:
        variables["tokenType"] = opts.token_type
        definitions.append("$tokenType: String")
        token_arguments += ", tokenType: { is: $tokenType }"

    body = (
        """\
      name
      symbol
      totalSupply
      contractType
      tokenStandard
      creator {
        address
      }
"""
        + f"      tokens({token_arguments}) {{\n"
        + """\
        tokenId
        tokenURI
        lastTransferBlock
        lastTransferTimestamp
        owner {
          address
        }
"""
        + _METADATA_FIELDS
        + "      }\n"
    )

    selection = f"nftCollection(address: $collectionAddress) {{\n{body}    }}"

    return _build(
        "GetNFTCollection",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_nfts_by_owner(
    owner_address: str, options: OptionsLike = None, **overrides: Any
) -> QueryDocument:
    """
    Create a query for the NFTs held by an address.

    Args:
        owner_address: Owner's wallet address
        options: Template options (network; limit, default 50; collection_address)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetNFTsByOwner
    """
    opts = _resolve_options(options, overrides)

    variables = {"ownerAddress": owner_address, "limit": _default(opts.limit, 50)}
    definitions = ["$ownerAddress: String!", "$limit: Int!"]
    collection_filter = ""

    if opts.collection_address:
        variables["collectionAddress"] = opts.collection_address
        definitions.append("$collectionAddress: String")
        collection_filter = "collection: { address: { is: $collectionAddress } }"

    selection = _selection(
        "nftOwnership",
        [
            "options: { limit: $limit }",
            "owner: { is: $ownerAddress }",
            collection_filter,
        ],
        _NFT_OWNERSHIP_FIELDS,
    )

    return _build(
        "GetNFTsByOwner",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_nft_transfers(options: OptionsLike = None, **overrides: Any) -> QueryDocument:
    """
    Create a query for NFT transfer history, newest first.

    Args:
        options: Template options (network; limit, default 50; token_id;
            collection_address; from; to)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetNFTTransfers
    """
    opts = _resolve_options(options, overrides)

    variables = {"limit": _default(opts.limit, 50)}
    definitions = ["$limit: Int!"]
    filters: List[str] = []

    if opts.token_id:
        variables["tokenId"] = opts.token_id
        definitions.append("$tokenId: String!")
        filters.append("token: { tokenId: { is: $tokenId } }")

    if opts.collection_address:
        variables["collectionAddress"] = opts.collection_address
        definitions.append("$collectionAddress: String!")
        filters.append("token: { collection: { address: { is: $collectionAddress } } }")

    if opts.from_:
        variables["from"] = opts.from_
        definitions.append("$from: ISO8601DateTime!")
    if opts.to:
        variables["to"] = opts.to
        definitions.append("$to: ISO8601DateTime!")

    date_filter = _date_filter(opts.from_, opts.to)
    if date_filter:
        filters.append(date_filter)

    selection = _selection(
        "nftTransfers",
        ['options: { limit: $limit, desc: "block.timestamp" }', ", ".join(filters)],
        _NFT_TRANSFER_FIELDS,
    )

    return _build(
        "GetNFTTransfers",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_dex_liquidity_pools(options: OptionsLike = None, **overrides: Any) -> QueryDocument:
    """
    Create a query for DEX liquidity pools, largest TVL first.

    Args:
        options: Template options (network; limit, default 20; protocol;
            token_address)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetDEXLiquidityPools
    """
    opts = _resolve_options(options, overrides)

    variables = {"limit": _default(opts.limit, 20)}
    definitions = ["$limit: Int!"]
    filters: List[str] = []

    if opts.protocol:
        variables["protocol"] = opts.protocol
        definitions.append("$protocol: String!")
        filters.append("protocol: { is: $protocol }")

    if opts.token_address:
        variables["tokenAddress"] = opts.token_address
        definitions.append("$tokenAddress: String!")
        filters.append("baseCurrency: { is: $tokenAddress }")

    selection = _selection(
        "liquidityPools",
        ['options: { limit: $limit, desc: "totalValueLocked" }', ", ".join(filters)],
        _LIQUIDITY_POOL_FIELDS,
    )

    return _build(
        "GetDEXLiquidityPools",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_dex_swaps(options: OptionsLike = None, **overrides: Any) -> QueryDocument:
    """
    Create a query for DEX swaps, newest first.

    Args:
        options: Template options (network; limit, default 50; protocol;
            token_address; from; to)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetDEXSwaps
    """
    opts = _resolve_options(options, overrides)

    variables = {"limit": _default(opts.limit, 50)}
    definitions = ["$limit: Int!"]
    filters: List[str] = []

    if opts.protocol:
        variables["protocol"] = opts.protocol
        definitions.append("$protocol: String!")
        filters.append("protocol: { is: $protocol }")

    if opts.token_address:
        variables["tokenAddress"] = opts.token_address
        definitions.append("$tokenAddress: String!")
        filters.append("tokenIn: { is: $tokenAddress }")

    if opts.from_:
        variables["from"] = opts.from_
        definitions.append("$from: ISO8601DateTime!")
    if opts.to:
        variables["to"] = opts.to
        definitions.append("$to: ISO8601DateTime!")

    date_filter = _date_filter(opts.from_, opts.to)
    if date_filter:
        filters.append(date_filter)

    selection = _selection(
        "dexTrades",
        ['options: { limit: $limit, desc: "block.timestamp" }', ", ".join(filters)],
        _DEX_SWAP_FIELDS,
    )

    return _build(
        "GetDEXSwaps",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_gas_price_analytics(options: OptionsLike = None, **overrides: Any) -> QueryDocument:
    """
    Create a query for gas price statistics bucketed by interval.

    Args:
        options: Template options (network; from; to; interval, default "1d")
        **overrides: Option overrides

    Returns:
        QueryDocument named GetGasPriceAnalytics
    """
    opts = _resolve_options(options, overrides)
    interval = _default(opts.interval, DEFAULT_INTERVAL)

    variables = {"interval": interval}
    definitions = ["$interval: String!"]

    if opts.from_:
        variables["from"] = opts.from_
        definitions.append("$from: ISO8601DateTime!")
    if opts.to:
        variables["to"] = opts.to
        definitions.append("$to: ISO8601DateTime!")

    body = (
        _time_interval(interval)
        + """\
      average: gasPrice(calculate: average)
      max: gasPrice(calculate: maximum)
      min: gasPrice(calculate: minimum)
      median: gasPrice(calculate: median)
      gasUsed
      transactionCount
      blockCount
"""
    )

    selection = _selection("gasPrice", [_date_filter(opts.from_, opts.to)], body)

    return _build(
        "GetGasPriceAnalytics",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def get_lending_markets(options: OptionsLike = None, **overrides: Any) -> QueryDocument:
    """
    Create a query for lending protocol markets, largest TVL first.

    Args:
        options: Template options (network; limit, default 20; protocol;
            token_address)
        **overrides: Option overrides

    Returns:
        QueryDocument named GetLendingMarkets
    """
    opts = _resolve_options(options, overrides)

    variables = {"limit": _default(opts.limit, 20)}
    definitions = ["$limit: Int!"]
    filters: List[str] = []

    if opts.protocol:
        variables["protocol"] = opts.protocol
        definitions.append("$protocol: String!")
        filters.append("protocol: { is: $protocol }")

    if opts.token_address:
        variables["tokenAddress"] = opts.token_address
        definitions.append("$tokenAddress: String!")
        filters.append("token: { address: { is: $tokenAddress } }")

    selection = _selection(
        "lendingMarkets",
        ['options: { limit: $limit, desc: "totalValueLocked" }', ", ".join(filters)],
        _LENDING_MARKET_FIELDS,
    )

    return _build(
        "GetLendingMarkets",
        definitions,
        _default(opts.network, DEFAULT_NETWORK),
        selection,
        variables,
    )


def load_query_from_file(file_path: Union[str, Path]) -> str:
    """
    Load a raw GraphQL document from a ``.graphql`` file.

    Args:
        file_path: Path to the file, relative to the working directory or absolute

    Returns:
        File contents, unmodified

    Raises:
        QueryFileError: If the file is missing or unreadable
    """
    try:
        return Path(file_path).resolve().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error loading query from %s: %s", file_path, e)
        raise QueryFileError(f"Failed to load query from {file_path}", path=str(file_path)) from e

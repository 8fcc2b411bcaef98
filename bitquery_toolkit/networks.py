"""
Registry of the blockchain networks the toolkit knows about.

Lookups take a network id (``"eth"``, ``"bsc"``, ``"matic"``) and return
``None`` (or ``False`` for :func:`validate_network`) when the id is unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

EVM_NETWORK = "evm_network"


@dataclass(frozen=True)
class NetworkInfo:
    """Static description of a supported network."""

    id: str
    name: str
    currency: str
    network_type: str
    network_value: str


NETWORKS: Dict[str, NetworkInfo] = {
    "ETHEREUM": NetworkInfo(
        id="eth",
        name="Ethereum",
        currency="ETH",
        network_type=EVM_NETWORK,
        network_value="eth",
    ),
    "BSC": NetworkInfo(
        id="bsc",
        name="Binance Smart Chain",
        currency="BNB",
        network_type=EVM_NETWORK,
        network_value="bsc",
    ),
    "POLYGON": NetworkInfo(
        id="matic",
        name="Polygon",
        currency="MATIC",
        network_type=EVM_NETWORK,
        network_value="matic",
    ),
}


def get_network(network_id: str) -> Optional[NetworkInfo]:
    """Find the registry entry with the given id."""
    for network in NETWORKS.values():
        if network.id == network_id:
            return network
    return None


def get_network_type(network_id: str) -> Optional[str]:
    network = get_network(network_id)
    return network.network_type if network else None


def get_network_value(network_id: str) -> Optional[str]:
    network = get_network(network_id)
    return network.network_value if network else None


def validate_network(network_id: str) -> bool:
    """Check whether a network id is registered."""
    return get_network(network_id) is not None


def get_network_currency(network_id: str) -> Optional[str]:
    network = get_network(network_id)
    return network.currency if network else None


def get_network_name(network_id: str) -> Optional[str]:
    network = get_network(network_id)
    return network.name if network else None

"""EVM network configuration.

Each network is addressable by its canonical key, an alias, or its numeric
chain id. Networks with a V2-style router carry a DexConfig used by the
swap engine.
"""

from dataclasses import dataclass, replace
from typing import Optional, Union

from chainops.config import Settings, get_settings
from chainops.errors import UnknownNetworkError


@dataclass(frozen=True)
class DexConfig:
    """Router deployment used for native <-> stable token swaps."""

    name: str
    router: str
    wrapped_native: str
    stable_token: str
    stable_symbol: str = "USDT"


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for an EVM network."""

    key: str
    name: str
    chain_id: int
    rpc_url: str
    native_symbol: str
    explorer_url: str
    dex: Optional[DexConfig] = None
    testnet: bool = False


# ======================
# Network Configurations
# ======================

NETWORKS: dict[str, NetworkConfig] = {
    "ethereum": NetworkConfig(
        key="ethereum",
        name="Ethereum",
        chain_id=1,
        rpc_url="https://eth.llamarpc.com",
        native_symbol="ETH",
        explorer_url="https://etherscan.io",
    ),
    "sepolia": NetworkConfig(
        key="sepolia",
        name="Sepolia",
        chain_id=11155111,
        rpc_url="https://ethereum-sepolia-rpc.publicnode.com",
        native_symbol="ETH",
        explorer_url="https://sepolia.etherscan.io",
        testnet=True,
    ),
    # BNB Smart Chain - PancakeSwap V2
    "bsc": NetworkConfig(
        key="bsc",
        name="BNB Smart Chain",
        chain_id=56,
        rpc_url="https://bsc-dataseed.binance.org",
        native_symbol="BNB",
        explorer_url="https://bscscan.com",
        dex=DexConfig(
            name="PancakeSwap V2",
            router="0x10ED43C718714eb63d5aA57B78B54704E256024E",
            wrapped_native="0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
            stable_token="0x55d398326f99059fF775485246999027B3197955",
        ),
    ),
    "bsc-testnet": NetworkConfig(
        key="bsc-testnet",
        name="BNB Smart Chain Testnet",
        chain_id=97,
        rpc_url="https://data-seed-prebsc-1-s1.binance.org:8545",
        native_symbol="tBNB",
        explorer_url="https://testnet.bscscan.com",
        dex=DexConfig(
            name="PancakeSwap V2 Testnet",
            router="0xD99D1c33F9fC3444f8101754aBC46c52416550D1",
            wrapped_native="0xae13d989dac2f0debff460ac112a837c89baa7cd",
            stable_token="0x337610d27c682e347c9cd60bd4b3b107c9d34ddd",
        ),
        testnet=True,
    ),
    "polygon": NetworkConfig(
        key="polygon",
        name="Polygon",
        chain_id=137,
        rpc_url="https://polygon-rpc.com",
        native_symbol="MATIC",
        explorer_url="https://polygonscan.com",
    ),
    "arbitrum": NetworkConfig(
        key="arbitrum",
        name="Arbitrum One",
        chain_id=42161,
        rpc_url="https://arb1.arbitrum.io/rpc",
        native_symbol="ETH",
        explorer_url="https://arbiscan.io",
    ),
    "base": NetworkConfig(
        key="base",
        name="Base",
        chain_id=8453,
        rpc_url="https://mainnet.base.org",
        native_symbol="ETH",
        explorer_url="https://basescan.org",
    ),
    "optimism": NetworkConfig(
        key="optimism",
        name="Optimism",
        chain_id=10,
        rpc_url="https://mainnet.optimism.io",
        native_symbol="ETH",
        explorer_url="https://optimistic.etherscan.io",
    ),
}

ALIASES: dict[str, str] = {
    "mainnet": "ethereum",
    "eth": "ethereum",
    "binance": "bsc",
    "bnb": "bsc",
    "bsc-mainnet": "bsc",
    "bsc_testnet": "bsc-testnet",
    "matic": "polygon",
    "arbitrum-one": "arbitrum",
}

_BY_CHAIN_ID: dict[int, str] = {cfg.chain_id: key for key, cfg in NETWORKS.items()}


def canonical_key(network: Union[str, int]) -> str:
    """Map a name, alias or chain id to its canonical network key.

    Raises:
        UnknownNetworkError: If nothing matches
    """
    if isinstance(network, bool):
        raise UnknownNetworkError(f"Unsupported network: {network}")

    if isinstance(network, int):
        key = _BY_CHAIN_ID.get(network)
    else:
        text = str(network).strip().lower()
        if text.isdigit():
            key = _BY_CHAIN_ID.get(int(text))
        else:
            key = ALIASES.get(text, text)
            if key not in NETWORKS:
                key = None

    if key is None:
        raise UnknownNetworkError(f"Unsupported network: {network}")
    return key


def resolve_network(
    network: Union[str, int],
    settings: Optional[Settings] = None,
) -> NetworkConfig:
    """Resolve a network key to its configuration, applying RPC overrides."""
    key = canonical_key(network)
    config = NETWORKS[key]

    settings = settings or get_settings()
    override = settings.get_rpc_url(key)
    if override:
        config = replace(config, rpc_url=override)
    return config


def list_supported_networks() -> list[str]:
    """Get canonical keys of all supported networks."""
    return sorted(NETWORKS)

"""Token descriptor reads (decimals, symbol) and collection metadata."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Union

from web3 import Web3

from chainops.abis import ERC20_ABI, ERC721_ABI
from chainops.connections import ConnectionCache
from chainops.errors import ContractReadError, InvalidParameterError
from chainops.units import MAX_DECIMALS

logger = logging.getLogger(__name__)

UNKNOWN_COLLECTION_NAME = "Unknown"
UNKNOWN_COLLECTION_SYMBOL = "NFT"


@dataclass(frozen=True)
class TokenDescriptor:
    """On-chain identity of a fungible token."""

    address: str
    decimals: int
    symbol: str

    def to_dict(self) -> dict:
        return {"address": self.address, "symbol": self.symbol, "decimals": self.decimals}


@dataclass(frozen=True)
class CollectionMetadata:
    """Name/symbol of an NFT collection.

    complete is False when the read failed and placeholders were used.
    """

    name: str
    symbol: str
    complete: bool = True

    @classmethod
    def placeholder(cls) -> "CollectionMetadata":
        return cls(name=UNKNOWN_COLLECTION_NAME, symbol=UNKNOWN_COLLECTION_SYMBOL, complete=False)

    def to_dict(self) -> dict:
        return {"name": self.name, "symbol": self.symbol}


def checksum(address: str, field: str = "address") -> str:
    """Checksum an address, raising InvalidParameterError if malformed."""
    if not Web3.is_address(address):
        raise InvalidParameterError(f"Invalid {field}: {address!r}")
    return Web3.to_checksum_address(address)


class TokenReader:
    """Reads token descriptors from contracts.

    Holds no per-token state: every call re-reads decimals and symbol.
    """

    def __init__(self, cache: ConnectionCache):
        self.cache = cache

    async def describe_token(
        self,
        token_address: str,
        network: Union[str, int],
    ) -> TokenDescriptor:
        """Read decimals and symbol for a token.

        Args:
            token_address: ERC20 contract address
            network: Network key

        Returns:
            TokenDescriptor

        Raises:
            ContractReadError: If the contract does not answer like an ERC20
        """
        address = checksum(token_address, "token address")
        connection = self.cache.get_connection(network)
        try:
            decimals, symbol = await asyncio.gather(
                connection.call(address, ERC20_ABI, "decimals"),
                connection.call(address, ERC20_ABI, "symbol"),
            )
        except Exception as e:
            raise ContractReadError(
                f"Failed to read token metadata for {address} on {connection.network.key}: {e}",
                cause=e,
            ) from e

        if not isinstance(decimals, int) or not 0 <= decimals <= MAX_DECIMALS:
            raise ContractReadError(f"Token {address} returned invalid decimals: {decimals!r}")

        descriptor = TokenDescriptor(address=address, decimals=decimals, symbol=str(symbol))
        logger.debug(f"Token {descriptor.symbol} ({address}) has {decimals} decimals")
        return descriptor

    async def collection_metadata(
        self,
        collection_address: str,
        network: Union[str, int],
    ) -> CollectionMetadata:
        """Best-effort read of an NFT collection's name and symbol.

        Never raises on a failed read; returns placeholder metadata with
        complete=False instead.
        """
        address = checksum(collection_address, "collection address")
        connection = self.cache.get_connection(network)
        try:
            name, symbol = await asyncio.gather(
                connection.call(address, ERC721_ABI, "name"),
                connection.call(address, ERC721_ABI, "symbol"),
            )
        except Exception as e:
            logger.warning(f"Collection metadata unavailable for {address}: {e}")
            return CollectionMetadata.placeholder()

        return CollectionMetadata(name=str(name), symbol=str(symbol))

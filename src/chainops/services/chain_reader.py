"""Read-only chain queries: chain info, balances, blocks, transactions."""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from web3 import Web3

from chainops.abis import ERC20_ABI
from chainops.chains import list_supported_networks
from chainops.config import Settings, get_settings
from chainops.connections import ConnectionCache
from chainops.errors import ContractReadError, InvalidParameterError
from chainops.names import NameResolver
from chainops.tokens import TokenReader, checksum
from chainops.units import NATIVE_DECIMALS, to_human_units

logger = logging.getLogger(__name__)

Network = Union[str, int, None]


def to_jsonable(value: Any) -> Any:
    """Convert web3 results (AttributeDict, HexBytes) to plain JSON types."""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


class ChainReader:
    """Chain queries that never sign."""

    def __init__(
        self,
        cache: ConnectionCache,
        names: NameResolver,
        tokens: TokenReader,
        settings: Optional[Settings] = None,
    ):
        self.cache = cache
        self.names = names
        self.tokens = tokens
        self.settings = settings or get_settings()

    def _connection(self, network: Network):
        target = network if network not in (None, "") else self.settings.default_network
        return self.cache.get_connection(target)

    async def get_chain_info(self, network: Network = None) -> dict:
        """Get chain id, latest block number and RPC endpoint."""
        connection = self._connection(network)
        block_number = await connection.get_block_number()
        return {
            "network": connection.network.key,
            "name": connection.network.name,
            "chain_id": connection.network.chain_id,
            "block_number": block_number,
            "rpc_url": connection.network.rpc_url,
            "native_symbol": connection.network.native_symbol,
        }

    def get_supported_networks(self) -> list[str]:
        return list_supported_networks()

    async def resolve_name(self, name: str, network: Network = None) -> dict:
        """Resolve a dotted name such as "vitalik.eth"."""
        if not name or "." not in name:
            raise InvalidParameterError(f"Not a resolvable name: {name!r}")
        connection = self._connection(network)
        address = await self.names.resolve(name, connection.network.key)
        return {"name": name, "address": address, "network": connection.network.key}

    async def get_balance(self, address_or_name: str, network: Network = None) -> dict:
        """Get native balance in wei and ether."""
        connection = self._connection(network)
        address = await self.names.resolve(address_or_name, connection.network.key)
        wei = await connection.get_balance(address)
        return {
            "address": Web3.to_checksum_address(address),
            "network": connection.network.key,
            "wei": str(wei),
            "ether": to_human_units(wei, NATIVE_DECIMALS),
            "symbol": connection.network.native_symbol,
        }

    async def get_token_balance(self, token_address: str, owner: str, network: Network = None) -> dict:
        """Get an ERC20 balance in raw and formatted form."""
        connection = self._connection(network)
        key = connection.network.key
        token = await self.names.resolve(token_address, key)
        holder = await self.names.resolve(owner, key)

        descriptor = await self.tokens.describe_token(token, key)
        try:
            raw = await connection.call(descriptor.address, ERC20_ABI, "balanceOf", checksum(holder))
        except Exception as e:
            raise ContractReadError(f"Failed to read balance of {holder} on {descriptor.address}: {e}", cause=e) from e

        return {
            "token": descriptor.address,
            "owner": checksum(holder),
            "network": key,
            "raw": str(raw),
            "formatted": to_human_units(raw, descriptor.decimals),
            "symbol": descriptor.symbol,
            "decimals": descriptor.decimals,
        }

    async def get_latest_block(self, network: Network = None) -> dict:
        return await self.get_block("latest", network)

    async def get_block(self, block: Union[int, str] = "latest", network: Network = None) -> dict:
        """Get a block by number or tag (latest, finalized, ...)."""
        if isinstance(block, str) and block.isdigit():
            block = int(block)
        connection = self._connection(network)
        return to_jsonable(await connection.get_block(block))

    async def get_transaction(self, tx_hash: str, network: Network = None) -> dict:
        connection = self._connection(network)
        return to_jsonable(await connection.get_transaction(tx_hash))

    async def get_transaction_receipt(self, tx_hash: str, network: Network = None) -> dict:
        connection = self._connection(network)
        return to_jsonable(await connection.get_transaction_receipt(tx_hash))

    async def read_contract(
        self,
        contract_address: str,
        abi: list,
        function_name: str,
        args: Sequence[Any] = (),
        network: Network = None,
    ) -> Any:
        """Call a view function and return its JSON-safe result.

        Raises:
            ContractReadError: If the call reverts or the ABI does not match
        """
        connection = self._connection(network)
        address = await self.names.resolve(contract_address, connection.network.key)
        try:
            result = await connection.call(address, abi, function_name, *args)
        except Exception as e:
            raise ContractReadError(f"Call to {function_name} on {address} failed: {e}", cause=e) from e
        return to_jsonable(result)

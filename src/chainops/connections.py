"""Per-network chain connections and the process-wide connection cache."""

import logging
from functools import lru_cache
from typing import Any, Callable, Optional, Union

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from chainops.chains import NetworkConfig, resolve_network
from chainops.config import Settings

logger = logging.getLogger(__name__)


class Connection:
    """Read/broadcast handle for one network.

    Wraps an AsyncWeb3 instance. Holds no account state, so one instance is
    shared by every caller of the same network.
    """

    def __init__(self, network: NetworkConfig, web3: Optional[AsyncWeb3] = None):
        self.network = network
        self.web3 = web3 or AsyncWeb3(AsyncHTTPProvider(network.rpc_url))

    def __repr__(self) -> str:
        return f"Connection(network={self.network.key!r}, chain_id={self.network.chain_id})"

    @property
    def chain_id(self) -> int:
        """Configured chain id."""
        return self.network.chain_id

    async def call(self, address: str, abi: list, fn_name: str, *args: Any) -> Any:
        """Execute a read-only contract call."""
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return await getattr(contract.functions, fn_name)(*args).call()

    async def resolve_name(self, name: str) -> Optional[str]:
        """Look up the address registered for a normalised ENS name."""
        return await self.web3.ens.address(name)

    async def get_balance(self, address: str) -> int:
        return await self.web3.eth.get_balance(Web3.to_checksum_address(address))

    async def get_block(self, block: Union[int, str] = "latest", full_transactions: bool = False):
        return await self.web3.eth.get_block(block, full_transactions)

    async def get_block_number(self) -> int:
        return await self.web3.eth.block_number

    async def get_transaction(self, tx_hash: str):
        return await self.web3.eth.get_transaction(tx_hash)

    async def get_transaction_receipt(self, tx_hash: str):
        return await self.web3.eth.get_transaction_receipt(tx_hash)

    async def get_transaction_count(self, address: str) -> int:
        """Get the pending nonce for an address."""
        return await self.web3.eth.get_transaction_count(address, "pending")

    async def estimate_gas(self, tx: dict) -> int:
        return await self.web3.eth.estimate_gas(tx)

    async def get_gas_price(self) -> int:
        return await self.web3.eth.gas_price

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Broadcast a signed transaction.

        Returns:
            0x-prefixed transaction hash
        """
        tx_hash = await self.web3.eth.send_raw_transaction(raw_tx)
        return Web3.to_hex(tx_hash)


ConnectionFactory = Callable[[NetworkConfig], Connection]


class ConnectionCache:
    """Memoises one Connection per canonical network key.

    Entries are never evicted; the number of networks a process touches is
    small. Lookup and insert happen without an await in between, so
    concurrent tasks never observe a half-built entry.
    """

    def __init__(
        self,
        connection_factory: Optional[ConnectionFactory] = None,
        settings: Optional[Settings] = None,
    ):
        self._factory = connection_factory or Connection
        self._settings = settings
        self._connections: dict[str, Connection] = {}

    def get_connection(self, network: Union[str, int]) -> Connection:
        """Get the shared connection for a network.

        Args:
            network: Network name, alias or chain id

        Returns:
            The same Connection object for every call with an equivalent key

        Raises:
            UnknownNetworkError: If the key does not resolve
        """
        config = resolve_network(network, self._settings)
        connection = self._connections.get(config.key)
        if connection is None:
            logger.debug(f"Creating connection for {config.key} ({config.rpc_url})")
            connection = self._factory(config)
            self._connections[config.key] = connection
        return connection

    def cached_networks(self) -> list[str]:
        """Get keys of networks with a live connection."""
        return sorted(self._connections)

    def __len__(self) -> int:
        return len(self._connections)


@lru_cache
def get_connection_cache() -> ConnectionCache:
    """Get the process-scoped connection cache."""
    return ConnectionCache()

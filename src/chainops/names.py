"""Name -> address resolution (ENS style)."""

import logging
from typing import Union

from ens.utils import normalize_name
from web3 import Web3

from chainops.connections import ConnectionCache
from chainops.errors import NameResolutionError

logger = logging.getLogger(__name__)


class NameResolver:
    """Resolves names to addresses, passing addresses through untouched."""

    def __init__(self, cache: ConnectionCache):
        self.cache = cache

    async def resolve(self, name_or_address: str, network: Union[str, int]) -> str:
        """Resolve a name or address to an address.

        A well-formed address is returned unchanged without touching the
        network.

        Args:
            name_or_address: Hex address or dotted name like "vitalik.eth"
            network: Network to resolve against

        Returns:
            Address string

        Raises:
            NameResolutionError: If the name is malformed or unregistered
            UnknownNetworkError: If the network does not resolve

        Transport failures from the lookup itself propagate unchanged.
        """
        value = (name_or_address or "").strip()
        if Web3.is_address(value):
            return value

        if "." not in value:
            raise NameResolutionError(f"Not an address or resolvable name: {name_or_address!r}")

        try:
            normalized = normalize_name(value)
        except Exception as e:
            raise NameResolutionError(f"Invalid name {name_or_address!r}: {e}") from e

        connection = self.cache.get_connection(network)
        address = await connection.resolve_name(normalized)

        if not address:
            raise NameResolutionError(f"Name {normalized} has no registered address")

        logger.info(f"Resolved {normalized} -> {address} on {connection.network.key}")
        return address

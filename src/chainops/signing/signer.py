"""Signer resolution and the single sign-and-broadcast path.

Signing flow:
1. Resolve a SignerRef (stored wallet, raw key or default key) to a
   SignerContext bound to one network connection
2. Build an unsigned transaction dict (to, value, data)
3. SignerContext.send_transaction fills nonce, chain id, gas and gas
   price, signs locally and broadcasts

Signer contexts are created per operation and never cached.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from web3 import Web3

from chainops.config import Settings, get_settings
from chainops.connections import Connection, ConnectionCache
from chainops.errors import InvalidParameterError, SignerUnavailableError
from chainops.signing.credentials import PrivateKey

if TYPE_CHECKING:
    from chainops.wallets.store import WalletStore

logger = logging.getLogger(__name__)


class SignerKind(str, Enum):
    """Where a signer's credential comes from."""

    STORED = "stored"      # Named wallet in the wallet store
    RAW = "raw"            # Key passed by the caller
    DEFAULT = "default"    # PRIVATE_KEY from settings


@dataclass(frozen=True)
class SignerRef:
    """Reference to a signing account, resolved lazily per operation."""

    kind: SignerKind
    wallet_name: Optional[str] = None
    credential: Optional[PrivateKey] = field(default=None, repr=False, compare=False)

    @classmethod
    def stored(cls, wallet_name: str) -> "SignerRef":
        if not wallet_name or not wallet_name.strip():
            raise InvalidParameterError("Wallet name must not be empty")
        return cls(kind=SignerKind.STORED, wallet_name=wallet_name.strip())

    @classmethod
    def raw(cls, credential: Union[str, PrivateKey]) -> "SignerRef":
        key = credential if isinstance(credential, PrivateKey) else PrivateKey(credential)
        return cls(kind=SignerKind.RAW, credential=key)

    @classmethod
    def default(cls) -> "SignerRef":
        return cls(kind=SignerKind.DEFAULT)

    def describe(self) -> str:
        """Log-safe description."""
        if self.kind == SignerKind.STORED:
            return f"wallet:{self.wallet_name}"
        return self.kind.value


class SignerContext:
    """One account bound to one network connection."""

    def __init__(self, connection: Connection, account):
        self.connection = connection
        self.account = account

    def __repr__(self) -> str:
        address = self.account.address if self.account is not None else None
        return f"SignerContext(network={self.connection.network.key!r}, address={address!r})"

    @property
    def network(self) -> str:
        return self.connection.network.key

    @property
    def address(self) -> str:
        """Checksum address of the bound account."""
        if self.account is None:
            raise SignerUnavailableError("No account bound to signer")
        return self.account.address

    async def send_transaction(self, tx: dict) -> str:
        """Sign and broadcast a transaction.

        Args:
            tx: Unsigned transaction (to, value, data; nonce/gas optional)

        Returns:
            Transaction hash

        Raises:
            SignerUnavailableError: If no account is bound
        """
        if self.account is None:
            raise SignerUnavailableError("Cannot submit transaction without a bound account")

        tx_params = dict(tx)
        tx_params["from"] = self.account.address
        tx_params.setdefault("value", 0)
        if tx_params.get("to"):
            tx_params["to"] = Web3.to_checksum_address(tx_params["to"])

        if "nonce" not in tx_params:
            tx_params["nonce"] = await self.connection.get_transaction_count(self.account.address)

        tx_params["chainId"] = self.connection.chain_id

        # Estimate gas if not provided
        if "gas" not in tx_params:
            tx_params["gas"] = await self.connection.estimate_gas(tx_params)

        # Get gas price if not provided
        if "gasPrice" not in tx_params and "maxFeePerGas" not in tx_params:
            tx_params["gasPrice"] = await self.connection.get_gas_price()

        signed_tx = self.account.sign_transaction(tx_params)
        tx_hash = await self.connection.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(
            f"Broadcast {tx_hash} from {self.account.address} on {self.network} "
            f"(nonce={tx_params['nonce']})"
        )
        return tx_hash


class SignerResolver:
    """Builds SignerContexts from raw keys, stored wallets or the default key."""

    def __init__(
        self,
        cache: ConnectionCache,
        wallet_store: Optional["WalletStore"] = None,
        settings: Optional[Settings] = None,
    ):
        self.cache = cache
        self.wallet_store = wallet_store
        self.settings = settings

    def from_credential(
        self,
        credential: Union[str, PrivateKey],
        network: Union[str, int],
    ) -> SignerContext:
        """Bind the account for a raw key to a network.

        Raises:
            InvalidCredentialError: If the key is not 64 hex characters
            UnknownNetworkError: If the network does not resolve
        """
        key = credential if isinstance(credential, PrivateKey) else PrivateKey(credential)
        account = key.to_account()
        connection = self.cache.get_connection(network)
        return SignerContext(connection, account)

    async def from_stored_wallet(self, wallet_name: str, network: Union[str, int]) -> SignerContext:
        """Bind a stored wallet's account to a network.

        Raises:
            WalletNotFoundError: If no wallet has this name
            InvalidCredentialError: If the stored key is malformed
        """
        if self.wallet_store is None:
            raise SignerUnavailableError("No wallet store configured")
        wallet = await self.wallet_store.get_wallet_by_name(wallet_name)
        return self.from_credential(wallet.private_key, network)

    def from_default(self, network: Union[str, int]) -> SignerContext:
        """Bind the PRIVATE_KEY account to a network.

        Raises:
            CredentialNotSetError: If PRIVATE_KEY is not configured
        """
        key = PrivateKey.from_settings(self.settings or get_settings())
        return self.from_credential(key, network)

    async def resolve(self, ref: SignerRef, network: Union[str, int]) -> SignerContext:
        """Resolve any SignerRef to a SignerContext."""
        if ref.kind == SignerKind.STORED:
            signer = await self.from_stored_wallet(ref.wallet_name, network)
        elif ref.kind == SignerKind.RAW:
            signer = self.from_credential(ref.credential, network)
        else:
            signer = self.from_default(network)

        logger.debug(f"Resolved signer {ref.describe()} -> {signer.address} on {signer.network}")
        return signer

"""Wallet store: named, persisted credential/address pairs.

Each call opens its own session, so one store instance can be shared by
concurrent requests.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chainops.errors import DuplicateWalletError, InvalidParameterError, WalletNotFoundError
from chainops.signing.credentials import PrivateKey
from chainops.tokens import checksum
from chainops.wallets.database import session_scope
from chainops.wallets.models import Wallet
from chainops.wallets.repository import WalletRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredWallet:
    """Detached wallet record."""

    id: int
    name: str
    address: str
    private_key: str = field(repr=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, wallet: Wallet) -> "StoredWallet":
        return cls(
            id=wallet.id,
            name=wallet.name,
            address=wallet.address,
            private_key=wallet.private_key,
            created_at=wallet.created_at,
            updated_at=wallet.updated_at,
        )

    def to_dict(self) -> dict:
        """Public view of the wallet (no credential)."""
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class WalletStore:
    """Create, import and look up stored wallets."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create_wallet(self, name: str) -> StoredWallet:
        """Generate a new key and store it under name.

        Raises:
            DuplicateWalletError: If the name is taken
        """
        return await self._save(name, PrivateKey.generate())

    async def import_wallet(self, name: str, private_key: str) -> StoredWallet:
        """Store an existing key under name.

        Raises:
            InvalidCredentialError: If the key is not 64 hex characters
            DuplicateWalletError: If the name or address is taken
        """
        return await self._save(name, PrivateKey(private_key))

    async def get_wallet_by_name(self, name: str) -> StoredWallet:
        """Get a wallet by name.

        Raises:
            WalletNotFoundError: If no wallet has this name
        """
        async with session_scope(self.session_factory) as session:
            wallet = await WalletRepository(session).get_by_name(name)
            if wallet is None:
                raise WalletNotFoundError(f"Wallet not found with name: {name}")
            return StoredWallet.from_model(wallet)

    async def get_wallet_by_address(self, address: str) -> StoredWallet:
        """Get a wallet by address (case-insensitive).

        Raises:
            WalletNotFoundError: If no wallet has this address
        """
        async with session_scope(self.session_factory) as session:
            wallet = await WalletRepository(session).get_by_address(address)
            if wallet is None:
                raise WalletNotFoundError(f"Wallet not found with address: {address}")
            return StoredWallet.from_model(wallet)

    async def list_wallets(self) -> list[StoredWallet]:
        """Get all wallets ordered by creation time, newest first."""
        async with session_scope(self.session_factory) as session:
            wallets = await WalletRepository(session).list_wallets()
            return [StoredWallet.from_model(w) for w in wallets]

    @staticmethod
    def address_from_private_key(private_key: str) -> str:
        """Derive the address for a key without storing it."""
        return PrivateKey(private_key).derive_address()

    async def _save(self, name: str, key: PrivateKey) -> StoredWallet:
        name = (name or "").strip()
        if not name:
            raise InvalidParameterError("Wallet name must not be empty")

        address = checksum(key.derive_address())
        try:
            async with session_scope(self.session_factory) as session:
                repo = WalletRepository(session)
                if await repo.get_by_name(name) is not None:
                    raise DuplicateWalletError(f"Wallet already exists with name: {name}")
                if await repo.get_by_address(address) is not None:
                    raise DuplicateWalletError(f"Wallet already exists for address: {address}")
                wallet = await repo.add_wallet(name, address, key.reveal())
                stored = StoredWallet.from_model(wallet)
        except IntegrityError as e:
            raise DuplicateWalletError(f"Wallet {name} conflicts with an existing wallet") from e

        logger.info(f"Stored wallet {stored.name} ({stored.address})")
        return stored

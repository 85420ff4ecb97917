"""Repository for wallet records."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chainops.wallets.models import Wallet


class WalletRepository:
    """Database operations on the wallets table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_wallet(self, name: str, address: str, private_key: str) -> Wallet:
        """Insert a wallet and flush to assign its id."""
        wallet = Wallet(name=name, address=address, private_key=private_key)
        self.session.add(wallet)
        await self.session.flush()
        await self.session.refresh(wallet)
        return wallet

    async def get_by_name(self, name: str) -> Optional[Wallet]:
        """Get wallet by exact name."""
        stmt = select(Wallet).where(Wallet.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_address(self, address: str) -> Optional[Wallet]:
        """Get wallet by address, ignoring case."""
        stmt = select(Wallet).where(func.lower(Wallet.address) == address.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_wallets(self) -> list[Wallet]:
        """Get all wallets, newest first."""
        stmt = select(Wallet).order_by(Wallet.created_at.desc(), Wallet.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

"""Persistent wallet store."""

from chainops.wallets.database import close_db, get_session_factory, init_db
from chainops.wallets.models import Base, Wallet
from chainops.wallets.store import StoredWallet, WalletStore

__all__ = [
    "Base",
    "Wallet",
    "StoredWallet",
    "WalletStore",
    "close_db",
    "get_session_factory",
    "init_db",
]

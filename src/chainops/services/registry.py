"""Process-wide wiring of the chain services."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chainops.config import Settings, get_settings
from chainops.connections import ConnectionCache, get_connection_cache
from chainops.names import NameResolver
from chainops.services.chain_reader import ChainReader
from chainops.signing.signer import SignerResolver
from chainops.swap.engine import SwapEngine
from chainops.tokens import TokenReader
from chainops.transfer.pipeline import TransferPipeline
from chainops.wallets.database import get_session_factory
from chainops.wallets.store import WalletStore


@dataclass
class Services:
    """All collaborators one request may need."""

    settings: Settings
    connections: ConnectionCache
    wallets: WalletStore
    signers: SignerResolver
    names: NameResolver
    tokens: TokenReader
    transfers: TransferPipeline
    swaps: SwapEngine
    reader: ChainReader


def build_services(
    connections: ConnectionCache,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], float]] = None,
) -> Services:
    """Wire services around an explicit connection cache and database."""
    settings = settings or get_settings()
    wallets = WalletStore(session_factory)
    signers = SignerResolver(connections, wallets, settings)
    names = NameResolver(connections)
    tokens = TokenReader(connections)

    swap_kwargs = {"clock": clock} if clock is not None else {}
    return Services(
        settings=settings,
        connections=connections,
        wallets=wallets,
        signers=signers,
        names=names,
        tokens=tokens,
        transfers=TransferPipeline(connections, signers, names, tokens, settings),
        swaps=SwapEngine(connections, signers, tokens, settings=settings, **swap_kwargs),
        reader=ChainReader(connections, names, tokens, settings),
    )


@lru_cache
def get_services() -> Services:
    """Get services bound to the process connection cache and database."""
    return build_services(get_connection_cache(), get_session_factory())

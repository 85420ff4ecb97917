"""Pytest configuration and fixtures."""

import os
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"
os.environ.pop("PRIVATE_KEY", None)

from chainops.config import Settings
from chainops.connections import Connection, ConnectionCache
from chainops.services.registry import build_services
from chainops.wallets.database import create_schema, make_session_factory
from chainops.wallets.store import WalletStore

# Well-known development keys (never funded on real networks)
TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
OTHER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

TOKEN_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
COLLECTION_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"

FIXED_NOW = 1_700_000_000


class FakeConnection(Connection):
    """Connection double with canned reads and recorded broadcasts.

    reads maps (lowercase address, function name) to a value, an exception
    instance (raised), or a callable taking the call args.
    """

    def __init__(self, network):
        self.network = network
        self.web3 = None
        self.reads: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str, tuple]] = []
        self.names: dict[str, str] = {}
        self.name_lookups: list[str] = []
        self.balances: dict[str, int] = {}
        self.blocks: dict[Any, dict] = {}
        self.transactions: dict[str, dict] = {}
        self.receipts: dict[str, dict] = {}
        self.estimated: list[dict] = []
        self.sent: list[bytes] = []
        self.block_number = 12345
        self.nonce = 0
        self.gas_price = 1_000_000_000
        self.send_error: Exception | None = None

    async def call(self, address, abi, fn_name, *args):
        self.calls.append((address, fn_name, args))
        value = self.reads.get((address.lower(), fn_name))
        if value is None:
            raise ValueError(f"execution reverted: {fn_name}")
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(*args)
        return value

    async def resolve_name(self, name):
        self.name_lookups.append(name)
        return self.names.get(name)

    async def get_balance(self, address):
        return self.balances.get(address.lower(), 0)

    async def get_block(self, block="latest", full_transactions=False):
        return self.blocks[block]

    async def get_block_number(self):
        return self.block_number

    async def get_transaction(self, tx_hash):
        return self.transactions[tx_hash]

    async def get_transaction_receipt(self, tx_hash):
        return self.receipts[tx_hash]

    async def get_transaction_count(self, address):
        return self.nonce

    async def estimate_gas(self, tx):
        self.estimated.append(dict(tx))
        return 21000 if not tx.get("data") else 100000

    async def get_gas_price(self):
        return self.gas_price

    async def send_raw_transaction(self, raw_tx):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(bytes(raw_tx))
        return "0x" + f"{len(self.sent):064x}"

    @property
    def last_tx(self) -> dict:
        """Transaction params of the most recent submission."""
        return self.estimated[-1]


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and .env."""
    return Settings(_env_file=None, private_key=None, debug=False)


@pytest.fixture
def connection_cache(settings) -> ConnectionCache:
    """Connection cache producing FakeConnections."""
    return ConnectionCache(connection_factory=FakeConnection, settings=settings)


@pytest_asyncio.fixture
async def db_engine():
    """Create in-memory database engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(db_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def wallet_store(session_factory) -> WalletStore:
    return WalletStore(session_factory)


@pytest_asyncio.fixture
async def services(connection_cache, session_factory, settings):
    """Fully wired services over fake connections and an in-memory store."""
    return build_services(connection_cache, session_factory, settings=settings, clock=lambda: FIXED_NOW)

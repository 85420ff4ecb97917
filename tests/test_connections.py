"""Tests for network configuration and the connection cache."""

import asyncio

import pytest

from chainops.chains import canonical_key, list_supported_networks, resolve_network
from chainops.config import Settings
from chainops.connections import Connection, ConnectionCache
from chainops.errors import UnknownNetworkError

from conftest import FakeConnection


class TestResolveNetwork:
    """Tests for network lookup."""

    def test_by_name(self, settings):
        config = resolve_network("ethereum", settings)
        assert config.chain_id == 1
        assert config.key == "ethereum"

    def test_case_insensitive_and_alias(self, settings):
        assert resolve_network("BSC", settings).chain_id == 56
        assert resolve_network("mainnet", settings).key == "ethereum"
        assert resolve_network("matic", settings).key == "polygon"

    def test_by_chain_id_int_and_string(self, settings):
        assert resolve_network(97, settings).key == "bsc-testnet"
        assert resolve_network("8453", settings).key == "base"

    def test_unknown_raises(self, settings):
        with pytest.raises(UnknownNetworkError):
            resolve_network("dogechain", settings)
        with pytest.raises(UnknownNetworkError):
            resolve_network(999999, settings)

    def test_bool_is_not_a_chain_id(self):
        with pytest.raises(UnknownNetworkError):
            canonical_key(True)

    def test_rpc_override_applied(self):
        settings = Settings(_env_file=None, bsc_testnet_rpc_url="http://localhost:8545")
        assert resolve_network("bsc-testnet", settings).rpc_url == "http://localhost:8545"

    def test_router_config_only_on_dex_networks(self, settings):
        assert resolve_network("bsc-testnet", settings).dex is not None
        assert resolve_network("ethereum", settings).dex is None

    def test_supported_networks(self):
        networks = list_supported_networks()
        assert "ethereum" in networks
        assert "bsc-testnet" in networks
        assert "mainnet" not in networks


class TestConnectionCache:
    """Tests for ConnectionCache."""

    def test_same_key_returns_identical_object(self, connection_cache):
        first = connection_cache.get_connection("ethereum")
        second = connection_cache.get_connection("ethereum")
        assert first is second

    def test_equivalent_keys_share_connection(self, connection_cache):
        by_name = connection_cache.get_connection("bsc")
        by_id = connection_cache.get_connection(56)
        by_alias = connection_cache.get_connection("binance")
        assert by_name is by_id is by_alias
        assert len(connection_cache) == 1

    def test_distinct_networks_get_distinct_connections(self, connection_cache):
        assert connection_cache.get_connection("ethereum") is not connection_cache.get_connection("polygon")
        assert connection_cache.cached_networks() == ["ethereum", "polygon"]

    def test_unknown_network_not_cached(self, connection_cache):
        with pytest.raises(UnknownNetworkError):
            connection_cache.get_connection("nowhere")
        assert len(connection_cache) == 0

    def test_factory_called_once_per_network(self, settings):
        created = []

        def factory(network):
            created.append(network.key)
            return FakeConnection(network)

        cache = ConnectionCache(connection_factory=factory, settings=settings)
        for _ in range(3):
            cache.get_connection("base")
        assert created == ["base"]

    @pytest.mark.asyncio
    async def test_concurrent_tasks_share_connection(self, connection_cache):
        async def grab():
            await asyncio.sleep(0)
            return connection_cache.get_connection("arbitrum")

        results = await asyncio.gather(*(grab() for _ in range(10)))
        assert all(conn is results[0] for conn in results)

    def test_default_factory_builds_real_connection(self, settings):
        """Building a connection does not touch the network."""
        cache = ConnectionCache(settings=settings)
        connection = cache.get_connection("sepolia")
        assert isinstance(connection, Connection)
        assert connection.chain_id == 11155111
        assert connection.web3 is not None

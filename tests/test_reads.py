"""Tests for read-only chain queries."""

import pytest

from chainops.abis import ERC20_ABI
from chainops.errors import ContractReadError, InvalidParameterError
from chainops.services.chain_reader import to_jsonable

from conftest import OTHER_ADDRESS, TOKEN_ADDRESS


class TestChainReader:
    """Tests for ChainReader."""

    @pytest.mark.asyncio
    async def test_chain_info(self, services):
        info = await services.reader.get_chain_info("bsc-testnet")

        assert info["network"] == "bsc-testnet"
        assert info["chain_id"] == 97
        assert info["block_number"] == 12345

    @pytest.mark.asyncio
    async def test_native_balance(self, services):
        eth = services.connections.get_connection("ethereum")
        eth.balances[OTHER_ADDRESS.lower()] = 1_250_000_000_000_000_000

        balance = await services.reader.get_balance(OTHER_ADDRESS)

        assert balance["wei"] == "1250000000000000000"
        assert balance["ether"] == "1.25"
        assert balance["symbol"] == "ETH"

    @pytest.mark.asyncio
    async def test_token_balance(self, services):
        eth = services.connections.get_connection("ethereum")
        eth.reads[(TOKEN_ADDRESS.lower(), "decimals")] = 6
        eth.reads[(TOKEN_ADDRESS.lower(), "symbol")] = "USDC"
        eth.reads[(TOKEN_ADDRESS.lower(), "balanceOf")] = 42_500_000

        balance = await services.reader.get_token_balance(TOKEN_ADDRESS, OTHER_ADDRESS)

        assert balance["raw"] == "42500000"
        assert balance["formatted"] == "42.5"
        assert balance["symbol"] == "USDC"
        assert balance["decimals"] == 6

    @pytest.mark.asyncio
    async def test_resolve_name_requires_dot(self, services):
        with pytest.raises(InvalidParameterError):
            await services.reader.resolve_name("vitalik")

    @pytest.mark.asyncio
    async def test_resolve_name(self, services):
        services.connections.get_connection("ethereum").names["bob.eth"] = OTHER_ADDRESS

        result = await services.reader.resolve_name("bob.eth")

        assert result["address"] == OTHER_ADDRESS

    @pytest.mark.asyncio
    async def test_block_is_jsonable(self, services):
        eth = services.connections.get_connection("ethereum")
        eth.blocks[100] = {"number": 100, "hash": bytes.fromhex("ab" * 32), "transactions": []}

        block = await services.reader.get_block("100")

        assert block["number"] == 100
        assert block["hash"] == "0x" + "ab" * 32

    @pytest.mark.asyncio
    async def test_read_contract(self, services):
        eth = services.connections.get_connection("ethereum")
        eth.reads[(TOKEN_ADDRESS.lower(), "balanceOf")] = 7

        result = await services.reader.read_contract(TOKEN_ADDRESS, ERC20_ABI, "balanceOf", [OTHER_ADDRESS])

        assert result == 7

    @pytest.mark.asyncio
    async def test_read_contract_failure(self, services):
        with pytest.raises(ContractReadError):
            await services.reader.read_contract(TOKEN_ADDRESS, ERC20_ABI, "totalSupply")

    @pytest.mark.asyncio
    async def test_supported_networks(self, services):
        assert "bsc-testnet" in services.reader.get_supported_networks()


class TestToJsonable:
    def test_nested(self):
        value = {"a": [bytes.fromhex("01"), b"\x02"], "b": (1, "x")}
        assert to_jsonable(value) == {"a": ["0x01", "0x02"], "b": [1, "x"]}

"""Tests for the swap engine."""

from decimal import Decimal

import pytest
import pytest_asyncio
from web3 import Web3

from chainops.abis import ROUTER_V2_ABI, encode_call
from chainops.chains import NETWORKS
from chainops.errors import InvalidParameterError, SwapExecutionError, UnknownNetworkError, WalletNotFoundError
from chainops.signing.signer import SignerRef
from chainops.swap.base import (
    DEFAULT_DEADLINE_SECONDS,
    SwapSide,
    apply_slippage,
    compute_deadline,
    slippage_bound,
)

from conftest import FIXED_NOW, TEST_ADDRESS, TEST_KEY

DEX = NETWORKS["bsc-testnet"].dex
ROUTER = Web3.to_checksum_address(DEX.router)
WBNB = Web3.to_checksum_address(DEX.wrapped_native)
USDT = Web3.to_checksum_address(DEX.stable_token)

ONE = 10**18


class TestSlippageMath:
    """Tests for the pure slippage and deadline helpers."""

    def test_buy_bound(self):
        assert apply_slippage(Decimal("100"), Decimal("0.5")) == Decimal("99.5")

    def test_sell_bound(self):
        assert apply_slippage(Decimal("2.0"), Decimal("1")) == Decimal("1.98")

    def test_integer_bound_matches_decimal(self):
        assert slippage_bound(100 * ONE, "0.5") == 995 * ONE // 10
        assert slippage_bound(2 * ONE, "1") == 198 * ONE // 100

    def test_integer_bound_rounds_down(self):
        assert slippage_bound(999, "0.5") == 994

    def test_zero_and_full_slippage(self):
        assert slippage_bound(12345, "0") == 12345
        assert slippage_bound(12345, "100") == 0

    def test_exact_for_large_amounts(self):
        amount = 123456789123456789123456789123456789
        assert slippage_bound(amount, "0.3") == amount * 997 // 1000

    def test_deadline(self):
        assert compute_deadline(FIXED_NOW) == FIXED_NOW + 1200
        assert compute_deadline(FIXED_NOW + 0.9) == FIXED_NOW + 1200
        assert DEFAULT_DEADLINE_SECONDS == 1200


@pytest_asyncio.fixture
async def alice(services):
    await services.wallets.import_wallet("alice", TEST_KEY)
    return SignerRef.stored("alice")


@pytest.fixture
def bsc(services):
    """Fake bsc-testnet router: 1 USDT costs 0.002 tBNB, 1 USDT sells for 0.0019."""
    connection = services.connections.get_connection("bsc-testnet")
    connection.reads[(USDT.lower(), "decimals")] = 18
    connection.reads[(USDT.lower(), "symbol")] = "USDT"
    connection.reads[(ROUTER.lower(), "getAmountsIn")] = lambda amount_out, path: [
        amount_out * 2 // 1000,
        amount_out,
    ]
    connection.reads[(ROUTER.lower(), "getAmountsOut")] = lambda amount_in, path: [
        amount_in,
        amount_in * 19 // 10000,
    ]
    return connection


def router_calls(connection):
    return [(fn, args) for address, fn, args in connection.calls if address.lower() == ROUTER.lower()]


class TestQuotes:
    """Tests for the quote helpers."""

    @pytest.mark.asyncio
    async def test_eth_needed_for_output(self, services, bsc):
        quote = await services.swaps.eth_needed_for_output("100")

        assert quote.side == SwapSide.BUY
        assert quote.amount_out == 100 * ONE
        assert quote.amount_in == 2 * ONE // 10
        assert quote.path == (WBNB, USDT)
        assert router_calls(bsc) == [("getAmountsIn", (100 * ONE, [WBNB, USDT]))]

    @pytest.mark.asyncio
    async def test_eth_receivable_for_input(self, services, bsc):
        quote = await services.swaps.eth_receivable_for_input("100")

        assert quote.side == SwapSide.SELL
        assert quote.amount_in == 100 * ONE
        assert quote.amount_out == 19 * ONE // 100
        assert quote.path == (USDT, WBNB)
        assert quote.to_dict()["amount_out"]["formatted"] == "0.19"

    @pytest.mark.asyncio
    async def test_quote_rejects_bad_amount_without_network(self, services, bsc):
        with pytest.raises(InvalidParameterError):
            await services.swaps.eth_needed_for_output("0")
        assert bsc.calls == []

    @pytest.mark.asyncio
    async def test_network_without_router(self, services):
        with pytest.raises(InvalidParameterError):
            await services.swaps.eth_needed_for_output("1", "ethereum")

    @pytest.mark.asyncio
    async def test_zero_quote_is_swap_failure(self, services, bsc):
        bsc.reads[(ROUTER.lower(), "getAmountsIn")] = lambda amount_out, path: [0, amount_out]

        with pytest.raises(SwapExecutionError) as exc_info:
            await services.swaps.eth_needed_for_output("1")
        assert exc_info.value.stage == "quote"

    @pytest.mark.asyncio
    async def test_router_revert_is_wrapped(self, services, bsc):
        bsc.reads[(ROUTER.lower(), "getAmountsOut")] = ValueError("execution reverted: INSUFFICIENT_LIQUIDITY")

        with pytest.raises(SwapExecutionError) as exc_info:
            await services.swaps.eth_receivable_for_input("1")
        assert isinstance(exc_info.value.cause, ValueError)
        assert exc_info.value.__cause__ is exc_info.value.cause


class TestBuy:
    """Tests for buy_stable_token."""

    @pytest.mark.asyncio
    async def test_buy_builds_value_carrying_call(self, services, alice, bsc):
        result = await services.swaps.buy_stable_token(alice, "100", "0.5")

        min_out = 995 * ONE // 10
        deadline = FIXED_NOW + 1200
        assert result.bound.min_amount_out == min_out
        assert result.deadline == deadline
        assert result.value == 2 * ONE // 10
        assert result.sender == TEST_ADDRESS

        tx = bsc.last_tx
        assert tx["to"] == ROUTER
        assert tx["value"] == 2 * ONE // 10
        assert tx["chainId"] == 97
        assert tx["data"] == encode_call(
            ROUTER, ROUTER_V2_ABI, "swapExactETHForTokens",
            [min_out, [WBNB, USDT], TEST_ADDRESS, deadline],
        )

    @pytest.mark.asyncio
    async def test_slippage_over_100_fails_before_quote(self, services, alice, bsc):
        with pytest.raises(InvalidParameterError):
            await services.swaps.buy_stable_token(alice, "100", "101")
        assert bsc.calls == []
        assert bsc.sent == []

    @pytest.mark.asyncio
    async def test_negative_amount_fails_before_quote(self, services, alice, bsc):
        with pytest.raises(InvalidParameterError):
            await services.swaps.buy_stable_token(alice, "-5", "1")
        assert bsc.calls == []

    @pytest.mark.asyncio
    async def test_deadline_independent_of_quote_latency(self, services, alice, bsc):
        ticks = iter([FIXED_NOW + 30, FIXED_NOW + 999])
        services.swaps.clock = lambda: next(ticks)

        result = await services.swaps.buy_stable_token(alice, "1", "1")

        # Clock is read once, at build time
        assert result.deadline == FIXED_NOW + 30 + 1200

    @pytest.mark.asyncio
    async def test_deadline_override(self, services, alice, bsc):
        result = await services.swaps.buy_stable_token(alice, "1", "1", deadline_seconds=60)
        assert result.deadline == FIXED_NOW + 60

    @pytest.mark.asyncio
    async def test_submit_failure_wrapped(self, services, alice, bsc):
        bsc.send_error = ConnectionError("nonce too low")

        with pytest.raises(SwapExecutionError) as exc_info:
            await services.swaps.buy_stable_token(alice, "1", "1")
        assert exc_info.value.stage == "submit"
        assert isinstance(exc_info.value.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_signer_lookup_miss_not_wrapped(self, services, bsc):
        with pytest.raises(WalletNotFoundError):
            await services.swaps.buy_stable_token(SignerRef.stored("ghost"), "1", "1")
        assert router_calls(bsc) == []

    @pytest.mark.asyncio
    async def test_unknown_network_not_wrapped(self, services, alice):
        with pytest.raises(UnknownNetworkError):
            await services.swaps.buy_stable_token(alice, "1", "1", "atlantis")


class TestSell:
    """Tests for sell_stable_token."""

    @pytest.mark.asyncio
    async def test_sell_builds_plain_call(self, services, alice, bsc):
        result = await services.swaps.sell_stable_token(alice, "100", "1")

        min_eth = 19 * ONE // 100 * 99 // 100
        deadline = FIXED_NOW + 1200
        assert result.bound.min_amount_out == min_eth
        assert result.value == 0

        tx = bsc.last_tx
        assert tx["value"] == 0
        assert tx["data"] == encode_call(
            ROUTER, ROUTER_V2_ABI, "swapExactTokensForETH",
            [100 * ONE, min_eth, [USDT, WBNB], TEST_ADDRESS, deadline],
        )

    @pytest.mark.asyncio
    async def test_sell_does_not_approve(self, services, alice, bsc):
        await services.swaps.sell_stable_token(alice, "10", "1")

        assert len(bsc.sent) == 1
        assert all(fn != "allowance" for _, fn, _ in bsc.calls)

    @pytest.mark.asyncio
    async def test_result_to_dict(self, services, alice, bsc):
        result = await services.swaps.sell_stable_token(alice, "100", "1")

        data = result.to_dict()

        assert data["network"] == "bsc-testnet"
        assert data["slippage_percent"] == "1"
        assert data["min_amount_out"]["formatted"] == "0.1881"
        assert data["deadline"] == FIXED_NOW + 1200

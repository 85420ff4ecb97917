"""Native <-> stable token swaps through a V2-style router.

Buying fixes the stable token output and pays the quoted native input;
selling fixes the stable token input. Selling requires the caller to have
approved the router beforehand, nothing is approved implicitly.
"""

import logging
import time
from decimal import Decimal
from typing import Callable, Optional, Union

from web3 import Web3

from chainops.abis import ROUTER_V2_ABI, encode_call
from chainops.chains import DexConfig
from chainops.config import Settings, get_settings
from chainops.connections import Connection, ConnectionCache
from chainops.errors import InvalidParameterError, SwapExecutionError
from chainops.signing.signer import SignerRef, SignerResolver
from chainops.swap.base import (
    SwapBound,
    SwapQuote,
    SwapResult,
    SwapSide,
    SwapStage,
    compute_deadline,
    slippage_bound,
)
from chainops.tokens import TokenReader
from chainops.units import NATIVE_DECIMALS, Number, parse_positive_amount, to_base_units, validate_slippage

logger = logging.getLogger(__name__)

Network = Union[str, int, None]


class SwapEngine:
    """Quotes and executes router swaps between the wrapped native asset and a stable token."""

    def __init__(
        self,
        cache: ConnectionCache,
        signers: SignerResolver,
        tokens: TokenReader,
        clock: Callable[[], float] = time.time,
        settings: Optional[Settings] = None,
    ):
        self.cache = cache
        self.signers = signers
        self.tokens = tokens
        self.clock = clock
        self.settings = settings or get_settings()

    def _dex(self, network: Network) -> tuple[Connection, DexConfig]:
        target = network if network not in (None, "") else self.settings.swap_network
        connection = self.cache.get_connection(target)
        dex = connection.network.dex
        if dex is None:
            raise InvalidParameterError(f"No swap router configured for {connection.network.key}")
        return connection, dex

    # ======================
    # QUOTE stage
    # ======================

    async def _router_amounts(
        self,
        connection: Connection,
        dex: DexConfig,
        fn_name: str,
        amount: int,
        path: tuple[str, ...],
    ) -> list[int]:
        amounts = await connection.call(dex.router, ROUTER_V2_ABI, fn_name, amount, list(path))
        if not amounts or len(amounts) != len(path):
            raise ValueError(f"Router {fn_name} returned malformed amounts: {amounts!r}")
        return list(amounts)

    async def _quote_buy(self, connection: Connection, dex: DexConfig, amount: Decimal) -> SwapQuote:
        stable = await self.tokens.describe_token(dex.stable_token, connection.network.key)
        amount_out = to_base_units(format(amount, "f"), stable.decimals)
        path = (Web3.to_checksum_address(dex.wrapped_native), stable.address)

        amounts = await self._router_amounts(connection, dex, "getAmountsIn", amount_out, path)
        native_needed = amounts[0]
        if native_needed <= 0:
            raise ValueError("Router quoted zero native input")

        return SwapQuote(
            side=SwapSide.BUY,
            path=path,
            amount_in=native_needed,
            amount_out=amount_out,
            in_decimals=NATIVE_DECIMALS,
            out_decimals=stable.decimals,
        )

    async def _quote_sell(self, connection: Connection, dex: DexConfig, amount: Decimal) -> SwapQuote:
        stable = await self.tokens.describe_token(dex.stable_token, connection.network.key)
        amount_in = to_base_units(format(amount, "f"), stable.decimals)
        path = (stable.address, Web3.to_checksum_address(dex.wrapped_native))

        amounts = await self._router_amounts(connection, dex, "getAmountsOut", amount_in, path)
        native_out = amounts[-1]
        if native_out <= 0:
            raise ValueError("Router quoted zero native output")

        return SwapQuote(
            side=SwapSide.SELL,
            path=path,
            amount_in=amount_in,
            amount_out=native_out,
            in_decimals=stable.decimals,
            out_decimals=NATIVE_DECIMALS,
        )

    async def _quote(self, side: SwapSide, connection: Connection, dex: DexConfig, amount: Decimal) -> SwapQuote:
        try:
            if side == SwapSide.BUY:
                return await self._quote_buy(connection, dex, amount)
            return await self._quote_sell(connection, dex, amount)
        except InvalidParameterError:
            raise
        except Exception as e:
            raise SwapExecutionError(SwapStage.QUOTE.value, e) from e

    async def eth_needed_for_output(self, amount: Number, network: Network = None) -> SwapQuote:
        """Quote the native input needed to receive amount of the stable token.

        Args:
            amount: Stable token amount wanted (human units)
            network: Network with a router (swap network if omitted)

        Returns:
            SwapQuote whose amount_in is the native cost
        """
        parsed = parse_positive_amount(amount)
        connection, dex = self._dex(network)
        return await self._quote(SwapSide.BUY, connection, dex, parsed)

    async def eth_receivable_for_input(self, amount: Number, network: Network = None) -> SwapQuote:
        """Quote the native output received for selling amount of the stable token.

        Returns:
            SwapQuote whose amount_out is the native proceeds
        """
        parsed = parse_positive_amount(amount)
        connection, dex = self._dex(network)
        return await self._quote(SwapSide.SELL, connection, dex, parsed)

    # ======================
    # Full swaps
    # ======================

    async def buy_stable_token(
        self,
        signer_ref: SignerRef,
        amount: Number,
        slippage_percent: Number,
        network: Network = None,
        deadline_seconds: Optional[int] = None,
    ) -> SwapResult:
        """Buy an exact stable token amount with native currency.

        The native cost comes from getAmountsIn and is attached as value;
        the minimum tokens received is amount * (1 - slippage/100).
        """
        return await self._execute(SwapSide.BUY, signer_ref, amount, slippage_percent, network, deadline_seconds)

    async def sell_stable_token(
        self,
        signer_ref: SignerRef,
        amount: Number,
        slippage_percent: Number,
        network: Network = None,
        deadline_seconds: Optional[int] = None,
    ) -> SwapResult:
        """Sell an exact stable token amount for native currency.

        The router must already be approved for amount.
        """
        return await self._execute(SwapSide.SELL, signer_ref, amount, slippage_percent, network, deadline_seconds)

    async def _execute(
        self,
        side: SwapSide,
        signer_ref: SignerRef,
        amount: Number,
        slippage_percent: Number,
        network: Network,
        deadline_seconds: Optional[int],
    ) -> SwapResult:
        # VALIDATE: input errors surface as-is, before any network call
        parsed_amount = parse_positive_amount(amount)
        slippage = validate_slippage(slippage_percent)
        window = self.settings.swap_deadline_seconds if deadline_seconds is None else deadline_seconds
        if window <= 0:
            raise InvalidParameterError("Deadline window must be positive")
        connection, dex = self._dex(network)
        key = connection.network.key

        signer = await self.signers.resolve(signer_ref, key)

        quote = await self._quote(side, connection, dex, parsed_amount)
        logger.info(
            f"{side.value} quote on {key}: in={quote.amount_in} out={quote.amount_out} via {dex.name}"
        )

        stage = SwapStage.BOUND
        try:
            bound = SwapBound(
                quote=quote,
                slippage_percent=slippage,
                min_amount_out=slippage_bound(quote.amount_out, slippage),
            )

            stage = SwapStage.BUILD
            deadline = compute_deadline(self.clock(), window)
            if side == SwapSide.BUY:
                data = encode_call(
                    dex.router, ROUTER_V2_ABI, "swapExactETHForTokens",
                    [bound.min_amount_out, list(quote.path), signer.address, deadline],
                )
                value = quote.amount_in
            else:
                data = encode_call(
                    dex.router, ROUTER_V2_ABI, "swapExactTokensForETH",
                    [quote.amount_in, bound.min_amount_out, list(quote.path), signer.address, deadline],
                )
                value = 0

            stage = SwapStage.SUBMIT
            tx_hash = await signer.send_transaction({"to": dex.router, "value": value, "data": data})
        except InvalidParameterError:
            raise
        except Exception as e:
            logger.error(f"Swap {side.value} failed at {stage.value} on {key}: {e}")
            raise SwapExecutionError(stage.value, e) from e

        logger.info(
            f"Swap {side.value} submitted on {key}: {tx_hash} "
            f"(min_out={bound.min_amount_out}, deadline={deadline})"
        )
        return SwapResult(
            tx_hash=tx_hash,
            network=key,
            sender=signer.address,
            bound=bound,
            deadline=deadline,
            value=value,
        )

"""Swap value types and pure slippage/deadline math.

Swap flow (one call):
1. VALIDATE - amount and slippage checked, no network access
2. QUOTE    - router getAmountsIn / getAmountsOut along a two-hop path
3. BOUND    - worst acceptable output from the quote and slippage
4. BUILD    - deadline and router calldata
5. SUBMIT   - sign and broadcast
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Union

from chainops.units import to_human_units

DEFAULT_DEADLINE_SECONDS = 20 * 60


class SwapSide(str, Enum):
    """Direction relative to the stable token."""

    BUY = "buy"    # native -> stable, known output
    SELL = "sell"  # stable -> native, known input


class SwapStage(str, Enum):
    """Stages of a swap call."""

    VALIDATE = "validate"
    QUOTE = "quote"
    BOUND = "bound"
    BUILD = "build"
    SUBMIT = "submit"


@dataclass(frozen=True)
class SwapQuote:
    """Router quote for one known side of a trade.

    amount_in/amount_out are base units of path[0] and path[-1].
    """

    side: SwapSide
    path: tuple[str, ...]
    amount_in: int
    amount_out: int
    in_decimals: int = 18
    out_decimals: int = 18

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "path": list(self.path),
            "amount_in": {
                "raw": str(self.amount_in),
                "formatted": to_human_units(self.amount_in, self.in_decimals),
            },
            "amount_out": {
                "raw": str(self.amount_out),
                "formatted": to_human_units(self.amount_out, self.out_decimals),
            },
        }


@dataclass(frozen=True)
class SwapBound:
    """Quote plus one-sided slippage tolerance on the output."""

    quote: SwapQuote
    slippage_percent: Decimal
    min_amount_out: int

    @property
    def side(self) -> SwapSide:
        return self.quote.side


@dataclass
class SwapResult:
    """Result of a submitted swap."""

    tx_hash: str
    network: str
    sender: str
    bound: SwapBound
    deadline: int
    value: int = 0

    def to_dict(self) -> dict:
        quote = self.bound.quote
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "from": self.sender,
            "quote": quote.to_dict(),
            "slippage_percent": str(self.bound.slippage_percent),
            "min_amount_out": {
                "raw": str(self.bound.min_amount_out),
                "formatted": to_human_units(self.bound.min_amount_out, quote.out_decimals),
            },
            "deadline": self.deadline,
            "value": str(self.value),
        }


def apply_slippage(amount: Decimal, slippage_percent: Union[Decimal, int, str]) -> Decimal:
    """Worst acceptable amount: amount * (1 - slippage/100).

    100 at 0.5% gives 99.5; 2.0 at 1% gives 1.98.
    """
    multiplier = Decimal(1) - Decimal(str(slippage_percent)) / Decimal(100)
    return Decimal(amount) * multiplier


def slippage_bound(amount: int, slippage_percent: Union[Decimal, int, str]) -> int:
    """Integer base-unit form of apply_slippage, rounded down."""
    multiplier = 1 - Fraction(Decimal(str(slippage_percent))) / 100
    return math.floor(amount * multiplier)


def compute_deadline(now: float, window_seconds: int = DEFAULT_DEADLINE_SECONDS) -> int:
    """Unix deadline window_seconds after now."""
    return int(now) + window_seconds

"""Router swaps between a chain's wrapped native asset and its stable token."""

from chainops.swap.base import (
    DEFAULT_DEADLINE_SECONDS,
    SwapBound,
    SwapQuote,
    SwapResult,
    SwapSide,
    SwapStage,
    apply_slippage,
    compute_deadline,
    slippage_bound,
)
from chainops.swap.engine import SwapEngine

__all__ = [
    "DEFAULT_DEADLINE_SECONDS",
    "SwapBound",
    "SwapEngine",
    "SwapQuote",
    "SwapResult",
    "SwapSide",
    "SwapStage",
    "apply_slippage",
    "compute_deadline",
    "slippage_bound",
]

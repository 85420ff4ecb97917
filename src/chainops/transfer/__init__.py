"""Asset transfers (native, ERC20, ERC721, ERC1155)."""

from chainops.transfer.base import (
    Amount,
    ApprovalResult,
    ContractWriteResult,
    MultiTokenTransferResult,
    NativeTransferResult,
    NftTransferResult,
    TokenTransferResult,
)
from chainops.transfer.pipeline import TransferPipeline

__all__ = [
    "Amount",
    "ApprovalResult",
    "ContractWriteResult",
    "MultiTokenTransferResult",
    "NativeTransferResult",
    "NftTransferResult",
    "TokenTransferResult",
    "TransferPipeline",
]

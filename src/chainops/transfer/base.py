"""Result types for transfers.

Transfer flow:
1. Resolve names to addresses
2. Resolve the signer for the network
3. Describe the token and scale the amount (fungible assets only)
4. Build one contract call or plain value transfer
5. Sign and broadcast through the signer
6. Return the hash with resolved amount/token metadata
"""

from dataclasses import dataclass, field
from typing import Optional

from chainops.tokens import CollectionMetadata, TokenDescriptor


@dataclass
class Amount:
    """An amount in both human and base-unit form."""

    raw: int
    formatted: str

    def to_dict(self) -> dict:
        # raw as string so 256-bit values survive JSON consumers
        return {"raw": str(self.raw), "formatted": self.formatted}


@dataclass
class NativeTransferResult:
    """Result of a native currency transfer."""

    tx_hash: str
    network: str
    sender: str
    to: str
    amount: Amount
    symbol: str

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "from": self.sender,
            "to": self.to,
            "amount": self.amount.to_dict(),
            "symbol": self.symbol,
        }


@dataclass
class TokenTransferResult:
    """Result of an ERC20 transfer."""

    tx_hash: str
    network: str
    sender: str
    to: str
    amount: Amount
    token: TokenDescriptor

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "from": self.sender,
            "to": self.to,
            "amount": self.amount.to_dict(),
            "token": self.token.to_dict(),
        }


@dataclass
class ApprovalResult:
    """Result of an ERC20 approval."""

    tx_hash: str
    network: str
    owner: str
    spender: str
    amount: Amount
    token: TokenDescriptor

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "owner": self.owner,
            "spender": self.spender,
            "amount": self.amount.to_dict(),
            "token": self.token.to_dict(),
        }


@dataclass
class NftTransferResult:
    """Result of an ERC721 transfer.

    metadata.complete is False when name/symbol could not be read; the
    transfer itself has still been broadcast.
    """

    tx_hash: str
    network: str
    sender: str
    to: str
    collection: str
    token_id: int
    metadata: CollectionMetadata = field(default_factory=CollectionMetadata.placeholder)

    @property
    def degraded(self) -> bool:
        return not self.metadata.complete

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "from": self.sender,
            "to": self.to,
            "collection": self.collection,
            "token_id": str(self.token_id),
            "token": self.metadata.to_dict(),
            "metadata_complete": self.metadata.complete,
        }


@dataclass
class MultiTokenTransferResult:
    """Result of an ERC1155 transfer."""

    tx_hash: str
    network: str
    sender: str
    to: str
    collection: str
    token_id: int
    amount: int

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "from": self.sender,
            "to": self.to,
            "collection": self.collection,
            "token_id": str(self.token_id),
            "amount": str(self.amount),
        }


@dataclass
class ContractWriteResult:
    """Result of an arbitrary contract write."""

    tx_hash: str
    network: str
    sender: str
    contract: str
    function: str
    value: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "network": self.network,
            "from": self.sender,
            "contract": self.contract,
            "function": self.function,
            "value": str(self.value or 0),
        }

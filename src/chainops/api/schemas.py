"""Request bodies for the HTTP API."""

from typing import Any, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from chainops.signing.signer import SignerRef


class SignerFields(BaseModel):
    """Which account signs: a stored wallet, a raw key, or the default key."""

    wallet_name: Optional[str] = Field(None, max_length=255, description="Stored wallet name")
    private_key: Optional[SecretStr] = Field(None, description="Raw hex private key")

    @model_validator(mode="after")
    def check_single_source(self):
        if self.wallet_name and self.private_key:
            raise ValueError("Provide wallet_name or private_key, not both")
        return self

    def signer_ref(self) -> SignerRef:
        """Build the SignerRef (validates a raw key)."""
        if self.wallet_name:
            return SignerRef.stored(self.wallet_name)
        if self.private_key:
            return SignerRef.raw(self.private_key.get_secret_value())
        return SignerRef.default()


class NetworkField(BaseModel):
    network: Optional[str] = Field(None, description="Network name or chain id")


class CreateWalletRequest(BaseModel):
    """Create a wallet with a freshly generated key."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique wallet name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Wallet name must not be blank")
        return v


class ImportWalletRequest(CreateWalletRequest):
    """Store an existing key under a name."""

    private_key: SecretStr = Field(..., description="Hex private key (64 chars, optional 0x)")


class DeriveAddressRequest(BaseModel):
    """Derive the address for a key without storing it."""

    private_key: SecretStr = Field(..., description="Hex private key (64 chars, optional 0x)")


class NativeTransferRequest(SignerFields, NetworkField):
    to: str = Field(..., description="Recipient address or name")
    amount: str = Field(..., description="Amount in ether units, e.g. '0.1'")


class TokenTransferRequest(SignerFields, NetworkField):
    token_address: str = Field(..., description="ERC20 contract address or name")
    to: str = Field(..., description="Recipient address or name")
    amount: str = Field(..., description="Amount in token units, e.g. '10.5'")


class ApproveRequest(SignerFields, NetworkField):
    token_address: str = Field(..., description="ERC20 contract address or name")
    spender: str = Field(..., description="Spender address or name")
    amount: str = Field(..., description="Allowance in token units")


class NftTransferRequest(SignerFields, NetworkField):
    collection_address: str = Field(..., description="ERC721 contract address or name")
    to: str = Field(..., description="Recipient address or name")
    token_id: str = Field(..., description="Token id")


class MultiTokenTransferRequest(SignerFields, NetworkField):
    collection_address: str = Field(..., description="ERC1155 contract address or name")
    to: str = Field(..., description="Recipient address or name")
    token_id: str = Field(..., description="Token id")
    amount: str = Field(..., description="Integer number of tokens")


class ContractWriteRequest(SignerFields, NetworkField):
    contract_address: str = Field(..., description="Contract address or name")
    abi: list[dict[str, Any]] = Field(..., description="Contract ABI")
    function_name: str = Field(..., description="Function to call")
    args: list[Any] = Field(default_factory=list, description="Positional arguments")
    value: int = Field(default=0, ge=0, description="Wei attached to the call")


class ContractReadRequest(NetworkField):
    contract_address: str = Field(..., description="Contract address or name")
    abi: list[dict[str, Any]] = Field(..., description="Contract ABI")
    function_name: str = Field(..., description="View function to call")
    args: list[Any] = Field(default_factory=list, description="Positional arguments")


class SwapRequest(SignerFields, NetworkField):
    """Buy or sell the stable token against native currency."""

    amount: str = Field(..., description="Stable token amount, e.g. '10'")
    slippage_percent: str = Field(..., description="Maximum slippage percent, e.g. '0.5'")
    deadline_seconds: Optional[int] = Field(None, description="Override the 20 minute deadline window")

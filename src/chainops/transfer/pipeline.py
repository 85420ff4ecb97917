"""Transfer pipeline for native, ERC20, ERC721 and ERC1155 assets.

Every operation resolves names first, then the signer, then (for fungible
tokens) the token descriptor, and hands exactly one unsigned transaction
to SignerContext.send_transaction.
"""

import logging
from typing import Any, Optional, Sequence, Union

from chainops.abis import ERC20_ABI, ERC721_ABI, ERC1155_ABI, encode_call
from chainops.config import Settings, get_settings
from chainops.connections import ConnectionCache
from chainops.errors import InvalidParameterError
from chainops.names import NameResolver
from chainops.signing.signer import SignerContext, SignerRef, SignerResolver
from chainops.tokens import TokenDescriptor, TokenReader, checksum
from chainops.transfer.base import (
    Amount,
    ApprovalResult,
    ContractWriteResult,
    MultiTokenTransferResult,
    NativeTransferResult,
    NftTransferResult,
    TokenTransferResult,
)
from chainops.units import NATIVE_DECIMALS, to_base_units, to_human_units

logger = logging.getLogger(__name__)

Network = Union[str, int, None]


def parse_token_id(value: Union[str, int], field: str = "token id") -> int:
    """Parse a non-negative integer id or count given as int or digit string."""
    if isinstance(value, bool):
        raise InvalidParameterError(f"Invalid {field}: {value!r}")
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        if not text.isdigit():
            raise InvalidParameterError(f"Invalid {field}: {value!r}")
        parsed = int(text)
    if parsed < 0 or parsed >= 2**256:
        raise InvalidParameterError(f"Invalid {field}: {value!r}")
    return parsed


class TransferPipeline:
    """Moves native currency and tokens on behalf of a signer."""

    def __init__(
        self,
        cache: ConnectionCache,
        signers: SignerResolver,
        names: NameResolver,
        tokens: TokenReader,
        settings: Optional[Settings] = None,
    ):
        self.cache = cache
        self.signers = signers
        self.names = names
        self.tokens = tokens
        self.settings = settings or get_settings()

    def _network(self, network: Network) -> str:
        target = network if network not in (None, "") else self.settings.default_network
        return self.cache.get_connection(target).network.key

    async def _submit(self, signer: SignerContext, to: str, data: Optional[str] = None, value: int = 0) -> str:
        tx: dict[str, Any] = {"to": to, "value": value}
        if data is not None:
            tx["data"] = data
        return await signer.send_transaction(tx)

    async def transfer_native(
        self,
        signer_ref: SignerRef,
        to: str,
        amount: str,
        network: Network = None,
    ) -> NativeTransferResult:
        """Send native currency (ETH, BNB, ...).

        Args:
            signer_ref: Sending account
            to: Recipient address or name
            amount: Human amount, scaled by 18 decimals
            network: Network key (default network if omitted)

        Returns:
            NativeTransferResult
        """
        key = self._network(network)
        raw = to_base_units(amount, NATIVE_DECIMALS)

        recipient = await self.names.resolve(to, key)
        signer = await self.signers.resolve(signer_ref, key)

        tx_hash = await self._submit(signer, recipient, value=raw)
        logger.info(f"Native transfer {raw} wei {signer.address} -> {recipient} on {key}: {tx_hash}")

        return NativeTransferResult(
            tx_hash=tx_hash,
            network=key,
            sender=signer.address,
            to=recipient,
            amount=Amount(raw=raw, formatted=to_human_units(raw, NATIVE_DECIMALS)),
            symbol=signer.connection.network.native_symbol,
        )

    async def _fungible_call(
        self,
        signer_ref: SignerRef,
        token_address: str,
        counterparty: str,
        amount: str,
        network: Network,
        fn_name: str,
    ) -> tuple[str, SignerContext, str, TokenDescriptor, Amount]:
        """Shared transfer/approve path: one descriptor fetch, one submission."""
        key = self._network(network)
        token = await self.names.resolve(token_address, key)
        target = await self.names.resolve(counterparty, key)
        signer = await self.signers.resolve(signer_ref, key)

        descriptor = await self.tokens.describe_token(token, key)
        raw = to_base_units(amount, descriptor.decimals)

        data = encode_call(descriptor.address, ERC20_ABI, fn_name, [checksum(target), raw])
        tx_hash = await self._submit(signer, descriptor.address, data=data)

        logger.info(
            f"ERC20 {fn_name} {raw} {descriptor.symbol} {signer.address} -> {target} on {key}: {tx_hash}"
        )
        return tx_hash, signer, target, descriptor, Amount(raw=raw, formatted=to_human_units(raw, descriptor.decimals))

    async def transfer_erc20(
        self,
        signer_ref: SignerRef,
        token_address: str,
        to: str,
        amount: str,
        network: Network = None,
    ) -> TokenTransferResult:
        """Transfer ERC20 tokens, scaling amount by the token's decimals."""
        tx_hash, signer, recipient, descriptor, scaled = await self._fungible_call(
            signer_ref, token_address, to, amount, network, "transfer"
        )
        return TokenTransferResult(
            tx_hash=tx_hash,
            network=signer.network,
            sender=signer.address,
            to=recipient,
            amount=scaled,
            token=descriptor,
        )

    async def approve_erc20(
        self,
        signer_ref: SignerRef,
        token_address: str,
        spender: str,
        amount: str,
        network: Network = None,
    ) -> ApprovalResult:
        """Approve a spender for ERC20 tokens."""
        tx_hash, signer, spender_address, descriptor, scaled = await self._fungible_call(
            signer_ref, token_address, spender, amount, network, "approve"
        )
        return ApprovalResult(
            tx_hash=tx_hash,
            network=signer.network,
            owner=signer.address,
            spender=spender_address,
            amount=scaled,
            token=descriptor,
        )

    async def transfer_erc721(
        self,
        signer_ref: SignerRef,
        collection_address: str,
        to: str,
        token_id: Union[str, int],
        network: Network = None,
    ) -> NftTransferResult:
        """Transfer one ERC721 token from the signer's address.

        The collection's name/symbol are read after broadcast; a failed read
        yields placeholder metadata instead of an error.
        """
        key = self._network(network)
        token_id_value = parse_token_id(token_id)

        collection = await self.names.resolve(collection_address, key)
        recipient = await self.names.resolve(to, key)
        signer = await self.signers.resolve(signer_ref, key)

        data = encode_call(
            collection, ERC721_ABI, "transferFrom",
            [signer.address, checksum(recipient), token_id_value],
        )
        tx_hash = await self._submit(signer, collection, data=data)
        logger.info(f"ERC721 #{token_id_value} {signer.address} -> {recipient} on {key}: {tx_hash}")

        metadata = await self.tokens.collection_metadata(collection, key)
        return NftTransferResult(
            tx_hash=tx_hash,
            network=key,
            sender=signer.address,
            to=recipient,
            collection=checksum(collection),
            token_id=token_id_value,
            metadata=metadata,
        )

    async def transfer_erc1155(
        self,
        signer_ref: SignerRef,
        collection_address: str,
        to: str,
        token_id: Union[str, int],
        amount: Union[str, int],
        network: Network = None,
    ) -> MultiTokenTransferResult:
        """Transfer an exact integer count of an ERC1155 token."""
        key = self._network(network)
        token_id_value = parse_token_id(token_id)
        count = parse_token_id(amount, "amount")
        if count == 0:
            raise InvalidParameterError("Amount must be a positive integer")

        collection = await self.names.resolve(collection_address, key)
        recipient = await self.names.resolve(to, key)
        signer = await self.signers.resolve(signer_ref, key)

        data = encode_call(
            collection, ERC1155_ABI, "safeTransferFrom",
            [signer.address, checksum(recipient), token_id_value, count, b""],
        )
        tx_hash = await self._submit(signer, collection, data=data)
        logger.info(
            f"ERC1155 #{token_id_value} x{count} {signer.address} -> {recipient} on {key}: {tx_hash}"
        )

        return MultiTokenTransferResult(
            tx_hash=tx_hash,
            network=key,
            sender=signer.address,
            to=recipient,
            collection=checksum(collection),
            token_id=token_id_value,
            amount=count,
        )

    async def write_contract(
        self,
        signer_ref: SignerRef,
        contract_address: str,
        abi: list,
        function_name: str,
        args: Sequence[Any] = (),
        network: Network = None,
        value: int = 0,
    ) -> ContractWriteResult:
        """Call any state-changing contract function.

        Args:
            signer_ref: Sending account
            contract_address: Contract address or name
            abi: Contract ABI containing function_name
            function_name: Function to call
            args: Positional arguments
            network: Network key
            value: Wei attached to the call
        """
        if value < 0:
            raise InvalidParameterError("Value must not be negative")

        key = self._network(network)
        contract = await self.names.resolve(contract_address, key)
        signer = await self.signers.resolve(signer_ref, key)

        try:
            data = encode_call(contract, abi, function_name, args)
        except Exception as e:
            raise InvalidParameterError(f"Cannot encode {function_name}: {e}") from e

        tx_hash = await self._submit(signer, contract, data=data, value=value)
        logger.info(f"Contract write {function_name} on {contract} ({key}): {tx_hash}")

        return ContractWriteResult(
            tx_hash=tx_hash,
            network=key,
            sender=signer.address,
            contract=checksum(contract),
            function=function_name,
            value=value,
        )

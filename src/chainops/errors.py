"""Error taxonomy shared by every chain operation.

Callers branch on the exception class (or its ``code``), never on message
text:

- ``InvalidParameterError`` and subclasses: caller mistakes, raised before
  any state-changing call and never worth retrying.
- ``UnknownNetworkError``, ``NameResolutionError``, ``WalletNotFoundError``:
  lookup misses, surfaced verbatim.
- ``ContractReadError``, ``SwapExecutionError``: wrapped network or contract
  failures that keep the original exception as ``cause``.
"""

from typing import Optional


class ChainOpsError(Exception):
    """Base error for chain operations."""

    code = "chainops_error"


class InvalidParameterError(ChainOpsError):
    """Malformed amount, slippage, address or other input."""

    code = "invalid_parameter"


class InvalidCredentialError(InvalidParameterError):
    """Private key is not 64 hex characters."""

    code = "invalid_credential"


class InvalidAmountError(InvalidParameterError):
    """Amount is not a valid decimal numeral for the token's decimals."""

    code = "invalid_amount"


class DuplicateWalletError(InvalidParameterError):
    """A wallet with this name or address already exists."""

    code = "duplicate_wallet"


class CredentialNotSetError(ChainOpsError):
    """Default signer requested but no PRIVATE_KEY is configured."""

    code = "credential_not_set"


class UnknownNetworkError(ChainOpsError):
    """Network key does not match any configured chain."""

    code = "unknown_network"


class NameResolutionError(ChainOpsError):
    """Name has no registered address."""

    code = "name_not_resolved"


class WalletNotFoundError(ChainOpsError):
    """No stored wallet matches the lookup."""

    code = "wallet_not_found"


class SignerUnavailableError(ChainOpsError):
    """Signing attempted without a bound account."""

    code = "signer_unavailable"


class ContractReadError(ChainOpsError):
    """A read-only contract call failed."""

    code = "contract_read_failed"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class SwapExecutionError(ChainOpsError):
    """A swap failed after validation.

    Attributes:
        stage: Swap stage that failed (quote, bound, build or submit)
        cause: Underlying exception
    """

    code = "swap_failed"

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"Swap failed at {stage}: {cause}")
        self.stage = stage
        self.cause = cause

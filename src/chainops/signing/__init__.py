"""Credentials and transaction signing.

- PrivateKey: validated, non-serialisable key type
- SignerResolver: stored wallet / raw key / default key -> SignerContext
- SignerContext: the one place transactions are signed and broadcast
"""

from chainops.signing.credentials import PrivateKey, address_from_private_key
from chainops.signing.signer import SignerContext, SignerKind, SignerRef, SignerResolver

__all__ = [
    "PrivateKey",
    "address_from_private_key",
    "SignerContext",
    "SignerKind",
    "SignerRef",
    "SignerResolver",
]

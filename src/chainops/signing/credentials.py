"""Private key credential type.

A PrivateKey is validated on construction, renders as a redacted string,
and refuses to pickle. The hex value is only exposed through reveal(),
which exists for account derivation and the wallet store.
"""

import re
from typing import Optional

from eth_account import Account

from chainops.config import Settings, get_settings
from chainops.errors import CredentialNotSetError, InvalidCredentialError

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")


class PrivateKey:
    """Validated 32-byte secp256k1 private key."""

    __slots__ = ("_hex",)

    def __init__(self, raw: str):
        if not isinstance(raw, str):
            raise InvalidCredentialError("Private key must be a hex string")
        value = raw.strip()
        if value[:2] in ("0x", "0X"):
            value = value[2:]
        if not _HEX_KEY.match(value):
            raise InvalidCredentialError("Private key must be 64 hex characters (optionally 0x-prefixed)")
        self._hex = "0x" + value.lower()

    @classmethod
    def generate(cls) -> "PrivateKey":
        """Create a fresh random key."""
        account = Account.create()
        return cls(account.key.hex())

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PrivateKey":
        """Load the default signer key from PRIVATE_KEY.

        Raises:
            CredentialNotSetError: If PRIVATE_KEY is unset or empty
        """
        settings = settings or get_settings()
        if not settings.has_default_signer:
            raise CredentialNotSetError("PRIVATE_KEY environment variable is not set")
        return cls(settings.private_key.get_secret_value())

    def reveal(self) -> str:
        """Get the 0x-prefixed hex key."""
        return self._hex

    def to_account(self):
        """Derive the eth_account LocalAccount for this key."""
        return Account.from_key(self._hex)

    def derive_address(self) -> str:
        """Get the checksum address controlled by this key."""
        return self.to_account().address

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._hex == other._hex

    def __hash__(self) -> int:
        return hash(self._hex)

    def __repr__(self) -> str:
        return "PrivateKey('***')"

    __str__ = __repr__

    def __reduce__(self):
        raise TypeError("PrivateKey cannot be serialized")


def address_from_private_key(raw: str) -> str:
    """Derive the address for a raw hex private key."""
    return PrivateKey(raw).derive_address()

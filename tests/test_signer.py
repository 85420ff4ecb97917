"""Tests for credentials and signer resolution."""

import copy
import pickle

import pytest

from chainops.config import Settings
from chainops.errors import (
    CredentialNotSetError,
    InvalidCredentialError,
    SignerUnavailableError,
    UnknownNetworkError,
    WalletNotFoundError,
)
from chainops.signing.credentials import PrivateKey, address_from_private_key
from chainops.signing.signer import SignerContext, SignerKind, SignerRef, SignerResolver

from conftest import OTHER_ADDRESS, TEST_ADDRESS, TEST_KEY


class TestPrivateKey:
    """Tests for the PrivateKey credential type."""

    def test_accepts_prefixed_and_bare_hex(self):
        assert PrivateKey(TEST_KEY) == PrivateKey(TEST_KEY[2:])
        assert PrivateKey(TEST_KEY.upper().replace("0X", "0x")).reveal() == TEST_KEY

    @pytest.mark.parametrize(
        "value",
        ["", "0x", "1234", TEST_KEY + "00", TEST_KEY[:-1], "0x" + "g" * 64, None],
    )
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidCredentialError):
            PrivateKey(value)

    def test_derives_address(self):
        assert PrivateKey(TEST_KEY).derive_address() == TEST_ADDRESS
        assert address_from_private_key(TEST_KEY[2:]) == TEST_ADDRESS

    def test_repr_is_redacted(self):
        key = PrivateKey(TEST_KEY)
        assert TEST_KEY[2:] not in repr(key)
        assert TEST_KEY[2:] not in str(key)
        assert TEST_KEY[2:] not in f"{key}"

    def test_cannot_be_pickled(self):
        with pytest.raises(TypeError):
            pickle.dumps(PrivateKey(TEST_KEY))
        with pytest.raises(TypeError):
            copy.deepcopy(PrivateKey(TEST_KEY))

    def test_generate_produces_valid_key(self):
        key = PrivateKey.generate()
        assert len(key.reveal()) == 66
        assert key.derive_address().startswith("0x")

    def test_from_settings(self):
        settings = Settings(_env_file=None, private_key=TEST_KEY)
        assert PrivateKey.from_settings(settings).derive_address() == TEST_ADDRESS

    def test_from_settings_missing(self, settings):
        with pytest.raises(CredentialNotSetError):
            PrivateKey.from_settings(settings)


class TestSignerRef:
    def test_raw_validates_immediately(self):
        with pytest.raises(InvalidCredentialError):
            SignerRef.raw("nope")

    def test_repr_hides_credential(self):
        ref = SignerRef.raw(TEST_KEY)
        assert TEST_KEY[2:] not in repr(ref)
        assert ref.describe() == "raw"

    def test_stored(self):
        ref = SignerRef.stored(" alice ")
        assert ref.kind == SignerKind.STORED
        assert ref.wallet_name == "alice"


class TestSignerResolver:
    """Tests for SignerResolver."""

    def test_from_credential(self, connection_cache):
        resolver = SignerResolver(connection_cache)

        signer = resolver.from_credential(TEST_KEY, "bsc-testnet")

        assert signer.address == TEST_ADDRESS
        assert signer.connection is connection_cache.get_connection("bsc-testnet")

    def test_invalid_credential_checked_before_network(self, connection_cache):
        resolver = SignerResolver(connection_cache)
        with pytest.raises(InvalidCredentialError):
            resolver.from_credential("bad", "nowhere")
        assert len(connection_cache) == 0

    def test_unknown_network(self, connection_cache):
        resolver = SignerResolver(connection_cache)
        with pytest.raises(UnknownNetworkError):
            resolver.from_credential(TEST_KEY, "nowhere")

    def test_contexts_are_not_shared(self, connection_cache):
        resolver = SignerResolver(connection_cache)
        first = resolver.from_credential(TEST_KEY, "ethereum")
        second = resolver.from_credential(TEST_KEY, "ethereum")
        assert first is not second
        assert first.connection is second.connection

    @pytest.mark.asyncio
    async def test_from_stored_wallet(self, connection_cache, wallet_store):
        await wallet_store.import_wallet("alice", TEST_KEY)
        resolver = SignerResolver(connection_cache, wallet_store)

        signer = await resolver.from_stored_wallet("alice", "ethereum")

        assert signer.address == TEST_ADDRESS

    @pytest.mark.asyncio
    async def test_missing_stored_wallet(self, connection_cache, wallet_store):
        resolver = SignerResolver(connection_cache, wallet_store)
        with pytest.raises(WalletNotFoundError):
            await resolver.from_stored_wallet("ghost", "ethereum")

    @pytest.mark.asyncio
    async def test_stored_path_ignores_missing_default_key(self, connection_cache, wallet_store, settings):
        await wallet_store.import_wallet("alice", TEST_KEY)
        resolver = SignerResolver(connection_cache, wallet_store, settings)

        signer = await resolver.resolve(SignerRef.stored("alice"), "ethereum")
        assert signer.address == TEST_ADDRESS

        with pytest.raises(CredentialNotSetError):
            await resolver.resolve(SignerRef.default(), "ethereum")

    @pytest.mark.asyncio
    async def test_default_signer(self, connection_cache):
        settings = Settings(_env_file=None, private_key=TEST_KEY)
        resolver = SignerResolver(connection_cache, settings=settings)

        signer = await resolver.resolve(SignerRef.default(), "ethereum")
        assert signer.address == TEST_ADDRESS


class TestSignerContext:
    """Tests for the sign-and-broadcast path."""

    @pytest.mark.asyncio
    async def test_send_transaction_fills_and_broadcasts(self, connection_cache):
        resolver = SignerResolver(connection_cache)
        signer = resolver.from_credential(TEST_KEY, "bsc-testnet")
        connection = signer.connection
        connection.nonce = 7

        tx_hash = await signer.send_transaction({"to": OTHER_ADDRESS.lower(), "value": 5})

        assert tx_hash.startswith("0x")
        assert len(connection.sent) == 1
        tx = connection.last_tx
        assert tx["from"] == TEST_ADDRESS
        assert tx["to"] == OTHER_ADDRESS
        assert tx["nonce"] == 7
        assert tx["chainId"] == 97
        assert tx["value"] == 5

    @pytest.mark.asyncio
    async def test_missing_account_is_fatal(self, connection_cache):
        signer = SignerContext(connection_cache.get_connection("ethereum"), None)
        with pytest.raises(SignerUnavailableError):
            await signer.send_transaction({"to": OTHER_ADDRESS, "value": 1})
        with pytest.raises(SignerUnavailableError):
            signer.address

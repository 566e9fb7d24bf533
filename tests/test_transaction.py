"""Tests for the signed Transaction envelope and the Tx reference union."""

import json

import pytest

from ethwire.common.errors import (
    InvalidLength,
    MissingRequiredField,
    UnexpectedType,
    UnrecognizedField,
)
from ethwire.common.types import (
    AccessListMessage,
    FeeMarketMessage,
    LegacyMessage,
    Transaction,
    TxType,
    tx_from_rpc,
    tx_to_rpc,
)
from ethwire.rpc.codec import decode, encode
from tests.fixtures.wire import LEGACY_TX_JSON, TX_HASH


class TestLegacyTransactionVector:
    """Byte-exact legacy transaction scenario."""

    def test_encode_matches_literal(self, legacy_transaction):
        """Encoding reproduces the canonical JSON text exactly."""
        assert encode(legacy_transaction) == LEGACY_TX_JSON

    def test_decode_matches_value(self, legacy_transaction):
        """Decoding the literal yields the fixture value."""
        decoded = decode(LEGACY_TX_JSON, "transaction")
        assert decoded == legacy_transaction
        assert isinstance(decoded.message, LegacyMessage)
        assert decoded.tx_type == TxType.LEGACY

    def test_fields(self, legacy_transaction):
        """Spot-check decoded scalar fields."""
        decoded = decode(LEGACY_TX_JSON, "transaction")
        assert decoded.message.chain_id == 2
        assert decoded.message.nonce == 12
        assert decoded.message.gas == 21_000
        assert decoded.v == 40
        assert decoded.from_address == b"\xaa" * 20
        assert decoded.transaction_index == 0x42


class TestEnvelope:
    """Flattened envelope behaviour for every message variant."""

    @pytest.mark.parametrize("fixture_name", [
        "legacy_message", "access_list_message", "fee_market_message",
    ])
    def test_roundtrip(self, request, transaction_factory, fixture_name):
        """Transaction round-trips and keeps its message variant."""
        message = request.getfixturevalue(fixture_name)
        tx = transaction_factory(message, transaction_index=3)
        decoded = Transaction.from_rpc(tx.to_rpc())
        assert decoded == tx
        assert type(decoded.message) is type(message)

    def test_flat_layout(self, transaction_factory, fee_market_message):
        """Message keys first, envelope keys after, one level."""
        raw = transaction_factory(fee_market_message).to_rpc()
        assert list(raw) == [
            "chainId", "nonce", "to", "gas", "maxFeePerGas", "maxPriorityFeePerGas",
            "value", "input", "accessList",
            "v", "r", "s", "from", "hash", "transactionIndex",
        ]
        assert raw["transactionIndex"] is None

    def test_pending_transaction_without_index(self, transaction_factory, access_list_message):
        """transactionIndex may be omitted."""
        raw = transaction_factory(access_list_message).to_rpc()
        del raw["transactionIndex"]
        decoded = Transaction.from_rpc(raw)
        assert decoded.transaction_index is None
        assert isinstance(decoded.message, AccessListMessage)

    def test_missing_signature(self, legacy_transaction):
        """Envelope fields are required even when the message decodes."""
        raw = legacy_transaction.to_rpc()
        del raw["r"]
        with pytest.raises(MissingRequiredField) as exc:
            Transaction.from_rpc(raw)
        assert exc.value.field == "r"
        assert exc.value.variant == "Transaction"

    def test_short_signature(self, legacy_transaction):
        """r and s are 32-byte values."""
        raw = legacy_transaction.to_rpc()
        raw["s"] = "0x1234"
        with pytest.raises(InvalidLength):
            Transaction.from_rpc(raw)

    def test_unknown_key_rejected(self, legacy_transaction):
        """Keys outside envelope and message fail the whole object."""
        raw = legacy_transaction.to_rpc()
        raw["blockHash"] = "0x" + "00" * 32
        with pytest.raises(UnrecognizedField) as exc:
            Transaction.from_rpc(raw)
        assert exc.value.field == "blockHash"

    def test_access_list_on_legacy_shape_selects_eip2930(self, legacy_transaction):
        """An accessList turns a legacy-shaped envelope into EIP-2930."""
        raw = legacy_transaction.to_rpc()
        raw["accessList"] = []
        decoded = Transaction.from_rpc(raw)
        assert isinstance(decoded.message, AccessListMessage)
        assert decoded.message.chain_id == 2

    def test_eip1559_text_roundtrip(self, transaction_factory, fee_market_message):
        """Through JSON text as well."""
        tx = transaction_factory(fee_market_message, transaction_index=0)
        decoded = decode(encode(tx), "transaction")
        assert decoded == tx
        assert isinstance(decoded.message, FeeMarketMessage)


class TestTxUnion:
    """Either a full transaction or its hash."""

    def test_string_is_hash(self):
        """A JSON string decodes to the hash variant."""
        assert tx_from_rpc("0x" + "bb" * 32) == TX_HASH

    def test_object_is_transaction(self, legacy_transaction):
        """A JSON object decodes to a Transaction."""
        decoded = tx_from_rpc(json.loads(LEGACY_TX_JSON))
        assert isinstance(decoded, Transaction)
        assert decoded == legacy_transaction

    def test_encode_projection(self, legacy_transaction):
        """Encoding is the converse projection."""
        assert tx_to_rpc(TX_HASH) == "0x" + "bb" * 32
        assert tx_to_rpc(legacy_transaction) == json.loads(LEGACY_TX_JSON)

    def test_hash_text_roundtrip(self):
        """Bare hash through the text codec."""
        assert decode(encode(TX_HASH), "tx") == TX_HASH

    def test_other_shapes_rejected(self):
        """Numbers, lists and null are neither variant."""
        for raw in (42, [], None):
            with pytest.raises(UnexpectedType):
                tx_from_rpc(raw)

    def test_short_hash_rejected(self):
        """The hash variant is still fixed-width."""
        with pytest.raises(InvalidLength):
            tx_from_rpc("0x1234")

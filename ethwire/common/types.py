"""
JSON-RPC wire types: access lists, transaction messages, call requests,
signed transactions, blocks and sync status.

Every record converts to and from its JSON-RPC object via to_rpc() /
from_rpc(). The message and call unions are untagged on the wire: decoding
tries Legacy, EIP-2930 and EIP-1559 in that order and keeps the first
variant that accepts the object. Variants reject keys they do not define,
which is what makes the ordered match unambiguous.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, ClassVar, Literal, NamedTuple, Optional, Union

from ethwire.common.errors import (
    DecodeError,
    MissingRequiredField,
    NoMatchingVariant,
    UnexpectedType,
    UnrecognizedField,
)
from ethwire.common.hexcodec import (
    BLOOM_SIZE,
    NONCE_SIZE,
    bytes_hex,
    quantity_hex,
    require_address,
    require_data,
    require_fixed,
    require_hash,
    require_u64,
    require_u256,
)

logger = logging.getLogger(__name__)


class TxType(IntEnum):
    LEGACY = 0
    ACCESS_LIST = 1   # EIP-2930
    FEE_MARKET = 2    # EIP-1559


# ---------------------------------------------------------------------------
# Field codecs
# ---------------------------------------------------------------------------

class FieldCodec(NamedTuple):
    encode: Callable[[Any], Any]
    decode: Callable[..., Any]
    sequence: bool = False


class WireField(NamedTuple):
    wire: str
    attr: str
    codec: FieldCodec
    required: bool = True


def _require_object(value: Any, *, name: str) -> dict:
    if not isinstance(value, dict):
        raise UnexpectedType(f"{name} must be an object, got {type(value).__name__}", field=name)
    return value


def _require_list(value: Any, *, name: str) -> list:
    if not isinstance(value, list):
        raise UnexpectedType(f"{name} must be a list, got {type(value).__name__}", field=name)
    return value


def _list_codec(item: FieldCodec) -> FieldCodec:
    def encode(values: Any) -> list:
        return [item.encode(v) for v in values]

    def decode(value: Any, *, name: str) -> tuple:
        return tuple(
            item.decode(v, name=f"{name}[{i}]")
            for i, v in enumerate(_require_list(value, name=name))
        )

    return FieldCodec(encode, decode, sequence=True)


ADDRESS = FieldCodec(bytes_hex, require_address)
HASH = FieldCodec(bytes_hex, require_hash)
U64 = FieldCodec(quantity_hex, require_u64)
U256 = FieldCodec(quantity_hex, require_u256)
DATA = FieldCodec(bytes_hex, require_data)
NONCE = FieldCodec(bytes_hex, lambda v, *, name: require_fixed(v, name=name, size=NONCE_SIZE))
BLOOM = FieldCodec(bytes_hex, lambda v, *, name: require_fixed(v, name=name, size=BLOOM_SIZE))
HASH_LIST = _list_codec(HASH)


def encode_fields(record: Any, wire_fields: tuple[WireField, ...]) -> dict[str, Any]:
    """Emit every field in declared order; absent optionals become null."""
    out: dict[str, Any] = {}
    for f in wire_fields:
        value = getattr(record, f.attr)
        out[f.wire] = None if value is None else f.codec.encode(value)
    return out


def decode_fields(raw: dict, wire_fields: tuple[WireField, ...],
                  prefix: str = "") -> dict[str, Any]:
    """Decode declared fields from ``raw`` into constructor kwargs.

    A missing key and an explicit null both mean "absent". Absent required
    fields raise MissingRequiredField.
    """
    kwargs: dict[str, Any] = {}
    for f in wire_fields:
        name = f"{prefix}.{f.wire}" if prefix else f.wire
        value = raw.get(f.wire)
        if value is None:
            if f.required:
                raise MissingRequiredField("required field is missing", field=name)
            kwargs[f.attr] = None
            continue
        kwargs[f.attr] = f.codec.decode(value, name=name)
    return kwargs


class WireRecord:
    """Base for dataclasses with a declared JSON-RPC field table."""

    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = ()
    # Records ignore unknown keys; union variants deny them.
    DENY_UNKNOWN: ClassVar[bool] = False

    def __post_init__(self) -> None:
        for f in self.WIRE_FIELDS:
            value = getattr(self, f.attr)
            if f.codec.sequence and isinstance(value, list):
                object.__setattr__(self, f.attr, tuple(value))

    @classmethod
    def wire_names(cls) -> frozenset[str]:
        return frozenset(f.wire for f in cls.WIRE_FIELDS)

    def to_rpc(self) -> dict[str, Any]:
        return encode_fields(self, self.WIRE_FIELDS)

    @classmethod
    def from_rpc(cls, raw: Any, name: str = ""):
        obj = _require_object(raw, name=name or cls.__name__)
        allowed = cls.wire_names()
        extra = [k for k in obj if k not in allowed]
        if extra and cls.DENY_UNKNOWN:
            raise UnrecognizedField(f"unknown field {extra[0]!r}", field=extra[0])
        if extra:
            logger.debug("%s: ignoring unknown keys %s", name or cls.__name__, extra)
        return cls(**decode_fields(obj, cls.WIRE_FIELDS, prefix=name))


# ---------------------------------------------------------------------------
# Access list
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccessListEntry(WireRecord):
    address: bytes  # 20 bytes
    storage_keys: tuple[bytes, ...] = ()  # 32-byte keys, order is significant

    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("address", "address", ADDRESS),
        WireField("storageKeys", "storage_keys", HASH_LIST),
    )


def _access_list_decode(value: Any, *, name: str) -> tuple[AccessListEntry, ...]:
    return tuple(
        AccessListEntry.from_rpc(item, name=f"{name}[{i}]")
        for i, item in enumerate(_require_list(value, name=name))
    )


ACCESS_LIST = FieldCodec(
    lambda entries: [e.to_rpc() for e in entries],
    _access_list_decode,
    sequence=True,
)


# ---------------------------------------------------------------------------
# Untagged union matching
# ---------------------------------------------------------------------------

class _Variant(WireRecord):
    VARIANT: ClassVar[str] = ""
    TX_TYPE: ClassVar[TxType] = TxType.LEGACY
    DENY_UNKNOWN: ClassVar[bool] = True

    @property
    def tx_type(self) -> TxType:
        return self.TX_TYPE


def match_variant(raw: Any, variants: tuple[type, ...], *, target: str):
    """Decode ``raw`` as the first of ``variants`` that accepts it.

    Keys unknown to every variant fail up front with UnrecognizedField. If
    every candidate fails with the same error on the same field, that error
    is raised with ``target`` as its variant; otherwise NoMatchingVariant
    lists each attempt.
    """
    obj = _require_object(raw, name=target)
    known: frozenset[str] = frozenset().union(*(v.wire_names() for v in variants))
    for key in obj:
        if key not in known:
            raise UnrecognizedField(f"{target} defines no field {key!r}", field=key)

    attempts: list[tuple[str, DecodeError]] = []
    for variant in variants:
        try:
            return variant.from_rpc(obj)
        except DecodeError as exc:
            exc.with_variant(variant.VARIANT)
            logger.debug("%s: %s rejected: %s", target, variant.VARIANT, exc)
            attempts.append((variant.VARIANT, exc))

    first = attempts[0][1]
    if all(type(err) is type(first) and err.field == first.field for _, err in attempts):
        first.variant = target
        raise first
    raise NoMatchingVariant(f"object matches no {target} variant", attempts=attempts)


# ---------------------------------------------------------------------------
# Transaction messages (signed transaction bodies)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LegacyMessage(_Variant):
    nonce: int
    gas: int
    gas_price: int
    value: int
    input: bytes
    to: Optional[bytes] = None  # None for contract creation
    chain_id: Optional[int] = None

    VARIANT: ClassVar[str] = "Legacy"
    TX_TYPE: ClassVar[TxType] = TxType.LEGACY
    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("chainId", "chain_id", U64, required=False),
        WireField("nonce", "nonce", U64),
        WireField("to", "to", ADDRESS, required=False),
        WireField("gas", "gas", U64),
        WireField("gasPrice", "gas_price", U256),
        WireField("value", "value", U256),
        WireField("input", "input", DATA),
    )


@dataclass(frozen=True)
class AccessListMessage(_Variant):
    chain_id: int
    nonce: int
    gas: int
    gas_price: int
    value: int
    input: bytes
    access_list: tuple[AccessListEntry, ...]
    to: Optional[bytes] = None

    VARIANT: ClassVar[str] = "EIP2930"
    TX_TYPE: ClassVar[TxType] = TxType.ACCESS_LIST
    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("chainId", "chain_id", U64),
        WireField("nonce", "nonce", U64),
        WireField("to", "to", ADDRESS, required=False),
        WireField("gas", "gas", U64),
        WireField("gasPrice", "gas_price", U256),
        WireField("value", "value", U256),
        WireField("input", "input", DATA),
        WireField("accessList", "access_list", ACCESS_LIST),
    )


@dataclass(frozen=True)
class FeeMarketMessage(_Variant):
    chain_id: int
    nonce: int
    gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    value: int
    input: bytes
    access_list: tuple[AccessListEntry, ...]
    to: Optional[bytes] = None

    VARIANT: ClassVar[str] = "EIP1559"
    TX_TYPE: ClassVar[TxType] = TxType.FEE_MARKET
    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("chainId", "chain_id", U64),
        WireField("nonce", "nonce", U64),
        WireField("to", "to", ADDRESS, required=False),
        WireField("gas", "gas", U64),
        WireField("maxFeePerGas", "max_fee_per_gas", U256),
        WireField("maxPriorityFeePerGas", "max_priority_fee_per_gas", U256),
        WireField("value", "value", U256),
        WireField("input", "input", DATA),
        WireField("accessList", "access_list", ACCESS_LIST),
    )


TransactionMessage = Union[LegacyMessage, AccessListMessage, FeeMarketMessage]

MESSAGE_VARIANTS: tuple[type, ...] = (LegacyMessage, AccessListMessage, FeeMarketMessage)


def decode_transaction_message(raw: Any) -> TransactionMessage:
    return match_variant(raw, MESSAGE_VARIANTS, target="TransactionMessage")


# ---------------------------------------------------------------------------
# Call requests (eth_call / eth_estimateGas), every field optional
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LegacyCall(_Variant):
    from_address: Optional[bytes] = None
    to: Optional[bytes] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    value: Optional[int] = None
    data: Optional[bytes] = None

    VARIANT: ClassVar[str] = "Legacy"
    TX_TYPE: ClassVar[TxType] = TxType.LEGACY
    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("from", "from_address", ADDRESS, required=False),
        WireField("to", "to", ADDRESS, required=False),
        WireField("gas", "gas", U64, required=False),
        WireField("gasPrice", "gas_price", U256, required=False),
        WireField("value", "value", U256, required=False),
        WireField("data", "data", DATA, required=False),
    )


@dataclass(frozen=True)
class AccessListCall(_Variant):
    from_address: Optional[bytes] = None
    to: Optional[bytes] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    value: Optional[int] = None
    data: Optional[bytes] = None
    access_list: Optional[tuple[AccessListEntry, ...]] = None

    VARIANT: ClassVar[str] = "EIP2930"
    TX_TYPE: ClassVar[TxType] = TxType.ACCESS_LIST
    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = LegacyCall.WIRE_FIELDS + (
        WireField("accessList", "access_list", ACCESS_LIST, required=False),
    )


@dataclass(frozen=True)
class FeeMarketCall(_Variant):
    from_address: Optional[bytes] = None
    to: Optional[bytes] = None
    gas: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    value: Optional[int] = None
    data: Optional[bytes] = None
    access_list: Optional[tuple[AccessListEntry, ...]] = None

    VARIANT: ClassVar[str] = "EIP1559"
    TX_TYPE: ClassVar[TxType] = TxType.FEE_MARKET
    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("from", "from_address", ADDRESS, required=False),
        WireField("to", "to", ADDRESS, required=False),
        WireField("gas", "gas", U64, required=False),
        WireField("maxFeePerGas", "max_fee_per_gas", U256, required=False),
        WireField("maxPriorityFeePerGas", "max_priority_fee_per_gas", U256, required=False),
        WireField("value", "value", U256, required=False),
        WireField("data", "data", DATA, required=False),
        WireField("accessList", "access_list", ACCESS_LIST, required=False),
    )


MessageCall = Union[LegacyCall, AccessListCall, FeeMarketCall]

CALL_VARIANTS: tuple[type, ...] = (LegacyCall, AccessListCall, FeeMarketCall)

CALL_DISCRIMINATORS = frozenset({"gasPrice", "accessList", "maxFeePerGas", "maxPriorityFeePerGas"})


def decode_message_call(raw: Any, *, require_discriminator: bool = False) -> MessageCall:
    """Decode a call request.

    An object carrying none of the fee/access-list keys decodes as Legacy,
    since Legacy is tried first and all of its fields are optional. With
    ``require_discriminator`` such an object is rejected instead.
    """
    call = match_variant(raw, CALL_VARIANTS, target="MessageCall")
    if require_discriminator and not any(raw.get(k) is not None for k in CALL_DISCRIMINATORS):
        raise NoMatchingVariant(
            "call has no gasPrice, accessList or maxFeePerGas; variant is ambiguous"
        )
    return call


# ---------------------------------------------------------------------------
# Signed transaction envelope
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Transaction:
    """Signed transaction: message fields flattened next to the envelope."""
    message: TransactionMessage
    v: int
    r: bytes  # 32 bytes
    s: bytes  # 32 bytes
    from_address: bytes
    hash: bytes
    transaction_index: Optional[int] = None

    ENVELOPE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("v", "v", U64),
        WireField("r", "r", HASH),
        WireField("s", "s", HASH),
        WireField("from", "from_address", ADDRESS),
        WireField("hash", "hash", HASH),
        WireField("transactionIndex", "transaction_index", U64, required=False),
    )

    @property
    def tx_type(self) -> TxType:
        return self.message.tx_type

    def to_rpc(self) -> dict[str, Any]:
        out = self.message.to_rpc()
        out.update(encode_fields(self, self.ENVELOPE_FIELDS))
        return out

    @classmethod
    def from_rpc(cls, raw: Any, name: str = "") -> Transaction:
        obj = _require_object(raw, name=name or "Transaction")
        envelope = {f.wire for f in cls.ENVELOPE_FIELDS}
        try:
            message = decode_transaction_message(
                {k: v for k, v in obj.items() if k not in envelope}
            )
        except DecodeError as exc:
            if name:
                exc.field = f"{name}.{exc.field}" if exc.field else name
            raise
        try:
            kwargs = decode_fields(obj, cls.ENVELOPE_FIELDS, prefix=name)
        except DecodeError as exc:
            raise exc.with_variant("Transaction")
        return cls(message=message, **kwargs)


# Either a full transaction or its hash.
Tx = Union[Transaction, bytes]


def tx_to_rpc(tx: Tx) -> Any:
    if isinstance(tx, Transaction):
        return tx.to_rpc()
    return bytes_hex(tx)


def tx_from_rpc(raw: Any, *, name: str = "tx") -> Tx:
    if isinstance(raw, str):
        return require_hash(raw, name=name)
    if isinstance(raw, dict):
        return Transaction.from_rpc(raw, name=name)
    raise UnexpectedType(
        f"{name} must be a hash string or transaction object, got {type(raw).__name__}",
        field=name,
    )


TX_LIST = _list_codec(FieldCodec(tx_to_rpc, tx_from_rpc))


# ---------------------------------------------------------------------------
# Block
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Block(WireRecord):
    parent_hash: bytes
    sha3_uncles: bytes
    transactions_root: bytes
    state_root: bytes
    receipts_root: bytes
    miner: bytes
    difficulty: int
    extra_data: bytes
    size: int
    gas_limit: int
    gas_used: int
    timestamp: int
    transactions: tuple[Tx, ...] = ()
    uncles: tuple[bytes, ...] = ()

    # Absent on pending blocks / pre-London headers
    number: Optional[int] = None
    hash: Optional[bytes] = None
    nonce: Optional[bytes] = None
    logs_bloom: Optional[bytes] = None
    total_difficulty: Optional[int] = None
    base_fee_per_gas: Optional[int] = None

    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("number", "number", U64, required=False),
        WireField("hash", "hash", HASH, required=False),
        WireField("parentHash", "parent_hash", HASH),
        WireField("nonce", "nonce", NONCE, required=False),
        WireField("sha3Uncles", "sha3_uncles", HASH),
        WireField("logsBloom", "logs_bloom", BLOOM, required=False),
        WireField("transactionsRoot", "transactions_root", HASH),
        WireField("stateRoot", "state_root", HASH),
        WireField("receiptsRoot", "receipts_root", HASH),
        WireField("miner", "miner", ADDRESS),
        WireField("difficulty", "difficulty", U256),
        WireField("totalDifficulty", "total_difficulty", U256, required=False),
        WireField("extraData", "extra_data", DATA),
        WireField("size", "size", U64),
        WireField("gasLimit", "gas_limit", U64),
        WireField("gasUsed", "gas_used", U64),
        WireField("timestamp", "timestamp", U64),
        WireField("baseFeePerGas", "base_fee_per_gas", U256, required=False),
        WireField("transactions", "transactions", TX_LIST),
        WireField("uncles", "uncles", HASH_LIST),
    )

    @property
    def has_full_transactions(self) -> bool:
        return any(isinstance(tx, Transaction) for tx in self.transactions)


# ---------------------------------------------------------------------------
# Sync status (eth_syncing)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SyncProgress(WireRecord):
    starting_block: int
    current_block: int
    highest_block: int

    WIRE_FIELDS: ClassVar[tuple[WireField, ...]] = (
        WireField("startingBlock", "starting_block", U64),
        WireField("currentBlock", "current_block", U64),
        WireField("highestBlock", "highest_block", U64),
    )


# False when the node is not syncing.
SyncStatus = Union[SyncProgress, Literal[False]]


def sync_status_to_rpc(status: SyncStatus) -> Any:
    if status is False:
        return False
    return status.to_rpc()


def sync_status_from_rpc(raw: Any, *, name: str = "syncStatus") -> SyncStatus:
    if raw is False:
        return False
    if isinstance(raw, dict):
        return SyncProgress.from_rpc(raw, name=name)
    raise UnexpectedType(
        f"{name} must be false or a progress object, got {raw!r}", field=name,
    )

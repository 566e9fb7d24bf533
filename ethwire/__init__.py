"""Ethereum JSON-RPC wire types and their canonical JSON codec."""

from .common.config import DEFAULT_CONFIG, LEGACY_PUBSUB_CONFIG, CodecConfig, ProtocolRevision
from .common.errors import (
    DecodeError,
    InvalidHex,
    InvalidJson,
    InvalidLength,
    MissingRequiredField,
    NoMatchingVariant,
    UnexpectedType,
    UnrecognizedField,
)
from .common.types import (
    AccessListCall,
    AccessListEntry,
    AccessListMessage,
    Block,
    FeeMarketCall,
    FeeMarketMessage,
    LegacyCall,
    LegacyMessage,
    MessageCall,
    SyncProgress,
    SyncStatus,
    Transaction,
    TransactionMessage,
    Tx,
    TxType,
)
from .rpc.codec import decode, encode, from_rpc, to_rpc
from .rpc.pubsub import EthSubscriptionKind, EthSubscriptionResult, NewHeadsResult, SyncingResult

__all__ = [
    "AccessListCall",
    "AccessListEntry",
    "AccessListMessage",
    "Block",
    "CodecConfig",
    "DEFAULT_CONFIG",
    "DecodeError",
    "EthSubscriptionKind",
    "EthSubscriptionResult",
    "FeeMarketCall",
    "FeeMarketMessage",
    "InvalidHex",
    "InvalidJson",
    "InvalidLength",
    "LEGACY_PUBSUB_CONFIG",
    "LegacyCall",
    "LegacyMessage",
    "MessageCall",
    "MissingRequiredField",
    "NewHeadsResult",
    "NoMatchingVariant",
    "ProtocolRevision",
    "SyncProgress",
    "SyncStatus",
    "SyncingResult",
    "Transaction",
    "TransactionMessage",
    "Tx",
    "TxType",
    "UnexpectedType",
    "UnrecognizedField",
    "decode",
    "encode",
    "from_rpc",
    "to_rpc",
]

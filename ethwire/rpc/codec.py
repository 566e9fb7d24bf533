"""
Text-level codec used by the request/response and subscription layers.

encode() turns a typed value into compact JSON text with keys in declared
order. decode() parses JSON text and builds the typed value named by
``target``, raising a DecodeError subclass on any malformed input.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from ethwire.common.config import DEFAULT_CONFIG, CodecConfig
from ethwire.common.errors import InvalidJson
from ethwire.common.types import (
    AccessListEntry,
    Block,
    Transaction,
    WireRecord,
    decode_message_call,
    decode_transaction_message,
    sync_status_from_rpc,
    tx_from_rpc,
    tx_to_rpc,
)
from ethwire.rpc.pubsub import (
    EthSubscriptionKind,
    NewHeadsResult,
    SyncingResult,
    kind_from_rpc,
    kind_to_rpc,
    result_from_rpc,
    result_to_rpc,
)

logger = logging.getLogger(__name__)


def _decoders(config: CodecConfig) -> dict[str, Callable[[Any], Any]]:
    return {
        "access_list_entry": AccessListEntry.from_rpc,
        "message_call": lambda raw: decode_message_call(
            raw, require_discriminator=config.require_call_discriminator),
        "transaction_message": decode_transaction_message,
        "transaction": Transaction.from_rpc,
        "tx": tx_from_rpc,
        "block": Block.from_rpc,
        "sync_status": sync_status_from_rpc,
        "subscription_kind": lambda raw: kind_from_rpc(raw, config),
        "subscription_result": lambda raw: result_from_rpc(raw, config=config),
    }


TARGETS = tuple(_decoders(DEFAULT_CONFIG))


def to_rpc(value: Any, config: CodecConfig = DEFAULT_CONFIG) -> Any:
    """Project a typed value onto its JSON-compatible form."""
    if isinstance(value, (WireRecord, Transaction)):
        return value.to_rpc()
    if isinstance(value, (SyncingResult, NewHeadsResult)):
        return result_to_rpc(value, config)
    if isinstance(value, EthSubscriptionKind):
        return kind_to_rpc(value, config)
    if value is False:
        return False
    if isinstance(value, bytes):
        return tx_to_rpc(value)
    raise TypeError(f"Cannot encode type {type(value).__name__}")


def from_rpc(raw: Any, target: str, config: CodecConfig = DEFAULT_CONFIG) -> Any:
    decoders = _decoders(config)
    if target not in decoders:
        raise ValueError(f"Unknown decode target: {target}")
    return decoders[target](raw)


def encode(value: Any, config: CodecConfig = DEFAULT_CONFIG) -> str:
    return json.dumps(to_rpc(value, config), separators=(",", ":"))


def decode(text: str | bytes, target: str, config: CodecConfig = DEFAULT_CONFIG) -> Any:
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise InvalidJson(f"Parse error: {exc}") from exc
    value = from_rpc(raw, target, config)
    logger.debug("decoded %s as %s", target, type(value).__name__)
    return value

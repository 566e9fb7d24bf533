"""
eth_subscribe kinds and payloads.

The kind is a plain string tag. Results are untagged under the current
protocol revision: the payload is exactly a SyncStatus, a Block or null,
and the consumer relies on the subscription it opened to know which kind a
result belongs to. The legacy revision wraps each payload in a one-key
object named after its kind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from ethwire.common.config import DEFAULT_CONFIG, CodecConfig, ProtocolRevision
from ethwire.common.errors import (
    DecodeError,
    MissingRequiredField,
    NoMatchingVariant,
    UnexpectedType,
    UnrecognizedField,
)
from ethwire.common.types import (
    Block,
    SyncStatus,
    sync_status_from_rpc,
    sync_status_to_rpc,
)

logger = logging.getLogger(__name__)


class EthSubscriptionKind(Enum):
    SYNCING = "syncing"
    NEW_HEADS = "newHeads"


_KIND_TAGS: dict[ProtocolRevision, dict[EthSubscriptionKind, str]] = {
    ProtocolRevision.CURRENT: {
        EthSubscriptionKind.SYNCING: "syncing",
        EthSubscriptionKind.NEW_HEADS: "newHeads",
    },
    ProtocolRevision.LEGACY: {
        EthSubscriptionKind.SYNCING: "sync",
        EthSubscriptionKind.NEW_HEADS: "block",
    },
}


def kind_to_rpc(kind: EthSubscriptionKind, config: CodecConfig = DEFAULT_CONFIG) -> str:
    return _KIND_TAGS[config.protocol_revision][kind]


def kind_from_rpc(raw: Any, config: CodecConfig = DEFAULT_CONFIG) -> EthSubscriptionKind:
    if not isinstance(raw, str):
        raise UnexpectedType(
            f"subscription kind must be a string, got {type(raw).__name__}", field="kind",
        )
    for kind, tag in _KIND_TAGS[config.protocol_revision].items():
        if raw == tag:
            return kind
    raise UnrecognizedField(
        f"unknown subscription kind {raw!r} for {config.protocol_revision.value} protocol",
        field="kind",
    )


@dataclass(frozen=True)
class SyncingResult:
    status: SyncStatus

    kind = EthSubscriptionKind.SYNCING


@dataclass(frozen=True)
class NewHeadsResult:
    # None means no update is available
    block: Optional[Block] = None

    kind = EthSubscriptionKind.NEW_HEADS


EthSubscriptionResult = Union[SyncingResult, NewHeadsResult]

_RESULT_VARIANTS = {
    EthSubscriptionKind.SYNCING: "Syncing",
    EthSubscriptionKind.NEW_HEADS: "NewHeads",
}


def _payload_to_rpc(result: EthSubscriptionResult) -> Any:
    if isinstance(result, SyncingResult):
        return sync_status_to_rpc(result.status)
    return None if result.block is None else result.block.to_rpc()


def _payload_from_rpc(raw: Any, kind: EthSubscriptionKind, *,
                      allow_empty_block: bool) -> EthSubscriptionResult:
    if kind is EthSubscriptionKind.SYNCING:
        return SyncingResult(sync_status_from_rpc(raw, name="result"))
    if raw is None:
        if not allow_empty_block:
            raise MissingRequiredField("block payload is required", field="result")
        return NewHeadsResult(None)
    return NewHeadsResult(Block.from_rpc(raw, name="result"))


def result_to_rpc(result: EthSubscriptionResult, config: CodecConfig = DEFAULT_CONFIG) -> Any:
    payload = _payload_to_rpc(result)
    if config.protocol_revision is ProtocolRevision.LEGACY:
        if payload is None:
            raise ValueError("legacy protocol has no empty newHeads result")
        return {kind_to_rpc(result.kind, config): payload}
    return payload


def result_from_rpc(raw: Any, kind: Optional[EthSubscriptionKind] = None,
                    config: CodecConfig = DEFAULT_CONFIG) -> EthSubscriptionResult:
    """Decode a subscription payload.

    ``kind`` is the kind the subscription was opened with. Without it the
    untagged payload is matched against Syncing, then NewHeads.
    """
    if config.protocol_revision is ProtocolRevision.LEGACY:
        return _tagged_result_from_rpc(raw, kind, config)

    if kind is not None:
        return _payload_from_rpc(raw, kind, allow_empty_block=True)

    attempts: list[tuple[str, DecodeError]] = []
    for candidate in (EthSubscriptionKind.SYNCING, EthSubscriptionKind.NEW_HEADS):
        label = _RESULT_VARIANTS[candidate]
        try:
            return _payload_from_rpc(raw, candidate, allow_empty_block=True)
        except DecodeError as exc:
            exc.with_variant(label)
            logger.debug("subscription result: %s rejected: %s", label, exc)
            attempts.append((label, exc))
    raise NoMatchingVariant("payload matches no subscription result", attempts=attempts)


def _tagged_result_from_rpc(raw: Any, kind: Optional[EthSubscriptionKind],
                            config: CodecConfig) -> EthSubscriptionResult:
    if not isinstance(raw, dict) or len(raw) != 1:
        raise UnexpectedType("legacy subscription result must be a single-key object",
                             field="result")
    (tag, payload), = raw.items()
    tagged_kind = kind_from_rpc(tag, config)
    if kind is not None and tagged_kind is not kind:
        raise UnrecognizedField(
            f"result tagged {tag!r} on a {kind_to_rpc(kind, config)!r} subscription",
            field=tag,
        )
    return _payload_from_rpc(payload, tagged_kind, allow_empty_block=False)

"""
Codec configuration.

Selects the subscription vocabulary (protocol revision) and how an
ambiguous call request is resolved. One configuration is fixed per
deployment; the two subscription vocabularies are never mixed.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping


class ProtocolRevision(str, Enum):
    # "syncing" / "newHeads", untagged results, NewHeads may be null
    CURRENT = "current"
    # "sync" / "block", externally tagged results
    LEGACY = "legacy"


@dataclass(frozen=True)
class CodecConfig:
    protocol_revision: ProtocolRevision = ProtocolRevision.CURRENT

    # A call object with none of gasPrice / accessList / maxFeePerGas /
    # maxPriorityFeePerGas falls back to the Legacy variant unless this is set.
    require_call_discriminator: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> CodecConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = dict(raw)
        if "protocol_revision" in kwargs:
            kwargs["protocol_revision"] = ProtocolRevision(kwargs["protocol_revision"])
        if "require_call_discriminator" in kwargs:
            value = kwargs["require_call_discriminator"]
            if not isinstance(value, bool):
                raise ValueError("require_call_discriminator must be a boolean")
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "protocol_revision": self.protocol_revision.value,
            "require_call_discriminator": self.require_call_discriminator,
        }


DEFAULT_CONFIG = CodecConfig()

LEGACY_PUBSUB_CONFIG = CodecConfig(protocol_revision=ProtocolRevision.LEGACY)

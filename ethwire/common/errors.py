"""
Decode error taxonomy.

Every failure carries the JSON-RPC "invalid params" code plus the wire field
and the union variant that was being tried, so a transport layer can hand the
error straight back to the caller.
"""

from __future__ import annotations

from typing import Any, Optional

INVALID_PARAMS = -32602
PARSE_ERROR = -32700


class DecodeError(ValueError):
    code = INVALID_PARAMS

    def __init__(self, message: str, *, field: Optional[str] = None,
                 variant: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.variant = variant

    def with_variant(self, variant: str) -> DecodeError:
        if self.variant is None:
            self.variant = variant
        return self

    def to_rpc_error(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": type(self).__name__}
        if self.field is not None:
            data["field"] = self.field
        if self.variant is not None:
            data["variant"] = self.variant
        return {"code": self.code, "message": self.message, "data": data}

    def __str__(self) -> str:
        context = [
            f"{key}={value}"
            for key, value in (("field", self.field), ("variant", self.variant))
            if value is not None
        ]
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class InvalidHex(DecodeError):
    """Text is not a well-formed 0x-prefixed hex string."""


class InvalidLength(DecodeError):
    """Decoded value does not fit the declared width."""


class UnrecognizedField(DecodeError):
    """Object carries a key the target does not define."""


class MissingRequiredField(DecodeError):
    """A required key is missing or null."""


class UnexpectedType(DecodeError):
    """JSON value has the wrong shape (e.g. a number where a string belongs)."""


class InvalidJson(DecodeError):
    code = PARSE_ERROR


class NoMatchingVariant(DecodeError):
    """No variant of an untagged union accepted the object."""

    def __init__(self, message: str, *, attempts: Optional[list[tuple[str, DecodeError]]] = None,
                 field: Optional[str] = None, variant: Optional[str] = None) -> None:
        super().__init__(message, field=field, variant=variant)
        self.attempts = attempts or []

    def to_rpc_error(self) -> dict[str, Any]:
        error = super().to_rpc_error()
        if self.attempts:
            error["data"]["attempts"] = {
                name: f"{type(err).__name__}: {err.message}"
                + (f" ({err.field})" if err.field else "")
                for name, err in self.attempts
            }
        return error

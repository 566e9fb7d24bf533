"""
Canonical hex text codec for the JSON-RPC primitive types.

Fixed-width values (Address, Hash256, bloom, nonce) encode as exactly
``2 + 2 * width`` characters. Quantities (UInt64 / UInt256) encode with the
minimal digit count, ``0x0`` for zero; decoding tolerates leading zeros.
Byte strings encode verbatim, the empty string as ``0x``.
"""

from __future__ import annotations

from typing import Any

from eth_utils import decode_hex, encode_hex, is_0x_prefixed, is_hexstr, remove_0x_prefix

from ethwire.common.errors import InvalidHex, InvalidLength, UnexpectedType

ADDRESS_SIZE = 20
HASH_SIZE = 32
NONCE_SIZE = 8
BLOOM_SIZE = 256

UINT64_BITS = 64
UINT256_BITS = 256


def quantity_hex(value: int) -> str:
    return hex(value)


def bytes_hex(value: bytes) -> str:
    return encode_hex(value)


def _require_hex_text(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise UnexpectedType(f"expected hex string, got {type(value).__name__}", field=name)
    if not is_0x_prefixed(value):
        raise InvalidHex("must be 0x-prefixed hex", field=name)
    if not is_hexstr(value):
        raise InvalidHex("contains non-hex characters", field=name)
    return remove_0x_prefix(value)


def require_fixed(value: Any, *, name: str, size: int) -> bytes:
    """Decode a fixed-width byte value (address, hash, ...)."""
    body = _require_hex_text(value, name=name)
    if len(body) != size * 2:
        raise InvalidLength(f"must be {size} bytes, got {len(body)} hex digits", field=name)
    return decode_hex(body)


def require_quantity(value: Any, *, name: str, bits: int = UINT256_BITS) -> int:
    """Decode an unsigned quantity bounded to ``bits``."""
    body = _require_hex_text(value, name=name)
    if not body:
        raise InvalidHex("empty quantity", field=name)
    result = int(body, 16)
    if result >> bits:
        raise InvalidLength(f"exceeds {bits}-bit range", field=name)
    return result


def require_data(value: Any, *, name: str) -> bytes:
    """Decode a variable-length byte string."""
    body = _require_hex_text(value, name=name)
    if len(body) % 2:
        raise InvalidHex("odd number of hex digits", field=name)
    return decode_hex(body)


def require_address(value: Any, *, name: str) -> bytes:
    return require_fixed(value, name=name, size=ADDRESS_SIZE)


def require_hash(value: Any, *, name: str) -> bytes:
    return require_fixed(value, name=name, size=HASH_SIZE)


def require_u64(value: Any, *, name: str) -> int:
    return require_quantity(value, name=name, bits=UINT64_BITS)


def require_u256(value: Any, *, name: str) -> int:
    return require_quantity(value, name=name, bits=UINT256_BITS)

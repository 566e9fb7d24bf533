"""Test fixtures for wire codec tests."""

from .wire import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    LEGACY_CALL_JSON,
    LEGACY_CALL_WITH_DATA_JSON,
    LEGACY_TX_JSON,
    TX_HASH,
    ZERO_ADDRESS,
)

__all__ = [
    "ALICE_ADDRESS",
    "BOB_ADDRESS",
    "LEGACY_CALL_JSON",
    "LEGACY_CALL_WITH_DATA_JSON",
    "LEGACY_TX_JSON",
    "TX_HASH",
    "ZERO_ADDRESS",
]

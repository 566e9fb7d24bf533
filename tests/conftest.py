"""Pytest configuration and shared fixtures for all tests."""

import pytest

from ethwire.common.types import (
    AccessListEntry,
    AccessListMessage,
    Block,
    FeeMarketMessage,
    LegacyMessage,
    SyncProgress,
    Transaction,
)
from tests.fixtures.wire import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    SIG_R,
    SIG_S,
    STORAGE_KEY_0,
    STORAGE_KEY_1,
    TEN_ETHER,
    TRANSFER_CALLDATA,
    TWENTY_GWEI,
    TX_HASH,
)


# =============================================================================
# Access lists
# =============================================================================

@pytest.fixture
def access_list():
    """Two entries: one with two storage keys, one address-only."""
    return (
        AccessListEntry(address=BOB_ADDRESS, storage_keys=(STORAGE_KEY_0, STORAGE_KEY_1)),
        AccessListEntry(address=ALICE_ADDRESS, storage_keys=()),
    )


# =============================================================================
# Transaction messages
# =============================================================================

@pytest.fixture
def legacy_message():
    """Legacy ERC-20 transfer on chain 2."""
    return LegacyMessage(
        chain_id=2,
        nonce=12,
        to=BOB_ADDRESS,
        gas=21_000,
        gas_price=TWENTY_GWEI,
        value=TEN_ETHER,
        input=TRANSFER_CALLDATA,
    )


@pytest.fixture
def access_list_message(access_list):
    """EIP-2930 message with a gas price and an access list."""
    return AccessListMessage(
        chain_id=1,
        nonce=3,
        to=BOB_ADDRESS,
        gas=60_000,
        gas_price=TWENTY_GWEI,
        value=0,
        input=b"",
        access_list=access_list,
    )


@pytest.fixture
def fee_market_message(access_list):
    """EIP-1559 contract creation (no recipient)."""
    return FeeMarketMessage(
        chain_id=1,
        nonce=7,
        to=None,
        gas=100_000,
        max_fee_per_gas=2_000_000_000,
        max_priority_fee_per_gas=1_000_000_000,
        value=TEN_ETHER,
        input=b"\x60\x80",
        access_list=access_list,
    )


@pytest.fixture
def legacy_transaction(legacy_message):
    """Signed legacy transaction matching LEGACY_TX_JSON."""
    return Transaction(
        message=legacy_message,
        v=40,
        r=SIG_R,
        s=SIG_S,
        from_address=ALICE_ADDRESS,
        hash=TX_HASH,
        transaction_index=0x42,
    )


@pytest.fixture
def transaction_factory():
    """Factory fixture wrapping any message in a signed envelope."""
    def _transaction_factory(message, transaction_index=None):
        return Transaction(
            message=message,
            v=1,
            r=SIG_R,
            s=SIG_S,
            from_address=ALICE_ADDRESS,
            hash=TX_HASH,
            transaction_index=transaction_index,
        )
    return _transaction_factory


# =============================================================================
# Blocks and sync status
# =============================================================================

@pytest.fixture
def block_factory():
    """Factory fixture to create blocks with a given transaction list."""
    def _block_factory(transactions=(), **overrides):
        params = dict(
            number=0x10,
            hash=b"\x11" * 32,
            parent_hash=b"\x22" * 32,
            nonce=b"\x00" * 8,
            sha3_uncles=b"\x33" * 32,
            logs_bloom=b"\x00" * 256,
            transactions_root=b"\x44" * 32,
            state_root=b"\x55" * 32,
            receipts_root=b"\x66" * 32,
            miner=ALICE_ADDRESS,
            difficulty=0,
            total_difficulty=None,
            extra_data=b"",
            size=0x220,
            gas_limit=30_000_000,
            gas_used=21_000,
            timestamp=1_700_000_000,
            base_fee_per_gas=7,
            transactions=transactions,
            uncles=(),
        )
        params.update(overrides)
        return Block(**params)
    return _block_factory


@pytest.fixture
def sync_progress():
    return SyncProgress(starting_block=0, current_block=0x100, highest_block=0x200)

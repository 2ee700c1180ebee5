"""
Pytest fixtures for pumpbot tests
"""
import struct
from unittest.mock import AsyncMock, MagicMock

import base58
import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from solana.rpc.commitment import Confirmed

from pumpbot.core.client import SolanaClient
from pumpbot.core.curve import BONDING_CURVE_DISCRIMINATOR, GLOBAL_ACCOUNT_DISCRIMINATOR
from pumpbot.core.wallet import Wallet


@pytest.fixture
def keypair():
    return Keypair()


@pytest.fixture
def private_key_bs58(keypair):
    return base58.b58encode(bytes(keypair)).decode()


@pytest.fixture
def wallet(private_key_bs58):
    return Wallet(private_key_bs58)


@pytest.fixture
def mint():
    return Keypair().pubkey()


@pytest.fixture
def creator():
    return Keypair().pubkey()


@pytest.fixture
def fee_recipient():
    return Keypair().pubkey()


@pytest.fixture
def mock_client():
    """Mock SolanaClient; every RPC helper is an AsyncMock."""
    client = MagicMock(spec=SolanaClient)
    client.commitment = Confirmed
    client.get_latest_blockhash = AsyncMock()
    client.get_account_data = AsyncMock(return_value=None)
    client.get_balance_lamports = AsyncMock(return_value=1_000_000_000)  # 1 SOL
    client.get_token_account_balance = AsyncMock(return_value=None)
    client.get_minimum_balance_for_rent_exemption = AsyncMock(return_value=1_461_600)
    client.get_recent_prioritization_fees = AsyncMock(return_value=[])
    client.send_transaction = AsyncMock()
    client.confirm_transaction = AsyncMock(return_value=None)
    client.get_transaction_fee = AsyncMock(return_value=5000)
    return client


@pytest.fixture
def curve_bytes(creator):
    """Factory for raw bonding curve account data."""
    def _build(
        virtual_token_reserves=1_073_000_000_000_000,
        virtual_sol_reserves=30_000_000_000,
        real_token_reserves=793_100_000_000_000,
        real_sol_reserves=0,
        token_total_supply=1_000_000_000_000_000,
        complete=False,
        with_creator=True,
    ) -> bytes:
        data = BONDING_CURVE_DISCRIMINATOR + struct.pack(
            "<QQQQQ?",
            virtual_token_reserves,
            virtual_sol_reserves,
            real_token_reserves,
            real_sol_reserves,
            token_total_supply,
            complete,
        )
        if with_creator:
            data += bytes(creator)
        return data

    return _build


@pytest.fixture
def global_bytes(fee_recipient):
    """Factory for raw global account data."""
    def _build(fee_basis_points=100) -> bytes:
        authority = Pubkey.default()
        return (
            GLOBAL_ACCOUNT_DISCRIMINATOR
            + struct.pack("<?", True)
            + bytes(authority)
            + bytes(fee_recipient)
            + struct.pack(
                "<QQQQQ",
                1_073_000_000_000_000,
                30_000_000_000,
                793_100_000_000_000,
                1_000_000_000_000_000,
                fee_basis_points,
            )
        )

    return _build

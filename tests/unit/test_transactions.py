"""Tests for build_and_send_transaction"""
from unittest.mock import AsyncMock, patch

import pytest
from solana.rpc.core import RPCException
from solders.compute_budget import set_compute_unit_limit
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature

from pumpbot.core.transactions import _dedupe_signers, build_and_send_transaction


@pytest.fixture
def ready_client(mock_client):
    mock_client.get_latest_blockhash.return_value = Hash.default()
    mock_client.send_transaction.return_value = Signature.default()
    return mock_client


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("pumpbot.core.transactions.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        yield mock_sleep


def test_dedupe_signers_keeps_payer_first(keypair):
    extra = Keypair()
    signers = _dedupe_signers(keypair, [extra, keypair, extra])

    assert [s.pubkey() for s in signers] == [keypair.pubkey(), extra.pubkey()]


@pytest.mark.asyncio
async def test_send_and_confirm(ready_client, keypair):
    result = await build_and_send_transaction(ready_client, keypair, [set_compute_unit_limit(200_000)])

    assert result.success is True
    assert result.signature == str(Signature.default())
    ready_client.send_transaction.assert_awaited_once()
    tx = ready_client.send_transaction.await_args.args[0]
    assert tx.message.account_keys[0] == keypair.pubkey()


@pytest.mark.asyncio
async def test_retries_rpc_error_then_succeeds(ready_client, keypair, no_sleep):
    ready_client.send_transaction.side_effect = [RPCException("node is behind"), Signature.default()]

    result = await build_and_send_transaction(ready_client, keypair, [set_compute_unit_limit(200_000)])

    assert result.success is True
    assert ready_client.send_transaction.await_count == 2
    no_sleep.assert_awaited_once()


@pytest.mark.asyncio
async def test_confirm_failure_is_not_resent(ready_client, keypair):
    ready_client.confirm_transaction.return_value = "on-chain error: slippage"

    result = await build_and_send_transaction(ready_client, keypair, [set_compute_unit_limit(200_000)])

    assert result.success is False
    assert result.error_type == "ConfirmError"
    assert result.signature == str(Signature.default())
    ready_client.send_transaction.assert_awaited_once()


@pytest.mark.asyncio
async def test_missing_blockhash_exhausts_retries(ready_client, keypair):
    ready_client.get_latest_blockhash.return_value = None

    result = await build_and_send_transaction(
        ready_client, keypair, [set_compute_unit_limit(200_000)], max_send_retries=2
    )

    assert result.success is False
    assert result.error_type == "BuildError"
    assert "Failed after 2 attempts" in result.error
    ready_client.send_transaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_unconfirmed_send(ready_client, keypair):
    result = await build_and_send_transaction(
        ready_client, keypair, [set_compute_unit_limit(200_000)], confirm=False
    )

    assert result.success is True
    ready_client.confirm_transaction.assert_not_awaited()

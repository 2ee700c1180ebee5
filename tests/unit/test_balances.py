"""Tests for balance helpers"""
from types import SimpleNamespace

import pytest
from spl.token.instructions import get_associated_token_address

from pumpbot.utils.balances import get_spl_balance, print_sol_balance, print_spl_balance


def token_amount(amount: int, decimals: int = 6, ui_amount=None):
    ui = ui_amount if ui_amount is not None else amount / 10 ** decimals
    return SimpleNamespace(amount=str(amount), decimals=decimals, ui_amount=ui)


@pytest.mark.asyncio
async def test_print_sol_balance(mock_client, wallet, capsys):
    mock_client.get_balance_lamports.return_value = 2_500_000_000

    balance = await print_sol_balance(mock_client, wallet.pubkey, "Wallet")

    assert balance == 2.5
    assert capsys.readouterr().out.strip() == f"Wallet {wallet.pubkey}: 2.5"


@pytest.mark.asyncio
async def test_print_sol_balance_unavailable(mock_client, wallet, capsys):
    mock_client.get_balance_lamports.return_value = None

    assert await print_sol_balance(mock_client, wallet.pubkey) is None
    assert "balance unavailable" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_spl_balance_reads_owner_ata(mock_client, wallet, mint):
    mock_client.get_token_account_balance.return_value = token_amount(12_500_000)

    assert await get_spl_balance(mock_client, mint, wallet.pubkey) == 12.5
    mock_client.get_token_account_balance.assert_awaited_with(
        get_associated_token_address(wallet.pubkey, mint)
    )


@pytest.mark.asyncio
async def test_print_spl_balance_no_account(mock_client, wallet, mint, capsys):
    assert await print_spl_balance(mock_client, mint, wallet.pubkey) is None
    assert capsys.readouterr().out.strip() == f"{wallet.pubkey}: No Account Found"


@pytest.mark.asyncio
async def test_print_spl_balance_with_label(mock_client, wallet, mint, capsys):
    mock_client.get_token_account_balance.return_value = token_amount(0, ui_amount=0.0)

    assert await print_spl_balance(mock_client, mint, wallet.pubkey, "After SPL sell all") == 0.0
    assert capsys.readouterr().out.strip() == "After SPL sell all Balance: 0.0"


@pytest.mark.asyncio
async def test_print_spl_balance_no_account_keeps_label(mock_client, wallet, mint, capsys):
    await print_spl_balance(mock_client, mint, wallet.pubkey, "After SPL sell all")

    assert capsys.readouterr().out.strip() == f"After SPL sell all {wallet.pubkey}: No Account Found"

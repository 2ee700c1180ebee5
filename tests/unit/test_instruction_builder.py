"""Tests for InstructionBuilder"""
import struct

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from spl.token.instructions import get_associated_token_address

from pumpbot.core.instruction_builder import (
    BUY_DISCRIMINATOR,
    SELL_DISCRIMINATOR,
    TRACK_VOLUME,
    InstructionBuilder,
)
from pumpbot.core.pubkeys import (
    PumpAddresses,
    SolanaProgramAddresses,
    find_bonding_curve_pda,
    find_creator_vault,
)


def test_compute_budget_prefix():
    instructions = InstructionBuilder.compute_budget_instructions(250_000, 250_000)

    assert instructions == [set_compute_unit_limit(250_000), set_compute_unit_price(250_000)]


def test_compute_budget_skips_missing_values():
    assert InstructionBuilder.compute_budget_instructions(0, 0) == []
    assert InstructionBuilder.compute_budget_instructions(200_000, None) == [set_compute_unit_limit(200_000)]


def test_buy_instruction_layout(keypair, mint, creator, fee_recipient):
    user = keypair.pubkey()
    ix = InstructionBuilder.build_pump_fun_buy_instruction(
        user_wallet_pubkey=user,
        mint_pubkey=mint,
        creator=creator,
        fee_recipient=fee_recipient,
        token_amount=1_000_000,
        max_sol_cost=101_000,
    )

    assert ix.program_id == PumpAddresses.PROGRAM_ID
    assert bytes(ix.data) == BUY_DISCRIMINATOR + struct.pack("<QQ", 1_000_000, 101_000) + TRACK_VOLUME
    assert len(ix.accounts) == 16

    assert ix.accounts[0].pubkey == PumpAddresses.GLOBAL_STATE
    assert ix.accounts[1].pubkey == fee_recipient
    assert ix.accounts[2].pubkey == mint
    assert ix.accounts[3].pubkey == find_bonding_curve_pda(mint)[0]
    assert ix.accounts[5].pubkey == get_associated_token_address(user, mint)
    assert ix.accounts[6].pubkey == user
    assert ix.accounts[6].is_signer and ix.accounts[6].is_writable
    assert ix.accounts[9].pubkey == find_creator_vault(creator)
    assert sum(1 for meta in ix.accounts if meta.is_signer) == 1


def test_sell_instruction_layout(keypair, mint, creator, fee_recipient):
    user = keypair.pubkey()
    ix = InstructionBuilder.build_pump_fun_sell_instruction(
        user_wallet_pubkey=user,
        mint_pubkey=mint,
        creator=creator,
        fee_recipient=fee_recipient,
        token_amount=5_000_000,
        min_sol_output=48,
    )

    assert ix.program_id == PumpAddresses.PROGRAM_ID
    assert bytes(ix.data)[:8] == SELL_DISCRIMINATOR
    assert struct.unpack("<QQ", bytes(ix.data)[8:]) == (5_000_000, 48)
    assert len(ix.accounts) == 14
    assert ix.accounts[8].pubkey == find_creator_vault(creator)
    assert ix.accounts[9].pubkey == SolanaProgramAddresses.TOKEN_PROGRAM_ID


def test_token_2022_accounts_follow_program(keypair, mint, creator, fee_recipient):
    user = keypair.pubkey()
    token_2022 = SolanaProgramAddresses.TOKEN_2022_PROGRAM_ID
    ix = InstructionBuilder.build_pump_fun_buy_instruction(
        user, mint, creator, fee_recipient, 1, 1, token_program_id=token_2022
    )

    assert ix.accounts[5].pubkey == get_associated_token_address(user, mint, token_2022)
    assert ix.accounts[8].pubkey == token_2022


def test_create_mint_instructions(keypair, mint):
    payer = keypair.pubkey()
    create_ix, init_ix = InstructionBuilder.build_create_mint_instructions(
        payer=payer, mint=mint, mint_authority=payer, decimals=6, rent_lamports=1_461_600
    )

    assert create_ix.program_id == SolanaProgramAddresses.SYSTEM_PROGRAM_ID
    assert init_ix.program_id == SolanaProgramAddresses.TOKEN_PROGRAM_ID
    assert init_ix.accounts[0].pubkey == mint


def test_create_ata_idempotent_flag(keypair, mint):
    owner = keypair.pubkey()
    idempotent = InstructionBuilder.get_create_ata_instruction(owner, owner, mint)
    strict = InstructionBuilder.get_create_ata_instruction(owner, owner, mint, idempotent=False)

    assert idempotent.program_id == SolanaProgramAddresses.ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID
    assert strict.program_id == SolanaProgramAddresses.ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID
    assert bytes(idempotent.data) != bytes(strict.data)

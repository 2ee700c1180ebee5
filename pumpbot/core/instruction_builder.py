# pumpbot/core/instruction_builder.py
import struct
from typing import List, Optional

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import MINT_LEN
from spl.token.instructions import (
    InitializeMintParams,
    create_associated_token_account,
    create_idempotent_associated_token_account,
    get_associated_token_address,
    initialize_mint,
)

from pumpbot.core.pubkeys import (
    PumpAddresses,
    SolanaProgramAddresses,
    find_associated_bonding_curve,
    find_bonding_curve_pda,
    find_creator_vault,
    find_fee_config,
    find_global_volume_accumulator,
    find_user_volume_accumulator,
)

# --- Instruction Discriminators (from the program IDL) ---
BUY_DISCRIMINATOR = bytes.fromhex("66063d1201daebea")
SELL_DISCRIMINATOR = bytes.fromhex("33e685a4017f83ad")

# OptionBool(Some(true)): opt the buy into volume tracking
TRACK_VOLUME = bytes([1, 1])


class InstructionBuilder:
    @staticmethod
    def compute_budget_instructions(unit_limit: Optional[int], unit_price: Optional[int]) -> List[Instruction]:
        """Compute budget prefix; either value may be omitted."""
        instructions: List[Instruction] = []
        if unit_limit:
            instructions.append(set_compute_unit_limit(unit_limit))
        if unit_price:
            instructions.append(set_compute_unit_price(unit_price))
        return instructions

    @staticmethod
    def get_create_ata_instruction(
            payer: Pubkey,
            owner: Pubkey,
            mint: Pubkey,
            token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
            idempotent: bool = True,
    ) -> Instruction:
        """
        Instruction creating the associated token account of `owner` for `mint`.
        The idempotent form succeeds when the account already exists.
        """
        if idempotent:
            return create_idempotent_associated_token_account(payer, owner, mint, token_program_id=token_program_id)
        return create_associated_token_account(payer, owner, mint, token_program_id=token_program_id)

    @staticmethod
    def build_create_mint_instructions(
            payer: Pubkey,
            mint: Pubkey,
            mint_authority: Pubkey,
            decimals: int,
            rent_lamports: int,
            freeze_authority: Optional[Pubkey] = None,
    ) -> List[Instruction]:
        """Allocate a mint account owned by the token program and initialize it."""
        token_program_id = SolanaProgramAddresses.TOKEN_PROGRAM_ID
        create_ix = create_account(
            CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=mint,
                lamports=rent_lamports,
                space=MINT_LEN,
                owner=token_program_id,
            )
        )
        init_ix = initialize_mint(
            InitializeMintParams(
                decimals=decimals,
                program_id=token_program_id,
                mint=mint,
                mint_authority=mint_authority,
                freeze_authority=freeze_authority,
            )
        )
        return [create_ix, init_ix]

    @staticmethod
    def build_pump_fun_buy_instruction(
            user_wallet_pubkey: Pubkey,
            mint_pubkey: Pubkey,
            creator: Pubkey,
            fee_recipient: Pubkey,
            token_amount: int,
            max_sol_cost: int,
            token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
    ) -> Instruction:
        """Builds the pump.fun 'buy' instruction: receive `token_amount` atoms for at most `max_sol_cost` lamports."""
        bonding_curve, _ = find_bonding_curve_pda(mint_pubkey)
        associated_bonding_curve = find_associated_bonding_curve(mint_pubkey, bonding_curve, token_program_id)
        user_ata_pubkey = get_associated_token_address(user_wallet_pubkey, mint_pubkey, token_program_id)

        instruction_data = (
                BUY_DISCRIMINATOR +
                struct.pack("<Q", token_amount) +
                struct.pack("<Q", max_sol_cost) +
                TRACK_VOLUME
        )

        accounts = [
            AccountMeta(pubkey=PumpAddresses.GLOBAL_STATE, is_signer=False, is_writable=False),
            AccountMeta(pubkey=fee_recipient, is_signer=False, is_writable=True),
            AccountMeta(pubkey=mint_pubkey, is_signer=False, is_writable=False),
            AccountMeta(pubkey=bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(pubkey=associated_bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(pubkey=user_ata_pubkey, is_signer=False, is_writable=True),
            AccountMeta(pubkey=user_wallet_pubkey, is_signer=True, is_writable=True),
            AccountMeta(pubkey=SolanaProgramAddresses.SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
            AccountMeta(pubkey=find_creator_vault(creator), is_signer=False, is_writable=True),
            AccountMeta(pubkey=PumpAddresses.EVENT_AUTHORITY, is_signer=False, is_writable=False),
            AccountMeta(pubkey=PumpAddresses.PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=find_global_volume_accumulator(), is_signer=False, is_writable=False),
            AccountMeta(pubkey=find_user_volume_accumulator(user_wallet_pubkey), is_signer=False, is_writable=True),
            AccountMeta(pubkey=find_fee_config(), is_signer=False, is_writable=False),
            AccountMeta(pubkey=PumpAddresses.FEE_PROGRAM, is_signer=False, is_writable=False),
        ]

        return Instruction(
            program_id=PumpAddresses.PROGRAM_ID,
            accounts=accounts,
            data=instruction_data
        )

    @staticmethod
    def build_pump_fun_sell_instruction(
            user_wallet_pubkey: Pubkey,
            mint_pubkey: Pubkey,
            creator: Pubkey,
            fee_recipient: Pubkey,
            token_amount: int,
            min_sol_output: int,
            token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
    ) -> Instruction:
        """Builds the pump.fun 'sell' instruction: sell `token_amount` atoms for at least `min_sol_output` lamports."""
        bonding_curve, _ = find_bonding_curve_pda(mint_pubkey)
        associated_bonding_curve = find_associated_bonding_curve(mint_pubkey, bonding_curve, token_program_id)
        user_ata_pubkey = get_associated_token_address(user_wallet_pubkey, mint_pubkey, token_program_id)

        instruction_data = (
                SELL_DISCRIMINATOR +
                struct.pack("<Q", token_amount) +
                struct.pack("<Q", min_sol_output)
        )

        accounts = [
            AccountMeta(pubkey=PumpAddresses.GLOBAL_STATE, is_signer=False, is_writable=False),
            AccountMeta(pubkey=fee_recipient, is_signer=False, is_writable=True),
            AccountMeta(pubkey=mint_pubkey, is_signer=False, is_writable=False),
            AccountMeta(pubkey=bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(pubkey=associated_bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(pubkey=user_ata_pubkey, is_signer=False, is_writable=True),
            AccountMeta(pubkey=user_wallet_pubkey, is_signer=True, is_writable=True),
            AccountMeta(pubkey=SolanaProgramAddresses.SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=find_creator_vault(creator), is_signer=False, is_writable=True),
            AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
            AccountMeta(pubkey=PumpAddresses.EVENT_AUTHORITY, is_signer=False, is_writable=False),
            AccountMeta(pubkey=PumpAddresses.PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=find_fee_config(), is_signer=False, is_writable=False),
            AccountMeta(pubkey=PumpAddresses.FEE_PROGRAM, is_signer=False, is_writable=False),
        ]

        return Instruction(
            program_id=PumpAddresses.PROGRAM_ID,
            accounts=accounts,
            data=instruction_data
        )

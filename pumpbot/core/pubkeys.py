# pumpbot/core/pubkeys.py

from typing import Tuple

from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID_SOLDERS  # Renamed to avoid conflict
from spl.token.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID as ASSOCIATED_TOKEN_PROGRAM_ID_SPL,
    TOKEN_2022_PROGRAM_ID as TOKEN_2022_PROGRAM_ID_SPL,
    TOKEN_PROGRAM_ID as TOKEN_PROGRAM_ID_SPL,
)

LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_TOKEN_DECIMALS = 6


class PumpAddresses:
    # (1) The on-chain Pump.fun program ID
    PROGRAM_ID = Pubkey.from_string("6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P")

    # (2) Global state PDA (seed = b"global")
    GLOBAL_STATE: Pubkey = Pubkey.from_string("4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf")

    # (3) Default fee recipient, used when the global account cannot be read
    FEE_RECIPIENT: Pubkey = Pubkey.from_string("CebN5WGQ4jvEPvsVU4EoHEpgzq1VV7AbicfhtW4xC9iM")

    # (4) Event authority PDA (seed = b"__event_authority")
    EVENT_AUTHORITY: Pubkey = Pubkey.from_string("Ce6TQqeHC9p8KetsN6JsjHK7UTZk7nasjjnr7XxXp9F1")

    # (5) Fee program, owner of the fee config PDA
    FEE_PROGRAM: Pubkey = Pubkey.from_string("pfeeUxB6jkeY1Hxd7CsFCAjcbHA9rWtchMGdZ6VojVZ")


class SolanaProgramAddresses:
    SYSTEM_PROGRAM_ID: Pubkey = SYSTEM_PROGRAM_ID_SOLDERS
    TOKEN_PROGRAM_ID: Pubkey = TOKEN_PROGRAM_ID_SPL
    TOKEN_2022_PROGRAM_ID: Pubkey = TOKEN_2022_PROGRAM_ID_SPL
    ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID_SPL


def find_bonding_curve_pda(mint: Pubkey) -> Tuple[Pubkey, int]:
    return Pubkey.find_program_address([b"bonding-curve", bytes(mint)], PumpAddresses.PROGRAM_ID)


def find_associated_bonding_curve(
    mint: Pubkey,
    bonding_curve: Pubkey,
    token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
) -> Pubkey:
    """The bonding curve's own associated token account for `mint`."""
    derived_address, _ = Pubkey.find_program_address(
        [bytes(bonding_curve), bytes(token_program_id), bytes(mint)],
        SolanaProgramAddresses.ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID,
    )
    return derived_address


def find_creator_vault(creator: Pubkey) -> Pubkey:
    derived_address, _ = Pubkey.find_program_address(
        [b"creator-vault", bytes(creator)], PumpAddresses.PROGRAM_ID
    )
    return derived_address


def find_global_volume_accumulator() -> Pubkey:
    derived_address, _ = Pubkey.find_program_address(
        [b"global_volume_accumulator"], PumpAddresses.PROGRAM_ID
    )
    return derived_address


def find_user_volume_accumulator(user: Pubkey) -> Pubkey:
    derived_address, _ = Pubkey.find_program_address(
        [b"user_volume_accumulator", bytes(user)], PumpAddresses.PROGRAM_ID
    )
    return derived_address


def find_fee_config() -> Pubkey:
    derived_address, _ = Pubkey.find_program_address(
        [b"fee_config", bytes(PumpAddresses.PROGRAM_ID)], PumpAddresses.FEE_PROGRAM
    )
    return derived_address

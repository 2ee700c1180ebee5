# pumpbot/core/curve.py

import hashlib
from dataclasses import dataclass
from typing import Optional

from borsh_construct import Bool, CStruct, U64
from construct import Bytes, ConstructError
from solders.pubkey import Pubkey

from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)

# Anchor account discriminators: sha256("account:<Name>")[:8]
BONDING_CURVE_DISCRIMINATOR = hashlib.sha256(b"account:BondingCurve").digest()[:8]
GLOBAL_ACCOUNT_DISCRIMINATOR = hashlib.sha256(b"account:Global").digest()[:8]

# --- Bonding Curve Layout ---
# Fixed part of the account after the discriminator. Newer curves append
# the 32-byte creator key.
BONDING_CURVE_LAYOUT = CStruct(
    "virtual_token_reserves" / U64,
    "virtual_sol_reserves" / U64,
    "real_token_reserves" / U64,
    "real_sol_reserves" / U64,
    "token_total_supply" / U64,
    "complete" / Bool,
)

GLOBAL_ACCOUNT_LAYOUT = CStruct(
    "initialized" / Bool,
    "authority" / Bytes(32),
    "fee_recipient" / Bytes(32),
    "initial_virtual_token_reserves" / U64,
    "initial_virtual_sol_reserves" / U64,
    "initial_real_token_reserves" / U64,
    "token_total_supply" / U64,
    "fee_basis_points" / U64,
)


@dataclass
class BondingCurveState:
    virtual_token_reserves: int
    virtual_sol_reserves: int
    real_token_reserves: int
    real_sol_reserves: int
    token_total_supply: int
    complete: bool
    creator: Optional[Pubkey] = None

    def get_buy_price(self, amount_lamports: int) -> int:
        """Token atoms received for `amount_lamports` of SOL at the current reserves."""
        if self.complete:
            raise ValueError("Curve is complete")
        if amount_lamports <= 0:
            return 0

        product = self.virtual_sol_reserves * self.virtual_token_reserves
        new_sol_reserves = self.virtual_sol_reserves + amount_lamports
        new_token_reserves = product // new_sol_reserves + 1
        tokens_out = self.virtual_token_reserves - new_token_reserves
        return min(tokens_out, self.real_token_reserves)

    def get_sell_price(self, amount: int, fee_basis_points: int) -> int:
        """Lamports received for selling `amount` token atoms, net of the protocol fee."""
        if self.complete:
            raise ValueError("Curve is complete")
        if amount <= 0:
            return 0

        sol_out = (amount * self.virtual_sol_reserves) // (self.virtual_token_reserves + amount)
        fee = (sol_out * fee_basis_points) // 10_000
        return sol_out - fee


@dataclass
class GlobalAccount:
    initialized: bool
    authority: Pubkey
    fee_recipient: Pubkey
    initial_virtual_token_reserves: int
    initial_virtual_sol_reserves: int
    initial_real_token_reserves: int
    token_total_supply: int
    fee_basis_points: int


MAX_SLIPPAGE_BASIS_POINTS = 10_000


def calculate_with_slippage_buy(amount: int, basis_points: int) -> int:
    """Upper bound on SOL spent for a buy."""
    return amount + (amount * basis_points) // 10_000


def calculate_with_slippage_sell(amount: int, basis_points: int) -> int:
    """Lower bound on SOL received for a sell."""
    return amount - (amount * basis_points) // 10_000


def decode_bonding_curve_account(raw_data: bytes) -> Optional[BondingCurveState]:
    """Decodes raw bonding curve account data, discriminator included."""
    base_size = BONDING_CURVE_LAYOUT.sizeof()
    if len(raw_data) < 8 + base_size:
        logger.error(f"Bonding curve account too short: {len(raw_data)} bytes (need {8 + base_size}).")
        return None
    if raw_data[:8] != BONDING_CURVE_DISCRIMINATOR:
        logger.error(f"Unexpected bonding curve discriminator: {raw_data[:8].hex()}")
        return None

    try:
        parsed = BONDING_CURVE_LAYOUT.parse(raw_data[8:8 + base_size])
    except ConstructError as e:
        logger.error(f"Borsh construct error decoding bonding curve data: {e}")
        return None

    creator_offset = 8 + base_size
    creator = None
    if len(raw_data) >= creator_offset + 32:
        creator = Pubkey.from_bytes(raw_data[creator_offset:creator_offset + 32])

    return BondingCurveState(
        virtual_token_reserves=parsed.virtual_token_reserves,
        virtual_sol_reserves=parsed.virtual_sol_reserves,
        real_token_reserves=parsed.real_token_reserves,
        real_sol_reserves=parsed.real_sol_reserves,
        token_total_supply=parsed.token_total_supply,
        complete=bool(parsed.complete),
        creator=creator,
    )


def decode_global_account(raw_data: bytes) -> Optional[GlobalAccount]:
    size = GLOBAL_ACCOUNT_LAYOUT.sizeof()
    if len(raw_data) < 8 + size:
        logger.error(f"Global account too short: {len(raw_data)} bytes (need {8 + size}).")
        return None
    if raw_data[:8] != GLOBAL_ACCOUNT_DISCRIMINATOR:
        logger.error(f"Unexpected global account discriminator: {raw_data[:8].hex()}")
        return None

    try:
        parsed = GLOBAL_ACCOUNT_LAYOUT.parse(raw_data[8:8 + size])
    except ConstructError as e:
        logger.error(f"Borsh construct error decoding global account: {e}")
        return None

    return GlobalAccount(
        initialized=bool(parsed.initialized),
        authority=Pubkey.from_bytes(parsed.authority),
        fee_recipient=Pubkey.from_bytes(parsed.fee_recipient),
        initial_virtual_token_reserves=parsed.initial_virtual_token_reserves,
        initial_virtual_sol_reserves=parsed.initial_virtual_sol_reserves,
        initial_real_token_reserves=parsed.initial_real_token_reserves,
        token_total_supply=parsed.token_total_supply,
        fee_basis_points=parsed.fee_basis_points,
    )

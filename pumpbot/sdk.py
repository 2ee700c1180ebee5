# pumpbot/sdk.py

from typing import List, Optional, Tuple

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from pumpbot.core.client import SolanaClient
from pumpbot.core.curve import (
    BondingCurveState,
    GlobalAccount,
    MAX_SLIPPAGE_BASIS_POINTS,
    calculate_with_slippage_buy,
    calculate_with_slippage_sell,
    decode_bonding_curve_account,
    decode_global_account,
)
from pumpbot.core.instruction_builder import InstructionBuilder
from pumpbot.core.pubkeys import PumpAddresses, SolanaProgramAddresses, find_bonding_curve_pda
from pumpbot.core.transactions import TransactionResult, build_and_send_transaction
from pumpbot.trading.base import PriorityFees
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SLIPPAGE_BASIS_POINTS = 500

_KNOWN_TOKEN_PROGRAMS = (
    SolanaProgramAddresses.TOKEN_PROGRAM_ID,
    SolanaProgramAddresses.TOKEN_2022_PROGRAM_ID,
)


def _check_slippage(slippage_basis_points: int) -> None:
    if not 0 <= slippage_basis_points <= MAX_SLIPPAGE_BASIS_POINTS:
        raise ValueError(
            f"slippage_basis_points must be between 0 and {MAX_SLIPPAGE_BASIS_POINTS}, got {slippage_basis_points}")


class PumpFunSDK:
    """
    Buy and sell against a pump.fun bonding curve.

    Reads the global and bonding curve accounts, turns a SOL or token amount
    into the slippage-bounded arguments of the program's `buy` / `sell`
    instructions, and sends the transaction through `build_and_send_transaction`.
    """

    def __init__(
        self,
        client: SolanaClient,
        confirm_timeout_seconds: int = 60,
        max_send_retries: int = 3,
    ):
        self.client = client
        self.confirm_timeout_seconds = confirm_timeout_seconds
        self.max_send_retries = max_send_retries

    async def get_global_account(self) -> Optional[GlobalAccount]:
        account = await self.client.get_account_data(PumpAddresses.GLOBAL_STATE)
        if account is None:
            logger.warning("Global account not found.")
            return None
        return decode_global_account(account.data)

    async def get_bonding_curve_account(self, mint: Pubkey) -> Optional[BondingCurveState]:
        bonding_curve, _ = find_bonding_curve_pda(mint)
        account = await self.client.get_account_data(bonding_curve)
        if account is None:
            logger.info(f"No bonding curve account for mint {mint} ({bonding_curve}).")
            return None
        return decode_bonding_curve_account(account.data)

    async def get_token_program_id(self, mint: Pubkey) -> Pubkey:
        """Owner program of the mint; the classic token program when it cannot be read."""
        account = await self.client.get_account_data(mint)
        if account is None:
            logger.warning(f"Mint {mint} not found, assuming the classic token program.")
            return SolanaProgramAddresses.TOKEN_PROGRAM_ID
        if account.owner not in _KNOWN_TOKEN_PROGRAMS:
            raise ValueError(f"Mint {mint} is owned by unknown program {account.owner}")
        return account.owner

    async def _load_curve_and_fee_recipient(
        self, mint: Pubkey
    ) -> Tuple[Optional[BondingCurveState], Optional[GlobalAccount], Optional[TransactionResult]]:
        curve = await self.get_bonding_curve_account(mint)
        if curve is None:
            return None, None, TransactionResult(
                success=False, error=f"Bonding curve account not found for {mint}", error_type="CurveNotFound"
            )
        if curve.complete:
            return curve, None, TransactionResult(
                success=False, error=f"Bonding curve for {mint} is complete", error_type="CurveComplete"
            )
        if curve.creator is None:
            return curve, None, TransactionResult(
                success=False, error=f"Bonding curve for {mint} has no creator", error_type="BuildError"
            )
        global_account = await self.get_global_account()
        return curve, global_account, None

    async def get_buy_instructions_by_sol_amount(
        self,
        buyer: Pubkey,
        mint: Pubkey,
        curve: BondingCurveState,
        global_account: Optional[GlobalAccount],
        buy_amount_sol: int,
        slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
    ) -> List[Instruction]:
        token_amount = curve.get_buy_price(buy_amount_sol)
        max_sol_cost = calculate_with_slippage_buy(buy_amount_sol, slippage_basis_points)
        fee_recipient = global_account.fee_recipient if global_account else PumpAddresses.FEE_RECIPIENT
        token_program_id = await self.get_token_program_id(mint)
        logger.info(
            f"Buy quote for {mint}: SOL_in={buy_amount_sol}, TokensOut={token_amount}, "
            f"MaxSolCost (Slip {slippage_basis_points}BPS)={max_sol_cost}")

        return [
            InstructionBuilder.get_create_ata_instruction(
                payer=buyer, owner=buyer, mint=mint, token_program_id=token_program_id
            ),
            InstructionBuilder.build_pump_fun_buy_instruction(
                user_wallet_pubkey=buyer,
                mint_pubkey=mint,
                creator=curve.creator,
                fee_recipient=fee_recipient,
                token_amount=token_amount,
                max_sol_cost=max_sol_cost,
                token_program_id=token_program_id,
            ),
        ]

    async def get_sell_instructions_by_token_amount(
        self,
        seller: Pubkey,
        mint: Pubkey,
        curve: BondingCurveState,
        global_account: GlobalAccount,
        sell_token_amount: int,
        slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
    ) -> List[Instruction]:
        sell_price = curve.get_sell_price(sell_token_amount, global_account.fee_basis_points)
        min_sol_output = calculate_with_slippage_sell(sell_price, slippage_basis_points)
        token_program_id = await self.get_token_program_id(mint)
        logger.info(
            f"Sell quote for {mint}: TokensIn={sell_token_amount}, Est.SOL_Out={sell_price}, "
            f"MinSOLOut (Slip {slippage_basis_points}BPS)={min_sol_output}")

        return [
            InstructionBuilder.build_pump_fun_sell_instruction(
                user_wallet_pubkey=seller,
                mint_pubkey=mint,
                creator=curve.creator,
                fee_recipient=global_account.fee_recipient,
                token_amount=sell_token_amount,
                min_sol_output=min_sol_output,
                token_program_id=token_program_id,
            ),
        ]

    async def buy(
        self,
        buyer: Keypair,
        mint: Pubkey,
        buy_amount_sol: int,
        slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
        priority_fees: Optional[PriorityFees] = None,
    ) -> TransactionResult:
        """Spend `buy_amount_sol` lamports on `mint`."""
        if buy_amount_sol <= 0:
            raise ValueError("buy_amount_sol must be positive")
        _check_slippage(slippage_basis_points)

        curve, global_account, failure = await self._load_curve_and_fee_recipient(mint)
        if failure:
            logger.warning(failure.error)
            return failure

        instructions = await self.get_buy_instructions_by_sol_amount(
            buyer.pubkey(), mint, curve, global_account, buy_amount_sol, slippage_basis_points
        )
        return await self._send(buyer, instructions, priority_fees, label=f"Buy_{str(mint)[:5]}")

    async def sell(
        self,
        seller: Keypair,
        mint: Pubkey,
        sell_token_amount: int,
        slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
        priority_fees: Optional[PriorityFees] = None,
    ) -> TransactionResult:
        """Sell `sell_token_amount` raw token atoms of `mint`."""
        if sell_token_amount <= 0:
            raise ValueError("sell_token_amount must be positive")
        _check_slippage(slippage_basis_points)

        curve, global_account, failure = await self._load_curve_and_fee_recipient(mint)
        if failure:
            logger.warning(failure.error)
            return failure
        if global_account is None:
            return TransactionResult(
                success=False, error="Global account not found", error_type="GlobalNotFound"
            )

        instructions = await self.get_sell_instructions_by_token_amount(
            seller.pubkey(), mint, curve, global_account, sell_token_amount, slippage_basis_points
        )
        return await self._send(seller, instructions, priority_fees, label=f"Sell_{str(mint)[:5]}")

    async def _send(
        self,
        payer: Keypair,
        instructions: List[Instruction],
        priority_fees: Optional[PriorityFees],
        label: str,
    ) -> TransactionResult:
        prefix: List[Instruction] = []
        if priority_fees:
            prefix = InstructionBuilder.compute_budget_instructions(
                priority_fees.unit_limit, priority_fees.unit_price
            )
        return await build_and_send_transaction(
            client=self.client,
            payer=payer,
            instructions=prefix + instructions,
            label=label,
            confirm_timeout_secs=self.confirm_timeout_seconds,
            commitment=self.client.commitment,
            max_send_retries=self.max_send_retries,
        )

# pumpbot/trading/buyer.py
from typing import Optional

from solders.pubkey import Pubkey

from pumpbot.core.client import SolanaClient
from pumpbot.core.exceptions import BuyError, InsufficientFundsError
from pumpbot.core.priority_fee.manager import PriorityFeeManager
from pumpbot.core.pubkeys import LAMPORTS_PER_SOL, find_bonding_curve_pda
from pumpbot.core.wallet import Wallet
from pumpbot.sdk import PumpFunSDK
from pumpbot.trading.base import PriorityFees, TradeResult
from pumpbot.utils.audit_logger import AuditLogger
from pumpbot.utils.balances import get_spl_balance, print_spl_balance
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)


class TokenBuyer:
    def __init__(self,
                 client: SolanaClient,
                 wallet: Wallet,
                 sdk: PumpFunSDK,
                 fee_manager: PriorityFeeManager,
                 buy_amount_sol: float,
                 slippage_bps: int,
                 min_balance_sol: float,
                 unit_limit: int = 250_000,
                 audit_logger: Optional[AuditLogger] = None,
                 ):
        self.client = client
        self.wallet = wallet
        self.sdk = sdk
        self.fee_manager = fee_manager
        self.buy_amount_sol = buy_amount_sol
        self.buy_amount_lamports = round(buy_amount_sol * LAMPORTS_PER_SOL)
        self.slippage_bps = slippage_bps
        self.min_balance_lamports = round(min_balance_sol * LAMPORTS_PER_SOL)
        self.unit_limit = unit_limit
        self.audit_logger = audit_logger or AuditLogger()
        logger.info(
            f"TokenBuyer Init: BuyAmt={self.buy_amount_sol:.6f} SOL, SlipBPS={self.slippage_bps}, "
            f"MinBalance={self.min_balance_lamports} lamports, CU Limit={self.unit_limit}")

    async def _ensure_balance(self) -> int:
        balance = await self.client.get_balance_lamports(self.wallet.pubkey)
        if balance is None:
            raise BuyError("Could not read wallet balance")
        required = max(self.min_balance_lamports, self.buy_amount_lamports)
        if balance < required:
            raise InsufficientFundsError(
                f"Insufficient balance: {balance / LAMPORTS_PER_SOL} SOL available, "
                f"{required / LAMPORTS_PER_SOL} SOL required")
        return balance

    async def _priority_fees(self, mint: Pubkey) -> PriorityFees:
        bonding_curve, _ = find_bonding_curve_pda(mint)
        details = await self.fee_manager.get_priority_fee(
            accounts_to_check=[bonding_curve, mint, self.wallet.pubkey]
        )
        return PriorityFees(unit_limit=self.unit_limit, unit_price=details.fee if details else 0)

    async def execute(self, mint: Pubkey) -> TradeResult:
        logger.info(f"Attempting buy for {mint} with {self.buy_amount_sol} SOL")
        await self._ensure_balance()

        try:
            token_program_id = await self.sdk.get_token_program_id(mint)
        except ValueError as e:
            raise BuyError(str(e)) from e
        balance_before = await get_spl_balance(
            self.client, mint, self.wallet.pubkey, token_program_id=token_program_id
        ) or 0.0

        priority_fees = await self._priority_fees(mint)
        tx_result = await self.sdk.buy(
            self.wallet.keypair,
            mint,
            self.buy_amount_lamports,
            self.slippage_bps,
            priority_fees,
        )

        if not tx_result.success:
            logger.error(f"BUY_FAIL: {mint}: {tx_result.error}")
            print("Buy failed")
            trade = TradeResult(
                mint=mint, signature=tx_result.signature, success=False,
                error=tx_result.error, error_type=tx_result.error_type,
            )
            self.audit_logger.log_trade_event("BUY_FAIL", trade)
            return trade

        logger.info(f"BUY_SUCCESS: {mint}. Tx: {tx_result.signature}")
        balance_after = await print_spl_balance(
            self.client, mint, self.wallet.pubkey, token_program_id=token_program_id
        )
        print("Bonding curve after buy", await self.sdk.get_bonding_curve_account(mint))

        acquired = balance_after - balance_before if balance_after is not None else None
        trade = TradeResult(
            mint=mint, signature=tx_result.signature, success=True,
            spent_lamports=self.buy_amount_lamports, acquired_tokens=acquired,
        )
        self.audit_logger.log_trade_event("BUY_SUCCESS", trade)
        return trade

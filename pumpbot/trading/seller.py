# pumpbot/trading/seller.py
from typing import Optional

from solders.pubkey import Pubkey
from solders.signature import Signature

from pumpbot.core.client import SolanaClient
from pumpbot.core.exceptions import SellError
from pumpbot.core.priority_fee.manager import PriorityFeeManager
from pumpbot.core.pubkeys import find_bonding_curve_pda
from pumpbot.core.wallet import Wallet
from pumpbot.sdk import PumpFunSDK
from pumpbot.trading.base import PriorityFees, TradeResult
from pumpbot.utils.audit_logger import AuditLogger
from pumpbot.utils.balances import print_sol_balance, print_spl_balance
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)


class TokenSeller:
    def __init__(
            self,
            client: SolanaClient,
            wallet: Wallet,
            sdk: PumpFunSDK,
            fee_manager: PriorityFeeManager,
            slippage_bps: int,
            unit_limit: int = 250_000,
            audit_logger: Optional[AuditLogger] = None,
    ):
        self.client = client
        self.wallet = wallet
        self.sdk = sdk
        self.fee_manager = fee_manager
        self.slippage_bps = slippage_bps
        self.unit_limit = unit_limit
        self.audit_logger = audit_logger or AuditLogger()
        logger.info(f"TokenSeller Init: SlipBPS={self.slippage_bps}, CU Limit={self.unit_limit}")

    async def _priority_fees(self, mint: Pubkey) -> PriorityFees:
        bonding_curve, _ = find_bonding_curve_pda(mint)
        details = await self.fee_manager.get_priority_fee(
            accounts_to_check=[bonding_curve, mint, self.wallet.pubkey]
        )
        return PriorityFees(unit_limit=self.unit_limit, unit_price=details.fee if details else 0)

    async def _sol_gained(self, balance_before: Optional[int], signature: Optional[str]) -> Optional[int]:
        """
        SOL received from the curve: the balance change plus the fee this transaction paid.
        """
        if balance_before is None or signature is None:
            return None
        balance_after = await self.client.get_balance_lamports(self.wallet.pubkey)
        if balance_after is None:
            return None
        fee = await self.client.get_transaction_fee(Signature.from_string(signature))
        if fee is None:
            logger.warning(f"Could not retrieve fee for sell tx {signature}. SOL gained will be less accurate.")
            fee = 0
        return (balance_after - balance_before) + fee

    async def execute(self, mint: Pubkey) -> TradeResult:
        """Sell the wallet's whole holding of `mint`."""
        try:
            token_program_id = await self.sdk.get_token_program_id(mint)
        except ValueError as e:
            raise SellError(str(e)) from e
        ata = self.wallet.get_associated_token_address(mint, token_program_id)
        holding = await self.client.get_token_account_balance(ata)
        print("currentSPLBalance", holding.ui_amount if holding is not None else None)

        tokens_to_sell = int(holding.amount) if holding is not None else 0
        if tokens_to_sell <= 0:
            print("No tokens to sell")
            return TradeResult(mint=mint, success=False, error="No tokens to sell", error_type="NoBalance")

        logger.info(f"Attempting sell of {tokens_to_sell} atoms of {mint}")
        sol_balance_before = await self.client.get_balance_lamports(self.wallet.pubkey)

        priority_fees = await self._priority_fees(mint)
        tx_result = await self.sdk.sell(
            self.wallet.keypair,
            mint,
            tokens_to_sell,
            self.slippage_bps,
            priority_fees,
        )

        if not tx_result.success:
            logger.error(f"SELL_FAIL: {mint}: {tx_result.error}")
            print("Sell failed")
            trade = TradeResult(
                mint=mint, signature=tx_result.signature, success=False,
                error=tx_result.error, error_type=tx_result.error_type,
            )
            self.audit_logger.log_trade_event("SELL_FAIL", trade)
            return trade

        logger.info(f"SELL_SUCCESS: {mint}. Tx: {tx_result.signature}")
        await print_sol_balance(self.client, self.wallet.pubkey, "Wallet")
        await print_spl_balance(
            self.client, mint, self.wallet.pubkey, "After SPL sell all", token_program_id=token_program_id
        )
        print("Bonding curve after sell", await self.sdk.get_bonding_curve_account(mint))

        trade = TradeResult(
            mint=mint, signature=tx_result.signature, success=True,
            sold_tokens=tokens_to_sell,
            acquired_sol=await self._sol_gained(sol_balance_before, tx_result.signature),
        )
        self.audit_logger.log_trade_event("SELL_SUCCESS", trade)
        return trade

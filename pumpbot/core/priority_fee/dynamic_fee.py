# pumpbot/core/priority_fee/dynamic_fee.py
import time
from typing import List, Optional, Sequence

from solders.pubkey import Pubkey

from pumpbot.core.client import SolanaClient
from pumpbot.utils.logger import get_logger
from . import PriorityFeePlugin

logger = get_logger(__name__)


def fee_at_percentile(fees: Sequence[int], percentile: int) -> int:
    """Nearest-rank percentile of the non-zero fees; 0 when there are none."""
    paid = sorted(fee for fee in fees if fee > 0)
    if not paid:
        return 0
    return paid[min(len(paid) - 1, (len(paid) * percentile) // 100)]


class DynamicPriorityFeePlugin(PriorityFeePlugin):
    """
    Suggests a compute unit price from `getRecentPrioritizationFees`.

    The fee is looked up against the accounts the next transaction writes
    (the bonding curve, the mint, the wallet) and kept for `cache_duration`
    seconds so a buy followed by a quick retry does not refetch.
    """

    def __init__(self,
                 client: SolanaClient,
                 percentile: int = 50,
                 adjustment_factor: float = 1.0,
                 cache_duration: int = 5):
        if not 0 <= percentile <= 100:
            raise ValueError("Percentile must be between 0 and 100")

        self.client = client
        self.percentile = percentile
        self.adjustment_factor = adjustment_factor
        self.cache_duration = max(0, cache_duration)

        self._accounts: Optional[List[Pubkey]] = None
        self._cached_fee: Optional[int] = None
        self._fetched_at = 0.0
        logger.info(
            f"DynamicPriorityFeePlugin: percentile={percentile}, factor={adjustment_factor}, "
            f"cache={self.cache_duration}s")

    def set_accounts_for_check(self, accounts: Optional[List[Pubkey]]):
        self._accounts = accounts

    def _cached(self, now: float) -> bool:
        return (
            self.cache_duration > 0
            and self._cached_fee is not None
            and now - self._fetched_at < self.cache_duration
        )

    def _remember(self, fee: int, now: float) -> Optional[int]:
        self._cached_fee = fee
        self._fetched_at = now
        return fee if fee > 0 else None

    async def get_priority_fee(self) -> int | None:
        now = time.time()
        if self._cached(now):
            logger.debug(f"Dynamic priority fee (cached): {self._cached_fee}")
            return self._cached_fee if self._cached_fee > 0 else None

        try:
            recent = await self.client.get_recent_prioritization_fees(self._accounts)
        except Exception as e:
            logger.error(f"Could not fetch recent prioritization fees: {e}", exc_info=True)
            return self._remember(0, now)

        base_fee = fee_at_percentile(recent, self.percentile)
        fee = max(0, int(base_fee * self.adjustment_factor))
        logger.debug(
            f"Dynamic priority fee: {len(recent)} samples, p{self.percentile}={base_fee}, adjusted={fee}")
        return self._remember(fee, now)

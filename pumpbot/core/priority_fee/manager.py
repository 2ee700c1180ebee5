# pumpbot/core/priority_fee/manager.py

import asyncio
from dataclasses import dataclass
from typing import List, Optional

from solders.pubkey import Pubkey

from pumpbot.core.client import SolanaClient
from pumpbot.utils.logger import get_logger
from . import PriorityFeePlugin
from .dynamic_fee import DynamicPriorityFeePlugin
from .fixed_fee import FixedPriorityFee

logger = get_logger(__name__)


@dataclass
class PriorityFeeDetails:
    """Data structure to hold calculated priority fee details."""
    fee: int  # Fee in microlamports


class PriorityFeeManager:
    """
    Manages the calculation of priority fees using different strategies (plugins).
    The highest plugin suggestion wins; `extra_fee` is added and `hard_cap` applied last.
    """

    def __init__(self,
                 client: SolanaClient,
                 enable_dynamic_fee: bool = False,
                 enable_fixed_fee: bool = True,
                 fixed_fee: int = 250_000,  # Microlamports
                 extra_fee: int = 0,  # Microlamports to add on top
                 hard_cap: Optional[int] = None,  # Max fee in Microlamports
                 dynamic_percentile: int = 50,
                 dynamic_adjustment_factor: float = 1.0,
                 dynamic_cache_duration_sec: int = 5
                 ):
        self.client = client
        self.plugins: List[PriorityFeePlugin] = []
        self.dynamic_plugin: Optional[DynamicPriorityFeePlugin] = None

        if enable_fixed_fee:
            self.plugins.append(FixedPriorityFee(fixed_fee))

        if enable_dynamic_fee:
            self.dynamic_plugin = DynamicPriorityFeePlugin(
                client=self.client,
                percentile=dynamic_percentile,
                adjustment_factor=dynamic_adjustment_factor,
                cache_duration=dynamic_cache_duration_sec
            )
            self.plugins.append(self.dynamic_plugin)

        self.extra_fee = max(0, extra_fee)
        self.hard_cap = hard_cap

        log_plugins = [type(p).__name__ for p in self.plugins]
        logger.info(
            f"PriorityFeeManager initialized. Plugins={log_plugins}, ExtraFee={self.extra_fee}, HardCap={self.hard_cap}")

    async def get_priority_fee(self, accounts_to_check: Optional[List[Pubkey]] = None) -> Optional[PriorityFeeDetails]:
        if self.dynamic_plugin:
            self.dynamic_plugin.set_accounts_for_check(accounts_to_check)

        results = await asyncio.gather(*(plugin.get_priority_fee() for plugin in self.plugins),
                                        return_exceptions=True)

        highest_plugin_fee = 0
        for plugin, result in zip(self.plugins, results):
            plugin_name = type(plugin).__name__
            if isinstance(result, Exception):
                logger.error(f"Error getting fee from plugin {plugin_name}: {result}")
            elif result is not None and result > 0:
                highest_plugin_fee = max(highest_plugin_fee, int(result))
                logger.debug(f"Plugin {plugin_name} suggested fee: {result}")

        final_fee = highest_plugin_fee + self.extra_fee

        if self.hard_cap is not None and final_fee > self.hard_cap:
            logger.info(f"Priority fee ({final_fee}) exceeded hard cap ({self.hard_cap}). Capping fee.")
            final_fee = self.hard_cap

        if final_fee <= 0:
            logger.debug("Final priority fee is zero or negative.")
            return None

        logger.info(f"Final Priority Fee: {final_fee} microlamports (Base={highest_plugin_fee}, Extra={self.extra_fee})")
        return PriorityFeeDetails(fee=final_fee)

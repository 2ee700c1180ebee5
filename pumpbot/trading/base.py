# pumpbot/trading/base.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from solders.pubkey import Pubkey


@dataclass
class PriorityFees:
    unit_limit: int = 250_000
    unit_price: int = 250_000  # micro-lamports per compute unit


@dataclass
class TradeResult:
    mint: Optional[Pubkey] = None
    signature: Optional[str] = None
    success: bool = False
    error: Optional[str] = None
    error_type: Optional[str] = None

    # Fields relevant to buy
    spent_lamports: Optional[int] = None
    acquired_tokens: Optional[float] = None

    # Fields relevant to sell
    sold_tokens: Optional[int] = None
    acquired_sol: Optional[int] = None

    timestamp: int = field(default_factory=lambda: int(datetime.now(timezone.utc).timestamp()))

    @property
    def mint_str(self) -> str:
        return str(self.mint) if self.mint else "N/A"

# pumpbot/core/priority_fee/fixed_fee.py

from . import PriorityFeePlugin


class FixedPriorityFee(PriorityFeePlugin):
    """Always suggests the same compute unit price."""

    def __init__(self, fixed_fee: int):
        self.fixed_fee = fixed_fee

    async def get_priority_fee(self) -> int | None:
        return self.fixed_fee if self.fixed_fee > 0 else None

# pumpbot/core/priority_fee/__init__.py
from abc import ABC, abstractmethod


class PriorityFeePlugin(ABC):
    """A source of compute unit price suggestions."""

    @abstractmethod
    async def get_priority_fee(self) -> int | None:
        """
        Returns:
            Optional[int]: Compute unit price in micro-lamports, or None if no fee should be applied.
        """


# Imported after the base class: the plugins subclass it.
from .manager import PriorityFeeDetails, PriorityFeeManager  # noqa: E402

__all__ = [
    "PriorityFeePlugin",
    "PriorityFeeDetails",
    "PriorityFeeManager",
]

# pumpbot/core/__init__.py

from .client import SolanaClient
from .wallet import Wallet
from .transactions import TransactionResult, build_and_send_transaction
from .instruction_builder import InstructionBuilder
from .curve import BondingCurveState, GlobalAccount
from .pubkeys import PumpAddresses, SolanaProgramAddresses

__all__ = [
    "SolanaClient",
    "Wallet",
    "TransactionResult",
    "build_and_send_transaction",
    "InstructionBuilder",
    "BondingCurveState",
    "GlobalAccount",
    "PumpAddresses",
    "SolanaProgramAddresses",
]

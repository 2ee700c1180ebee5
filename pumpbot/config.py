# pumpbot/config.py

import math
import os
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from solana.rpc.commitment import Commitment, Confirmed, Finalized, Processed

from pumpbot.core.curve import MAX_SLIPPAGE_BASIS_POINTS
from pumpbot.core.exceptions import ConfigError
from pumpbot.core.pubkeys import LAMPORTS_PER_SOL
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_RPC_ENDPOINT = "https://api.mainnet-beta.solana.com"

COMMITMENTS: Dict[str, Commitment] = {
    "processed": Processed,
    "confirmed": Confirmed,
    "finalized": Finalized,
}

# Optional settings: env var -> default. The default's type drives coercion.
OPTIONAL_DEFAULTS: Dict[str, Any] = {
    "BUY_AMOUNT_SOL": 0.0001,
    "SLIPPAGE_BPS": 100,
    "MIN_BALANCE_SOL": 0.001,
    "UNIT_LIMIT": 250_000,
    "UNIT_PRICE": 250_000,
    "ENABLE_DYNAMIC_FEE": False,
    "EXTRA_PRIORITY_FEE_MICROLAMPORTS": 0,
    "HARD_CAP_PRIORITY_FEE_MICROLAMPORTS": 1_000_000,
    "CONFIRM_TIMEOUT_SECONDS": 60,
    "MAX_SEND_RETRIES": 3,
}


def _whole_lamports(sol: float) -> bool:
    return math.isfinite(sol) and round(sol * LAMPORTS_PER_SOL) > 0


# Range checks applied after coercion; a failing value falls back to the default.
VALUE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "BUY_AMOUNT_SOL": _whole_lamports,
    "SLIPPAGE_BPS": lambda bps: 0 <= bps <= MAX_SLIPPAGE_BASIS_POINTS,
    "MIN_BALANCE_SOL": lambda sol: sol >= 0,
    "UNIT_LIMIT": lambda units: units >= 0,
    "UNIT_PRICE": lambda price: price >= 0,
    "CONFIRM_TIMEOUT_SECONDS": lambda secs: secs > 0,
    "MAX_SEND_RETRIES": lambda n: n >= 1,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    private_key: str
    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT
    commitment: Commitment = Finalized
    buy_amount_sol: float = 0.0001
    slippage_bps: int = 100
    min_balance_sol: float = 0.001
    unit_limit: int = 250_000
    unit_price: int = 250_000
    enable_dynamic_fee: bool = False
    extra_priority_fee_microlamports: int = 0
    hard_cap_priority_fee_microlamports: int = 1_000_000
    confirm_timeout_seconds: int = 60
    max_send_retries: int = 3
    audit_log_file: Optional[str] = None

    def with_overrides(self, **changes: Any) -> "Settings":
        """Copy with the non-None keyword arguments applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> "Settings":
        """Raise ConfigError for trade parameters that cannot be sent on-chain."""
        if not _whole_lamports(self.buy_amount_sol):
            raise ConfigError(f"Buy amount must be at least 1 lamport, got {self.buy_amount_sol} SOL")
        if not 0 <= self.slippage_bps <= MAX_SLIPPAGE_BASIS_POINTS:
            raise ConfigError(
                f"Slippage must be between 0 and {MAX_SLIPPAGE_BASIS_POINTS} bps, got {self.slippage_bps}")
        return self


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    return type(default)(raw)


def load_config(env_file: Optional[str] = None) -> Settings:
    """Load settings from the environment, after applying `.env` (or `env_file`)."""
    if env_file:
        if not os.path.isfile(env_file):
            raise ConfigError(f"Env file not found: {env_file}")
        load_dotenv(dotenv_path=env_file)
    else:
        load_dotenv()

    private_key = os.getenv("PRIVATE_KEY")
    if not private_key:
        raise ConfigError("Missing required config var: PRIVATE_KEY")

    rpc_endpoint = (
        os.getenv("SOLANA_NODE_RPC_ENDPOINT")
        or os.getenv("HELIUS_RPC_URL")
        or DEFAULT_RPC_ENDPOINT
    )

    commitment_name = os.getenv("COMMITMENT", "finalized").strip().lower()
    if commitment_name not in COMMITMENTS:
        raise ConfigError(f"Invalid COMMITMENT {commitment_name!r}; expected one of {sorted(COMMITMENTS)}")

    values: Dict[str, Any] = {}
    for var, default in OPTIONAL_DEFAULTS.items():
        raw = os.getenv(var)
        if raw is None or raw == "":
            values[var] = default
            continue
        try:
            value = _coerce(raw, default)
            check = VALUE_CHECKS.get(var)
            if check is not None and not check(value):
                raise ValueError(f"{var} out of range")
            values[var] = value
        except ValueError:
            logger.warning(f"Config warning: invalid value for {var} ({raw!r}), using default {default}")
            values[var] = default

    settings = Settings(
        private_key=private_key,
        rpc_endpoint=rpc_endpoint,
        commitment=COMMITMENTS[commitment_name],
        buy_amount_sol=values["BUY_AMOUNT_SOL"],
        slippage_bps=values["SLIPPAGE_BPS"],
        min_balance_sol=values["MIN_BALANCE_SOL"],
        unit_limit=values["UNIT_LIMIT"],
        unit_price=values["UNIT_PRICE"],
        enable_dynamic_fee=values["ENABLE_DYNAMIC_FEE"],
        extra_priority_fee_microlamports=values["EXTRA_PRIORITY_FEE_MICROLAMPORTS"],
        hard_cap_priority_fee_microlamports=values["HARD_CAP_PRIORITY_FEE_MICROLAMPORTS"],
        confirm_timeout_seconds=values["CONFIRM_TIMEOUT_SECONDS"],
        max_send_retries=values["MAX_SEND_RETRIES"],
        audit_log_file=os.getenv("AUDIT_LOG_FILE") or None,
    )
    logger.info(f"Configuration loaded: rpc={settings.rpc_endpoint} commitment={commitment_name}")
    return settings

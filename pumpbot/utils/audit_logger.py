# pumpbot/utils/audit_logger.py

import json
from datetime import datetime, timezone
from typing import Optional

from pumpbot.core.pubkeys import LAMPORTS_PER_SOL
from pumpbot.trading.base import TradeResult
from .logger import get_logger

audit_log = get_logger("AuditLogger")  # Dedicated logger instance


class AuditLogger:
    """
    Handles logging of trade events for auditing and analysis.
    One JSON object per event; optionally appended to a file as JSON lines.
    """

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath

    def build_entry(self, event_type: str, trade_result: TradeResult, extra_data: Optional[dict] = None) -> dict:
        log_entry = {
            "timestamp": datetime.fromtimestamp(trade_result.timestamp, timezone.utc).isoformat(),
            "event_type": event_type.upper(),
            "token_mint": trade_result.mint_str,
            "success": trade_result.success,
            "signature": trade_result.signature,
            "error": trade_result.error,
            "error_type": trade_result.error_type,
        }

        if "BUY" in log_entry["event_type"]:
            log_entry["buy_sol_spent"] = (
                trade_result.spent_lamports / LAMPORTS_PER_SOL if trade_result.spent_lamports is not None else None
            )
            log_entry["buy_tokens_acquired_ui"] = trade_result.acquired_tokens

        if "SELL" in log_entry["event_type"]:
            log_entry["sell_tokens_sold_atoms"] = trade_result.sold_tokens
            log_entry["sell_sol_acquired"] = (
                trade_result.acquired_sol / LAMPORTS_PER_SOL if trade_result.acquired_sol is not None else None
            )

        if extra_data:
            log_entry.update(extra_data)
        return log_entry

    def log_trade_event(self, event_type: str, trade_result: TradeResult, extra_data: Optional[dict] = None) -> dict:
        """Logs a trade-related event and returns the record."""
        log_entry = self.build_entry(event_type, trade_result, extra_data)
        log_message = json.dumps(log_entry)
        audit_log.info(log_message)

        if self.filepath:
            try:
                with open(self.filepath, "a", encoding="utf-8") as f:
                    f.write(log_message + "\n")
            except OSError as e:
                audit_log.error(f"Failed to write audit log to file {self.filepath}: {e}")
        return log_entry

# pumpbot/utils/logger.py

import logging
import sys
from typing import Dict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: Dict[str, logging.Logger] = {}
_console_handler_added = False


def get_logger(name: str) -> logging.Logger:
    """Get or create a named logger. Level is inherited from the root logger."""
    if name in _loggers:
        return _loggers[name]
    logger = logging.getLogger(name)
    _loggers[name] = logger
    return logger


def setup_console_logging(level: int = logging.INFO) -> None:
    """Attach a single stderr handler to the root logger."""
    global _console_handler_added

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if _console_handler_added:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)

    # solana-py / httpx are chatty at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    _console_handler_added = True

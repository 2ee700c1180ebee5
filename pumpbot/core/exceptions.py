# pumpbot/core/exceptions.py

class PumpBotException(Exception):
    """Base class for custom exceptions in this application."""
    pass

class ConfigError(PumpBotException):
    """Missing or unusable configuration."""
    pass

class InvalidAddressError(PumpBotException):
    """A string did not parse as a Solana public key."""
    pass

class BuildTransactionError(PumpBotException):
    """For errors during transaction construction."""
    pass

class BuyError(PumpBotException):
    """Specific error related to buying tokens."""
    pass

class SellError(PumpBotException):
    """Specific error related to selling tokens."""
    pass

class InsufficientFundsError(PumpBotException):
    """For insufficient funds errors."""
    pass

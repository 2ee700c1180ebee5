# pumpbot/core/wallet.py

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from pumpbot.core.pubkeys import SolanaProgramAddresses
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)


class Wallet:
    """ Represents the user's wallet with keypair for signing. """
    def __init__(self, private_key_bs58: str):
        try:
            private_key_bytes: bytes = base58.b58decode(private_key_bs58.strip())
            self.keypair = Keypair.from_bytes(private_key_bytes)
        except ValueError as e:
            logger.error(f"Invalid base58 private key provided: {e}")
            raise ValueError("Invalid private key format") from e
        except Exception as e:
            logger.error(f"Error initializing Keypair from private key: {e}")
            raise ValueError("Invalid private key format") from e
        self.pubkey: Pubkey = self.keypair.pubkey()
        logger.info(f"Wallet initialized for pubkey: {self.pubkey}")

    def get_associated_token_address(
        self,
        mint: Pubkey,
        token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
    ) -> Pubkey:
        """ Associated token account of this wallet for `mint`. """
        return get_associated_token_address(self.pubkey, mint, token_program_id)

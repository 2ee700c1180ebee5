# pumpbot/trading/token_creator.py
from dataclasses import dataclass
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN

from pumpbot.core.client import SolanaClient
from pumpbot.core.exceptions import BuildTransactionError
from pumpbot.core.instruction_builder import InstructionBuilder
from pumpbot.core.pubkeys import DEFAULT_TOKEN_DECIMALS
from pumpbot.core.transactions import TransactionResult, build_and_send_transaction
from pumpbot.core.wallet import Wallet
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CreatedToken:
    mint: Pubkey
    associated_account: Pubkey
    result: TransactionResult


class TokenCreator:
    """Creates a plain SPL mint controlled by the wallet, plus the wallet's token account for it."""

    def __init__(self, client: SolanaClient, wallet: Wallet, confirm_timeout_seconds: int = 60,
                 max_send_retries: int = 3):
        self.client = client
        self.wallet = wallet
        self.confirm_timeout_seconds = confirm_timeout_seconds
        self.max_send_retries = max_send_retries

    async def execute(self, decimals: int = DEFAULT_TOKEN_DECIMALS,
                      mint_keypair: Optional[Keypair] = None) -> CreatedToken:
        if not 0 <= decimals <= 9:
            raise ValueError("decimals must be between 0 and 9")

        mint_keypair = mint_keypair or Keypair()
        mint = mint_keypair.pubkey()

        rent_lamports = await self.client.get_minimum_balance_for_rent_exemption(MINT_LEN)
        if rent_lamports is None:
            raise BuildTransactionError("Could not fetch rent-exempt minimum for a mint account")

        instructions = InstructionBuilder.build_create_mint_instructions(
            payer=self.wallet.pubkey,
            mint=mint,
            mint_authority=self.wallet.pubkey,
            decimals=decimals,
            rent_lamports=rent_lamports,
            freeze_authority=self.wallet.pubkey,
        )
        instructions.append(
            InstructionBuilder.get_create_ata_instruction(
                payer=self.wallet.pubkey, owner=self.wallet.pubkey, mint=mint, idempotent=False
            )
        )
        associated_account = self.wallet.get_associated_token_address(mint)

        logger.info(f"Creating mint {mint} (decimals={decimals}) with token account {associated_account}")
        result = await build_and_send_transaction(
            client=self.client,
            payer=self.wallet.keypair,
            instructions=instructions,
            signers=[mint_keypair],
            label="CreateToken",
            confirm_timeout_secs=self.confirm_timeout_seconds,
            commitment=self.client.commitment,
            max_send_retries=self.max_send_retries,
        )
        if result.success:
            print(f"Mint: {mint}")
            print(f"Associated token account: {associated_account}")
        else:
            print("Create token failed")
        return CreatedToken(mint=mint, associated_account=associated_account, result=result)

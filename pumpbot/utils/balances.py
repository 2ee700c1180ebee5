# pumpbot/utils/balances.py

from typing import Optional

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from pumpbot.core.client import SolanaClient
from pumpbot.core.pubkeys import LAMPORTS_PER_SOL, SolanaProgramAddresses


async def print_sol_balance(client: SolanaClient, pubkey: Pubkey, info: str = "") -> Optional[float]:
    lamports = await client.get_balance_lamports(pubkey)
    if lamports is None:
        print(f"{info} {pubkey}: balance unavailable".strip())
        return None
    balance_sol = lamports / LAMPORTS_PER_SOL
    print(f"{info} {pubkey}: {balance_sol}".strip())
    return balance_sol


async def get_spl_balance(
    client: SolanaClient,
    mint: Pubkey,
    owner: Pubkey,
    token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
) -> Optional[float]:
    """UI balance of the owner's associated token account, None if it does not exist."""
    ata = get_associated_token_address(owner, mint, token_program_id)
    amount = await client.get_token_account_balance(ata)
    if amount is None:
        return None
    if amount.ui_amount is not None:
        return amount.ui_amount
    return int(amount.amount) / (10 ** amount.decimals)


async def print_spl_balance(
    client: SolanaClient,
    mint: Pubkey,
    owner: Pubkey,
    info: str = "",
    token_program_id: Pubkey = SolanaProgramAddresses.TOKEN_PROGRAM_ID,
) -> Optional[float]:
    balance = await get_spl_balance(client, mint, owner, token_program_id)
    if balance is None:
        print(f"{info} {owner}: No Account Found".strip())
    else:
        print(f"{info} Balance: {balance}".strip())
    return balance

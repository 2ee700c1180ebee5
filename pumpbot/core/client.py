# pumpbot/core/client.py

import asyncio
from typing import List, Optional

from solders.account_decoder import UiTokenAmount
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts

from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60
DEFAULT_CONFIRM_SLEEP_SECONDS = 1.0


class AccountData:
    """Raw account bytes plus the owning program."""

    def __init__(self, data: bytes, owner: Pubkey, lamports: int):
        self.data = data
        self.owner = owner
        self.lamports = lamports


class SolanaClient:
    def __init__(
        self,
        rpc_endpoint: str,
        commitment: Commitment = Confirmed,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.rpc_endpoint = rpc_endpoint
        self.commitment = commitment
        self.timeout_seconds = timeout_seconds
        self.async_client = AsyncClient(rpc_endpoint, commitment=commitment, timeout=timeout_seconds)
        logger.info(f"SolanaClient initialized: {rpc_endpoint} @ {commitment}")

    async def __aenter__(self) -> "SolanaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            await self.async_client.close()
            logger.debug("SolanaClient connection closed.")
        except Exception as e:
            logger.warning(f"Error closing SolanaClient: {e}")

    async def get_latest_blockhash(self) -> Optional[Hash]:
        try:
            resp = await self.async_client.get_latest_blockhash(self.commitment)
            return resp.value.blockhash if resp.value else None
        except Exception as e:
            logger.error(f"Error get_latest_blockhash: {e}", exc_info=True)
            return None

    async def get_account_data(self, pubkey: Pubkey) -> Optional[AccountData]:
        """Returns the account's raw data, or None when it does not exist."""
        try:
            resp = await self.async_client.get_account_info(pubkey, self.commitment, encoding="base64")
        except RPCException as e:
            logger.error(f"RPC error get_account_info {pubkey}: {e}")
            return None
        except Exception as e:
            logger.error(f"Error get_account_info {pubkey}: {e}", exc_info=True)
            return None
        if resp.value is None:
            logger.debug(f"Account {pubkey} not found.")
            return None
        return AccountData(bytes(resp.value.data), resp.value.owner, resp.value.lamports)

    async def get_balance_lamports(self, pubkey: Pubkey) -> Optional[int]:
        try:
            resp = await self.async_client.get_balance(pubkey, self.commitment)
            return resp.value
        except Exception as e:
            logger.error(f"Error get_balance {pubkey}: {e}", exc_info=True)
            return None

    async def get_token_account_balance(self, token_account: Pubkey) -> Optional[UiTokenAmount]:
        """None when the token account does not exist or the call fails."""
        try:
            resp = await self.async_client.get_token_account_balance(token_account, self.commitment)
            return resp.value
        except RPCException:
            logger.debug(f"Token account not found {token_account}")
            return None
        except Exception as e:
            logger.error(f"Error get_token_account_balance {token_account}: {e}", exc_info=True)
            return None

    async def get_minimum_balance_for_rent_exemption(self, size: int) -> Optional[int]:
        try:
            resp = await self.async_client.get_minimum_balance_for_rent_exemption(size, self.commitment)
            return resp.value
        except Exception as e:
            logger.error(f"Error get_minimum_balance_for_rent_exemption({size}): {e}", exc_info=True)
            return None

    async def get_recent_prioritization_fees(self, accounts: Optional[List[Pubkey]] = None) -> List[int]:
        resp = await self.async_client.get_recent_prioritization_fees(accounts)
        return [item.prioritization_fee for item in (resp.value or [])]

    async def send_transaction(self, transaction: VersionedTransaction, opts: TxOpts) -> Signature:
        """Raises on RPC rejection; retries are the caller's concern."""
        resp = await self.async_client.send_transaction(transaction, opts=opts)
        logger.info(f"Tx sent: {resp.value}")
        return resp.value

    async def confirm_transaction(
        self,
        signature: Signature,
        commitment: Optional[Commitment] = None,
        timeout_seconds: Optional[int] = None,
        sleep_seconds: float = DEFAULT_CONFIRM_SLEEP_SECONDS,
    ) -> Optional[str]:
        """
        Waits for the signature to reach `commitment`.
        Returns None on success, otherwise a description of the failure.
        """
        _commit = commitment or self.commitment
        _timeout = timeout_seconds or self.timeout_seconds
        logger.info(f"Confirming {signature} @ {_commit} timeout={_timeout}s")
        try:
            resp = await asyncio.wait_for(
                self.async_client.confirm_transaction(signature, _commit, sleep_seconds=sleep_seconds),
                timeout=_timeout,
            )
        except asyncio.TimeoutError:
            return f"confirmation timed out after {_timeout}s"
        except Exception as e:
            logger.error(f"confirm_transaction error for {signature}: {e}", exc_info=True)
            return str(e)

        status = resp.value[0] if resp.value else None
        if status is None:
            return "no status returned"
        if status.err is not None:
            return f"on-chain error: {status.err}"
        return None

    async def get_transaction_fee(self, signature: Signature) -> Optional[int]:
        """Fee paid by a confirmed transaction, in lamports."""
        try:
            resp = await self.async_client.get_transaction(
                signature,
                encoding="json",
                commitment=self.commitment,
                max_supported_transaction_version=0,
            )
        except Exception as e:
            logger.warning(f"Could not fetch transaction {signature}: {e}")
            return None
        if resp.value is None or resp.value.transaction.meta is None:
            logger.warning(f"Could not find fee information in transaction meta for {signature}.")
            return None
        return resp.value.transaction.meta.fee

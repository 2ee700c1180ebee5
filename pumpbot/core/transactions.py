# pumpbot/core/transactions.py

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.transaction import VersionedTransaction

from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts

from pumpbot.core.client import SolanaClient
from pumpbot.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class TransactionResult:
    success: bool
    signature: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None  # e.g. BuildError, RpcSendError, ConfirmError, CurveComplete


def _dedupe_signers(payer: Keypair, signers: Optional[List[Keypair]]) -> List[Keypair]:
    # Payer signs first; extra signers (e.g. a fresh mint) follow once each
    signers_to_use = [payer]
    seen_pubkeys = {payer.pubkey()}
    for s in signers or []:
        if s.pubkey() not in seen_pubkeys:
            signers_to_use.append(s)
            seen_pubkeys.add(s.pubkey())
    return signers_to_use


async def build_and_send_transaction(
        client: SolanaClient,
        payer: Keypair,
        instructions: Sequence[Instruction],
        signers: Optional[List[Keypair]] = None,
        label: str = "Transaction",
        confirm: bool = True,
        confirm_timeout_secs: int = 60,
        commitment: Commitment = Confirmed,
        skip_preflight: bool = False,
        max_send_retries: int = 3,
) -> TransactionResult:
    """ Builds, signs, sends, and optionally confirms a Versioned Transaction with retries. """
    signers_to_use = _dedupe_signers(payer, signers)
    last_error: Optional[Exception] = None
    error_type = "UnknownSendError"

    for attempt in range(max_send_retries):
        logger.info(f"{label}: Build/Send attempt {attempt + 1}/{max_send_retries}...")
        try:
            latest_blockhash = await client.get_latest_blockhash()
            if latest_blockhash is None:
                raise ValueError("Failed to get blockhash.")

            message = MessageV0.try_compile(
                payer=payer.pubkey(),
                instructions=list(instructions),
                address_lookup_table_accounts=[],
                recent_blockhash=latest_blockhash,
            )
            tx = VersionedTransaction(message, signers_to_use)

            opts = TxOpts(
                skip_preflight=skip_preflight,
                preflight_commitment=commitment,
                max_retries=0,  # retries are handled by this loop
            )
            signature = await client.send_transaction(tx, opts=opts)
            signature_str = str(signature)
            logger.info(f"{label}: Sent successfully. Signature: {signature_str}")

            if not confirm:
                return TransactionResult(success=True, signature=signature_str)

            confirm_error = await client.confirm_transaction(
                signature, commitment=commitment, timeout_seconds=confirm_timeout_secs
            )
            if confirm_error is None:
                logger.info(f"{label}: CONFIRMED. Sig: {signature_str}")
                return TransactionResult(success=True, signature=signature_str)

            # Never resend once a signature exists
            logger.error(f"{label}: Tx {signature_str} not confirmed: {confirm_error}")
            return TransactionResult(
                success=False, signature=signature_str, error=confirm_error, error_type="ConfirmError"
            )

        except RPCException as e_rpc:
            last_error = e_rpc
            error_type = "RpcSendError"
            logger.warning(f"{label}: RPCException during attempt {attempt + 1}: {e_rpc}")
        except ValueError as e_build:
            last_error = e_build
            error_type = "BuildError"
            logger.warning(f"{label}: Build error during attempt {attempt + 1}: {e_build}")
        except Exception as e_general:
            last_error = e_general
            error_type = type(e_general).__name__
            logger.error(
                f"{label}: Unexpected error during attempt {attempt + 1}: {type(e_general).__name__} - {e_general}",
                exc_info=True)

        if attempt < max_send_retries - 1:
            delay = 0.75 * (1.5 ** attempt)  # Exponential backoff
            logger.info(f"{label}: Retrying in {delay:.2f}s... (Last error type: {type(last_error).__name__})")
            await asyncio.sleep(delay)

    final_error = f"Failed after {max_send_retries} attempts."
    if last_error is not None:
        final_error += f" Last error: ({type(last_error).__name__}) {last_error}"
    logger.error(f"{label}: {final_error}")
    return TransactionResult(success=False, error=final_error, error_type=error_type)

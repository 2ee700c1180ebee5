# pumpbot/cli.py

import argparse
import asyncio
import logging
from typing import List, Optional

from solders.pubkey import Pubkey

from pumpbot.config import Settings, load_config
from pumpbot.core.client import SolanaClient
from pumpbot.core.exceptions import ConfigError, InsufficientFundsError, InvalidAddressError
from pumpbot.core.priority_fee.manager import PriorityFeeManager
from pumpbot.core.wallet import Wallet
from pumpbot.sdk import PumpFunSDK
from pumpbot.trading.buyer import TokenBuyer
from pumpbot.trading.seller import TokenSeller
from pumpbot.trading.token_creator import TokenCreator
from pumpbot.utils.audit_logger import AuditLogger
from pumpbot.utils.balances import print_sol_balance
from pumpbot.utils.logger import get_logger, setup_console_logging

logger = get_logger(__name__)


def parse_address(value: str) -> Pubkey:
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as e:
        raise InvalidAddressError(f"Invalid contract address: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pumpbot",
        description="Buy and sell pump.fun bonding-curve tokens from the command line.",
    )
    parser.add_argument("--env-file", help="Load settings from this .env file instead of ./.env")
    parser.add_argument("--rpc-url", help="Override SOLANA_NODE_RPC_ENDPOINT")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    subparsers.add_parser("balance", help="Print the wallet's SOL balance")

    create = subparsers.add_parser("create-token", help="Create a new token mint and its token account")
    create.add_argument("--decimals", type=int, default=6, help="Mint decimals (default: 6)")

    buy = subparsers.add_parser("buy", help="Buy a token on its bonding curve")
    buy.add_argument("contract_address", help="Token mint address")
    buy.add_argument("--amount", type=float, help="SOL to spend (default: BUY_AMOUNT_SOL)")
    buy.add_argument("--slippage-bps", type=int, help="Slippage in basis points (default: SLIPPAGE_BPS)")

    sell = subparsers.add_parser("sell", help="Sell the wallet's whole holding of a token")
    sell.add_argument("contract_address", help="Token mint address")
    sell.add_argument("--slippage-bps", type=int, help="Slippage in basis points (default: SLIPPAGE_BPS)")

    return parser


def build_fee_manager(client: SolanaClient, settings: Settings) -> PriorityFeeManager:
    return PriorityFeeManager(
        client=client,
        enable_dynamic_fee=settings.enable_dynamic_fee,
        enable_fixed_fee=not settings.enable_dynamic_fee,
        fixed_fee=settings.unit_price,
        extra_fee=settings.extra_priority_fee_microlamports,
        hard_cap=settings.hard_cap_priority_fee_microlamports,
    )


def load_wallet(settings: Settings) -> Wallet:
    try:
        return Wallet(settings.private_key)
    except ValueError as e:
        raise ConfigError(f"PRIVATE_KEY: {e}") from e


async def run(args: argparse.Namespace, settings: Settings, wallet: Wallet) -> int:
    mint = parse_address(args.contract_address) if hasattr(args, "contract_address") else None

    async with SolanaClient(settings.rpc_endpoint, commitment=settings.commitment) as client:
        if args.command == "balance":
            balance = await print_sol_balance(client, wallet.pubkey, "Wallet")
            return 0 if balance is not None else 1

        if args.command == "create-token":
            creator = TokenCreator(client, wallet, settings.confirm_timeout_seconds, settings.max_send_retries)
            created = await creator.execute(decimals=args.decimals)
            return 0 if created.result.success else 1

        sdk = PumpFunSDK(client, settings.confirm_timeout_seconds, settings.max_send_retries)
        fee_manager = build_fee_manager(client, settings)
        audit_logger = AuditLogger(settings.audit_log_file)

        if args.command == "buy":
            buyer = TokenBuyer(
                client=client,
                wallet=wallet,
                sdk=sdk,
                fee_manager=fee_manager,
                buy_amount_sol=settings.buy_amount_sol,
                slippage_bps=settings.slippage_bps,
                min_balance_sol=settings.min_balance_sol,
                unit_limit=settings.unit_limit,
                audit_logger=audit_logger,
            )
            result = await buyer.execute(mint)
        else:
            seller = TokenSeller(
                client=client,
                wallet=wallet,
                sdk=sdk,
                fee_manager=fee_manager,
                slippage_bps=settings.slippage_bps,
                unit_limit=settings.unit_limit,
                audit_logger=audit_logger,
            )
            result = await seller.execute(mint)

        if result.signature:
            print(f"Signature: {result.signature}")
        return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_console_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        if hasattr(args, "contract_address"):
            parse_address(args.contract_address)
        settings = load_config(args.env_file).with_overrides(
            rpc_endpoint=args.rpc_url,
            buy_amount_sol=getattr(args, "amount", None),
            slippage_bps=getattr(args, "slippage_bps", None),
        ).validate()
        wallet = load_wallet(settings)
        return asyncio.run(run(args, settings, wallet))
    except InvalidAddressError as e:
        logger.error(str(e))
        print("Invalid contract address")
    except InsufficientFundsError as e:
        logger.error(str(e))
        print("Insufficient balance")
    except ConfigError as e:
        logger.critical(f"Config load failed: {e}")
        print(f"Configuration error: {e}")
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130
    except Exception as e:
        logger.critical(f"FATAL: Unhandled error: {e}", exc_info=True)
        print(f"Error: {e}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

"""
Kaspa Wallet - HD keys + encrypted seed, from the command line.

Entry point for the application.

Usage:
    kaspa-wallet new --passphrase P
    kaspa-wallet restore --mnemonic "word1 ... word12" --passphrase P
    kaspa-wallet address --passphrase P [--path "m/44'/111111'/0'/0/0"]
    kaspa-wallet export-pub --passphrase P
    kaspa-wallet balance ADDRESS
    kaspa-wallet send TO AMOUNT --passphrase P [--raw-tx HEX]
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Optional

from networks import NodeClient, NodeError
from services import vault_worker
from services.logging import configure_logging
from settings import load_settings
from wallet import Wallet, WalletError, load_record, save_record

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def build_parser(settings: dict) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from settings."""
    parser = argparse.ArgumentParser(
        prog="kaspa-wallet",
        description="Minimal Kaspa wallet (HD keys + encrypted seed)",
    )
    parser.add_argument("-f", "--file", type=Path, default=Path(settings["wallet_file"]),
                        help="Path to wallet file (encrypted seed)")
    parser.add_argument("-n", "--node", default=settings["node_url"],
                        help="Kaspa node endpoint (e.g. http://127.0.0.1:16110)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show log output")

    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Create a new wallet (writes encrypted seed to file)")
    new.add_argument("-p", "--passphrase", help="Passphrase to encrypt the seed with")
    new.add_argument("-w", "--words", type=int, default=settings["word_count"],
                     choices=(12, 15, 18, 21, 24), help="Mnemonic length")
    new.add_argument("--force", action="store_true", help="Overwrite an existing wallet file")

    restore = sub.add_parser("restore", help="Restore wallet from mnemonic (writes encrypted seed to file)")
    restore.add_argument("-m", "--mnemonic", required=True, help="Mnemonic words (quoted)")
    restore.add_argument("-p", "--passphrase", help="Passphrase to encrypt the seed with")
    restore.add_argument("--force", action="store_true", help="Overwrite an existing wallet file")

    for name, help_text in (
        ("address", "Show the key for a derivation path"),
        ("export-pub", "Export compressed public key hex for a derivation path"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--path", default=settings["derivation_path"],
                         help="Derivation path e.g. \"m/44'/111111'/0'/0/0\"")
        cmd.add_argument("-p", "--passphrase", help="Passphrase to decrypt the wallet")

    balance = sub.add_parser("balance", help="Query balance for an address using the node")
    balance.add_argument("address", help="Address to query")

    send = sub.add_parser("send", help="Broadcast a pre-built transaction")
    send.add_argument("to", help="Destination address")
    send.add_argument("amount", type=int, help="Amount in atomic units")
    send.add_argument("-p", "--passphrase", help="Passphrase to decrypt the wallet")
    send.add_argument("--raw-tx", help="Hex-serialized, signed transaction to broadcast")

    return parser


def _passphrase(args: argparse.Namespace, confirm: bool = False) -> str:
    """Passphrase from the flag, or prompt for it."""
    if args.passphrase is not None:
        return args.passphrase

    passphrase = getpass.getpass("Wallet passphrase: ")
    if confirm and getpass.getpass("Repeat passphrase: ") != passphrase:
        raise SystemExit("Passphrases do not match")
    return passphrase


def _unlock(args: argparse.Namespace) -> Wallet:
    """Load, decrypt and parse the wallet file."""
    record = load_record(args.file)
    # Argon2id runs on the vault worker so Ctrl-C stays responsive
    phrase = vault_worker.decrypt(record, _passphrase(args)).result()
    return Wallet.from_phrase(phrase)


def _write_new(args: argparse.Namespace, wallet: Wallet) -> bool:
    if args.file.exists() and not args.force:
        print(f"Error: {args.file} already exists (use --force to overwrite)", file=sys.stderr)
        return False
    record = vault_worker.encrypt(wallet.phrase, _passphrase(args, confirm=True)).result()
    save_record(record, args.file)
    return True


# ============================================
# Commands
# ============================================

def cmd_new(args: argparse.Namespace, settings: dict) -> int:
    wallet = Wallet.create(args.words)
    try:
        if not _write_new(args, wallet):
            return EXIT_ERROR
        print(f"New wallet created and saved to {args.file}")
        print(f"Mnemonic (store this safely):\n{wallet.phrase}")
    finally:
        wallet.lock()
    return EXIT_OK


def cmd_restore(args: argparse.Namespace, settings: dict) -> int:
    wallet = Wallet.from_phrase(args.mnemonic)
    try:
        if not _write_new(args, wallet):
            return EXIT_ERROR
        print(f"Wallet restored and saved to {args.file}")
    finally:
        wallet.lock()
    return EXIT_OK


def _public_key_for(args: argparse.Namespace, path: str) -> str:
    wallet = _unlock(args)
    try:
        with wallet.derive_private_key(path) as secret:
            return wallet.public_key_hex(secret)
    finally:
        wallet.lock()


def cmd_address(args: argparse.Namespace, settings: dict) -> int:
    pubkey = _public_key_for(args, args.path)
    print(f"Derived public key (compressed hex): {pubkey}")
    print("Kaspa address encoding is not provided by this tool; "
          "encode the public key with a Kaspa address library.")
    return EXIT_OK


def cmd_export_pub(args: argparse.Namespace, settings: dict) -> int:
    print(_public_key_for(args, args.path))
    return EXIT_OK


def cmd_balance(args: argparse.Namespace, settings: dict) -> int:
    client = NodeClient(args.node, timeout=settings["request_timeout"])
    balance = client.get_balance(args.address)
    print(f"Balance for {args.address}: {balance}")
    return EXIT_OK


def cmd_send(args: argparse.Namespace, settings: dict) -> int:
    if args.amount <= 0:
        print("Error: amount must be positive", file=sys.stderr)
        return EXIT_USAGE

    pubkey = _public_key_for(args, settings["derivation_path"])
    print(f"Sending from key: {pubkey}")

    if not args.raw_tx:
        print("Transaction construction (UTXO selection, serialization, signing) is not "
              "provided by this tool. Build and sign the transaction externally and "
              "pass it with --raw-tx.", file=sys.stderr)
        return EXIT_USAGE

    client = NodeClient(args.node, timeout=settings["request_timeout"])
    response = client.broadcast(args.raw_tx)
    print(f"Broadcast {args.amount} to {args.to}: {response}")
    return EXIT_OK


COMMANDS = {
    "new": cmd_new,
    "restore": cmd_restore,
    "address": cmd_address,
    "export-pub": cmd_export_pub,
    "balance": cmd_balance,
    "send": cmd_send,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point."""
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    # Configure logging before anything else
    configure_logging(
        logging.INFO if args.verbose else logging.WARNING,
        retention_days=settings["log_retention_days"],
    )

    try:
        return COMMANDS[args.command](args, settings)
    except (WalletError, NodeError) as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

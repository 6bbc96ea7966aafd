"""Command-line signer.

Reads a hex EIP-712 digest (32 bytes) or encoding (66 bytes) from stdin and
signs it with exactly one credential source.

Usage:
    echo 0x1901... | eip712-sign --private-key <hex>
    echo 0x1901... | eip712-sign --mnemonic "word1 ... word12" [--hd-paths "m/44'/60'/0'/0/1"]
    echo 0x1901... | eip712-sign --ledger

Credentials may also come from SIGNER_PRIVATE_KEY, WALLET_SEED_PHRASE or
USE_LEDGER (environment or .env) when no credential flag is given.
"""

import argparse
import logging
import sys
from typing import Optional, TextIO

from eip712_signer.config import Settings, get_settings
from eip712_signer.digest import decode_hex_digest
from eip712_signer.errors import SignerError
from eip712_signer.service import sign_typed_data
from eip712_signer.signing.device import DeviceHub
from eip712_signer.signing.factory import select_source

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eip712-sign",
        description="Sign an EIP-712 digest read from stdin",
    )
    parser.add_argument("--private-key", default="", help="Private key to use for signing")
    parser.add_argument("--ledger", action="store_true", help="Use ledger device for signing")
    parser.add_argument("--mnemonic", default="", help="Mnemonic to use for signing")
    parser.add_argument(
        "--hd-paths",
        default=settings.hd_path,
        help="Hierarchical deterministic derivation path for mnemonic or ledger",
    )
    parser.add_argument("--debug", action="store_true", default=settings.debug, help="Enable debug logging")
    return parser


def configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _credentials(args: argparse.Namespace, settings: Settings) -> tuple[str, str, bool]:
    """Pick credentials from flags, falling back to settings when no flag is set."""
    if args.private_key or args.mnemonic or args.ledger:
        return args.private_key, args.mnemonic, args.ledger
    return (
        settings.signer_private_key or "",
        settings.wallet_seed_phrase or "",
        settings.use_ledger,
    )


def main(
    argv: Optional[list[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    device_hub: Optional[DeviceHub] = None,
) -> int:
    """Main entry point.

    Returns:
        Process exit status (0 on success, 1 on any signing error)
    """
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.debug)

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    private_key, mnemonic, use_ledger = _credentials(args, settings)

    try:
        select_source(private_key, mnemonic, use_ledger)

        data = decode_hex_digest(stdin.read())
        result = sign_typed_data(
            data,
            private_key=private_key,
            mnemonic=mnemonic,
            use_ledger=use_ledger,
            hd_path=args.hd_paths,
            device_hub=device_hub,
            passphrase=settings.ledger_passphrase,
        )
    except SignerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    print(f"Data: {result.data.hex()}", file=stdout)
    print(f"Signer: {result.address}", file=stdout)
    print(f"Signature: {result.signature.hex()}", file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Ledger hardware wallet hub.

Implements the DeviceHub contract on top of:
- hidapi: USB HID enumeration of Ledger devices (vendor id 0x2c97)
- ledgerblue: APDU transport over an opened HID device
- ledgereth: Ethereum app commands (account derivation, EIP-712 signing)

Setup:
1. pip install "eip712-signer[ledger]"
2. Connect and unlock the device
3. Open the Ethereum app

The Ethereum app signs EIP-712 messages from the domain separator and the
message struct hash, so the digest must come from the full 66-byte encoding.
"""

import logging
from typing import Any, Optional

from eth_utils import to_checksum_address

from eip712_signer.digest import Digest
from eip712_signer.errors import (
    DeviceDerivationError,
    DeviceError,
    DeviceLockedOrUnavailable,
    DeviceSigningError,
)
from eip712_signer.hdwallet.path import DerivationPath
from eip712_signer.signing.device import DeviceAccount

logger = logging.getLogger(__name__)

LEDGER_VENDOR_ID = 0x2C97
LEDGER_USAGE_PAGE = 0xFFA0

INSTALL_HINT = 'Ledger support not installed. Install with: pip install "eip712-signer[ledger]"'


class LedgerHub:
    """DeviceHub for Ledger devices connected over USB."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def enumerate(self) -> list[dict]:
        """List connected Ledger devices, one entry per physical device."""
        try:
            import hid
        except ImportError:
            raise DeviceError(INSTALL_HINT)

        devices = []
        seen_paths = set()
        for info in hid.enumerate(LEDGER_VENDOR_ID, 0):
            # Each device exposes several HID interfaces; keep the APDU one
            if info.get("interface_number") != 0 and info.get("usage_page") != LEDGER_USAGE_PAGE:
                continue
            if info["path"] in seen_paths:
                continue
            seen_paths.add(info["path"])
            devices.append(info)

        logger.debug(f"Found {len(devices)} Ledger device(s)")
        return devices

    def open(self, handle: dict, passphrase: str = "") -> Any:
        """Open an APDU session to the device.

        Ledger devices do not take a host-side passphrase; it is accepted for
        contract compatibility and ignored.

        Raises:
            DeviceLockedOrUnavailable: If the device cannot be opened
        """
        try:
            import hid
            from ledgerblue.comm import HIDDongleHIDAPI
        except ImportError:
            raise DeviceError(INSTALL_HINT)

        try:
            device = hid.device()
            device.open_path(handle["path"])
            device.set_nonblocking(True)
        except (OSError, KeyError) as e:
            raise DeviceLockedOrUnavailable(
                f"Error opening ledger (have you unlocked?): {e}"
            ) from e

        return HIDDongleHIDAPI(device, True, self.debug)

    def derive_account(self, session: Any, path: DerivationPath) -> DeviceAccount:
        """Derive the Ethereum account at path on the device.

        Raises:
            DeviceLockedOrUnavailable: If the device is locked or the app is closed
            DeviceDerivationError: For any other device failure
        """
        try:
            from ledgereth.accounts import get_account_by_path
            from ledgereth.exceptions import LedgerAppNotOpened, LedgerError, LedgerLocked
        except ImportError:
            raise DeviceError(INSTALL_HINT)

        try:
            account = get_account_by_path(path.relative, dongle=session)
        except (LedgerLocked, LedgerAppNotOpened) as e:
            raise DeviceLockedOrUnavailable(
                f"Error opening ledger (have you unlocked?): {e}"
            ) from e
        except LedgerError as e:
            raise DeviceDerivationError(f"Error deriving ledger account: {e}") from e

        address = to_checksum_address(account.address)
        logger.info(f"Ledger account at {path}: {address}")
        return DeviceAccount(path=path, address=address)

    def sign_typed_data(self, session: Any, account: DeviceAccount, digest: Digest) -> bytes:
        """Sign an EIP-712 digest on the device.

        Raises:
            DeviceSigningError: If the digest lacks its component hashes, the
                user declines, or the device fails mid-request
        """
        if not digest.has_components:
            raise DeviceSigningError(
                "Ledger signing requires the full 66-byte EIP-712 encoding "
                "(0x1901 || domainSeparator || hashStruct(message))"
            )

        try:
            from ledgereth.exceptions import LedgerCancel, LedgerError
            from ledgereth.messages import sign_typed_data_draft
        except ImportError:
            raise DeviceError(INSTALL_HINT)

        try:
            signed = sign_typed_data_draft(
                domain_hash=digest.domain_hash,
                message_hash=digest.message_hash,
                sender_path=account.path.relative,
                dongle=session,
            )
        except LedgerCancel as e:
            raise DeviceSigningError("Signing request declined on device") from e
        except LedgerError as e:
            raise DeviceSigningError(f"Error signing data on ledger: {e}") from e

        return _encode_signature(signed.r, signed.s, signed.v)

    def close(self, session: Optional[Any]) -> None:
        if session is not None:
            session.close()


def _encode_signature(r: int, s: int, v: int) -> bytes:
    return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])

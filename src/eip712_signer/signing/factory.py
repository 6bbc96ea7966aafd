"""Signer factory.

Builds exactly one signer from the caller's credential selection:
- private key -> KeySigner
- mnemonic + path -> KeySigner over the derived key
- ledger -> DeviceSigner over the single connected device

SECURITY NOTE:
- Selecting zero or several sources is refused rather than guessed
- Several connected devices are refused rather than guessed
- Secrets are never logged
"""

import logging
from typing import Optional

from eip712_signer.config import DEFAULT_HD_PATH
from eip712_signer.errors import (
    AmbiguousCredentialSelection,
    AmbiguousDevice,
    DeviceDerivationError,
    DeviceError,
    DeviceLockedOrUnavailable,
    NoDeviceFound,
)
from eip712_signer.hdwallet.path import DerivationPath
from eip712_signer.signing.base import CredentialSource, Signer
from eip712_signer.signing.device import DeviceHub, DeviceSigner
from eip712_signer.signing.local import KeySigner

logger = logging.getLogger(__name__)


def select_source(
    private_key: Optional[str] = None,
    mnemonic: Optional[str] = None,
    use_ledger: bool = False,
) -> CredentialSource:
    """Determine the single selected credential source.

    Raises:
        AmbiguousCredentialSelection: If zero or several sources are set
    """
    selected = []
    if private_key:
        selected.append(CredentialSource.PRIVATE_KEY)
    if use_ledger:
        selected.append(CredentialSource.LEDGER)
    if mnemonic:
        selected.append(CredentialSource.MNEMONIC)

    if len(selected) != 1:
        raise AmbiguousCredentialSelection(len(selected))
    return selected[0]


def resolve_signer(
    private_key: Optional[str] = None,
    mnemonic: Optional[str] = None,
    use_ledger: bool = False,
    hd_path: str = DEFAULT_HD_PATH,
    device_hub: Optional[DeviceHub] = None,
    passphrase: str = "",
) -> Signer:
    """Create the signer for the selected credential source.

    Args:
        private_key: Hex private key
        mnemonic: BIP39 mnemonic phrase
        use_ledger: Sign with a connected hardware wallet
        hd_path: Derivation path for mnemonic or ledger
        device_hub: Hardware wallet hub (defaults to LedgerHub)
        passphrase: Passphrase used when opening the device

    Returns:
        Signer ready to sign; close it (or use it as a context manager) when done

    Raises:
        AmbiguousCredentialSelection: If not exactly one source is selected
        InvalidDerivationPath: If hd_path is malformed
        CredentialError / DeviceError: From the selected backend
    """
    source = select_source(private_key, mnemonic, use_ledger)
    path = DerivationPath.parse(hd_path)

    logger.info(f"Initializing {source.value} signer")

    if source == CredentialSource.PRIVATE_KEY:
        return KeySigner.from_hex(private_key)

    if source == CredentialSource.MNEMONIC:
        signer = KeySigner.from_mnemonic(mnemonic, path)
        logger.info(f"Derived account {signer.address} at {path}")
        return signer

    if device_hub is None:
        from eip712_signer.signing.ledger import LedgerHub
        device_hub = LedgerHub()

    return _open_device_signer(device_hub, path, passphrase)


def _open_device_signer(hub: DeviceHub, path: DerivationPath, passphrase: str) -> DeviceSigner:
    """Open the single connected device and derive the account at path."""
    try:
        devices = hub.enumerate()
    except DeviceError:
        raise
    except Exception as e:
        raise DeviceError(f"Error enumerating ledgers: {e}") from e

    if not devices:
        raise NoDeviceFound()
    if len(devices) > 1:
        raise AmbiguousDevice(len(devices))

    try:
        session = hub.open(devices[0], passphrase)
    except DeviceError:
        raise
    except Exception as e:
        raise DeviceLockedOrUnavailable(
            f"Error opening ledger (have you unlocked?): {e}"
        ) from e

    try:
        account = hub.derive_account(session, path)
    except DeviceError:
        _close_quietly(hub, session)
        raise
    except Exception as e:
        _close_quietly(hub, session)
        raise DeviceDerivationError(f"Error deriving ledger account: {e}") from e

    return DeviceSigner(hub, session, account)


def _close_quietly(hub: DeviceHub, session) -> None:
    """Close a session on an error path without masking the original error."""
    try:
        hub.close(session)
    except Exception as e:
        logger.warning(f"Failed to close device session: {e}")

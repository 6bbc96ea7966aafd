"""Hardware wallet signing backend.

The device is reached through a DeviceHub collaborator so the transport
(USB HID, APDU framing) stays outside the signing core. LedgerHub in
eip712_signer.signing.ledger is the production hub; tests use a fake.

Keys never enter process memory: the device derives the account and signs
internally. DeviceSigner.sign blocks until the user approves or rejects on the
device; there is no internal timeout.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from eip712_signer.digest import Digest, Signature
from eip712_signer.errors import DeviceError, DeviceSigningError
from eip712_signer.hdwallet.path import DerivationPath
from eip712_signer.signing.base import CredentialSource, Signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceAccount:
    """Account derived on a hardware wallet."""
    path: DerivationPath
    address: str


class DeviceHub(Protocol):
    """Collaborator contract for hardware wallet transports.

    Implementations raise the DeviceError subclasses named below; anything
    else is treated as a transport failure of the current operation.
    """

    def enumerate(self) -> list[Any]:
        """Return handles of all connected devices."""
        ...

    def open(self, handle: Any, passphrase: str = "") -> Any:
        """Open a session. Raises DeviceLockedOrUnavailable."""
        ...

    def derive_account(self, session: Any, path: DerivationPath) -> DeviceAccount:
        """Derive the account at path. Raises DeviceDerivationError."""
        ...

    def sign_typed_data(self, session: Any, account: DeviceAccount, digest: Digest) -> bytes:
        """Sign on-device, returning r || s || v. Raises DeviceSigningError."""
        ...

    def close(self, session: Any) -> None:
        """Release the session."""
        ...


class DeviceSigner(Signer):
    """Signer delegating to a hardware wallet session.

    Owns the session: close() releases it, and the signer is unusable after.
    """

    def __init__(self, hub: DeviceHub, session: Any, account: DeviceAccount):
        super().__init__(CredentialSource.LEDGER)
        self.hub = hub
        self.account = account
        self._session = session

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def closed(self) -> bool:
        return self._session is None

    def sign(self, digest: Digest) -> Signature:
        """Ask the device to sign the digest.

        The device already emits v in {27, 28}; its output is checked but not
        modified.

        Raises:
            DeviceSigningError: If the device rejects or aborts the request,
                or returns a malformed signature
        """
        if self._session is None:
            raise DeviceSigningError("Device session is closed")

        logger.info(f"Waiting for signature confirmation on device for {self.address}")
        try:
            raw = self.hub.sign_typed_data(self._session, self.account, digest)
        except DeviceError:
            raise
        except Exception as e:
            raise DeviceSigningError(f"Device signing failed: {e}") from e

        try:
            return Signature.from_bytes(raw)
        except ValueError as e:
            raise DeviceSigningError(f"Device returned an invalid signature: {e}") from e

    def close(self) -> None:
        """Close the device session."""
        if self._session is None:
            return
        session, self._session = self._session, None
        try:
            self.hub.close(session)
        except Exception as e:
            logger.warning(f"Failed to close device session: {e}")

"""End-to-end signing flow.

validate digest -> resolve signer -> sign -> close signer

Either a complete SignedDigest is returned or a SignerError propagates;
no partial results.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from eip712_signer.config import DEFAULT_HD_PATH
from eip712_signer.digest import Digest, Signature, validate_digest
from eip712_signer.signing.device import DeviceHub
from eip712_signer.signing.factory import resolve_signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedDigest:
    """Result of a signing operation."""
    data: bytes
    digest: Digest
    address: str
    signature: Signature


def sign_typed_data(
    data: bytes,
    private_key: Optional[str] = None,
    mnemonic: Optional[str] = None,
    use_ledger: bool = False,
    hd_path: str = DEFAULT_HD_PATH,
    device_hub: Optional[DeviceHub] = None,
    passphrase: str = "",
) -> SignedDigest:
    """Validate data, sign it with the selected credential and return the result.

    The signer is closed on every exit path, wiping key material or releasing
    the device session.
    """
    digest = validate_digest(data)

    with resolve_signer(
        private_key=private_key,
        mnemonic=mnemonic,
        use_ledger=use_ledger,
        hd_path=hd_path,
        device_hub=device_hub,
        passphrase=passphrase,
    ) as signer:
        address = signer.address
        signature = signer.sign(digest)

    logger.info(f"Signed digest {digest.hex()} with {address}")
    return SignedDigest(data=bytes(data), digest=digest, address=address, signature=signature)

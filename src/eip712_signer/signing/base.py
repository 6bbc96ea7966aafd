"""Base interface for typed-data signers.

Signing flow:
1. Caller validates the digest (see eip712_signer.digest)
2. Credential resolver builds exactly one signer
3. Signer returns a normalized signature (v in {27, 28})
4. Signer is closed, wiping key material or releasing the device session

Both variants expose the same contract, so callers never need to know which
credential source produced the signature.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from eip712_signer.digest import Digest, Signature

logger = logging.getLogger(__name__)


class CredentialSource(str, Enum):
    """Where the signing key comes from."""
    PRIVATE_KEY = "private_key"   # Raw hex key supplied by the caller
    MNEMONIC = "mnemonic"         # BIP39 phrase + BIP32 path
    LEDGER = "ledger"             # Hardware wallet, key never leaves the device


class Signer(ABC):
    """Abstract signer bound to a single credential source.

    Implementations must keep `address` stable for their whole lifetime and
    must release any secret or device resources in `close()`.
    """

    def __init__(self, source: CredentialSource):
        self.source = source

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed address of the signing account."""
        pass

    @abstractmethod
    def sign(self, digest: Digest) -> Signature:
        """Sign a validated digest.

        Args:
            digest: Digest produced by validate_digest()

        Returns:
            Signature with recovery id in {27, 28}
        """
        pass

    def close(self) -> None:
        """Release resources held by the signer."""
        pass

    def __enter__(self) -> "Signer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source={self.source.value}, address={self.address})"

"""Local signing backend.

Signs in-process with a secp256k1 private key that is either supplied as hex
or derived from a mnemonic.

WARNING: The private key lives in process memory while the signer is open.
It is kept in a mutable buffer and zeroed on close(); use the signer as a
context manager so this happens on every exit path.
"""

import logging
from typing import Optional

from eth_account import Account
from eth_keys import keys
from eth_keys.exceptions import ValidationError
from eth_utils import remove_0x_prefix

from eip712_signer.digest import Digest, Signature, normalize_recovery_id
from eip712_signer.errors import InvalidPrivateKeyEncoding, SigningError
from eip712_signer.hdwallet.derivation import (
    PRIVATE_KEY_LENGTH,
    check_private_key,
    derive_private_key,
)
from eip712_signer.hdwallet.path import DerivationPath
from eip712_signer.signing.base import CredentialSource, Signer

logger = logging.getLogger(__name__)


class KeySigner(Signer):
    """Signer holding a raw private key.

    Signatures are deterministic (RFC 6979): the same key and digest always
    produce the same r, s and v.
    """

    def __init__(
        self,
        private_key: bytes,
        source: CredentialSource = CredentialSource.PRIVATE_KEY,
        path: Optional[DerivationPath] = None,
    ):
        """Initialize with a raw key.

        Args:
            private_key: 32-byte secp256k1 scalar
            source: Credential source the key came from
            path: Derivation path, when the key was derived from a mnemonic

        Raises:
            InvalidPrivateKeyEncoding: If the scalar is out of range
        """
        super().__init__(source)
        check_private_key(private_key, InvalidPrivateKeyEncoding)

        self.path = path
        self._key = bytearray(private_key)
        self._address = Account.from_key(bytes(self._key)).address
        self._closed = False

    @classmethod
    def from_hex(cls, private_key_hex: str) -> "KeySigner":
        """Build a signer from a hex private key (0x prefix optional).

        Raises:
            InvalidPrivateKeyEncoding: On bad hex, wrong length or out-of-range scalar
        """
        cleaned = remove_0x_prefix(private_key_hex.strip())
        if len(cleaned) != PRIVATE_KEY_LENGTH * 2:
            raise InvalidPrivateKeyEncoding(
                f"Private key must be {PRIVATE_KEY_LENGTH * 2} hex characters, got {len(cleaned)}"
            )
        try:
            raw = bytes.fromhex(cleaned)
        except ValueError as e:
            raise InvalidPrivateKeyEncoding("Private key is not valid hex") from e

        return cls(raw, source=CredentialSource.PRIVATE_KEY)

    @classmethod
    def from_mnemonic(cls, mnemonic: str, path: DerivationPath) -> "KeySigner":
        """Build a signer from a mnemonic derived along path."""
        raw = derive_private_key(mnemonic, path)
        return cls(raw, source=CredentialSource.MNEMONIC, path=path)

    @property
    def address(self) -> str:
        return self._address

    @property
    def closed(self) -> bool:
        return self._closed

    def sign(self, digest: Digest) -> Signature:
        """Sign the digest hash and normalize v to {27, 28}.

        Raises:
            SigningError: If the signer is closed, the digest is all zeros,
                or the curve operation fails
        """
        if self._closed:
            raise SigningError("Signer is closed")
        if len(digest.hash) != 32:
            raise SigningError(f"Digest must be 32 bytes, got {len(digest.hash)}")
        if not any(digest.hash):
            raise SigningError("Refusing to sign an all-zero digest")

        try:
            private_key = keys.PrivateKey(bytes(self._key))
            signature = private_key.sign_msg_hash(digest.hash)
        except (ValidationError, ValueError) as e:
            logger.error(f"Local signing failed for {self._address}: {e}")
            raise SigningError(f"Signing failed: {e}") from e

        return Signature(
            r=signature.r,
            s=signature.s,
            v=normalize_recovery_id(signature.v),
        )

    def close(self) -> None:
        """Zero the key buffer. The signer cannot sign afterwards."""
        if self._closed:
            return
        for i in range(len(self._key)):
            self._key[i] = 0
        self._closed = True

"""Digest validation and signature encoding.

Accepted digest inputs:
- 32 bytes: an opaque EIP-712 hash, signed as-is
- 66 bytes: the full EIP-712 encoding 0x19 0x01 || domainSeparator || hashStruct(message),
  signed as keccak256 of the encoding. Hardware wallets need the two component
  hashes, so they are kept alongside the digest.

Signatures are always returned as r || s || v with v in {27, 28}.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from eth_utils import decode_hex, keccak

from eip712_signer.errors import DigestEncodingError, DigestLengthError, SigningError

logger = logging.getLogger(__name__)

DIGEST_LENGTH = 32
TYPED_DATA_PREFIX = b"\x19\x01"
TYPED_DATA_LENGTH = len(TYPED_DATA_PREFIX) + 2 * DIGEST_LENGTH  # 66
ACCEPTED_LENGTHS = (DIGEST_LENGTH, TYPED_DATA_LENGTH)

SIGNATURE_LENGTH = 65
RECOVERY_ID_OFFSET = 64
RECOVERY_ID_BASE = 27


@dataclass(frozen=True)
class Digest:
    """A validated 32-byte hash ready for signing.

    Attributes:
        hash: The 32 bytes handed to the curve signing operation
        domain_hash: EIP-712 domain separator, when known
        message_hash: EIP-712 struct hash of the message, when known
    """
    hash: bytes
    domain_hash: Optional[bytes] = None
    message_hash: Optional[bytes] = None

    @property
    def has_components(self) -> bool:
        """Whether the domain and message hashes are available."""
        return self.domain_hash is not None and self.message_hash is not None

    def hex(self) -> str:
        return self.hash.hex()


def validate_digest(raw: bytes) -> Digest:
    """Validate decoded digest bytes.

    Args:
        raw: Decoded input bytes (hex decoding happens at the caller)

    Returns:
        Digest wrapping the 32-byte hash to sign

    Raises:
        DigestLengthError: If the length is neither 32 nor 66 bytes
        DigestEncodingError: If a 66-byte input lacks the 0x1901 prefix
    """
    raw = bytes(raw)

    if len(raw) == DIGEST_LENGTH:
        return Digest(hash=raw)

    if len(raw) == TYPED_DATA_LENGTH:
        if not raw.startswith(TYPED_DATA_PREFIX):
            raise DigestEncodingError(
                f"EIP-712 encoding must start with 0x1901, got 0x{raw[:2].hex()}"
            )
        domain_hash = raw[2:2 + DIGEST_LENGTH]
        message_hash = raw[2 + DIGEST_LENGTH:]
        return Digest(
            hash=keccak(raw),
            domain_hash=domain_hash,
            message_hash=message_hash,
        )

    # Report the decoded length, not the length of the text it came from
    raise DigestLengthError(expected=ACCEPTED_LENGTHS, actual=len(raw))


def decode_hex_digest(text: str) -> bytes:
    """Decode a hex digest as received on stdin.

    Surrounding whitespace and an optional 0x prefix are ignored.

    Raises:
        DigestEncodingError: If the text is not valid hex
    """
    stripped = text.strip()
    try:
        return decode_hex(stripped)
    except ValueError as e:
        raise DigestEncodingError(f"Digest is not valid hex: {e}") from e


def normalize_recovery_id(v: int) -> int:
    """Map a curve recovery id onto the {27, 28} convention.

    Raises:
        SigningError: If v is not a recovery id in either convention
    """
    if v in (0, 1):
        return v + RECOVERY_ID_BASE
    if v in (RECOVERY_ID_BASE, RECOVERY_ID_BASE + 1):
        return v
    raise SigningError(f"Unexpected recovery id: {v}")


@dataclass(frozen=True)
class Signature:
    """ECDSA signature with a normalized recovery id."""
    r: int
    s: int
    v: int

    def to_bytes(self) -> bytes:
        """Encode as 65 bytes: r (32) || s (32) || v (1)."""
        return (
            self.r.to_bytes(32, "big")
            + self.s.to_bytes(32, "big")
            + bytes([self.v])
        )

    def hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        """Decode a 65-byte r || s || v signature.

        Raises:
            ValueError: On wrong length or a v outside {27, 28}
        """
        raw = bytes(raw)
        if len(raw) != SIGNATURE_LENGTH:
            raise ValueError(f"Expected {SIGNATURE_LENGTH}-byte signature, got {len(raw)} bytes")

        v = raw[RECOVERY_ID_OFFSET]
        if v not in (RECOVERY_ID_BASE, RECOVERY_ID_BASE + 1):
            raise ValueError(f"Signature recovery id {v} is not in {{27, 28}}")

        return cls(
            r=int.from_bytes(raw[:32], "big"),
            s=int.from_bytes(raw[32:64], "big"),
            v=v,
        )

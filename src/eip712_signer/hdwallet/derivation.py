"""Mnemonic to private key derivation.

Pipeline: mnemonic -> BIP39 seed -> BIP32 master key -> child keys along the
path -> raw secp256k1 scalar.

The master key is built with all-zero key-net version bytes. Only the raw
scalar of the last child is ever used, so the extended-key serialization (and
therefore the network tag) is irrelevant here.

Security: the seed, intermediate keys and the resulting scalar are never logged.
"""

import logging

from bip_utils import (
    Bip32KeyError,
    Bip32KeyNetVersions,
    Bip32Secp256k1,
    Bip39Languages,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
    MnemonicChecksumError,
)
from eth_keys import keys
from eth_keys.constants import SECPK1_N

from eip712_signer.errors import (
    DerivationError,
    InvalidMnemonic,
    KeyDecodeError,
    SeedDerivationError,
)
from eip712_signer.hdwallet.path import DerivationPath

logger = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32

# Version bytes are never serialized, see module docstring
NULL_KEY_NET_VERSIONS = Bip32KeyNetVersions(b"\x00\x00\x00\x00", b"\x00\x00\x00\x00")


def validate_mnemonic(mnemonic: str) -> str:
    """Check word count, wordlist membership and checksum.

    Words must match the English wordlist exactly: lowercase ASCII separated
    by single spaces.

    Returns:
        The mnemonic with surrounding whitespace removed

    Raises:
        InvalidMnemonic: With the specific reason
    """
    if not mnemonic or not mnemonic.strip():
        raise InvalidMnemonic("Mnemonic is empty")

    mnemonic = mnemonic.strip()
    if not mnemonic.isascii() or mnemonic != mnemonic.lower():
        raise InvalidMnemonic("Mnemonic words must be lowercase English wordlist entries")
    if mnemonic != " ".join(mnemonic.split()):
        raise InvalidMnemonic("Mnemonic words must be separated by single spaces")

    try:
        Bip39MnemonicValidator(Bip39Languages.ENGLISH).Validate(mnemonic)
    except MnemonicChecksumError as e:
        raise InvalidMnemonic(f"Invalid mnemonic checksum: {e}") from e
    except ValueError as e:
        raise InvalidMnemonic(f"Invalid mnemonic: {e}") from e

    return mnemonic


def derive_private_key(mnemonic: str, path: DerivationPath) -> bytes:
    """Derive the raw private key for a mnemonic at a BIP32 path.

    Deterministic: the same (mnemonic, path) always yields the same key.

    Args:
        mnemonic: BIP39 mnemonic phrase (empty passphrase is used)
        path: Parsed derivation path

    Returns:
        32-byte private key scalar

    Raises:
        InvalidMnemonic: If the phrase is malformed
        SeedDerivationError: If the master key cannot be built
        DerivationError: If a child derivation step fails
        KeyDecodeError: If the final scalar is not a valid key
    """
    mnemonic = validate_mnemonic(mnemonic)

    seed = Bip39SeedGenerator(mnemonic, Bip39Languages.ENGLISH).Generate("")

    try:
        ctx = Bip32Secp256k1.FromSeed(seed, NULL_KEY_NET_VERSIONS)
    except (Bip32KeyError, ValueError) as e:
        raise SeedDerivationError(f"Failed to create master key from seed: {e}") from e

    for depth, index in enumerate(path, start=1):
        try:
            ctx = ctx.ChildKey(index)
        except Bip32KeyError as e:
            raise DerivationError(
                f"Child derivation failed at depth {depth} (index {index}): {e}"
            ) from e

    raw_key = ctx.PrivateKey().Raw().ToBytes()
    check_private_key(raw_key, KeyDecodeError)

    logger.debug(f"Derived key at {path}")
    return raw_key


def derive_signer_key(mnemonic: str, path: DerivationPath) -> keys.PrivateKey:
    """Derive a key and wrap it as an eth_keys PrivateKey."""
    return load_private_key(derive_private_key(mnemonic, path), KeyDecodeError)


def check_private_key(raw_key: bytes, error_cls: type[Exception]) -> None:
    """Ensure raw_key is a 32-byte scalar in [1, n-1].

    Raises:
        error_cls: If the length or range is wrong
    """
    if len(raw_key) != PRIVATE_KEY_LENGTH:
        raise error_cls(f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw_key)}")

    scalar = int.from_bytes(raw_key, "big")
    if scalar == 0:
        raise error_cls("Private key scalar is zero")
    if scalar >= SECPK1_N:
        raise error_cls("Private key scalar is not below the secp256k1 curve order")


def load_private_key(raw_key: bytes, error_cls: type[Exception]) -> keys.PrivateKey:
    """Build an eth_keys PrivateKey after range checking the scalar."""
    check_private_key(raw_key, error_cls)
    return keys.PrivateKey(bytes(raw_key))

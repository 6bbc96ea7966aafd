"""Error taxonomy for typed-data signing.

Every failure raised by this package is a SignerError, grouped into four
families so callers can decide how to report it:

- InputError: malformed digest or bad credential selection
- CredentialError: bad mnemonic, private key or derivation path
- DeviceError: hardware wallet missing, locked or rejecting a request
- CryptoError: the signing primitive itself failed

None of these are retried automatically. Re-prompting a hardware wallet must
be an explicit re-invocation by the caller.
"""

from typing import Sequence


class SignerError(Exception):
    """Base class for all signing failures."""
    pass


# ======================
# Input errors
# ======================

class InputError(SignerError):
    """Bad input handed to the signing core."""
    pass


class DigestLengthError(InputError):
    """Raised when the decoded digest does not have an accepted length."""

    def __init__(self, expected: Sequence[int], actual: int):
        self.expected = tuple(expected)
        self.actual = actual
        accepted = " or ".join(str(n) for n in self.expected)
        super().__init__(
            f"Expected EIP-712 digest of {accepted} bytes, got {actual} bytes"
        )


class DigestEncodingError(InputError):
    """Raised when the digest is not valid hex or not a typed-data encoding."""
    pass


class AmbiguousCredentialSelection(InputError):
    """Raised when zero or several credential sources are selected."""

    def __init__(self, selected: int):
        self.selected = selected
        super().__init__(
            "One (and only one) of --private-key, --ledger, --mnemonic must be set "
            f"({selected} selected)"
        )


# ======================
# Credential errors
# ======================

class CredentialError(SignerError):
    """Bad credential material."""
    pass


class InvalidMnemonic(CredentialError):
    """Mnemonic has the wrong word count, an unknown word or a bad checksum."""
    pass


class InvalidDerivationPath(CredentialError):
    """Derivation path string is malformed."""
    pass


class InvalidPrivateKeyEncoding(CredentialError):
    """Private key hex is malformed or the scalar is out of range."""
    pass


class SeedDerivationError(CredentialError):
    """Master key could not be built from the seed."""
    pass


class DerivationError(CredentialError):
    """A BIP32 child derivation step produced an invalid key."""
    pass


class KeyDecodeError(CredentialError):
    """Derived scalar is not a usable secp256k1 private key."""
    pass


# ======================
# Device errors
# ======================

class DeviceError(SignerError):
    """Hardware wallet failure."""
    pass


class NoDeviceFound(DeviceError):
    def __init__(self, message: str = "No ledgers found, please connect your ledger"):
        super().__init__(message)


class AmbiguousDevice(DeviceError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"Multiple ledgers found ({count}), please use one ledger at a time"
        )


class DeviceLockedOrUnavailable(DeviceError):
    """Device session could not be opened (locked, app closed, busy)."""
    pass


class DeviceDerivationError(DeviceError):
    """Device failed to derive the account at the requested path."""
    pass


class DeviceSigningError(DeviceError):
    """Device rejected or aborted the signing request."""
    pass


# ======================
# Crypto errors
# ======================

class CryptoError(SignerError):
    """Unexpected failure of a cryptographic primitive."""
    pass


class SigningError(CryptoError):
    """Raised when the curve signing operation fails."""
    pass

"""HD wallet module for deterministic key derivation."""

from eip712_signer.hdwallet.derivation import (
    derive_private_key,
    derive_signer_key,
    validate_mnemonic,
)
from eip712_signer.hdwallet.path import HARDENED_OFFSET, DerivationPath

__all__ = [
    "DerivationPath",
    "HARDENED_OFFSET",
    "derive_private_key",
    "derive_signer_key",
    "validate_mnemonic",
]

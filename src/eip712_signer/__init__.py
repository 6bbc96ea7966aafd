"""EIP-712 typed-data signer.

Signs a typed-data digest with a raw private key, a mnemonic-derived HD key,
or a Ledger hardware wallet, behind one signer contract.
"""

from eip712_signer.digest import Digest, Signature, validate_digest
from eip712_signer.hdwallet.path import DerivationPath
from eip712_signer.service import SignedDigest, sign_typed_data
from eip712_signer.signing import (
    CredentialSource,
    DeviceSigner,
    KeySigner,
    Signer,
    resolve_signer,
)

__version__ = "0.1.0"

__all__ = [
    "CredentialSource",
    "DerivationPath",
    "DeviceSigner",
    "Digest",
    "KeySigner",
    "Signature",
    "SignedDigest",
    "Signer",
    "resolve_signer",
    "sign_typed_data",
    "validate_digest",
]

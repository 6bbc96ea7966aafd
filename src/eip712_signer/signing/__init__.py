"""Typed-data signing backends.

Provides interchangeable signer implementations:
- KeySigner: In-process ECDSA over a raw or mnemonic-derived key
- DeviceSigner: Delegates to a hardware wallet through a DeviceHub
"""

from eip712_signer.signing.base import CredentialSource, Signer
from eip712_signer.signing.device import DeviceAccount, DeviceHub, DeviceSigner
from eip712_signer.signing.factory import resolve_signer, select_source
from eip712_signer.signing.local import KeySigner

__all__ = [
    "CredentialSource",
    "DeviceAccount",
    "DeviceHub",
    "DeviceSigner",
    "KeySigner",
    "Signer",
    "resolve_signer",
    "select_source",
]

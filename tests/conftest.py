"""Pytest configuration and fixtures."""

import os
from typing import Any, Optional

import pytest
from eth_keys import keys

# Set test environment
os.environ["DEBUG"] = "false"
for _name in ("SIGNER_PRIVATE_KEY", "WALLET_SEED_PHRASE", "USE_LEDGER", "HD_PATH"):
    os.environ.pop(_name, None)

from eip712_signer.config import get_settings
from eip712_signer.digest import Digest
from eip712_signer.errors import (
    DeviceDerivationError,
    DeviceLockedOrUnavailable,
    DeviceSigningError,
)
from eip712_signer.hdwallet.path import DerivationPath
from eip712_signer.signing.device import DeviceAccount

# Well-known development mnemonic (Hardhat / Anvil / Foundry default accounts)
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_PATH = "m/44'/60'/0'/0/0"
TEST_PRIVATE_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_PRIVATE_KEY_1 = "59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
TEST_ADDRESS_1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

TEST_DOMAIN_HASH = bytes.fromhex("aa" * 32)
TEST_MESSAGE_HASH = bytes.fromhex("bb" * 32)
TEST_TYPED_DATA = b"\x19\x01" + TEST_DOMAIN_HASH + TEST_MESSAGE_HASH
TEST_DIGEST = bytes.fromhex("1c8aff950685c2ed4bc3174f3472287b56d9517b9c948127319a09a7a36deac8")


class FakeDeviceHub:
    """Deterministic stand-in for a hardware wallet hub.

    Signs with a fixed in-memory key so signatures are verifiable, and records
    every session opened and closed. Failures are injected via constructor args.
    """

    def __init__(
        self,
        devices: Optional[list] = None,
        private_key_hex: str = TEST_PRIVATE_KEY,
        open_error: Optional[Exception] = None,
        derive_error: Optional[Exception] = None,
        sign_error: Optional[Exception] = None,
        canned_signature: Optional[bytes] = None,
        enumerate_error: Optional[Exception] = None,
        close_error: Optional[Exception] = None,
    ):
        self.devices = ["ledger-0"] if devices is None else devices
        self._key = keys.PrivateKey(bytes.fromhex(private_key_hex))
        self.open_error = open_error
        self.derive_error = derive_error
        self.sign_error = sign_error
        self.canned_signature = canned_signature
        self.enumerate_error = enumerate_error
        self.close_error = close_error

        self.opened: list[dict] = []
        self.closed: list[dict] = []
        self.sign_requests: list[Digest] = []

    def enumerate(self) -> list:
        if self.enumerate_error is not None:
            raise self.enumerate_error
        return list(self.devices)

    def open(self, handle: Any, passphrase: str = "") -> dict:
        if self.open_error is not None:
            raise self.open_error
        session = {"handle": handle, "passphrase": passphrase}
        self.opened.append(session)
        return session

    def derive_account(self, session: dict, path: DerivationPath) -> DeviceAccount:
        if self.derive_error is not None:
            raise self.derive_error
        return DeviceAccount(path=path, address=self._key.public_key.to_checksum_address())

    def sign_typed_data(self, session: dict, account: DeviceAccount, digest: Digest) -> bytes:
        self.sign_requests.append(digest)
        if self.sign_error is not None:
            raise self.sign_error
        if self.canned_signature is not None:
            return self.canned_signature
        signature = self._key.sign_msg_hash(digest.hash)
        return signature.to_bytes()[:64] + bytes([signature.v + 27])

    def close(self, session: dict) -> None:
        self.closed.append(session)
        if self.close_error is not None:
            raise self.close_error

    @property
    def open_sessions(self) -> int:
        return len(self.opened) - len(self.closed)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def device_hub() -> FakeDeviceHub:
    return FakeDeviceHub()


@pytest.fixture
def locked_hub() -> FakeDeviceHub:
    return FakeDeviceHub(open_error=DeviceLockedOrUnavailable("device locked"))


@pytest.fixture
def underivable_hub() -> FakeDeviceHub:
    return FakeDeviceHub(derive_error=DeviceDerivationError("app not ready"))


@pytest.fixture
def declining_hub() -> FakeDeviceHub:
    return FakeDeviceHub(sign_error=DeviceSigningError("user declined"))

"""Tests for the command-line front end."""

import io
import logging

from conftest import (
    TEST_ADDRESS,
    TEST_ADDRESS_1,
    TEST_DIGEST,
    TEST_MNEMONIC,
    TEST_PRIVATE_KEY,
    TEST_TYPED_DATA,
    FakeDeviceHub,
)
from eip712_signer.cli import main


def run(argv, stdin_text, device_hub=None):
    stdout = io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin_text), stdout=stdout, device_hub=device_hub)
    return code, stdout.getvalue()


def parse_output(output: str) -> dict:
    return dict(line.split(": ", 1) for line in output.strip().splitlines())


class TestCli:
    """Tests for eip712-sign."""

    def test_private_key(self):
        code, output = run(["--private-key", TEST_PRIVATE_KEY], f"0x{TEST_TYPED_DATA.hex()}\n")
        fields = parse_output(output)

        assert code == 0
        assert fields["Data"] == TEST_TYPED_DATA.hex()
        assert fields["Signer"] == TEST_ADDRESS
        assert len(fields["Signature"]) == 130
        assert fields["Signature"][-2:] in ("1b", "1c")

    def test_mnemonic_with_path(self):
        code, output = run(
            ["--mnemonic", TEST_MNEMONIC, "--hd-paths", "m/44'/60'/0'/0/1"],
            TEST_DIGEST.hex(),
        )

        assert code == 0
        assert parse_output(output)["Signer"] == TEST_ADDRESS_1

    def test_key_and_mnemonic_agree(self):
        _, by_key = run(["--private-key", TEST_PRIVATE_KEY], TEST_DIGEST.hex())
        _, by_mnemonic = run(["--mnemonic", TEST_MNEMONIC], TEST_DIGEST.hex())

        assert by_key == by_mnemonic

    def test_ledger(self, device_hub):
        code, output = run(["--ledger"], TEST_TYPED_DATA.hex(), device_hub=device_hub)

        assert code == 0
        assert parse_output(output)["Signer"] == TEST_ADDRESS
        assert device_hub.open_sessions == 0

    def test_no_credentials(self, caplog):
        with caplog.at_level(logging.ERROR):
            code, output = run([], TEST_DIGEST.hex())

        assert code == 1
        assert output == ""
        assert "One (and only one)" in caplog.text

    def test_two_credentials(self):
        code, _ = run(["--private-key", TEST_PRIVATE_KEY, "--mnemonic", TEST_MNEMONIC], TEST_DIGEST.hex())

        assert code == 1

    def test_wrong_length_reports_decoded_bytes(self, caplog):
        with caplog.at_level(logging.ERROR):
            code, _ = run(["--private-key", TEST_PRIVATE_KEY], "0x" + "ab" * 33 + "\n")

        assert code == 1
        assert "got 33 bytes" in caplog.text

    def test_bad_hex(self):
        code, _ = run(["--private-key", TEST_PRIVATE_KEY], "0xnothex")

        assert code == 1

    def test_errors_do_not_leak_secrets(self, caplog):
        with caplog.at_level(logging.DEBUG):
            run(["--mnemonic", TEST_MNEMONIC, "--hd-paths", "bad"], TEST_DIGEST.hex())

        assert "test junk" not in caplog.text

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("SIGNER_PRIVATE_KEY", TEST_PRIVATE_KEY)

        code, output = run([], TEST_DIGEST.hex())

        assert code == 0
        assert parse_output(output)["Signer"] == TEST_ADDRESS

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("SIGNER_PRIVATE_KEY", TEST_PRIVATE_KEY)

        code, output = run(
            ["--mnemonic", TEST_MNEMONIC, "--hd-paths", "m/44'/60'/0'/0/1"],
            TEST_DIGEST.hex(),
        )

        assert code == 0
        assert parse_output(output)["Signer"] == TEST_ADDRESS_1

    def test_device_transport_failure_exits_cleanly(self):
        hub = FakeDeviceHub(open_error=OSError("busy"))

        code, output = run(["--ledger"], TEST_TYPED_DATA.hex(), device_hub=hub)

        assert code == 1
        assert output == ""

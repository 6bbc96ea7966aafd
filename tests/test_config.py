"""Tests for settings loading."""

from conftest import TEST_MNEMONIC, TEST_PRIVATE_KEY
from eip712_signer.config import DEFAULT_HD_PATH, Settings, get_settings


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.hd_path == DEFAULT_HD_PATH
        assert settings.use_ledger is False
        assert settings.ledger_passphrase == ""
        assert not settings.has_private_key
        assert not settings.has_wallet

    def test_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("HD_PATH", "m/44'/60'/0'/0/3")
        monkeypatch.setenv("WALLET_SEED_PHRASE", TEST_MNEMONIC)
        monkeypatch.setenv("USE_LEDGER", "true")

        settings = get_settings()

        assert settings.hd_path == "m/44'/60'/0'/0/3"
        assert settings.has_wallet
        assert settings.use_ledger is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_safe_dict_redacts_secrets(self):
        settings = Settings(
            _env_file=None,
            signer_private_key=TEST_PRIVATE_KEY,
            wallet_seed_phrase=TEST_MNEMONIC,
            ledger_passphrase="hunter2",
        )

        data = settings.get_safe_dict()
        rendered = repr(data)

        assert data["signer_private_key"] == "***"
        assert data["wallet_seed_phrase"] == "***"
        assert data["ledger_passphrase"] == "***"
        assert TEST_PRIVATE_KEY not in rendered
        assert "test junk" not in rendered
        assert "hunter2" not in rendered

    def test_short_phrase_is_not_a_wallet(self):
        settings = Settings(_env_file=None, wallet_seed_phrase="one two three")

        assert not settings.has_wallet

    def test_only_consumed_settings_are_declared(self):
        """Test every field feeds the CLI or the safe dict."""
        settings = Settings(_env_file=None)

        assert set(Settings.model_fields) == set(settings.get_safe_dict())
        assert "environment" not in Settings.model_fields

"""Application configuration using pydantic-settings.

Command-line flags take precedence; these settings supply defaults and let
credentials come from the environment or a .env file instead of argv.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HD_PATH = "m/44'/60'/0'/0/0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Logging
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Derivation
    # ======================
    hd_path: str = Field(
        default=DEFAULT_HD_PATH,
        description="BIP32 derivation path for mnemonic or ledger",
    )

    # ======================
    # Credentials
    # ======================
    signer_private_key: Optional[str] = Field(
        default=None, description="Hex private key used when --private-key is not given"
    )
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="BIP39 mnemonic used when --mnemonic is not given"
    )

    # ======================
    # Ledger
    # ======================
    use_ledger: bool = Field(default=False, description="Sign with a connected Ledger device")
    ledger_passphrase: str = Field(default="", description="Passphrase passed when opening the device")

    @property
    def has_private_key(self) -> bool:
        """Check if a private key is configured."""
        return bool(self.signer_private_key and self.signer_private_key.strip())

    @property
    def has_wallet(self) -> bool:
        """Check if a wallet seed phrase is configured."""
        return bool(self.wallet_seed_phrase and len(self.wallet_seed_phrase.split()) >= 12)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "debug": self.debug,
            "hd_path": self.hd_path,
            "signer_private_key": "***" if self.has_private_key else "(not set)",
            "wallet_seed_phrase": "***" if self.wallet_seed_phrase else "(not set)",
            "use_ledger": self.use_ledger,
            "ledger_passphrase": "***" if self.ledger_passphrase else "(not set)",
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

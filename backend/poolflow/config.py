"""Application configuration."""


from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # Stellar network
    stellar_network: str = "testnet"
    explorer_base_url: str = "https://stellar.expert/explorer"

    # Signing relay
    relay_url: str = "http://localhost:8787"
    relay_timeout: float = 30.0

    # Submission
    submit_timeout_seconds: float = 180.0

    # Wallet
    wallet_public_key: str | None = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()

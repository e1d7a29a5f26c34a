"""Configuration management using Pydantic Settings."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://ingestion.sqreen.com/"


class SignalClientSettings(BaseSettings):
    """Client settings loaded from ``SIGNAL_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Ingestion endpoint
    base_url: str = DEFAULT_BASE_URL
    token: SecretStr | None = None
    timeout_seconds: float = 10.0

    # Logging
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False


settings = SignalClientSettings()

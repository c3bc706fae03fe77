"""Configuration management for fx-settle."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FX_SETTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Currency balances are expressed in when neither caller nor ledger picks one
    settlement_currency: str = "USD"

    # Display only; the engine never converts to major units
    minor_factor: int = 100


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check FX_SETTLE_* variables and your "
            f".env file.\n"
            f"Error: {e}"
        ) from e

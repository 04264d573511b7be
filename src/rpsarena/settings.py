"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Game coordinator
    host: str = "0.0.0.0"
    port: int = 5000

    # Match rules
    wins_needed: int = 2

    # Fallback identity for participants who send an empty name
    guest_name_prefix: str = "Player"
    guest_name_range: int = 1000

    # Status API (disabled unless a port is configured)
    status_host: str = "127.0.0.1"
    status_port: int | None = None

    log_level: str = "INFO"

    @property
    def status_api_enabled(self) -> bool:
        """Check if the HTTP status API should be served."""
        return self.status_port is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

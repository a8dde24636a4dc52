"""Configuration management using Pydantic Settings.

Priority order:
1. Environment variables (highest priority)
2. .env file (for local development fallback)

API_BASE_URL is read once at startup. Leaving it empty keeps the explanation
request on the same origin as the page, which the app relays to
EXPLAIN_BACKEND_URL.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "dev"
    log_level: str = "INFO"

    # Explanation service
    api_base_url: str = ""  # Empty = same-origin relative routing
    explain_backend_url: str = "http://localhost:8080"  # Target of the same-origin relay
    backend_port: int = 8080  # Named in the "backend unreachable" message

    # Sessions
    session_secret_key: str = ""
    view_ttl_seconds: int = 3600  # Idle views are torn down after this

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production."""
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Default settings instance
settings = get_settings()

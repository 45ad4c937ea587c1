"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost/mealcart"

    # Cart filling
    cart_retailer: str = "walmart"  # key into CART_FILLER_REGISTRY
    cart_max_retries: int = 3  # attempts per item on transient failures
    cart_item_delay: float = 0.5  # seconds between items
    cart_retry_backoff: float = 1.0  # multiplier for exponential backoff

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    log_file: str | None = None
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

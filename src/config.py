"""Configuration settings for the Saturno Affiliates backend."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

# Business rule: a product may belong to at most this many categories
MAX_CATEGORIES_PER_PRODUCT = 4

DEFAULT_PER_PAGE = 12
MAX_PER_PAGE = 100

# Upper bound of the INTEGER id and counter columns
MAX_DB_INT = 2**31 - 1


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, populate_by_name=True, extra="ignore")

    project_name: str = "Saturno Affiliates API"
    api_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    port: int = Field(default=3001, alias="PORT")

    database_url: str = Field(default="sqlite:///./affiliates.db", alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, alias="DB_MAX_OVERFLOW")

    # Rate limiting is disabled when no Redis URL is configured
    redis_url: str = Field(default="", alias="REDIS_URL")
    rate_limit_requests: int = Field(default=100, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window: int = Field(default=900, alias="RATE_LIMIT_WINDOW")

    admin_password: str = Field(default="", alias="ADMIN_PASSWORD")
    jwt_secret: str = Field(default="", alias="JWT_SECRET")
    jwt_expires_in: int = Field(default=7 * 24 * 3600, alias="JWT_EXPIRES_IN")

    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"],
        alias="CORS_ORIGINS",
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

"""Application configuration with validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Review dashboard settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Application Review Dashboard"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Scoring
    ELIGIBILITY_SET_NAME: str = "Eligibility Shortlisting"
    ELIGIBILITY_DISPLAY_MAX: float = Field(default=6.0, gt=0)
    DEFAULT_DISPLAY_MAX: float = Field(default=5.0, gt=0)
    SCORE_DECIMAL_PLACES: int = Field(default=2, ge=0, le=6)

    # GoodGrants (external grant-management platform)
    GOODGRANTS_API_KEY: Optional[SecretStr] = None
    GOODGRANTS_BASE_URL: str = "https://api.cr4ce.com"
    GOODGRANTS_ACCEPT: str = "application/vnd.Creative Force.v2.3+json"
    GOODGRANTS_LANGUAGE: str = "en_GB"
    GOODGRANTS_PER_PAGE: int = Field(default=50, ge=1, le=100)
    GOODGRANTS_REQUEST_DELAY: float = Field(
        default=0.25,
        ge=0.0,
        le=10.0,
        description="Pause between consecutive page requests (seconds)",
    )
    GOODGRANTS_RATE_LIMIT_BACKOFF: float = Field(default=1.0, ge=0.0, le=60.0)
    GOODGRANTS_MAX_RETRIES: int = Field(default=5, ge=0, le=20)
    GOODGRANTS_TIMEOUT: float = Field(default=30.0, ge=1.0, le=300.0)
    MUNICIPALITY_FIELD_SLUG: str = "rDkKljjz"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_AGGREGATES: int = 3600    # 1 hour

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has safe settings."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self

    @property
    def goodgrants_api_key(self) -> Optional[str]:
        """Plain API key, or None when not configured."""
        if self.GOODGRANTS_API_KEY is None:
            return None
        return self.GOODGRANTS_API_KEY.get_secret_value() or None


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()

"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


DEFAULT_NEGATIVE_KEYWORD_API_URL = (
    "https://adapi.xiaohongshu.com/api/open/jg/negative/keyword/batch/add"
)


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Every field has a default so the app starts without a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # NEGATIVE KEYWORD API
    # ===================
    negative_keyword_api_url: str = Field(
        default=DEFAULT_NEGATIVE_KEYWORD_API_URL,
        description="Endpoint receiving one POST per advertiser/unit group"
    )
    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Maximum number of group submissions in flight at once"
    )
    request_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="Per-request timeout passed to the HTTP client"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()

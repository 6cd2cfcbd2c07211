"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # CATALOG API
    # ===================
    catalog_api_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the back-office REST API"
    )
    catalog_api_token: Optional[str] = Field(
        None,
        description="Bearer token sent to the back-office API"
    )
    catalog_api_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for a single API request"
    )

    # ===================
    # IMPORT WIZARD
    # ===================
    import_page_size: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Rows per page when searching an external source"
    )
    code_check_debounce_ms: int = Field(
        default=500,
        ge=0,
        le=10000,
        description="Idle time after the last code edit before checking codes"
    )
    margin_presets: list[float] = Field(
        default=[2.0, 2.5],
        description="Fixed margin multipliers offered to the user"
    )
    custom_margin_min: float = Field(
        default=1.0,
        gt=0,
        description="Lowest custom margin multiplier"
    )
    custom_margin_max: float = Field(
        default=10.0,
        gt=0,
        description="Highest custom margin multiplier"
    )
    default_custom_margin: float = Field(
        default=2.0,
        gt=0,
        description="Initial value of the custom margin input"
    )
    reselect_existing_on_check: bool = Field(
        default=True,
        description="Force-select rows every time a code check confirms they exist"
    )
    wizard_session_ttl_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Minutes an idle wizard session is kept in memory"
    )

    # ===================
    # NOTIFICATIONS
    # ===================
    toast_life_ms: int = Field(
        default=3000,
        ge=500,
        description="Display time of error and warning toasts"
    )
    toast_success_life_ms: int = Field(
        default=5000,
        ge=500,
        description="Display time of import result toasts"
    )
    ui_language: str = Field(
        default="es",
        pattern="^(es|en)$",
        description="Language of user-facing messages"
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
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        description="Origins allowed to call the API"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def code_check_debounce_seconds(self) -> float:
        return self.code_check_debounce_ms / 1000


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

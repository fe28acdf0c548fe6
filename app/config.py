# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Supabase credentials are NOT required at load time. The app can still
# paint cached state without them; the auth flows check for them and report a
# ConfigurationError (see has_supabase_credentials).
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance, or passed
    explicitly into AppContext.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Both are needed for any backend call. Empty means "not configured".

    SUPABASE_URL: str = Field(
        default="",
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        default="",
        description="Supabase anon/public API key"
    )

    STORAGE_BUCKET: str = Field(
        default="resources",
        description="Storage bucket holding uploaded resource files"
    )

    # -------------------------------------------------------------------------
    # Institution
    # -------------------------------------------------------------------------

    INSTITUTION_EMAIL_DOMAIN: str = Field(
        default="eastdelta.edu.bd",
        min_length=3,
        description="Email domain students must sign up with"
    )

    # -------------------------------------------------------------------------
    # Local Storage
    # -------------------------------------------------------------------------

    LOCAL_CACHE_PATH: Path = Field(
        default=Path(".breez/auth_cache.json"),
        description="JSON file mirroring the last known session for warm start"
    )

    DOWNLOAD_DIR: Path = Field(
        default=Path("downloads"),
        description="Directory downloaded resources are saved into"
    )

    DOWNLOAD_MODE: Literal["browser", "save"] = Field(
        default="browser",
        description="Open downloads in the browser, or save them into DOWNLOAD_DIR"
    )

    # -------------------------------------------------------------------------
    # Workflow Settings
    # -------------------------------------------------------------------------

    MOCK_UPLOAD_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Delay per step of the simulated upload (no file selected)"
    )

    LEADERBOARD_LIMIT: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Number of leaderboard rows to fetch"
    )

    TRANSACTIONS_LIMIT: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Number of coin transactions shown on the dashboard"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty env vars as unset so defaults apply
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def has_supabase_credentials(self) -> bool:
        """True when both the project URL and the anon key are set."""
        return bool(self.SUPABASE_URL.strip() and self.SUPABASE_ANON_KEY.strip())

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()

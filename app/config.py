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
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Development-only signing key; refused in production
DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Supabase and R2 credentials are required; the app won't start without them.
    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for password sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Cloudflare R2 (S3-compatible object store)
    # -------------------------------------------------------------------------
    # Consumed verbatim; only the bucket name has a fallback.

    CLOUDFLARE_ACCOUNT_ID: str = Field(
        ...,
        description="Cloudflare account id, used to build the R2 endpoint"
    )

    R2_ACCESS_KEY_ID: str = Field(
        ...,
        description="R2 access key id"
    )

    R2_SECRET_ACCESS_KEY: str = Field(
        ...,
        description="R2 secret access key"
    )

    R2_BUCKET_NAME: str = Field(
        default="job-videos",
        description="Bucket holding job files"
    )

    # -------------------------------------------------------------------------
    # Client Sessions
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default=DEFAULT_SECRET_KEY,
        min_length=16,
        description="Secret key for signing client-session tokens"
    )

    CLIENT_SESSION_TTL_MINUTES: int = Field(
        default=720,
        ge=1,
        le=60 * 24 * 30,
        description="Lifetime of a client-session token in minutes"
    )

    # -------------------------------------------------------------------------
    # Job Files
    # -------------------------------------------------------------------------

    REVISION_ASSIGN_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts at claiming a server-assigned revision number before giving up"
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
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty values fall back to defaults (R2_BUCKET_NAME="" -> job-videos)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @model_validator(mode="after")
    def check_production_secret(self) -> "Settings":
        """SECRET_KEY signs client logins; production must set its own."""
        if self.is_production and self.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set to a private value in production")
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def r2_endpoint_url(self) -> str:
        """S3 API endpoint for the configured Cloudflare account."""
        return f"https://{self.CLOUDFLARE_ACCOUNT_ID}.r2.cloudflarestorage.com"

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
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()

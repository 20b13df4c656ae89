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
# Payment gateway credentials are optional at startup. Code that needs them
# goes through PaymentGatewayConfig.from_settings(), which raises if any are missing.
# =============================================================================

import json
from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
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
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Payment Gateway (PayHere)
    # -------------------------------------------------------------------------

    PAYHERE_MERCHANT_ID: str | None = Field(
        default=None,
        description="PayHere merchant ID"
    )

    PAYHERE_MERCHANT_SECRET: str | None = Field(
        default=None,
        description="PayHere merchant secret (used only for signing)"
    )

    PAYHERE_URL: str | None = Field(
        default=None,
        description="PayHere base URL (sandbox or live), e.g. https://sandbox.payhere.lk"
    )

    APP_BASE_URL: str | None = Field(
        default=None,
        description="Public base URL of this app, used for return/cancel/notify URLs"
    )

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    LKR_PER_USD: Decimal = Field(
        default=Decimal("300"),
        gt=0,
        description="Conversion rate applied to USD rate-table costs before charging in LKR"
    )

    SERVICE_FEE_RATE: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Service fee added to the buyer's cost"
    )

    PLATFORM_RATES_JSON: str | None = Field(
        default=None,
        description='Optional JSON override of USD per 1000 views, e.g. {"YOUTUBE": 5}'
    )

    DEADLINE_MULTIPLIERS_JSON: str | None = Field(
        default=None,
        description='Optional JSON override of deadline multipliers, e.g. {"3d": 2}'
    )

    MIN_WITHDRAWAL_AMOUNT: Decimal = Field(
        default=Decimal("1000"),
        ge=0,
        description="Minimum withdrawal amount in LKR"
    )

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    SMTP_HOST: str | None = Field(default=None, description="SMTP server host")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535, description="SMTP server port")
    SMTP_USER: str | None = Field(default=None, description="SMTP username")
    SMTP_PASS: str | None = Field(default=None, description="SMTP password")
    SMTP_FROM: str | None = Field(default=None, description="Default sender address")
    SMTP_FROM_NAME: str = Field(default="BrandSync", description="Sender display name")

    SMS_API_URL: str = Field(
        default="https://app.text.lk/api/v3/sms/send",
        description="text.lk SMS endpoint"
    )
    SMS_API_TOKEN: str | None = Field(default=None, description="text.lk API token")
    SMS_SENDER_ID: str | None = Field(default=None, description="Registered SMS sender ID")

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
    # File Upload Settings (bank slips, proof images)
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum file upload size in MB"
    )

    ALLOWED_UPLOAD_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp,application/pdf",
        description="Allowed upload content types (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS string into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_upload_types_list(self) -> list[str]:
        """Parse ALLOWED_UPLOAD_TYPES into a list of content types."""
        return [t.strip().lower() for t in self.ALLOWED_UPLOAD_TYPES.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def platform_rate_overrides(self) -> dict[str, float]:
        """Decoded PLATFORM_RATES_JSON, empty if unset."""
        return json.loads(self.PLATFORM_RATES_JSON) if self.PLATFORM_RATES_JSON else {}

    @property
    def deadline_multiplier_overrides(self) -> dict[str, float]:
        """Decoded DEADLINE_MULTIPLIERS_JSON, empty if unset."""
        return json.loads(self.DEADLINE_MULTIPLIERS_JSON) if self.DEADLINE_MULTIPLIERS_JSON else {}

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

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()

"""
Configuration Management for Finance Dashboard

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here: the hosted backend's URL and public
key, plus the handful of application knobs the pages read.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseSettings(BaseSettings):
    """Hosted backend (auth + row-store) configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    url: str = Field(
        ...,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
        description="Project URL of the hosted backend"
    )
    anon_key: str = Field(
        ...,
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        description="Public (anon) API key"
    )
    client_info: str = Field(
        default="finance-dashboard",
        validation_alias=AliasChoices("SUPABASE_CLIENT_INFO"),
        description="Value sent in the x-client-info header"
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """The client library rejects anything that is not http(s)."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Backend URL must start with http:// or https://, got {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # Public URL used for auth redirects (sign-up confirmation, password reset)
    site_url: str = Field(
        default="http://localhost:8501",
        description="Public base URL of this application"
    )

    # Navigation
    dashboard_path: str = Field(default="/dashboard")
    sign_in_path: str = Field(default="/sign-in")
    sign_up_path: str = Field(default="/sign-up")
    auth_callback_path: str = Field(default="/auth/callback")

    # Display
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 code used when a profile has none"
    )
    recent_transactions_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="How many transactions the dashboard lists"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Months shown in the income/expense trend"
    )
    notice_queue_size: int = Field(
        default=20,
        ge=1,
        description="Transient notices kept for display"
    )

    @field_validator("default_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    def callback_url(self, path: Optional[str] = None) -> str:
        """Absolute URL for an auth redirect."""
        return f"{self.site_url.rstrip('/')}{path or self.auth_callback_path}"


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def supabase(self) -> SupabaseSettings:
        return SupabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.supabase
        results["supabase"] = True
    except Exception as e:
        results["supabase"] = False
        results["supabase_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
